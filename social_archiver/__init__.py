from __future__ import annotations

from .config import load_config, resolve_runtime_secrets
from .config_schema import AppConfig
from .errors import ConfigError, RetrievalError, SchemaValidationError, SinkError
from .extract import extract_reference
from .normalize import normalize, normalize_post
from .pipeline import LinkAnalyzer, analyze_link
from .post import AnalyzedPost, PostReference
from .retrieval_schema import UNAVAILABLE_CONTENT, RawFinding
from .strategy import RetrievalDirective, build_directives
from .verification import Confidence, assess, classify

__all__ = [
    "AnalyzedPost",
    "AppConfig",
    "Confidence",
    "ConfigError",
    "LinkAnalyzer",
    "PostReference",
    "RawFinding",
    "RetrievalDirective",
    "RetrievalError",
    "SchemaValidationError",
    "SinkError",
    "UNAVAILABLE_CONTENT",
    "analyze_link",
    "assess",
    "build_directives",
    "classify",
    "extract_reference",
    "load_config",
    "normalize",
    "normalize_post",
    "resolve_runtime_secrets",
]
