from __future__ import annotations

import re
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

_ENV_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
_SCHEME_RE = re.compile(r"^[a-z][a-z0-9+.-]*://", re.IGNORECASE)


def _normalize_domain_list(values: list[str], *, min_items: int) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()

    for item in values:
        domain = _SCHEME_RE.sub("", (item or "").strip()).strip("/").casefold()
        if not domain:
            continue
        if domain in seen:
            continue
        seen.add(domain)
        out.append(domain)

    if len(out) < min_items:
        raise ValueError(f"must contain at least {min_items} distinct domain(s)")
    return out


def _normalize_prefix_list(values: list[str]) -> list[str]:
    out: list[str] = []
    seen: set[str] = set()

    for item in values:
        prefix = (item or "").strip()
        if not prefix:
            continue
        if not _SCHEME_RE.match(prefix):
            prefix = "https://" + prefix.lstrip("/")
        if not prefix.endswith("/"):
            prefix += "/"
        if prefix in seen:
            continue
        seen.add(prefix)
        out.append(prefix)
    return out


def _validate_env_var_name(value: str) -> str:
    name = (value or "").strip()
    if not _ENV_NAME_RE.fullmatch(name):
        raise ValueError("must be a valid environment variable name")
    return name


PositiveInt = Annotated[int, Field(ge=1)]


class OpenAIConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    api_key_env: str = "OPENAI_API_KEY"
    model: str = "gpt-5-mini"
    max_output_tokens: PositiveInt = 4000
    search_context_size: Literal["low", "medium", "high"] = "medium"

    @field_validator("api_key_env")
    @classmethod
    def _api_key_env_must_be_valid(cls, v: str) -> str:
        return _validate_env_var_name(v)

    @field_validator("model")
    @classmethod
    def _model_must_be_set(cls, v: str) -> str:
        name = (v or "").strip()
        if not name:
            raise ValueError("must be a non-empty model name")
        return name


class StrategyConfig(BaseModel):
    """Where the retrieval step looks, in addition to the pasted URL itself."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    proxy_mirrors: list[str] = Field(
        default_factory=lambda: ["nitter.net", "xcancel.com", "fxtwitter.com"]
    )
    archive_services: list[str] = Field(
        default_factory=lambda: ["https://web.archive.org/web/", "https://archive.ph/"]
    )
    search_sites: list[str] = Field(default_factory=lambda: ["x.com", "twitter.com"])

    @field_validator("proxy_mirrors")
    @classmethod
    def _normalize_mirrors(cls, v: list[str]) -> list[str]:
        return _normalize_domain_list(v, min_items=2)

    @field_validator("archive_services")
    @classmethod
    def _normalize_archives(cls, v: list[str]) -> list[str]:
        return _normalize_prefix_list(v)

    @field_validator("search_sites")
    @classmethod
    def _normalize_sites(cls, v: list[str]) -> list[str]:
        return _normalize_domain_list(v, min_items=0)


class SinkConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    script_url_env: str = "SHEET_SCRIPT_URL"
    timeout_seconds: float = Field(30.0, gt=0.0)

    @field_validator("script_url_env")
    @classmethod
    def _script_url_env_must_be_valid(cls, v: str) -> str:
        return _validate_env_var_name(v)


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    strategy: StrategyConfig = Field(default_factory=StrategyConfig)
    sink: SinkConfig = Field(default_factory=SinkConfig)
