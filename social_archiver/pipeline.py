from __future__ import annotations

import uuid
from typing import Any, Mapping

from .config import config_sha256, resolve_runtime_secrets
from .config_schema import AppConfig, StrategyConfig
from .errors import RetrievalError
from .extract import extract_reference
from .normalize import normalize
from .post import AnalyzedPost
from .retrieval import OpenAIPostRetriever, PostRetriever
from .retrieval_schema import RawFinding
from .run_log import RunLogger
from .strategy import RetrievalDirective, build_directives
from .verification import assess, classify


class LinkAnalyzer:
    """
    Turn a post URL into a confidence-labelled AnalyzedPost.

    Each `analyze` call is independent: extract, plan, one retrieval, classify,
    normalize. The analyzer holds no per-request state, so one instance can serve
    concurrent callers.
    """

    def __init__(
        self,
        retriever: PostRetriever,
        *,
        strategy: StrategyConfig | None = None,
        logger: RunLogger | None = None,
    ) -> None:
        self._retriever = retriever
        self._strategy = strategy or StrategyConfig()
        self._log = logger

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        environ: Mapping[str, str] | None = None,
        client: Any = None,
        logger: RunLogger | None = None,
    ) -> "LinkAnalyzer":
        secrets = resolve_runtime_secrets(config, environ=environ)
        retriever = OpenAIPostRetriever(
            secrets.openai_api_key,
            openai_cfg=config.openai,
            client=client,
        )
        if logger is not None:
            logger.debug(
                "analyzer_configured",
                model=config.openai.model,
                config_sha256=config_sha256(config),
            )
        return cls(retriever, strategy=config.strategy, logger=logger)

    def analyze(self, url: str, *, timeout: float | None = None) -> AnalyzedPost:
        if not (url or "").strip():
            raise ValueError("url must be non-empty")

        analysis_id = uuid.uuid4().hex
        log = self._log

        ref = extract_reference(url)
        if log is not None:
            log.info(
                "analysis_started",
                url=url,
                analysis_id=analysis_id,
                post_id=ref.post_id,
                handle=ref.handle,
            )

        try:
            directive = build_directives(ref, strategy=self._strategy)
            if log is not None:
                log.debug(
                    "directives_built",
                    url=url,
                    analysis_id=analysis_id,
                    steps=directive.steps(),
                )

            finding = self._invoke(directive, timeout=timeout, url=url, analysis_id=analysis_id)

            confidence = assess(ref, finding)
            if log is not None:
                log.info(
                    "verification_assessed",
                    url=url,
                    analysis_id=analysis_id,
                    confidence=confidence.value,
                    found_status_id=finding.found_status_id,
                )

            post = normalize(ref, finding, classify(ref, finding))
        except Exception as e:
            if log is not None:
                log.exception("analysis_failed", exc=e, url=url, analysis_id=analysis_id)
            raise

        if log is not None:
            log.info(
                "analysis_completed",
                url=url,
                analysis_id=analysis_id,
                platform=post.platform,
                keywords=len(post.keywords),
            )
        return post

    def _invoke(
        self,
        directive: RetrievalDirective,
        *,
        timeout: float | None,
        url: str,
        analysis_id: str,
    ) -> RawFinding:
        finding, tokens = self._retriever.invoke_with_metadata(directive, timeout=timeout)

        if finding is None:
            raise RetrievalError("No response from the retrieval model.")

        if self._log is not None:
            self._log.info(
                "retrieval_completed",
                url=url,
                analysis_id=analysis_id,
                total_tokens=tokens,
                source_url=finding.source_url,
            )
        return finding


def analyze_link(
    url: str,
    *,
    config: AppConfig | None = None,
    environ: Mapping[str, str] | None = None,
    client: Any = None,
    logger: RunLogger | None = None,
    timeout: float | None = None,
) -> AnalyzedPost:
    """
    Analyze one URL with a freshly configured analyzer.

    Raises ConfigError when the OpenAI credential is missing, before any network call.
    """
    analyzer = LinkAnalyzer.from_config(
        config or AppConfig(),
        environ=environ,
        client=client,
        logger=logger,
    )
    return analyzer.analyze(url, timeout=timeout)
