from __future__ import annotations

from .retrieval_schema import UNAVAILABLE_CONTENT, RawFinding
from .strategy import RetrievalDirective


_OFFLINE_CONTENT = (
    "Shipping the archive tool today. Paste a link, get the text and keywords, "
    "save it to a sheet."
)


class OfflinePostRetriever:
    """
    Deterministic, network-free retriever for `analyze --offline` smoke checks.

    Echoes the target status id back as corroboration when there is one, and reports
    the post as unavailable when the plan has no handle to look under.
    """

    def invoke(
        self, directive: RetrievalDirective, *, timeout: float | None = None
    ) -> RawFinding:
        _ = timeout
        ref = directive.reference

        if not ref.handle:
            return RawFinding(
                platform="Unknown",
                content=UNAVAILABLE_CONTENT,
                keywords=[],
            )

        return RawFinding(
            platform="Twitter" if ref.host in ("x.com", "twitter.com") else "Unknown",
            content=_OFFLINE_CONTENT,
            keywords=["archive", "offline"],
            source_url=directive.mirror_urls[0] if directive.mirror_urls else None,
            found_status_id=ref.post_id,
        )

    def invoke_with_metadata(
        self, directive: RetrievalDirective, *, timeout: float | None = None
    ) -> tuple[RawFinding, int | None]:
        return self.invoke(directive, timeout=timeout), None
