from __future__ import annotations

from typing import Any, Mapping

from .post import AnalyzedPost, PostReference
from .retrieval_schema import RawFinding

DEFAULT_PLATFORM = "Unknown"
DEFAULT_CONTENT = "Could not extract content."


def _coerce_str(value: Any) -> str | None:
    if isinstance(value, str):
        s = value.strip()
        return s if s else None
    return None


def _coerce_id(value: Any) -> str | None:
    if isinstance(value, str):
        v = value.strip()
        return v if v else None
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return None


def _coerce_keywords(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return ()

    return tuple(item for item in value if isinstance(item, str))


def normalize(
    ref: PostReference, finding: RawFinding, annotated_content: str | None
) -> AnalyzedPost:
    """Assemble the final record, filling defaults for anything the model left empty."""
    return AnalyzedPost(
        platform=_coerce_str(finding.platform) or DEFAULT_PLATFORM,
        content=annotated_content or DEFAULT_CONTENT,
        keywords=tuple(finding.keywords or ()),
        original_link=ref.raw_url,
        found_status_id=finding.found_status_id,
    )


def normalize_post(item: AnalyzedPost | Mapping[str, Any]) -> AnalyzedPost:
    """
    Re-apply the record defaults to an existing record or a JSON payload.

    Accepts the camelCase keys written by `AnalyzedPost.to_payload()` as well as
    snake_case. Idempotent: normalizing a normalized record returns an equal one.
    """
    data = item.to_payload() if isinstance(item, AnalyzedPost) else item

    link = data.get("originalLink", data.get("original_link"))
    if not isinstance(link, str):
        raise ValueError("originalLink must be a string")

    content = data.get("content")
    return AnalyzedPost(
        platform=_coerce_str(data.get("platform")) or DEFAULT_PLATFORM,
        content=content if isinstance(content, str) and content else DEFAULT_CONTENT,
        keywords=_coerce_keywords(data.get("keywords")),
        original_link=link,
        found_status_id=_coerce_id(data.get("foundStatusId", data.get("found_status_id"))),
    )
