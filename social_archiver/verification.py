from __future__ import annotations

from enum import Enum

from .post import PostReference
from .retrieval_schema import UNAVAILABLE_CONTENT, RawFinding

VERIFIED_MARKER = "✅ [Verified]: "
WRONG_ID_MARKER = "⚠️ [Approximation - Wrong ID]: "
LIKELY_LATEST_MARKER = "⚠️ [Likely Latest Post]: "


class Confidence(str, Enum):
    VERIFIED = "verified"
    WRONG_ID = "wrong_id"
    LIKELY_LATEST = "likely_latest"
    UNAVAILABLE = "unavailable"
    UNVERIFIABLE = "unverifiable"


_MARKERS: dict[Confidence, str] = {
    Confidence.VERIFIED: VERIFIED_MARKER,
    Confidence.WRONG_ID: WRONG_ID_MARKER,
    Confidence.LIKELY_LATEST: LIKELY_LATEST_MARKER,
}


def is_unavailable(content: str | None) -> bool:
    return (content or "").strip() == UNAVAILABLE_CONTENT


def assess(ref: PostReference, finding: RawFinding) -> Confidence:
    """
    Decide how far the finding can be trusted, using only the status id.

    The model's narrative is ignored; an exact id match wins over anything else,
    including an unavailable report. The sentinel is only left unlabelled when
    no corroborating id came back.
    """
    if ref.post_id is None:
        return Confidence.UNVERIFIABLE

    found = finding.found_status_id
    if found == ref.post_id:
        return Confidence.VERIFIED
    if found is not None:
        return Confidence.WRONG_ID
    if is_unavailable(finding.content):
        return Confidence.UNAVAILABLE
    return Confidence.LIKELY_LATEST


def classify(ref: PostReference, finding: RawFinding) -> str:
    """Return the finding's content with its confidence marker prepended."""
    marker = _MARKERS.get(assess(ref, finding))
    if marker is None:
        return finding.content
    return marker + finding.content
