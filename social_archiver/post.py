from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any


@dataclass(frozen=True)
class PostReference:
    """What can be read off a post URL without any network access."""

    raw_url: str
    post_id: str | None = None
    handle: str | None = None
    host: str | None = None


@dataclass(frozen=True)
class AnalyzedPost:
    """
    The archival record produced by one analysis.

    Edits return a new record; `original_link` is fixed to the analyzed URL.
    """

    platform: str
    content: str
    keywords: tuple[str, ...]
    original_link: str
    found_status_id: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.keywords, tuple):
            object.__setattr__(self, "keywords", tuple(self.keywords))

    def to_payload(self) -> dict[str, Any]:
        return {
            "platform": self.platform,
            "content": self.content,
            "keywords": list(self.keywords),
            "originalLink": self.original_link,
            "foundStatusId": self.found_status_id,
        }

    def with_platform(self, platform: str) -> "AnalyzedPost":
        return replace(self, platform=platform)

    def with_content(self, content: str) -> "AnalyzedPost":
        return replace(self, content=content)

    def with_keyword(self, index: int, value: str) -> "AnalyzedPost":
        keywords = list(self.keywords)
        keywords[index] = value
        return replace(self, keywords=tuple(keywords))

    def add_keyword(self, value: str = "new-tag") -> "AnalyzedPost":
        return replace(self, keywords=(*self.keywords, value))

    def remove_keyword(self, index: int) -> "AnalyzedPost":
        keywords = list(self.keywords)
        del keywords[index]
        return replace(self, keywords=tuple(keywords))
