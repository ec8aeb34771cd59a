from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Sequence

from .config_schema import StrategyConfig
from .post import PostReference
from .retrieval_schema import FINDING_JSON_SCHEMA, FINDING_SCHEMA_NAME


@dataclass(frozen=True)
class RetrievalDirective:
    """
    Where to look for one post, in priority order, plus the output contract.

    Built once per analysis and consumed by a single retrieval call.
    """

    reference: PostReference
    exact_url: str
    mirror_urls: Sequence[str] = ()
    archive_urls: Sequence[str] = ()
    queries: Sequence[str] = ()
    schema_name: str = FINDING_SCHEMA_NAME
    schema: dict[str, Any] = field(default_factory=lambda: copy.deepcopy(FINDING_JSON_SCHEMA))

    def steps(self) -> list[str]:
        return [self.exact_url, *self.mirror_urls, *self.archive_urls, *self.queries]


def _dedupe(values: Sequence[str]) -> tuple[str, ...]:
    out: list[str] = []
    seen: set[str] = set()
    for item in values:
        s = (item or "").strip()
        if not s:
            continue
        key = s.casefold()
        if key in seen:
            continue
        seen.add(key)
        out.append(s)
    return tuple(out)


def _status_path(handle: str, post_id: str) -> str:
    return f"{handle}/status/{post_id}"


def mirror_urls(ref: PostReference, mirrors: Sequence[str]) -> tuple[str, ...]:
    if not (ref.handle and ref.post_id):
        return ()
    path = _status_path(ref.handle, ref.post_id)
    return _dedupe([f"https://{domain}/{path}" for domain in mirrors])


def archive_urls(ref: PostReference, services: Sequence[str]) -> tuple[str, ...]:
    if not (ref.handle and ref.post_id and ref.host):
        return ()
    canonical = f"https://{ref.host}/{_status_path(ref.handle, ref.post_id)}"
    return _dedupe([f"{prefix}{canonical}" for prefix in services])


def search_queries(ref: PostReference, sites: Sequence[str]) -> tuple[str, ...]:
    queries: list[str] = []

    if ref.post_id:
        scoped = [ref.host, *sites] if ref.host else list(sites)
        for site in _dedupe([s for s in scoped if s]):
            queries.append(f'site:{site} "{ref.post_id}"')

        if ref.handle:
            queries.append(f'"{ref.handle}" "{ref.post_id}"')
        else:
            queries.append(f'"{ref.post_id}"')
    elif ref.handle:
        queries.append(f'"{ref.handle}" latest post')

    return _dedupe(queries)


def build_directives(
    ref: PostReference, *, strategy: StrategyConfig | None = None
) -> RetrievalDirective:
    """
    Turn a PostReference into an ordered lookup plan.

    Mirrors and archives come before generic search because platform pages are
    often walled off from crawlers while mirrors expose the text in metadata.
    """
    cfg = strategy or StrategyConfig()

    return RetrievalDirective(
        reference=ref,
        exact_url=ref.raw_url.strip(),
        mirror_urls=mirror_urls(ref, cfg.proxy_mirrors),
        archive_urls=archive_urls(ref, cfg.archive_services),
        queries=search_queries(ref, cfg.search_sites),
    )
