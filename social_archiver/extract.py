from __future__ import annotations

import re
from urllib.parse import SplitResult, urlsplit

from .post import PostReference

# Status identifiers are snowflake-style integers; shorter runs are
# usually query parameters or dates.
_POST_ID_RE = re.compile(r"\d{15,}")


def _split(url: str) -> SplitResult | None:
    u = url.strip()
    if "://" not in u:
        u = "https://" + u.lstrip("/")
    try:
        return urlsplit(u)
    except ValueError:
        return None


def _normalize_host(netloc: str) -> str | None:
    host = (netloc or "").rsplit("@", 1)[-1].split(":", 1)[0].strip().casefold()
    if host.startswith("www."):
        host = host[4:]
    return host or None


def extract_post_id(url: str) -> str | None:
    match = _POST_ID_RE.search(url or "")
    return match.group(0) if match else None


def extract_reference(url: str) -> PostReference:
    """
    Derive a PostReference from a pasted post URL.

    A missing identifier or handle is not an error; later stages fall back to
    unverifiable mode.
    """
    raw = url or ""
    post_id = extract_post_id(raw)

    handle: str | None = None
    host: str | None = None

    parts = _split(raw) if raw.strip() else None
    if parts is not None:
        host = _normalize_host(parts.netloc)
        segs = [s for s in (parts.path or "").split("/") if s]
        if segs:
            handle = segs[0]

    return PostReference(raw_url=raw, post_id=post_id, handle=handle, host=host)
