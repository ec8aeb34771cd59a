from __future__ import annotations

import httpx

from .errors import ConfigError, SinkError
from .post import AnalyzedPost


class SheetSink:
    """
    Posts an AnalyzedPost as JSON to a Google Apps Script web app.

    Apps Script endpoints frequently answer with redirects or opaque bodies, so the
    response is not inspected: a request that went out without a transport error
    counts as saved.
    """

    def __init__(
        self,
        script_url: str,
        *,
        timeout_seconds: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        url = (script_url or "").strip()
        if not url:
            raise ConfigError("Google Apps Script URL is missing.")

        self._url = url
        self._timeout = timeout_seconds
        self._client = client

    def save(self, post: AnalyzedPost) -> None:
        try:
            if self._client is not None:
                self._client.post(self._url, json=post.to_payload(), timeout=self._timeout)
                return
            with httpx.Client(timeout=self._timeout) as client:
                client.post(self._url, json=post.to_payload())
        except httpx.HTTPError as e:
            raise SinkError(f"Failed to save to Google Sheet: {e}") from e
