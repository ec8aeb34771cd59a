from __future__ import annotations

import json
from typing import Any, Protocol

from openai import OpenAI

from .config_schema import OpenAIConfig
from .errors import ConfigError, RetrievalError, SchemaValidationError
from .retrieval_schema import UNAVAILABLE_CONTENT, RawFinding
from .strategy import RetrievalDirective


class _ResponsesAPI(Protocol):
    def create(self, **kwargs: Any) -> Any: ...


class _OpenAIClient(Protocol):
    responses: _ResponsesAPI


class PostRetriever(Protocol):
    def invoke(
        self, directive: RetrievalDirective, *, timeout: float | None = None
    ) -> RawFinding: ...

    def invoke_with_metadata(
        self, directive: RetrievalDirective, *, timeout: float | None = None
    ) -> tuple[RawFinding, int | None]:
        """Same as `invoke`, plus the total tokens spent when the backend reports them."""
        ...


_SYSTEM_INSTRUCTIONS = f"""\
You locate the text of a single social media post for an archive.

Use the web search tool. Work through the lookup plan in the order given:
the exact URL first, then the mirror and archive URLs, then the search queries.
Mirror and archive pages usually expose the post text in their page metadata;
when a snippet from one of them contains the post, copy its text verbatim.

Rules:
- Only report text that belongs to the target post. Ignore pinned posts,
  "suggested", "who to follow", "trending", and replies shown beside it.
- Status ids grow over time. If the post you found is dated far from what the
  target id implies (e.g. an old post for a recent id), it is not the target.
- Set foundStatusId to the numeric status id you actually saw in the evidence the
  content came from (in its URL or page), or null if you did not see one.
  Never copy the target id into foundStatusId unless the evidence shows it.
- Set sourceUrl to the page the content came from, or null.
- If nothing corroborates the target post, set content to exactly:
  {UNAVAILABLE_CONTENT}
  Do not write a summary, a guess, or a description of the account instead.
- platform: the social network name (Twitter, Facebook, LinkedIn, Instagram, ...).
- keywords: 3-7 short keywords or hashtags about the post text.

Return a JSON object that matches the provided schema EXACTLY.
"""


def render_request(directive: RetrievalDirective) -> str:
    """Render the lookup plan as the user message for the retrieval call."""
    ref = directive.reference
    lines: list[str] = [f"Target URL: {directive.exact_url}"]

    if ref.post_id:
        lines.append(f"Target status id: {ref.post_id}")
    else:
        lines.append("Target status id: unknown (no id in the URL; the latest post is acceptable)")
    if ref.handle:
        lines.append(f"Account handle: {ref.handle}")

    lines.append("")
    lines.append("Lookup plan:")
    for i, step in enumerate(directive.steps(), start=1):
        lines.append(f"{i}. {step}")

    return "\n".join(lines)


def _text_format(directive: RetrievalDirective) -> dict[str, Any]:
    return {
        "format": {
            "type": "json_schema",
            "name": directive.schema_name,
            "strict": True,
            "schema": directive.schema,
        }
    }


def _extract_output_text(response: Any) -> str:
    direct = (getattr(response, "output_text", None) or "").strip()
    if direct:
        return direct

    # Search-enabled responses put web_search_call items before the message.
    output = getattr(response, "output", None) or []
    for item in output:
        content = getattr(item, "content", None) or []
        for part in content:
            text = getattr(part, "text", None)
            if isinstance(text, str) and text.strip():
                return text.strip()

    raise RetrievalError("No response from the retrieval model.")


def _extract_total_tokens(response: Any) -> int | None:
    usage = getattr(response, "usage", None)
    if usage is None and isinstance(response, dict):
        usage = response.get("usage")

    if usage is None:
        return None

    val: Any
    if isinstance(usage, dict):
        val = usage.get("total_tokens")
    else:
        val = getattr(usage, "total_tokens", None)

    if val is None:
        return None

    try:
        n = int(val)
    except (TypeError, ValueError):
        return None
    return n if n >= 0 else None


def parse_finding(raw: str) -> RawFinding:
    try:
        data = json.loads(raw)
    except ValueError as e:
        raise SchemaValidationError(f"Retrieval output is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise SchemaValidationError("Retrieval output must be a JSON object")

    try:
        return RawFinding.model_validate(data)
    except ValueError as e:
        raise SchemaValidationError(f"Retrieval output does not match the schema: {e}") from e


class OpenAIPostRetriever:
    """
    One search-enabled OpenAI Responses call per analysis, constrained by Structured Outputs.

    There is no retry here; callers that want one wrap `invoke`.
    """

    def __init__(
        self,
        api_key: str,
        *,
        openai_cfg: OpenAIConfig,
        client: _OpenAIClient | None = None,
    ) -> None:
        key = (api_key or "").strip()
        if not key:
            raise ConfigError(f"Missing OpenAI API key (expected in {openai_cfg.api_key_env})")

        self._cfg = openai_cfg
        self._client: _OpenAIClient = client or OpenAI(api_key=key)

    def _call_raw(
        self, directive: RetrievalDirective, *, timeout: float | None
    ) -> tuple[str, int | None]:
        kwargs: dict[str, Any] = {
            "model": self._cfg.model,
            "instructions": _SYSTEM_INSTRUCTIONS,
            "input": [
                {"role": "user", "content": render_request(directive)},
            ],
            "tools": [
                {"type": "web_search", "search_context_size": self._cfg.search_context_size},
            ],
            "text": _text_format(directive),
            "max_output_tokens": self._cfg.max_output_tokens,
        }
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            response = self._client.responses.create(**kwargs)
        except Exception as e:
            raise RetrievalError(f"OpenAI call failed ({self._cfg.model}): {e}") from e

        return _extract_output_text(response), _extract_total_tokens(response)

    def invoke_with_metadata(
        self, directive: RetrievalDirective, *, timeout: float | None = None
    ) -> tuple[RawFinding, int | None]:
        raw, tokens = self._call_raw(directive, timeout=timeout)
        return parse_finding(raw), tokens

    def invoke(
        self, directive: RetrievalDirective, *, timeout: float | None = None
    ) -> RawFinding:
        finding, _ = self.invoke_with_metadata(directive, timeout=timeout)
        return finding
