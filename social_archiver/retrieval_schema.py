from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


FINDING_SCHEMA_NAME = "social_archiver_post_finding"

# Exact `content` value the model must return when nothing corroborates the post.
UNAVAILABLE_CONTENT = "❌ [Unavailable]: The text of this post could not be found."

# NOTE: Hand-authored to stay within the Structured Outputs subset of JSON Schema.
# Strict mode requires every property to be listed as required, so the optional
# corroboration fields are nullable instead of omitted.
FINDING_JSON_SCHEMA: dict[str, Any] = {
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "platform": {
            "type": "string",
            "description": "Social platform name, e.g. Twitter, Facebook, LinkedIn, Instagram.",
        },
        "content": {
            "type": "string",
            "description": "Verbatim post text from the search evidence, or the unavailable sentinel.",
        },
        "keywords": {
            "type": "array",
            "items": {"type": "string"},
            "description": "3-7 keywords or hashtags relevant to the post text.",
        },
        "sourceUrl": {
            "type": ["string", "null"],
            "description": "URL of the page the content was taken from, or null.",
        },
        "foundStatusId": {
            "type": ["string", "null"],
            "description": "Numeric status id seen in the evidence the content came from, or null.",
        },
    },
    "required": ["platform", "content", "keywords", "sourceUrl", "foundStatusId"],
}


class RawFinding(BaseModel):
    """Untrusted model output, validated against FINDING_JSON_SCHEMA."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    platform: str
    content: str
    keywords: list[str]
    source_url: str | None = Field(default=None, alias="sourceUrl")
    found_status_id: str | None = Field(default=None, alias="foundStatusId")

    @field_validator("source_url", "found_status_id")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        s = v.strip()
        return s or None
