"""Content summary handed over by the extraction collaborator.

Scraped pages arrive in several historical shapes (flat camelCase records,
records with a nested ``seo`` block, keyword strings instead of lists).
``ContentSummary`` accepts all of them and fills every missing field with an
empty default so prompt construction never has to branch on ``None``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Union

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)

# Wire names checked in order for each field; first non-empty value wins.
_FIELD_SOURCES: Dict[str, tuple[str, ...]] = {
    "url": ("url",),
    "title": ("title",),
    "meta_description": ("meta_description", "metaDescription", "seo.metaDescription"),
    "keywords": ("keywords", "extractedKeywords", "seo.extractedKeywords"),
    "body_text": ("body_text", "bodyText", "cleanText", "content", "text"),
    "headings": ("headings", "seo.headings"),
}


def _lookup(data: Mapping[str, Any], dotted: str) -> Any:
    current: Any = data
    for part in dotted.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def _as_string_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, Mapping):
        # {"h1": [...], "h2": [...]} keeps level order
        items: List[str] = []
        for level in sorted(value):
            items.extend(_as_string_list(value[level]))
        return items
    if isinstance(value, (list, tuple)):
        return [str(item).strip() for item in value if item is not None and str(item).strip()]
    return []


class ContentSummary(BaseModel):
    """Scraped page content reduced to what the prompts need."""

    url: str = ""
    title: str = ""
    meta_description: str = ""
    keywords: List[str] = Field(default_factory=list)
    body_text: str = ""
    headings: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_wire_shape(cls, data: Any) -> Any:
        """Collapse the accepted wire aliases into canonical field names."""
        if not isinstance(data, Mapping):
            return data

        normalized: Dict[str, Any] = {}
        for field_name, sources in _FIELD_SOURCES.items():
            value = None
            for source in sources:
                candidate = _lookup(data, source)
                if candidate not in (None, "", [], {}):
                    value = candidate
                    break
            if field_name in ("keywords", "headings"):
                normalized[field_name] = _as_string_list(value)
            else:
                normalized[field_name] = "" if value is None else str(value)
        return normalized

    @classmethod
    def coerce(cls, content: Union["ContentSummary", Mapping[str, Any], str, None]) -> "ContentSummary":
        """Accept a summary, a mapping, or raw body text."""
        if isinstance(content, ContentSummary):
            return content
        if content is None:
            return cls()
        if isinstance(content, str):
            return cls(body_text=content)
        return cls.model_validate(content)
