"""Framework definition models.

A framework is an evaluation rubric: named categories, each holding a list of
element names the backend scores one category at a time. Definitions arrive
from the built-in registry, from JSON/TOML files, or from callers as plain
mappings using either snake_case or the camelCase wire names
(``categoryName``, ``categoryKey``, ``scoringInstructions``).

Validation runs at construction; any structural problem surfaces as
:class:`~framework_eval.core.errors.FrameworkInvalidError`.
"""

from __future__ import annotations

import re
from typing import Any, List, Mapping, Optional

from pydantic import AliasChoices, BaseModel, Field, ValidationError, field_validator, model_validator

from framework_eval.core.errors import FrameworkInvalidError

_SLUG_PATTERN = re.compile(r"[^a-z0-9]+")


def slugify(value: str) -> str:
    """Lower-case, hyphen-separated form of *value* (``"B2B Elements"`` -> ``"b2b-elements"``)."""
    return _SLUG_PATTERN.sub("-", value.lower()).strip("-")


def _describe_validation_error(exc: ValidationError) -> str:
    messages = []
    for err in exc.errors():
        original = (err.get("ctx") or {}).get("error")
        if original is not None:
            messages.append(str(original))
            continue
        location = ".".join(str(part) for part in err.get("loc", ()))
        messages.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    return "; ".join(messages) or "Invalid framework definition"


class Category(BaseModel):
    """One rubric category: the unit of work sent to the backend."""

    model_config = {"frozen": True, "populate_by_name": True}

    name: str = Field(validation_alias=AliasChoices("name", "categoryName"))
    key: str = Field(validation_alias=AliasChoices("key", "categoryKey"))
    elements: List[str] = Field(default_factory=list)

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise FrameworkInvalidError(_describe_validation_error(exc)) from exc

    @field_validator("name", "key")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("category name and key must be non-empty")
        return v

    @model_validator(mode="after")
    def validate_has_elements(self) -> "Category":
        """A category with nothing to score cannot produce a chunk."""
        if not self.elements:
            raise ValueError(f"category '{self.key}' has no elements")
        for element in self.elements:
            if not element.strip():
                raise ValueError(f"category '{self.key}' contains an empty element name")
        return self


class FrameworkDefinition(BaseModel):
    """A complete evaluation rubric.

    Attributes:
        name: Display name used in prompts and reports
        categories: Ordered categories; order drives chunk order
        scoring_instructions: Optional replacement for the default scoring bands
        description: Free-form summary shown by ``frameworks list``
    """

    model_config = {"frozen": True, "populate_by_name": True}

    name: str = Field(validation_alias=AliasChoices("name", "frameworkName"))
    categories: List[Category] = Field(
        default_factory=list,
        validation_alias=AliasChoices("categories", "chunks"),
    )
    scoring_instructions: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("scoring_instructions", "scoringInstructions"),
    )
    description: str = ""

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise FrameworkInvalidError(
                _describe_validation_error(exc),
                framework=data.get("name") if isinstance(data.get("name"), str) else None,
            ) from exc

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("framework name must be non-empty")
        return v

    @model_validator(mode="after")
    def validate_unique_keys(self) -> "FrameworkDefinition":
        """Category keys and element names must be unique across the framework."""
        seen_keys: set[str] = set()
        seen_elements: set[str] = set()
        for category in self.categories:
            if category.key in seen_keys:
                raise ValueError(f"duplicate category key '{category.key}'")
            seen_keys.add(category.key)
            for element in category.elements:
                if element in seen_elements:
                    raise ValueError(f"element '{element}' appears in more than one place")
                seen_elements.add(element)
        return self

    @property
    def slug(self) -> str:
        return slugify(self.name)

    @property
    def element_count(self) -> int:
        return sum(len(c.elements) for c in self.categories)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FrameworkDefinition":
        """Build a definition from a plain mapping.

        Raises:
            FrameworkInvalidError: If *data* is not a mapping or fails validation
        """
        if not isinstance(data, Mapping):
            raise FrameworkInvalidError(
                f"framework definition must be a mapping, got {type(data).__name__}"
            )
        return cls(**dict(data))
