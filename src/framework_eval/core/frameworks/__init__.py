"""Evaluation frameworks: models, built-in rubrics and custom loading."""

from framework_eval.core.frameworks.builtin import (
    BUILTIN_FRAMEWORKS,
    get_framework,
    list_frameworks,
)
from framework_eval.core.frameworks.loader import (
    FrameworkInput,
    load_framework_file,
    resolve_framework,
)
from framework_eval.core.frameworks.models import (
    Category,
    FrameworkDefinition,
    slugify,
)

__all__ = [
    "BUILTIN_FRAMEWORKS",
    "Category",
    "FrameworkDefinition",
    "FrameworkInput",
    "get_framework",
    "list_frameworks",
    "load_framework_file",
    "resolve_framework",
    "slugify",
]
