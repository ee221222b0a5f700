"""Custom framework loading and framework resolution.

``resolve_framework`` is the single entry point used by the pipeline and the
CLI: it accepts a ready ``FrameworkDefinition``, a plain mapping, a built-in
registry key, or a path to a JSON/TOML definition file.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Union

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # Python < 3.11 fallback

from framework_eval.core.errors import FrameworkInvalidError
from framework_eval.core.frameworks.builtin import BUILTIN_FRAMEWORKS, get_framework
from framework_eval.core.frameworks.models import FrameworkDefinition

logger = logging.getLogger(__name__)

FrameworkInput = Union[FrameworkDefinition, Mapping[str, Any], str, Path]

_SUPPORTED_SUFFIXES = (".json", ".toml")


def load_framework_file(path: Path) -> FrameworkDefinition:
    """Load a framework definition from a JSON or TOML file.

    A TOML file may hold the definition at the top level or under a
    ``[framework]`` table.

    Args:
        path: Definition file

    Returns:
        Validated FrameworkDefinition

    Raises:
        FrameworkInvalidError: If the file is missing, unreadable, not a
            supported format, or fails validation
    """
    suffix = path.suffix.lower()
    if suffix not in _SUPPORTED_SUFFIXES:
        raise FrameworkInvalidError(
            f"Unsupported framework file type '{suffix or path.name}'; expected .json or .toml"
        )

    try:
        if suffix == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
        else:
            with open(path, "rb") as f:
                data = tomllib.load(f)
    except FileNotFoundError as exc:
        raise FrameworkInvalidError(f"Framework file not found: {path}") from exc
    except (OSError, ValueError) as exc:
        raise FrameworkInvalidError(f"Could not read framework file {path}: {exc}") from exc

    if isinstance(data, dict) and isinstance(data.get("framework"), dict):
        data = data["framework"]

    framework = FrameworkDefinition.from_mapping(data)
    logger.debug(
        "Loaded framework '%s' from %s (%d categories)",
        framework.name,
        path,
        len(framework.categories),
    )
    return framework


def resolve_framework(framework: FrameworkInput) -> FrameworkDefinition:
    """Turn any accepted framework reference into a validated definition.

    Strings are tried as built-in registry keys / names first, then as file
    paths.

    Raises:
        FrameworkInvalidError: If the reference cannot be resolved or validated
    """
    if isinstance(framework, FrameworkDefinition):
        return framework
    if isinstance(framework, Path):
        return load_framework_file(framework)
    if isinstance(framework, str):
        key = framework.strip().lower()
        if key in BUILTIN_FRAMEWORKS or not Path(framework).suffix:
            return get_framework(framework)
        return load_framework_file(Path(framework))
    if isinstance(framework, Mapping):
        return FrameworkDefinition.from_mapping(framework)
    raise FrameworkInvalidError(
        f"Unsupported framework reference of type {type(framework).__name__}"
    )
