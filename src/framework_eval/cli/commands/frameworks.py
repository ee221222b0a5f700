"""Framework inspection commands."""

import click

from framework_eval.cli.output import emit_exception, emit_success
from framework_eval.core.errors import FrameworkInvalidError
from framework_eval.core.frameworks import BUILTIN_FRAMEWORKS, resolve_framework


@click.group("frameworks")
def frameworks_group() -> None:
    """List and inspect evaluation frameworks."""
    pass


@frameworks_group.command("list")
def list_cmd() -> None:
    """List the built-in frameworks."""
    emit_success(
        {
            "frameworks": [
                {
                    "key": key,
                    "name": framework.name,
                    "description": framework.description,
                    "categories": len(framework.categories),
                    "elements": framework.element_count,
                }
                for key, framework in BUILTIN_FRAMEWORKS.items()
            ]
        }
    )


@frameworks_group.command("show")
@click.argument("name")
def show_cmd(name: str) -> None:
    """Show the categories and elements of NAME.

    NAME is a built-in framework key or a path to a JSON/TOML definition.
    """
    try:
        framework = resolve_framework(name)
    except FrameworkInvalidError as e:
        emit_exception(e)

    emit_success(
        {
            "name": framework.name,
            "slug": framework.slug,
            "description": framework.description,
            "elementCount": framework.element_count,
            "categories": [
                {
                    "categoryName": category.name,
                    "categoryKey": category.key,
                    "elements": list(category.elements),
                }
                for category in framework.categories
            ],
            "scoringInstructions": framework.scoring_instructions,
        }
    )
