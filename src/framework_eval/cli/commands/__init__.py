"""CLI command groups."""

from framework_eval.cli.commands.analyze import analyze_cmd
from framework_eval.cli.commands.frameworks import frameworks_group

__all__ = [
    "analyze_cmd",
    "frameworks_group",
]
