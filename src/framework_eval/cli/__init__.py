"""Command-line interface for framework-eval."""

from framework_eval.cli.main import cli

__all__ = ["cli"]
