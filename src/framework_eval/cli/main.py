"""framework-eval CLI entry point."""

from typing import Optional

import click

from framework_eval.cli.commands import analyze_cmd, frameworks_group
from framework_eval.config import EvalConfig, set_config
from framework_eval.config.settings import _PACKAGE_VERSION

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    help="TOML config file (overrides FRAMEWORK_EVAL_CONFIG_FILE).",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Override the configured log level.",
)
@click.version_option(_PACKAGE_VERSION, prog_name="framework-eval")
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str], log_level: Optional[str]) -> None:
    """Score web content against value frameworks with an LLM backend."""
    config = EvalConfig.from_env(config_file)
    if log_level:
        config.log_level = log_level.upper()
    set_config(config)
    config.setup_logging()
    ctx.ensure_object(dict)["config"] = config


cli.add_command(analyze_cmd)
cli.add_command(frameworks_group)


if __name__ == "__main__":
    cli()
