"""Analyze command: run the chunked evaluation pipeline from the shell."""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Mapping, Optional, Union

import click

from framework_eval.cli.output import emit_error, emit_exception, emit_success
from framework_eval.cli.progress import drain_with_progress
from framework_eval.config import EvalConfig, get_config
from framework_eval.core.errors import FrameworkInvalidError, ProviderError
from framework_eval.core.evaluation import (
    AnalysisReport,
    EvaluationPipeline,
    ProgressStreamer,
    encode_event,
)
from framework_eval.core.frameworks import FrameworkDefinition, resolve_framework
from framework_eval.core.providers import build_provider
from framework_eval.core.storage import JsonFileReportStore

logger = logging.getLogger(__name__)


def _read_content(source: str) -> Union[Mapping[str, Any], str]:
    """Read a content summary from a file or stdin.

    A JSON object is treated as a scraped content record; anything else is
    used as the page body text.
    """
    if source == "-":
        text = sys.stdin.read()
    else:
        text = Path(source).read_text(encoding="utf-8")

    stripped = text.lstrip()
    if stripped.startswith("{"):
        try:
            data = json.loads(stripped)
        except json.JSONDecodeError:
            return text
        if isinstance(data, dict):
            return data
    return text


def _build_store(config: EvalConfig, store_dir: Optional[str]) -> Optional[JsonFileReportStore]:
    if store_dir:
        return JsonFileReportStore(Path(store_dir).expanduser())
    if config.storage.enabled:
        return JsonFileReportStore(config.storage.get_directory())
    return None


async def _stream_events(streamer: ProgressStreamer) -> None:
    async for event in streamer:
        click.echo(encode_event(event), nl=False)


async def _run_buffered(streamer: ProgressStreamer, show_progress: bool) -> Optional[AnalysisReport]:
    if show_progress:
        return await drain_with_progress(streamer)
    async for _ in streamer:
        pass
    return streamer.report


@click.command("analyze")
@click.option(
    "--framework",
    "-f",
    "framework_name",
    required=True,
    help="Built-in framework key or path to a JSON/TOML definition.",
)
@click.option(
    "--content",
    "-c",
    "content_source",
    required=True,
    help="Content file (JSON record or plain text), or - for stdin.",
)
@click.option("--url", help="Page URL to report (overrides the content record).")
@click.option("--analysis-id", help="Analysis identifier (default: new ULID).")
@click.option(
    "--stream",
    "stream_events",
    is_flag=True,
    help="Write progress events as NDJSON instead of a single report.",
)
@click.option(
    "--progress",
    "show_progress",
    is_flag=True,
    help="Render a progress bar on stderr while the analysis runs.",
)
@click.option(
    "--store-dir",
    type=click.Path(file_okay=False),
    help="Persist the finished report into this directory.",
)
def analyze_cmd(
    framework_name: str,
    content_source: str,
    url: Optional[str],
    analysis_id: Optional[str],
    stream_events: bool,
    show_progress: bool,
    store_dir: Optional[str],
) -> None:
    """Evaluate page content against a framework, one category at a time."""
    config = get_config()

    try:
        content = _read_content(content_source)
    except OSError as e:
        emit_error(
            f"Cannot read content: {e}",
            code="VALIDATION_ERROR",
            error_type="validation",
            details={"content": content_source},
        )

    try:
        framework: FrameworkDefinition = resolve_framework(framework_name)
        provider = build_provider(config)
    except (FrameworkInvalidError, ProviderError) as e:
        emit_exception(e)

    pipeline = EvaluationPipeline(
        provider,
        store=_build_store(config, store_dir),
        content_excerpt_chars=config.pipeline.content_excerpt_chars,
    )
    streamer = pipeline.stream(framework, content, analysis_id=analysis_id, url=url)
    logger.debug("Starting analysis %s with %s", streamer.analysis_id, provider.get_provider_name())

    if stream_events:
        asyncio.run(_stream_events(streamer))
        if streamer.error is not None:
            sys.exit(1)
        return

    report = asyncio.run(_run_buffered(streamer, show_progress))
    if report is None:
        emit_exception(streamer.error or RuntimeError("Analysis ended without a report"))
    emit_success(report.to_dict())
