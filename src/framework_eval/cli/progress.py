"""Rich progress rendering for buffered analyze runs."""

from typing import Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, TaskID, TextColumn, TimeElapsedColumn

from framework_eval.core.evaluation import AnalysisReport, ProgressStreamer, ProgressUpdate, ResultEvent
from framework_eval.core.evaluation.models import ChunkStatus


async def drain_with_progress(
    streamer: ProgressStreamer,
    *,
    console: Optional[Console] = None,
) -> Optional[AnalysisReport]:
    """Consume *streamer* while drawing a progress bar on stderr.

    Returns:
        The final report, or None when the run ended with an error event
    """
    console = console or Console(stderr=True)
    with Progress(
        TextColumn("[bold blue]{task.description}"),
        BarColumn(),
        TextColumn("{task.percentage:>3.0f}%"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task: TaskID = progress.add_task("Planning", total=100)
        async for event in streamer:
            if isinstance(event, ProgressUpdate):
                if event.status == ChunkStatus.STARTED:
                    description = f"Scoring {event.category_name}"
                elif event.status == ChunkStatus.FAILED:
                    description = f"[red]{event.category_name} failed"
                else:
                    description = f"{event.category_name} done"
                progress.update(task, completed=event.percent, description=description)
            elif isinstance(event, ResultEvent):
                progress.update(task, completed=event.percent, description="Merged")

    if streamer.report is not None:
        failed = streamer.report.chunks_total - streamer.report.chunks_completed
        if failed:
            console.print(f"[yellow]{failed} of {streamer.report.chunks_total} categories failed")
    return streamer.report
