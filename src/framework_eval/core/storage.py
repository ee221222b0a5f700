"""File-based storage for finished analysis reports.

Provides persistence for reports with:
- Atomic writes (temp+fsync+rename)
- File locking with timeout
- Path-traversal-safe file names

Files are named ``<analysis_id>-<framework_slug>.json`` and hold the
report's wire shape.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from filelock import FileLock, Timeout

from framework_eval.core.errors import StorageError
from framework_eval.core.evaluation.models import AnalysisReport
from framework_eval.core.frameworks.models import slugify

logger = logging.getLogger(__name__)

DEFAULT_REPORTS_PATH = Path.home() / ".framework-eval" / "reports"

# Lock acquisition timeout (seconds)
LOCK_ACQUISITION_TIMEOUT = 5


def sanitize_id(item_id: str) -> str:
    """Sanitize ID to prevent path traversal attacks.

    Args:
        item_id: Raw identifier

    Returns:
        Sanitized identifier safe for filesystem use
    """
    # Only allow alphanumeric, hyphens, underscores
    return "".join(c for c in item_id if c.isalnum() or c in "-_")


class JsonFileReportStore:
    """Stores each report as one JSON file in a directory."""

    def __init__(self, directory: Optional[Path] = None) -> None:
        """Initialize storage backend.

        Args:
            directory: Report directory (default: ~/.framework-eval/reports)
        """
        self.directory = Path(directory) if directory is not None else DEFAULT_REPORTS_PATH
        self.locks_path = self.directory / ".locks"

    def _ensure_directories(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self.locks_path.mkdir(parents=True, exist_ok=True)

    def _file_stem(self, analysis_id: str, framework_name: str) -> str:
        safe_id = sanitize_id(analysis_id)
        if not safe_id:
            raise StorageError(
                f"Invalid analysis id {analysis_id!r}",
                analysis_id=analysis_id,
            )
        return f"{safe_id}-{slugify(framework_name) or 'framework'}"

    def get_report_path(self, analysis_id: str, framework_name: str) -> Path:
        return self.directory / f"{self._file_stem(analysis_id, framework_name)}.json"

    def _get_lock_path(self, analysis_id: str, framework_name: str) -> Path:
        return self.locks_path / f"{self._file_stem(analysis_id, framework_name)}.lock"

    # =========================================================================
    # Operations
    # =========================================================================

    def store(self, analysis_id: str, framework_name: str, report: AnalysisReport) -> Path:
        """Save a report with atomic write and locking.

        Args:
            analysis_id: Run identifier
            framework_name: Framework display name (slugged into the file name)
            report: Finished report

        Returns:
            Path of the written file

        Raises:
            StorageError: If the directory, lock or write fails
        """
        report_path = self.get_report_path(analysis_id, framework_name)
        lock_path = self._get_lock_path(analysis_id, framework_name)

        try:
            self._ensure_directories()
            with FileLock(lock_path, timeout=LOCK_ACQUISITION_TIMEOUT):
                # Atomic write: temp file + fsync + rename
                data = report.to_dict()

                fd, temp_path = tempfile.mkstemp(
                    dir=self.directory,
                    prefix=f".{report_path.stem}.",
                    suffix=".tmp",
                )
                try:
                    with os.fdopen(fd, "w", encoding="utf-8") as f:
                        json.dump(data, f, indent=2, default=str)
                        f.flush()
                        os.fsync(f.fileno())

                    os.replace(temp_path, report_path)

                except Exception:
                    # Clean up temp file on error
                    try:
                        os.unlink(temp_path)
                    except OSError:
                        pass
                    raise
        except Timeout as exc:
            raise StorageError(
                f"Timed out waiting for report lock {lock_path}",
                analysis_id=analysis_id,
            ) from exc
        except OSError as exc:
            raise StorageError(
                f"Failed to write report {report_path}: {exc}",
                analysis_id=analysis_id,
            ) from exc

        logger.debug("Saved report %s to %s", analysis_id, report_path)
        return report_path

    def load(self, analysis_id: str, framework_name: str) -> Optional[Dict[str, Any]]:
        """Load a stored report's wire shape.

        Returns:
            Report dict, or None if not found or unreadable
        """
        report_path = self.get_report_path(analysis_id, framework_name)
        if not report_path.exists():
            return None

        lock_path = self._get_lock_path(analysis_id, framework_name)
        with FileLock(lock_path, timeout=LOCK_ACQUISITION_TIMEOUT):
            if not report_path.exists():
                return None
            try:
                data = json.loads(report_path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Failed to load report %s: %s", analysis_id, exc)
                return None
        return data if isinstance(data, dict) else None

    def list_reports(self) -> List[Path]:
        """Stored report files, oldest first."""
        if not self.directory.exists():
            return []
        return sorted(self.directory.glob("*.json"), key=lambda p: p.stat().st_mtime)
