"""Report storage error classes."""

from typing import Optional


class StorageError(RuntimeError):
    """Raised when a finished report cannot be persisted or loaded.

    Attributes:
        analysis_id: Analysis the report belongs to.
    """

    def __init__(self, message: str, *, analysis_id: Optional[str] = None):
        super().__init__(message)
        self.analysis_id = analysis_id
