"""Framework definition error classes."""

from typing import Optional


class FrameworkInvalidError(ValueError):
    """Raised when a framework definition is malformed or unknown.

    This is the only error that aborts a whole evaluation run; it is
    detected before any chunk executes.

    Attributes:
        framework: Name of the offending framework, when known.
    """

    def __init__(self, message: str, *, framework: Optional[str] = None):
        super().__init__(message)
        self.framework = framework
