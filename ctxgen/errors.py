"""Exception hierarchy and error-handling wrapper for ctxgen.

Every public entry point runs inside :func:`error_handling`, which reports
the failure on the console and re-raises it as one of the typed errors below
so callers only need to catch :class:`ContextError`.
"""

from __future__ import annotations

import traceback
from collections.abc import Iterator
from contextlib import contextmanager

from ctxgen.utils import print_error, print_info


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class ContextError(Exception):
    """Base class for every error raised by ctxgen."""

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        location: str | None = None,
    ) -> None:
        self.message = message
        self.operation = operation
        self.location = location
        prefix = f"{operation}: " if operation else ""
        super().__init__(f"{prefix}{message}")


class ConfigurationError(ContextError):
    """Raised for a missing configuration callable or an invalid option shape."""


class GenerationError(ContextError):
    """Raised when synthesizing or writing a file fails.

    Attributes:
        path: The file (or directory) being written when the failure happened.
    """

    def __init__(self, message: str, *, path: str | None = None, **kwargs) -> None:
        self.path = path
        if path:
            message = f"{message} ({path})"
        super().__init__(message, **kwargs)


class RollbackError(ContextError):
    """Raised when a generation cannot be rolled back or listed."""


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------

_HINTS: dict[str, str] = {
    "configure": "Check your configuration syntax and required parameters",
    "generate": "Verify your generation callable and file permissions",
    "rollback": "Check if the timestamp exists and files are accessible",
    "list_generations": "Check that the generation journal is readable",
}

_ERRORS: dict[str, type[ContextError]] = {
    "configure": ConfigurationError,
    "generate": GenerationError,
    "rollback": RollbackError,
    "list_generations": RollbackError,
}


def _location(exc: BaseException) -> str | None:
    frames = traceback.extract_tb(exc.__traceback__)
    if not frames:
        return None
    frame = frames[-1]
    return f"{frame.filename}:{frame.lineno} in {frame.name}"


@contextmanager
def error_handling(operation: str) -> Iterator[None]:
    """Translate any failure inside the block into a typed :class:`ContextError`.

    * ``ContextError`` subclasses are reported and re-raised unchanged.
    * ``ValueError``/``TypeError`` (bad arguments, pydantic validation) become
      :class:`ConfigurationError`.
    * Anything else becomes the error type registered for *operation*.
    """
    try:
        yield
    except ContextError as exc:
        print_error(f"Error during {operation}: {exc.message}")
        raise
    except (ValueError, TypeError) as exc:
        print_error(f"Invalid arguments for {operation}: {exc}")
        print_info("Please check the documentation for correct usage")
        raise ConfigurationError(
            str(exc), operation=operation, location=_location(exc)
        ) from exc
    except Exception as exc:
        location = _location(exc)
        print_error(f"Error during {operation}: {exc}")
        if location:
            print_info(f"Location: {location}")
        hint = _HINTS.get(operation)
        if hint:
            print_info(hint)
        error_cls = _ERRORS.get(operation, ContextError)
        raise error_cls(str(exc), operation=operation, location=location) from exc
