"""Shared utility functions for ctxgen.

Provides identifier transforms used to derive class and file names, the
generation timestamp helpers, path normalisation, and Rich-based operator
output.  Every generator and the rollback journal report through the single
module-level ``console`` so output can be captured or silenced in one place.
"""

from __future__ import annotations

import os
import re
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.table import Table

console = Console()

# ---------------------------------------------------------------------------
# Timestamps
# ---------------------------------------------------------------------------

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
GENERATED_AT_FORMAT = "%Y-%m-%d %H:%M:%S %z"


def generation_timestamp(moment: datetime | None = None) -> str:
    """Return a fixed-width ``YYYYMMDDHHMMSS`` timestamp.

    The fields are zero-padded, so the strings sort lexicographically in
    chronological order.  Rolling back the most recent generation relies on
    that.
    """
    return (moment or datetime.now()).strftime(TIMESTAMP_FORMAT)


def generated_at(moment: datetime | None = None) -> str:
    """Human-readable local time stored next to every journal entry."""
    return (moment or datetime.now().astimezone()).strftime(GENERATED_AT_FORMAT).strip()


# ---------------------------------------------------------------------------
# Identifier transforms
# ---------------------------------------------------------------------------


def camelize(value: str) -> str:
    """Convert ``some_thing`` or ``some-thing`` to ``SomeThing``.

    Only the first letter of every word is upper-cased, so names that are
    already PascalCase pass through unchanged::

        camelize("user_profile") -> "UserProfile"
        camelize("UserProfile")  -> "UserProfile"
        camelize("user")         -> "User"
    """
    parts = re.split(r"[-_\s]+", str(value))
    return "".join(part[:1].upper() + part[1:] for part in parts if part)


def underscore(value: str) -> str:
    """Convert ``SomeThing`` or ``some-thing`` to ``some_thing``."""
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", str(value))
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return re.sub(r"[-\s]+", "_", s2).lower()


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def normalize_path(path: str | Path) -> str:
    """Return *path* as a normalised POSIX string (``"./a//b/"`` -> ``"a/b"``)."""
    return Path(os.path.normpath(str(path))).as_posix()


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist."""
    dir_path = Path(path)
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def print_summary_table(data: dict[str, str], title: str = "Summary") -> None:
    """Print a two-column key/value summary table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")

    for key, value in data.items():
        table.add_row(key, str(value))

    console.print(table)
    console.print()


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{message}[/bold green]")


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{message}[/bold red]")


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{message}[/bold yellow]")


def print_info(message: str) -> None:
    """Print a plain informational message."""
    console.print(message, highlight=False)
