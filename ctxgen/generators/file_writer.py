"""File writing with conflict resolution.

One :class:`GenerationRun` is created per ``Generator.execute`` call and is
shared by reference with every domain generator of that run.  It carries the
run timestamp, the force flag, the accumulated list of written files, and the
sticky "apply to all" decision taken at a conflict prompt.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from rich.prompt import Prompt

from ctxgen.errors import GenerationError
from ctxgen.utils import console, ensure_dir, generation_timestamp


class OverrideState(str, Enum):
    """Run-wide answer to "overwrite an existing file?"."""

    UNSET = "unset"
    FORCE_ALL = "force_all"
    SKIP_ALL = "skip_all"


PromptFn = Callable[[str], str]


@dataclass
class GenerationRun:
    """Mutable state shared by every generator taking part in one run."""

    force: bool = False
    project_root: Path = field(default_factory=Path)
    timestamp: str = field(default_factory=generation_timestamp)
    override: OverrideState = OverrideState.UNSET
    generated_files: list[str] = field(default_factory=list)

    def resolve(self, path: str | Path) -> Path:
        """Absolute location of a project-relative *path*."""
        return Path(self.project_root) / path


def console_prompt(path: str) -> str:
    """Ask the operator on the Rich console; end of input counts as "no"."""
    try:
        return Prompt.ask(
            f"File '{path}' already exists. Override? (y/N/a=all/s=skip all)",
            console=console,
            default="n",
            show_default=False,
        )
    except EOFError:
        return "n"


class FileWriter:
    """Writes generated files, asking before overwriting existing ones.

    Decision order for an existing file: force mode, then a sticky
    ``OverrideState`` decision, then one interactive prompt.  ``y``/``n``
    answers apply to that file only; ``a``/``s`` answers are stored on the
    shared run and apply to every later conflict.
    """

    def __init__(self, run: GenerationRun, prompt: PromptFn | None = None) -> None:
        self.run = run
        self.prompt = prompt or console_prompt

    def ensure_directory(self, path: str | Path) -> Path:
        try:
            return ensure_dir(self.run.resolve(path))
        except OSError as exc:
            raise GenerationError(
                f"Cannot create directory: {exc.strerror or exc}", path=Path(path).as_posix()
            ) from exc

    def generate_file(self, path: str | Path, content: str) -> bool:
        """Write *content* to *path*; return ``True`` iff the file was written."""
        rel = Path(path)
        target = self.run.resolve(rel)
        self.ensure_directory(rel.parent)

        if not self.should_write(target, rel):
            console.print(f"[yellow]Skipped:[/yellow] {rel} (already exists or user declined)")
            return False

        try:
            target.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise GenerationError(
                f"Cannot write file: {exc.strerror or exc}", path=rel.as_posix()
            ) from exc

        self.run.generated_files.append(rel.as_posix())
        console.print(f"[green]Created:[/green] {rel}")
        return True

    def should_write(self, target: Path, rel: Path) -> bool:
        if not target.exists():
            return True
        if self.run.force:
            return True
        if self.run.override is OverrideState.FORCE_ALL:
            return True
        if self.run.override is OverrideState.SKIP_ALL:
            return False
        return self.handle_response(self.prompt(rel.as_posix()))

    def handle_response(self, response: str | None) -> bool:
        answer = (response or "n").strip().lower()
        if answer.startswith("a") or (answer.endswith("all") and "skip" not in answer):
            self.run.override = OverrideState.FORCE_ALL
            return True
        if answer.startswith("s") or "skip" in answer:
            self.run.override = OverrideState.SKIP_ALL
            return False
        return answer.startswith("y") or answer.endswith("yes")
