"""Generation journal and rollback.

The journal is a YAML map persisted at ``GlobalConfig.journal_path``::

    '20240601120000':
      generated_at: 2024-06-01 12:00:00 +0200
      files:
      - app/contexts/user/operation/create_operation.py
      - app/controllers/api/user_controller.py

Keys are 14-digit timestamps (always written as strings).  The file is read,
fully rewritten and closed within every call; there is no locking, so two
processes writing at the same time can lose an update.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from rich.table import Table

from ctxgen.config import GlobalConfig
from ctxgen.errors import RollbackError
from ctxgen.utils import console, generated_at, normalize_path, print_info, print_success, print_warning


class GenerationRecord(BaseModel):
    """Files written by one successful generation run."""

    timestamp: str
    generated_at: str
    files: list[str] = Field(default_factory=list)

    def to_journal(self) -> dict[str, Any]:
        return {"generated_at": self.generated_at, "files": list(self.files)}


class RollbackManager:
    """Records generations and deletes the files of a recorded generation."""

    def __init__(
        self,
        config: GlobalConfig | None = None,
        project_root: str | Path = ".",
    ) -> None:
        self.config = config or GlobalConfig()
        self.project_root = Path(project_root)

    @property
    def journal_file(self) -> Path:
        return self.project_root / self.config.journal_path

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load(self) -> dict[str, GenerationRecord]:
        """Read the journal; a missing or unparseable file is an empty journal."""
        if not self.journal_file.is_file():
            return {}
        try:
            raw = yaml.safe_load(self.journal_file.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, yaml.YAMLError) as exc:
            print_warning(f"Ignoring unreadable generation journal {self.journal_file}: {exc}")
            return {}
        if not isinstance(raw, dict):
            return {}

        records: dict[str, GenerationRecord] = {}
        for key, value in raw.items():
            timestamp = str(key)
            entry = value if isinstance(value, dict) else {}
            records[timestamp] = GenerationRecord(
                timestamp=timestamp,
                generated_at=str(entry.get("generated_at", "")),
                files=[str(f) for f in entry.get("files") or []],
            )
        return records

    def save(self, records: dict[str, GenerationRecord]) -> None:
        data = {timestamp: record.to_journal() for timestamp, record in records.items()}
        self.journal_file.parent.mkdir(parents=True, exist_ok=True)
        self.journal_file.write_text(
            yaml.safe_dump(data, sort_keys=False, default_flow_style=False),
            encoding="utf-8",
        )

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def track_generation(self, timestamp: str, files: list[str]) -> GenerationRecord:
        records = self.load()
        merged = list(files)
        previous = records.get(str(timestamp))
        if previous is not None:
            # Two runs within the same second share a key.
            merged = previous.files + [f for f in files if f not in previous.files]
        record = GenerationRecord(
            timestamp=str(timestamp), generated_at=generated_at(), files=merged
        )
        records[record.timestamp] = record
        self.save(records)
        return record

    def rollback_by_timestamp(self, timestamp: str) -> bool:
        records = self.load()
        record = records.get(str(timestamp))
        if record is None:
            print_warning(f"No generation found with timestamp: {timestamp}")
            print_info(f"Available generations: {', '.join(records) or 'none'}")
            return False

        self._rollback_files(record)

        del records[record.timestamp]
        self.save(records)
        print_success(f"Rollback completed for timestamp: {record.timestamp}")
        return True

    def rollback_last(self) -> bool:
        records = self.load()
        if not records:
            print_warning("No generations to rollback")
            return False
        return self.rollback_by_timestamp(max(records))

    def list_generations(self) -> list[GenerationRecord]:
        """Report every tracked generation in stored order (read-only)."""
        records = list(self.load().values())
        if not records:
            print_info("No context generations found")
            return records

        for record in records:
            table = Table(
                title=f"{record.timestamp} ({record.generated_at})",
                show_header=True,
                header_style="bold cyan",
            )
            table.add_column(f"Files: {len(record.files)} files")
            for file_path in record.files:
                table.add_row(file_path)
            console.print(table)
            console.print()
        return records

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _rollback_files(self, record: GenerationRecord) -> None:
        print_info(f"Rolling back generation {record.timestamp}...")
        for file_path in record.files:
            target = self.project_root / file_path
            try:
                if target.is_file() or target.is_symlink():
                    target.unlink()
                    print_info(f"   Removed: {file_path}")
                else:
                    print_info(f"   Already removed: {file_path}")
                self._remove_empty_directories(Path(file_path).parent)
            except OSError as exc:
                raise RollbackError(
                    f"Cannot remove {file_path}: {exc.strerror or exc}",
                    operation="rollback",
                ) from exc

    def _remove_empty_directories(self, directory: Path) -> None:
        """Remove *directory* and its parents while they are empty.

        Stops at the contexts root, its parent, and the project root.
        """
        protected = {normalize_path(p) for p in self.config.protected_paths}
        root = self.project_root.resolve()
        current = directory
        while True:
            key = normalize_path(current)
            if key in protected or key in (".", "") or current == current.parent:
                return
            target = self.project_root / current
            if not target.is_dir() or target.resolve() == root or any(target.iterdir()):
                return
            target.rmdir()
            print_info(f"   Removed empty directory: {key}")
            current = current.parent
