"""Unit tests for the generation journal and rollback (ctxgen.journal).

Tests cover:
- track_generation / load round trip and YAML layout
- rollback_by_timestamp: file removal, journal update, unknown timestamps
- rollback_last picks the newest timestamp
- Empty-directory pruning stops at protected roots
- Missing, unparseable and oddly keyed journals
- list_generations is read-only
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from ctxgen.config import GlobalConfig
from ctxgen.journal import GenerationRecord, RollbackManager

pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def manager(config: GlobalConfig, project_root: Path) -> RollbackManager:
    return RollbackManager(config, project_root)


def touch(project_root: Path, rel: str) -> Path:
    path = project_root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("generated\n", encoding="utf-8")
    return path


CONTEXT_FILES = [
    "app/contexts/user/operation/create_operation.py",
    "app/contexts/user/operation/update_operation.py",
]


# ---------------------------------------------------------------------------
# Tracking
# ---------------------------------------------------------------------------


class TestTracking:
    def test_round_trip(self, manager):
        record = manager.track_generation("20240101120000", CONTEXT_FILES)
        loaded = manager.load()
        assert list(loaded) == ["20240101120000"]
        assert loaded["20240101120000"].files == CONTEXT_FILES
        assert loaded["20240101120000"].generated_at == record.generated_at

    def test_yaml_layout(self, manager):
        manager.track_generation("20240101120000", ["a.py"])
        raw = yaml.safe_load(manager.journal_file.read_text(encoding="utf-8"))
        assert set(raw["20240101120000"]) == {"generated_at", "files"}
        assert raw["20240101120000"]["files"] == ["a.py"]

    def test_journal_location(self, manager, project_root):
        assert manager.journal_file == project_root / "config/contexts/.generations.yml"

    def test_entries_accumulate(self, manager):
        manager.track_generation("20240101000000", ["a.py"])
        manager.track_generation("20240601000000", ["b.py"])
        assert list(manager.load()) == ["20240101000000", "20240601000000"]

    def test_same_timestamp_merges_files(self, manager):
        manager.track_generation("20240101000000", ["a.py", "b.py"])
        manager.track_generation("20240101000000", ["b.py", "c.py"])
        loaded = manager.load()
        assert list(loaded) == ["20240101000000"]
        assert loaded["20240101000000"].files == ["a.py", "b.py", "c.py"]

    def test_to_journal(self):
        record = GenerationRecord(timestamp="1", generated_at="now", files=["x"])
        assert record.to_journal() == {"generated_at": "now", "files": ["x"]}


# ---------------------------------------------------------------------------
# Loading edge cases
# ---------------------------------------------------------------------------


class TestLoading:
    def test_missing_journal_is_empty(self, manager):
        assert manager.load() == {}

    def test_unparseable_journal_is_empty(self, manager):
        manager.journal_file.parent.mkdir(parents=True)
        manager.journal_file.write_text("{ this is: [not yaml", encoding="utf-8")
        assert manager.load() == {}

    def test_non_mapping_journal_is_empty(self, manager):
        manager.journal_file.parent.mkdir(parents=True)
        manager.journal_file.write_text("- just\n- a list\n", encoding="utf-8")
        assert manager.load() == {}

    def test_integer_keys_are_coerced(self, manager):
        manager.journal_file.parent.mkdir(parents=True)
        manager.journal_file.write_text(
            "20240101120000:\n  generated_at: x\n  files:\n  - a.py\n", encoding="utf-8"
        )
        records = manager.load()
        assert list(records) == ["20240101120000"]
        assert manager.rollback_by_timestamp("20240101120000") is True


# ---------------------------------------------------------------------------
# Rollback
# ---------------------------------------------------------------------------


class TestRollback:
    def test_removes_files_and_entry(self, manager, project_root):
        for rel in CONTEXT_FILES:
            touch(project_root, rel)
        manager.track_generation("20240101120000", CONTEXT_FILES)

        assert manager.rollback_by_timestamp("20240101120000") is True
        for rel in CONTEXT_FILES:
            assert not (project_root / rel).exists()
        assert manager.load() == {}

    def test_second_rollback_fails(self, manager, project_root):
        touch(project_root, "a.py")
        manager.track_generation("20240101120000", ["a.py"])
        assert manager.rollback_by_timestamp("20240101120000") is True
        assert manager.rollback_by_timestamp("20240101120000") is False

    def test_unknown_timestamp_leaves_journal_untouched(self, manager, project_root):
        touch(project_root, "a.py")
        manager.track_generation("20240101120000", ["a.py"])
        assert manager.rollback_by_timestamp("19990101000000") is False
        assert list(manager.load()) == ["20240101120000"]
        assert (project_root / "a.py").exists()

    def test_already_deleted_files_are_tolerated(self, manager):
        manager.track_generation("20240101120000", ["gone.py"])
        assert manager.rollback_by_timestamp("20240101120000") is True

    def test_rollback_last_picks_newest(self, manager, project_root):
        touch(project_root, "old.py")
        touch(project_root, "new.py")
        manager.track_generation("20240601000000", ["new.py"])
        manager.track_generation("20240101000000", ["old.py"])

        assert manager.rollback_last() is True
        assert not (project_root / "new.py").exists()
        assert (project_root / "old.py").exists()
        assert list(manager.load()) == ["20240101000000"]

    def test_rollback_last_with_empty_journal(self, manager):
        assert manager.rollback_last() is False

    def test_empty_directories_are_pruned_up_to_contexts_root(self, manager, project_root):
        for rel in CONTEXT_FILES:
            touch(project_root, rel)
        manager.track_generation("20240101120000", CONTEXT_FILES)
        manager.rollback_by_timestamp("20240101120000")

        assert not (project_root / "app/contexts/user").exists()
        assert (project_root / "app/contexts").is_dir()
        assert (project_root / "app").is_dir()

    def test_non_empty_directories_are_kept(self, manager, project_root):
        touch(project_root, "app/models/user.py")
        touch(project_root, "app/models/keep.py")
        manager.track_generation("20240101120000", ["app/models/user.py"])
        manager.rollback_by_timestamp("20240101120000")
        assert (project_root / "app/models/keep.py").exists()

    def test_pruning_stops_below_project_root(self, manager, project_root):
        touch(project_root, "lib/generated/thing.py")
        manager.track_generation("20240101120000", ["lib/generated/thing.py"])
        manager.rollback_by_timestamp("20240101120000")
        assert not (project_root / "lib").exists()
        assert project_root.is_dir()

    def test_custom_base_path_is_protected(self, project_root):
        config = GlobalConfig(base_path=Path("src/domains"))
        manager = RollbackManager(config, project_root)
        touch(project_root, "src/domains/user/query/finder.py")
        manager.track_generation("20240101120000", ["src/domains/user/query/finder.py"])
        manager.rollback_by_timestamp("20240101120000")
        assert (project_root / "src/domains").is_dir()
        assert not (project_root / "src/domains/user").exists()


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


class TestListGenerations:
    def test_lists_in_stored_order(self, manager):
        manager.track_generation("20240601000000", ["b.py"])
        manager.track_generation("20240101000000", ["a.py", "c.py"])
        records = manager.list_generations()
        assert [r.timestamp for r in records] == ["20240601000000", "20240101000000"]

    def test_is_read_only(self, manager):
        manager.track_generation("20240101000000", ["a.py"])
        before = manager.journal_file.read_text(encoding="utf-8")
        manager.list_generations()
        assert manager.journal_file.read_text(encoding="utf-8") == before

    def test_empty(self, manager):
        assert manager.list_generations() == []
        assert not manager.journal_file.exists()
