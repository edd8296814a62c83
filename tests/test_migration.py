"""Unit tests for the migration-style base class (ctxgen.migration)."""

from __future__ import annotations

import pytest

import ctxgen
from ctxgen.migration import Migration

pytestmark = pytest.mark.unit


class CreateUserContext(Migration):
    def change(self):
        self.domain("user", lambda d: d.operation(lambda op: op.component(["create", "update"])))
        self.model("user")
        self.endpoint(["health", "status"])


class TestMigration:
    def test_change_is_required(self, project_root):
        with pytest.raises(NotImplementedError):
            Migration(project_root).run()

    def test_run_generates(self, project_root):
        assert CreateUserContext(project_root).run() is True
        assert (project_root / "app/models/user.py").is_file()
        assert (project_root / "app/controllers/api/health_controller.py").is_file()
        assert (project_root / "app/controllers/api/status_controller.py").is_file()
        assert (project_root / "app/contexts/user/operation/create_operation.py").is_file()

    def test_overwrites_without_prompting(self, project_root):
        (project_root / "app/models").mkdir(parents=True)
        (project_root / "app/models/user.py").write_text("keep\n", encoding="utf-8")
        CreateUserContext(project_root).run()
        assert "class User" in (project_root / "app/models/user.py").read_text(encoding="utf-8")

    def test_uses_global_configuration(self, project_root):
        ctxgen.configure(lambda c: c.base_path("lib/contexts"))
        CreateUserContext(project_root).run()
        assert (project_root / "lib/contexts/user/operation/create_operation.py").is_file()

    def test_empty_change_executes_nothing(self, project_root):
        class Empty(Migration):
            def change(self):
                pass

        assert Empty(project_root).run() is False

    def test_generator_is_created_once(self, project_root):
        migration = CreateUserContext(project_root)
        assert migration.generator is migration.generator
        assert migration.generator.run.force is True
