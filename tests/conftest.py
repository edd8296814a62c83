"""Shared pytest fixtures for the ctxgen test suite.

Provides reusable fixtures for:
- Temporary project roots
- Default and customised global configurations
- Scripted conflict-prompt answers
- Reading generated files back
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

import ctxgen
from ctxgen.config import ConfigBuilder, GlobalConfig


# ---------------------------------------------------------------------------
# Global state
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def reset_global_configuration():
    """Every test starts (and ends) without a global configuration."""
    ctxgen.reset_configuration()
    yield
    ctxgen.reset_configuration()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Defaults must not pick up ``CTXGEN_*`` variables from the caller's shell."""
    for key in [k for k in os.environ if k.startswith("CTXGEN_")]:
        monkeypatch.delenv(key)


# ---------------------------------------------------------------------------
# Paths & Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Temporary project root that generated paths are resolved against."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def config() -> GlobalConfig:
    """Default global configuration."""
    return GlobalConfig()


@pytest.fixture
def layered_config() -> GlobalConfig:
    """Configuration whose domain template declares an operation and a service layer."""
    builder = ConfigBuilder()
    builder.base_path("app/contexts")

    def template(domain):
        domain.operation(lambda op: op.base("app/operations/base_operation"))
        domain.layer("service", lambda layer: layer.base("application_service"))

    builder.domain(template)
    return builder.build()


# ---------------------------------------------------------------------------
# Prompts
# ---------------------------------------------------------------------------

class ScriptedPrompt:
    """Conflict prompt that replays canned answers and records every question."""

    def __init__(self, *answers: str) -> None:
        self.answers = list(answers)
        self.calls: list[str] = []

    def __call__(self, path: str) -> str:
        self.calls.append(path)
        if not self.answers:
            raise AssertionError(f"Unexpected prompt for {path}")
        return self.answers.pop(0)


@pytest.fixture
def scripted_prompt() -> Callable[..., ScriptedPrompt]:
    """Factory: ``scripted_prompt("y", "s")``."""
    return ScriptedPrompt


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

@pytest.fixture
def read_file(project_root: Path) -> Callable[[str], str]:
    """Read a generated file by its project-relative path."""

    def _read(rel_path: str) -> str:
        return (project_root / rel_path).read_text(encoding="utf-8")

    return _read
