"""Public entry points: configure, generate, rollback, list.

The global configuration lives at module level, set by :func:`configure`
and read by :func:`generate` and by :class:`ctxgen.migration.Migration`.
Every entry point runs inside :func:`ctxgen.errors.error_handling`.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from ctxgen.config import ConfigBuilder, GlobalConfig
from ctxgen.errors import ConfigurationError, error_handling
from ctxgen.generators.file_writer import PromptFn
from ctxgen.generators.generator import Generator
from ctxgen.journal import RollbackManager

_global_config: GlobalConfig | None = None


def configure(configure_fn: Callable[[ConfigBuilder], Any] | None = None) -> GlobalConfig:
    """Build the global configuration from *configure_fn*.

    Every call starts from the defaults (seeded from ``CTXGEN_*`` environment
    variables) and replaces the previous global configuration.

    Example::

        def setup(config):
            config.base_path("app/contexts")
            config.model(path="app/models", base="ApplicationRecord")

        ctxgen.configure(setup)
    """
    global _global_config
    if configure_fn is None:
        raise ConfigurationError("Configuration callable is required", operation="configure")

    with error_handling("configure"):
        builder = ConfigBuilder()
        configure_fn(builder)
        _global_config = builder.build()
        return _global_config


def generate(
    generate_fn: Callable[[Generator], Any] | None = None,
    *,
    force: bool = False,
    project_root: str | Path = ".",
    prompt: PromptFn | None = None,
) -> bool:
    """Run one generation against a fresh :class:`Generator`.

    Example::

        def change(ctx):
            ctx.domain("user", lambda d: (
                d.operation(lambda op: op.component(["create", "update"])),
                d.endpoint(True),
            ))

        ctxgen.generate(change)
    """
    if generate_fn is None:
        raise ConfigurationError("Generation callable is required", operation="generate")

    with error_handling("generate"):
        generator = Generator(
            active_configuration(), force=force, project_root=project_root, prompt=prompt
        )
        generate_fn(generator)
        generator.execute()
        return True


def rollback(timestamp: str | None = None, *, project_root: str | Path = ".") -> bool:
    """Roll back one generation, or the most recent one when *timestamp* is omitted."""
    with error_handling("rollback"):
        manager = RollbackManager(active_configuration(), project_root)
        if timestamp:
            return manager.rollback_by_timestamp(timestamp)
        return manager.rollback_last()


def list_generations(*, project_root: str | Path = ".") -> bool:
    with error_handling("list_generations"):
        RollbackManager(active_configuration(), project_root).list_generations()
        return True


def get_configuration() -> GlobalConfig | None:
    return _global_config


def active_configuration() -> GlobalConfig:
    """The configuration generation and rollback run with.

    Falls back to :meth:`GlobalConfig.from_env` until :func:`configure` is called.
    """
    return _global_config or GlobalConfig.from_env()


def reset_configuration() -> bool:
    global _global_config
    _global_config = None
    return True


def is_configured() -> bool:
    return _global_config is not None
