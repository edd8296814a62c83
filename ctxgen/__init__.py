"""ctxgen -- migration-style code generation for layered application domains.

Describe a domain (data model, endpoint, and any number of layers of
components), generate its source files from templates, and roll any
generation back by timestamp.

Quick usage::

    import ctxgen

    ctxgen.configure(lambda config: config.base_path("app/contexts"))

    def change(ctx):
        ctx.domain("user", lambda d: (
            d.operation(lambda op: op.component(["create", "update"])),
            d.endpoint(True),
        ))

    ctxgen.generate(change)
    ctxgen.list_generations()
    ctxgen.rollback()          # undo the most recent generation
"""

from ctxgen.api import (
    active_configuration,
    configure,
    generate,
    get_configuration,
    is_configured,
    list_generations,
    reset_configuration,
    rollback,
)
from ctxgen.config import ConfigBuilder, EndpointDefaults, GlobalConfig, ModelDefaults
from ctxgen.errors import ConfigurationError, ContextError, GenerationError, RollbackError
from ctxgen.generators import DomainGenerator, Generator, OverrideState
from ctxgen.journal import GenerationRecord, RollbackManager
from ctxgen.layers import Component, DomainSpec, EnabledState, LayerSpec, OperationLayerSpec
from ctxgen.migration import Migration

__all__ = [
    "Component",
    "ConfigBuilder",
    "ConfigurationError",
    "ContextError",
    "DomainGenerator",
    "DomainSpec",
    "EnabledState",
    "EndpointDefaults",
    "GenerationError",
    "GenerationRecord",
    "Generator",
    "GlobalConfig",
    "LayerSpec",
    "Migration",
    "ModelDefaults",
    "OperationLayerSpec",
    "OverrideState",
    "RollbackError",
    "RollbackManager",
    "active_configuration",
    "configure",
    "generate",
    "get_configuration",
    "is_configured",
    "list_generations",
    "reset_configuration",
    "rollback",
]
