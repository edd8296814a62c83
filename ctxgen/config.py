"""ctxgen configuration.

Centralised, typed configuration for the generation engine.  All settings use
Pydantic v2 models so they can be validated at construction time and
seeded from ``CTXGEN_*`` environment variables without boiler-plate.

:class:`GlobalConfig` holds process-wide defaults; :class:`ConfigBuilder` is
the mutable front handed to the callable passed to ``ctxgen.configure``.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ctxgen.errors import ConfigurationError
from ctxgen.layers import DomainSpec


class ModelDefaults(BaseModel):
    """Where data-model files go and what they inherit from."""

    path: Path = Field(default=Path("app/models"))
    base: str = Field(default="ApplicationRecord")


class EndpointDefaults(BaseModel):
    """Where endpoint (controller) files go and what they inherit from.

    ``mixin`` is the shared response-handling capability every generated
    controller includes.  ``enabled=False`` suppresses endpoint files for
    every domain, whatever the domain declares.
    """

    path: Path = Field(default=Path("app/controllers/api"))
    base: str = Field(default="ApplicationController")
    mixin: str | None = Field(default="app.core.response_handler.ResponseHandler")
    enabled: bool = Field(default=True)


class GlobalConfig(BaseModel):
    """Process-wide defaults for every generation run.

    Instances are typically created once by ``ctxgen.configure`` and then
    passed to every ``Generator`` and ``RollbackManager``.
    """

    model_config = ConfigDict(protected_namespaces=())

    base_path: Path = Field(default=Path("app/contexts"))
    model: ModelDefaults = Field(default_factory=ModelDefaults)
    endpoint: EndpointDefaults = Field(default_factory=EndpointDefaults)
    domain_template: DomainSpec = Field(default_factory=DomainSpec)
    journal_path: Path = Field(default=Path("config/contexts/.generations.yml"))

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def protected_paths(self) -> tuple[Path, Path]:
        """Directories rollback never removes: the contexts root and its parent."""
        return (self.base_path, self.base_path.parent)

    # ------------------------------------------------------------------
    # Environment
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "GlobalConfig":
        """Build a ``GlobalConfig`` from environment variables.

        Recognised variables (all optional):
            CTXGEN_BASE_PATH, CTXGEN_MODEL_PATH, CTXGEN_MODEL_BASE,
            CTXGEN_ENDPOINT_PATH, CTXGEN_ENDPOINT_BASE, CTXGEN_JOURNAL_PATH.
        """
        model_kwargs: dict[str, Any] = {}
        if os.environ.get("CTXGEN_MODEL_PATH"):
            model_kwargs["path"] = Path(os.environ["CTXGEN_MODEL_PATH"])
        if os.environ.get("CTXGEN_MODEL_BASE"):
            model_kwargs["base"] = os.environ["CTXGEN_MODEL_BASE"]

        endpoint_kwargs: dict[str, Any] = {}
        if os.environ.get("CTXGEN_ENDPOINT_PATH"):
            endpoint_kwargs["path"] = Path(os.environ["CTXGEN_ENDPOINT_PATH"])
        if os.environ.get("CTXGEN_ENDPOINT_BASE"):
            endpoint_kwargs["base"] = os.environ["CTXGEN_ENDPOINT_BASE"]

        kwargs: dict[str, Any] = {}
        if os.environ.get("CTXGEN_JOURNAL_PATH"):
            kwargs["journal_path"] = Path(os.environ["CTXGEN_JOURNAL_PATH"])

        return cls(
            base_path=Path(os.environ.get("CTXGEN_BASE_PATH", "app/contexts")),
            model=ModelDefaults(**model_kwargs),
            endpoint=EndpointDefaults(**endpoint_kwargs),
            **kwargs,
        )


# ---------------------------------------------------------------------------
# Builder
# ---------------------------------------------------------------------------


class ConfigBuilder:
    """Mutable front for building a :class:`GlobalConfig`.

    Example::

        def setup(config):
            config.base_path("app/contexts")
            config.model(path="app/models", base="ApplicationRecord")
            config.domain(lambda tpl: tpl.operation(lambda op: op.base("app/operations/base")))
    """

    def __init__(self, config: GlobalConfig | None = None) -> None:
        self.config = config.model_copy(deep=True) if config else GlobalConfig.from_env()

    def base_path(self, path: str | Path | None = None) -> Path:
        if path is not None:
            self.config.base_path = Path(path)
        return self.config.base_path

    def journal_path(self, path: str | Path | None = None) -> Path:
        if path is not None:
            self.config.journal_path = Path(path)
        return self.config.journal_path

    def model(self, path: str | Path | None = None, base: str | None = None) -> ModelDefaults:
        if path:
            self.config.model.path = Path(path)
        if base:
            self.config.model.base = base
        return self.config.model

    def endpoint(self, enabled: Any = True, **options: Any) -> EndpointDefaults:
        """Update endpoint defaults.

        ``endpoint(False)`` disables endpoint files, ``endpoint({...})`` and
        ``endpoint(path=..., base=...)`` merge options.
        """
        if enabled is False:
            update: dict[str, Any] = {"enabled": False}
        elif enabled is True:
            update = {**options}
        elif isinstance(enabled, dict):
            update = {**enabled, **options}
        else:
            raise ConfigurationError(
                f"endpoint() expects a bool or an options dict, got {enabled!r}"
            )
        self.config.endpoint = EndpointDefaults.model_validate(
            {**self.config.endpoint.model_dump(), **update}
        )
        return self.config.endpoint

    def domain(self, configure: Callable[[DomainSpec], Any] | None = None) -> DomainSpec:
        """Configure the domain template every new domain starts from."""
        if configure is not None:
            configure(self.config.domain_template)
        return self.config.domain_template

    def build(self) -> GlobalConfig:
        return self.config
