"""Layer and domain configuration models.

A *domain* is a named vertical slice of an application: an optional data
model file, an optional endpoint file, and any number of named *layers*.
Each layer holds an ordered list of components; every component becomes one
generated file.  The ``operation`` layer is special: its components may be
expanded into an ordered pipeline of steps.

All models are Pydantic v2 models so a domain template can be deep-copied
into every new domain and serialised together with the global configuration.
Configuration happens through plain method calls on these objects (builder
style); callables passed to :meth:`DomainSpec.operation` and
:meth:`DomainSpec.layer` receive the layer being configured.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from ctxgen.errors import ConfigurationError

# Sentinel component meaning "use the owning domain's own name".
DOMAIN_COMPONENT = "domain"

OPERATION_LAYER = "operation"
OPERATION_BASE = "app/operations/base_operation"


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


class Component(BaseModel):
    """One entry of a layer's component list.

    ``options["suffix"]`` overrides the layer's default suffixing for this
    component only.
    """

    name: str
    options: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def of(cls, value: Any, options: dict[str, Any] | None = None) -> "Component":
        """Coerce an identifier, a ``{name: options}`` dict or a Component."""
        if isinstance(value, Component):
            return value.model_copy(deep=True)
        if isinstance(value, dict):
            if len(value) != 1:
                raise ConfigurationError(
                    f"Option-tagged component must have exactly one key, got {value!r}"
                )
            name, opts = next(iter(value.items()))
            return cls(name=str(name), options=dict(opts or {}))
        if not isinstance(value, str) or not value:
            raise ConfigurationError(f"Invalid component identifier: {value!r}")
        return cls(name=value, options=dict(options or {}))

    @property
    def is_domain(self) -> bool:
        return self.name == DOMAIN_COMPONENT

    def suffix_enabled(self, default: bool) -> bool:
        return bool(self.options.get("suffix", default))


def _flatten(names: Iterable[Any]) -> list[Any]:
    flat: list[Any] = []
    for name in names:
        if isinstance(name, (list, tuple)):
            flat.extend(_flatten(name))
        else:
            flat.append(name)
    return flat


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------


class LayerSpec(BaseModel):
    """A named group of generated components sharing a base type."""

    kind: Literal["standard"] = "standard"
    name: str
    base_type: str | None = None
    components: list[Component] = Field(default_factory=list)
    default_suffix: bool = True

    def component(self, *names: Any, **options: Any) -> "LayerSpec":
        """Append components in order.

        Lists and tuples are flattened.  Keyword options tag every name passed
        in this call.  With no names at all, the component list becomes the
        single ``domain`` sentinel.
        """
        if not names:
            self.components = [Component(name=DOMAIN_COMPONENT)]
            return self
        for name in names:
            if isinstance(name, (list, tuple)):
                self.components.extend(Component.of(n) for n in _flatten(name))
            else:
                self.components.append(Component.of(name, options))
        return self

    def base(self, base_type: str) -> "LayerSpec":
        self.base_type = base_type
        return self

    def suffix(self, enabled: bool = True) -> "LayerSpec":
        """Turn the ``_{layer}`` file/class suffix on or off for the whole layer."""
        self.default_suffix = enabled
        return self

    def duplicate(self) -> "LayerSpec":
        """Deep copy; mutating the copy never affects the original."""
        return self.model_copy(deep=True)


class OperationLayerSpec(LayerSpec):
    """The ``operation`` layer, whose components may expand into steps."""

    kind: Literal["operation"] = "operation"  # type: ignore[assignment]
    name: str = OPERATION_LAYER
    base_type: str | None = OPERATION_BASE
    step_names: list[str] = Field(default_factory=list)
    step_options: dict[str, Any] = Field(default_factory=dict)

    def step(self, *names: Any, **options: Any) -> "OperationLayerSpec":
        """Replace the step list, or merge step options when called without names.

        ``op.step("validate", "persist")`` sets the steps;
        ``op.step(granular=True)`` only merges options.
        """
        if names:
            self.step_names = [str(n) for n in _flatten(names)]
        if options:
            self.step_options.update(options)
        return self

    def steps(self) -> list[str]:
        return list(self.step_names)

    @property
    def granular(self) -> bool:
        return self.step_options.get("granular") is True


AnyLayer = Annotated[Union[LayerSpec, OperationLayerSpec], Field(discriminator="kind")]

LayerConfigurer = Callable[[Any], Any]


# ---------------------------------------------------------------------------
# Enabled state
# ---------------------------------------------------------------------------


class EnabledState(BaseModel):
    """Whether a domain's model/endpoint file is generated, and with what options."""

    enabled: bool = False
    options: dict[str, Any] = Field(default_factory=dict)
    explicit_components: list[str] | None = None

    @classmethod
    def disabled(cls) -> "EnabledState":
        return cls(enabled=False)

    @classmethod
    def from_declaration(
        cls,
        value: Any = True,
        components: Iterable[Any] | None = None,
        **options: Any,
    ) -> "EnabledState":
        """Normalise the four accepted declaration shapes.

        * ``False`` -> disabled
        * ``True`` -> enabled; ``components=`` becomes the explicit list
        * a list/tuple of identifiers -> enabled with those explicit components
        * a dict -> enabled, the dict is the options (``enabled`` and
          ``components`` keys are honoured)
        """
        if value is False:
            return cls.disabled()
        if value is True:
            explicit = [str(c) for c in _flatten(components)] if components else None
            return cls(enabled=True, options=options, explicit_components=explicit)
        if isinstance(value, (list, tuple)):
            return cls(
                enabled=True,
                options=options,
                explicit_components=[str(c) for c in _flatten(value)],
            )
        if isinstance(value, dict):
            merged = {**value, **options}
            if merged.pop("enabled", True) is False:
                return cls.disabled()
            listed = merged.pop("components", None) or components
            return cls.from_declaration(True, components=listed, **merged)
        raise ConfigurationError(
            f"Expected a bool, a list of components or an options dict, got {value!r}"
        )


# ---------------------------------------------------------------------------
# Domain
# ---------------------------------------------------------------------------


class DomainSpec(BaseModel):
    """A named collection of layers plus model/endpoint switches.

    The global configuration holds one unnamed ``DomainSpec`` used as the
    template for every generated domain.
    """

    model_config = ConfigDict(protected_namespaces=())

    name: str = ""
    layers: dict[str, AnyLayer] = Field(default_factory=dict)
    model_state: EnabledState = Field(default_factory=EnabledState.disabled)
    endpoint_state: EnabledState = Field(default_factory=EnabledState.disabled)

    def operation(self, configure: LayerConfigurer | None = None) -> OperationLayerSpec:
        layer = OperationLayerSpec()
        if configure is not None:
            configure(layer)
        self.layers[OPERATION_LAYER] = layer
        return layer

    def layer(self, name: str, configure: LayerConfigurer | None = None) -> LayerSpec:
        """Declare (or redeclare) a standard layer called *name*.

        Without a configure callable the layer gets the ``domain`` sentinel as
        its only component.
        """
        if not name:
            raise ConfigurationError("Layer name must not be empty")
        name = str(name)
        if name == OPERATION_LAYER:
            return self.operation(configure)
        layer = LayerSpec(name=name)
        if configure is not None:
            configure(layer)
        else:
            layer.component()
        self.layers[name] = layer
        return layer

    def model(self, enabled: Any = True, **options: Any) -> EnabledState:
        if isinstance(enabled, (list, tuple)):
            raise ConfigurationError("model() does not take a component list")
        self.model_state = EnabledState.from_declaration(enabled, **options)
        return self.model_state

    def endpoint(
        self,
        enabled: Any = True,
        components: Iterable[Any] | None = None,
        **options: Any,
    ) -> EnabledState:
        self.endpoint_state = EnabledState.from_declaration(
            enabled, components=components, **options
        )
        return self.endpoint_state

    def copy_layers(self) -> dict[str, LayerSpec]:
        """Return deep copies of every layer, preserving declaration order."""
        return {name: layer.duplicate() for name, layer in self.layers.items()}
