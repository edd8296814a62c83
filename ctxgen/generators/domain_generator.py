"""Per-domain generation.

A :class:`DomainGenerator` resolves its layer set from the global domain
template plus the caller's overrides, then writes the domain's model file,
endpoint file and one file per layer component.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ctxgen.config import GlobalConfig
from ctxgen.errors import GenerationError
from ctxgen.generators.content import (
    component_class_name,
    component_file_name,
    render_component,
    render_controller,
    render_model,
    render_operation,
)
from ctxgen.generators.file_writer import FileWriter
from ctxgen.layers import (
    OPERATION_BASE,
    OPERATION_LAYER,
    Component,
    DomainSpec,
    EnabledState,
    LayerConfigurer,
    LayerSpec,
    OperationLayerSpec,
)
from ctxgen.utils import print_warning


class DomainGenerator:
    """Generates every file of one domain.

    Declaration methods (:meth:`operation`, :meth:`layer`, :meth:`model`,
    :meth:`endpoint`) mirror :class:`~ctxgen.layers.DomainSpec` and are meant
    to be called from the configure callable passed to ``Generator.domain``.

    Options:
        layers: allow-list restricting the final layer set to exactly these
            names.  Layers missing from the template are created fresh.
        components: components given to every allow-listed layer that has
            none of its own.
    """

    def __init__(
        self,
        name: str,
        config: GlobalConfig,
        writer: FileWriter,
        options: dict[str, Any] | None = None,
    ) -> None:
        self.name = str(name)
        self.config = config
        self.writer = writer
        self.options = dict(options or {})
        self.spec = DomainSpec(name=self.name)
        self._setup_layers()

    # -- Declarations --------------------------------------------------------

    @property
    def layers(self) -> dict[str, LayerSpec]:
        return self.spec.layers

    def operation(self, configure: LayerConfigurer | None = None) -> OperationLayerSpec:
        return self.spec.operation(configure)

    def layer(self, name: str, configure: LayerConfigurer | None = None) -> LayerSpec:
        return self.spec.layer(name, configure)

    def model(self, enabled: Any = True, **options: Any) -> EnabledState:
        return self.spec.model(enabled, **options)

    def endpoint(
        self,
        enabled: Any = True,
        components: Iterable[Any] | None = None,
        **options: Any,
    ) -> EnabledState:
        return self.spec.endpoint(enabled, components=components, **options)

    # -- Layer setup -----------------------------------------------------------

    def _setup_layers(self) -> None:
        template = self.config.domain_template
        self.spec.layers = template.copy_layers()
        self.spec.model_state = template.model_state.model_copy(deep=True)
        self.spec.endpoint_state = template.endpoint_state.model_copy(deep=True)

        requested = self.options.get("layers")
        if requested is None:
            return

        requested_names = [str(name) for name in requested]
        components = self.options.get("components")
        for name in requested_names:
            layer = self.spec.layers.get(name)
            if layer is None:
                layer = self._create_layer(name)
                self.spec.layers[name] = layer
            if components and not layer.components:
                layer.component(list(components))

        self.spec.layers = {
            name: layer for name, layer in self.spec.layers.items() if name in requested_names
        }

    @staticmethod
    def _create_layer(name: str) -> LayerSpec:
        if name == OPERATION_LAYER:
            return OperationLayerSpec(base_type=OPERATION_BASE)
        return LayerSpec(name=name, base_type=f"application_{name}")

    # -- Generation ------------------------------------------------------------

    def generate(self) -> None:
        if self.spec.model_state.enabled:
            self.generate_model()
        if self.spec.endpoint_state.enabled and self.config.endpoint.enabled:
            self.generate_endpoint()
        self.generate_layers()

    def generate_model(self) -> bool:
        options = self.spec.model_state.options
        path = Path(options.get("path") or self.config.model.path)
        base_type = options.get("base") or self.config.model.base
        content = render_model(self.name, base_type, timestamp=self.writer.run.timestamp)
        return self.writer.generate_file(path / f"{self.name}.py", content)

    def generate_endpoint(self) -> bool:
        options = self.spec.endpoint_state.options
        path = Path(options.get("path") or self.config.endpoint.path)
        base_type = options.get("base") or self.config.endpoint.base
        content = render_controller(
            self.name,
            base_type,
            self.endpoint_actions(),
            mixin=self.config.endpoint.mixin,
            operation_package=self.operation_package(),
            timestamp=self.writer.run.timestamp,
        )
        return self.writer.generate_file(path / f"{self.name}_controller.py", content)

    def operation_package(self) -> str:
        """Dotted import path of this domain's operation layer directory."""
        path = Path(self.config.base_path) / self.name / OPERATION_LAYER
        return ".".join(path.parts)

    def endpoint_actions(self) -> list[str]:
        """Explicit endpoint components, else the operation layer's components."""
        explicit = self.spec.endpoint_state.explicit_components
        if explicit:
            return list(explicit)
        operation = self.layers.get(OPERATION_LAYER)
        if operation is None:
            return []
        return [c.name for c in operation.components if not c.is_domain]

    def generate_layers(self) -> None:
        contexts_root = self.writer.run.resolve(self.config.base_path)
        if contexts_root.exists() and not contexts_root.is_dir():
            print_warning(f"Removing file blocking the contexts directory: {self.config.base_path}")
            try:
                contexts_root.unlink()
            except OSError as exc:
                raise GenerationError(
                    f"Cannot remove file: {exc.strerror or exc}",
                    path=Path(self.config.base_path).as_posix(),
                ) from exc

        domain_path = Path(self.config.base_path) / self.name
        self.writer.ensure_directory(domain_path)

        for layer in self.layers.values():
            self.generate_layer(domain_path, layer)

    def generate_layer(self, domain_path: Path, layer: LayerSpec) -> None:
        layer_path = domain_path / layer.name
        self.writer.ensure_directory(layer_path)
        for component in layer.components:
            self.generate_component(layer_path, layer, component)

    def generate_component(self, layer_path: Path, layer: LayerSpec, component: Component) -> bool:
        name = self.name if component.is_domain else component.name
        suffix = component.suffix_enabled(layer.default_suffix)
        class_name = component_class_name(name, layer.name, suffix)
        file_path = layer_path / component_file_name(name, layer.name, suffix)
        timestamp = self.writer.run.timestamp

        if isinstance(layer, OperationLayerSpec):
            steps = self.operation_steps(layer) if self.uses_steps(layer) else None
            content = render_operation(
                class_name, name, layer.base_type, steps, timestamp=timestamp
            )
        else:
            content = render_component(class_name, layer.base_type, timestamp=timestamp)

        return self.writer.generate_file(file_path, content)

    # -- Operation steps -------------------------------------------------------

    def _other_layer_names(self) -> list[str]:
        return [name for name in self.layers if name != OPERATION_LAYER]

    def uses_steps(self, layer: OperationLayerSpec) -> bool:
        return bool(layer.steps()) or layer.granular or bool(self._other_layer_names())

    def operation_steps(self, layer: OperationLayerSpec) -> list[str]:
        return layer.steps() or self._other_layer_names()
