"""Content synthesis: turn names and base types into generated source text.

Every function here is deterministic apart from reading the clock for the
``# Generated at`` header, which can be pinned by passing ``timestamp``.
Nothing is written to disk; :mod:`ctxgen.generators.file_writer` does that.

Base types are opaque strings stitched into the generated code.  They are
interpreted only far enough to emit an import line:

* ``"ApplicationRecord"`` -> inherited as-is, no import
* ``"app.core.Operation"`` -> ``from app.core import Operation``
* ``"app/operations/base_operation"`` or ``"application_service"`` -> the
  last segment is camelized and imported from the full module path

Operations also need ``Success`` (and ``step`` in step-based mode).  Both are
imported from the module that provides the operation base class, or from
the default operation base module when the base is a bare class name.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from ctxgen.generators.templates import TemplateRenderer
from ctxgen.layers import OPERATION_BASE, OPERATION_LAYER
from ctxgen.utils import camelize, generation_timestamp

_renderer: TemplateRenderer | None = None


def _default_renderer() -> TemplateRenderer:
    global _renderer
    if _renderer is None:
        _renderer = TemplateRenderer()
    return _renderer


# ---------------------------------------------------------------------------
# Naming helpers
# ---------------------------------------------------------------------------


def split_base(base_type: str) -> tuple[str | None, str]:
    """Split a base type into ``(module, class_name)``; ``module`` is ``None`` for bare names."""
    normalized = base_type.strip().replace("/", ".").strip(".")
    if not normalized:
        raise ValueError(f"Invalid base type: {base_type!r}")
    module, _, last = normalized.rpartition(".")
    if last[:1].isupper():
        return module or None, last
    return normalized, camelize(last)


def resolve_base(base_type: str) -> tuple[str | None, str]:
    """Split a base type into ``(import_line, class_name)``."""
    module, class_name = split_base(base_type)
    if module is None:
        return None, class_name
    return f"from {module} import {class_name}", class_name


def component_class_name(component: str, layer: str, suffix: bool = True) -> str:
    """``("create", "operation")`` -> ``"CreateOperation"``; ``"Create"`` without suffix."""
    base_name = camelize(component)
    return f"{base_name}{camelize(layer)}" if suffix else base_name


def component_module_name(component: str, layer: str, suffix: bool = True) -> str:
    """``("create", "operation")`` -> ``"create_operation"``."""
    return f"{component}_{layer}" if suffix else component


def component_file_name(component: str, layer: str, suffix: bool = True, ext: str = "py") -> str:
    """``("create", "operation")`` -> ``"create_operation.py"``."""
    return f"{component_module_name(component, layer, suffix)}.{ext}"


def _bases_and_imports(base_types: Iterable[str | None]) -> tuple[list[str], list[str]]:
    bases: list[str] = []
    imports: list[str] = []
    for base_type in base_types:
        if not base_type:
            continue
        import_line, class_name = resolve_base(base_type)
        if import_line and import_line not in imports:
            imports.append(import_line)
        bases.append(class_name)
    return bases, imports


def _render(
    template: str,
    context: dict[str, Any],
    bases: list[str],
    imports: list[str],
    timestamp: str | None,
    renderer: TemplateRenderer | None,
) -> str:
    return (renderer or _default_renderer()).render(
        template,
        {
            **context,
            "bases": bases,
            "imports": imports,
            "timestamp": timestamp or generation_timestamp(),
        },
    )


# ---------------------------------------------------------------------------
# Content generators
# ---------------------------------------------------------------------------


def render_model(
    name: str,
    base_type: str,
    *,
    timestamp: str | None = None,
    renderer: TemplateRenderer | None = None,
) -> str:
    """Data-model file: one class named after the domain."""
    bases, imports = _bases_and_imports([base_type])
    return _render(
        "model.py.j2", {"name": name, "class_name": camelize(name)}, bases, imports, timestamp, renderer
    )


def render_controller(
    name: str,
    base_type: str,
    actions: Sequence[str] = (),
    *,
    mixin: str | None = None,
    operation_package: str | None = None,
    timestamp: str | None = None,
    renderer: TemplateRenderer | None = None,
) -> str:
    """Endpoint file: ``{Name}Controller`` with one method per action.

    Each action delegates to ``{Action}Operation`` through the controller's
    ``run_and_render`` convention.  With ``operation_package`` (dotted, e.g.
    ``"app.contexts.user.operation"``) every operation class is imported from
    its generated module in that package.
    """
    bases, imports = _bases_and_imports([mixin, base_type])
    if operation_package:
        for action in actions:
            module = component_module_name(action, OPERATION_LAYER)
            line = f"from {operation_package}.{module} import {component_class_name(action, OPERATION_LAYER)}"
            if line not in imports:
                imports.append(line)
    return _render(
        "controller.py.j2",
        {"name": name, "class_name": f"{camelize(name)}Controller", "actions": list(actions)},
        bases,
        imports,
        timestamp,
        renderer,
    )


def render_component(
    class_name: str,
    base_type: str | None = None,
    *,
    timestamp: str | None = None,
    renderer: TemplateRenderer | None = None,
) -> str:
    """Standard layer component: one class, optional base, placeholder body."""
    bases, imports = _bases_and_imports([base_type])
    return _render("component.py.j2", {"class_name": class_name}, bases, imports, timestamp, renderer)


def render_operation(
    class_name: str,
    action: str,
    base_type: str | None = None,
    steps: Sequence[str] | None = None,
    *,
    timestamp: str | None = None,
    renderer: TemplateRenderer | None = None,
) -> str:
    """Operation component.

    ``steps=None`` selects simple mode: a single ``call`` that echoes its
    input through ``Success``.  Any sequence (even an empty one) selects
    step-based mode: one ``step`` declaration per step, and a ``call`` that
    threads ``result`` through every step in order.
    """
    module, base_class = split_base(base_type or OPERATION_BASE)
    helpers = ["Success"] if steps is None else ["Success", "step"]
    if module is None:
        imports = [f"from {split_base(OPERATION_BASE)[0]} import {', '.join(helpers)}"]
    else:
        imports = [f"from {module} import {', '.join([base_class, *helpers])}"]

    context: dict[str, Any] = {"class_name": class_name, "action": action}
    if steps is None:
        template = "operation.py.j2"
    else:
        template = "step_operation.py.j2"
        context["steps"] = list(steps)
    return _render(template, context, [base_class], imports, timestamp, renderer)
