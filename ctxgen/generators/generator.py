"""Main generation orchestrator.

A :class:`Generator` collects global (domain-independent) model and endpoint
requests plus any number of domains, then :meth:`Generator.execute` writes
them in a fixed order and records every written file in the generation
journal under one timestamp so the run can be rolled back.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ctxgen.config import GlobalConfig
from ctxgen.generators.content import render_controller, render_model
from ctxgen.generators.domain_generator import DomainGenerator
from ctxgen.generators.file_writer import FileWriter, GenerationRun, PromptFn
from ctxgen.journal import RollbackManager
from ctxgen.utils import console, print_success, print_summary_table, print_warning


@dataclass
class GlobalRequest:
    """One queued model or endpoint that belongs to no domain."""

    name: str
    options: dict[str, Any] = field(default_factory=dict)


def extract_names_and_options(
    names_or_options: Any, options: dict[str, Any]
) -> tuple[list[str], dict[str, Any]]:
    """Split the flexible first argument of ``model``/``endpoint``.

    A dict is pure options and yields no names; a string or a list yields
    names and keeps the keyword options.
    """
    if isinstance(names_or_options, dict):
        return [], dict(names_or_options)
    if isinstance(names_or_options, (list, tuple)):
        return [str(n) for n in names_or_options], dict(options)
    return [str(names_or_options)], dict(options)


class Generator:
    """Top-level orchestrator for one generation run.

    Example::

        generator = Generator(config, force=False)
        generator.domain("user", lambda d: (
            d.operation(lambda op: op.component(["create", "update"])),
            d.endpoint(True),
        ))
        generator.execute()
    """

    def __init__(
        self,
        config: GlobalConfig | None = None,
        *,
        force: bool = False,
        project_root: str | Path = ".",
        prompt: PromptFn | None = None,
    ) -> None:
        self.config = config or GlobalConfig()
        self.run = GenerationRun(force=force, project_root=Path(project_root))
        self.writer = FileWriter(self.run, prompt=prompt)
        self.domains: dict[str, DomainGenerator] = {}
        self.models: list[GlobalRequest] = []
        self.endpoints: list[GlobalRequest] = []

    @property
    def timestamp(self) -> str:
        return self.run.timestamp

    @property
    def generated_files(self) -> list[str]:
        return self.run.generated_files

    # -- Declarations ----------------------------------------------------------

    def model(self, names_or_options: Any = None, **options: Any) -> list[GlobalRequest]:
        """Queue global model files, e.g. ``model(["product", "order"])``."""
        if names_or_options is None:
            return []
        names, opts = extract_names_and_options(names_or_options, options)
        requests = [GlobalRequest(name, opts) for name in names]
        self.models.extend(requests)
        return requests

    def endpoint(self, names_or_options: Any = None, **options: Any) -> list[GlobalRequest]:
        """Queue global endpoint files, e.g. ``endpoint("health", path="app/api")``."""
        if names_or_options is None:
            return []
        names, opts = extract_names_and_options(names_or_options, options)
        requests = [GlobalRequest(name, opts) for name in names]
        self.endpoints.extend(requests)
        return requests

    def domain(
        self,
        name: str,
        configure: Callable[[DomainGenerator], Any] | None = None,
        **options: Any,
    ) -> DomainGenerator:
        """Declare a domain; a later declaration with the same name replaces it."""
        generator = DomainGenerator(name, self.config, self.writer, options)
        if configure is not None:
            configure(generator)
        self.domains[generator.name] = generator
        return generator

    # -- Execution -------------------------------------------------------------

    def nothing_to_generate(self) -> bool:
        return not (self.models or self.endpoints or self.domains)

    def execute(self) -> bool:
        """Generate everything queued; ``False`` when nothing was declared."""
        if self.nothing_to_generate():
            print_warning("Nothing to generate")
            return False

        for request in self.models:
            self.generate_model(request)
        for request in self.endpoints:
            self.generate_endpoint(request)
        for domain in self.domains.values():
            domain.generate()

        self.track_generation()
        return True

    def generate_model(self, request: GlobalRequest) -> bool:
        path = Path(request.options.get("path") or self.config.model.path)
        base_type = request.options.get("base") or self.config.model.base
        content = render_model(request.name, base_type, timestamp=self.timestamp)
        return self.writer.generate_file(path / f"{request.name}.py", content)

    def generate_endpoint(self, request: GlobalRequest) -> bool:
        path = Path(request.options.get("path") or self.config.endpoint.path)
        base_type = request.options.get("base") or self.config.endpoint.base
        content = render_controller(
            request.name,
            base_type,
            mixin=self.config.endpoint.mixin,
            timestamp=self.timestamp,
        )
        return self.writer.generate_file(path / f"{request.name}_controller.py", content)

    def track_generation(self) -> None:
        if not self.generated_files:
            return

        RollbackManager(self.config, self.run.project_root).track_generation(
            self.timestamp, self.generated_files
        )
        console.print()
        print_success("Generation completed successfully!")
        print_summary_table(
            {
                "Timestamp": self.timestamp,
                "Files generated": str(len(self.generated_files)),
                "To rollback": f"ctxgen.rollback({self.timestamp!r})",
            },
            title="Generation",
        )
