"""Migration-style base class.

Subclasses describe a generation in :meth:`Migration.change`; :meth:`run`
executes it.  The generator is created lazily from the current global
configuration and overwrites existing files without prompting.

Example::

    class CreateUserContext(Migration):
        def change(self):
            self.domain("user", lambda d: (
                d.operation(lambda op: op.component(["create", "update", "destroy"])),
                d.endpoint(True),
            ))
            self.model("user")

    CreateUserContext().run()
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

from ctxgen import api
from ctxgen.generators.domain_generator import DomainGenerator
from ctxgen.generators.generator import Generator


class Migration:
    force = True

    def __init__(self, project_root: str | Path = ".") -> None:
        self.project_root = Path(project_root)
        self._generator: Generator | None = None

    @property
    def generator(self) -> Generator:
        if self._generator is None:
            self._generator = Generator(
                api.active_configuration(), force=self.force, project_root=self.project_root
            )
        return self._generator

    def domain(
        self,
        name: str,
        configure: Callable[[DomainGenerator], Any] | None = None,
        **options: Any,
    ) -> DomainGenerator:
        return self.generator.domain(name, configure, **options)

    def model(self, names: str | list[str]) -> None:
        for name in [names] if isinstance(names, str) else names:
            self.generator.model(name)

    def endpoint(self, names: str | list[str]) -> None:
        for name in [names] if isinstance(names, str) else names:
            self.generator.endpoint(name)

    def change(self) -> None:
        raise NotImplementedError("Migration classes must implement the change method")

    def execute(self) -> bool:
        if self._generator is None:
            return False
        return self.generator.execute()

    def run(self) -> bool:
        self.change()
        return self.execute()
