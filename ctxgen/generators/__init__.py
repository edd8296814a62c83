"""ctxgen generators -- turn domain declarations into source files.

Quick usage::

    from ctxgen.generators import Generator

    generator = Generator(config)
    generator.domain("user", lambda d: d.operation(lambda op: op.component("create")))
    generator.execute()
"""

from ctxgen.generators.domain_generator import DomainGenerator
from ctxgen.generators.file_writer import FileWriter, GenerationRun, OverrideState
from ctxgen.generators.generator import Generator
from ctxgen.generators.templates import TemplateRenderer

__all__ = [
    "DomainGenerator",
    "FileWriter",
    "GenerationRun",
    "Generator",
    "OverrideState",
    "TemplateRenderer",
]
