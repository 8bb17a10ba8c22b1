"""Library scaffolder -- materialises a gradle java library project.

Quick usage::

    from libgen.scaffolder import LibraryGenerator

    generator = LibraryGenerator()
    result = await generator.generate("/tmp/my-lib", settings, context)
"""

from libgen.scaffolder.generator import (
    WRITE_ONCE_FILES,
    GenerationResult,
    LibraryGenerator,
    build_template_context,
)
from libgen.scaffolder.templates import TemplateRenderer, TreeResult

__all__ = [
    "WRITE_ONCE_FILES",
    "GenerationResult",
    "LibraryGenerator",
    "TemplateRenderer",
    "TreeResult",
    "build_template_context",
]
