"""Compilation context value object.

Packages the ``(compiler, options)`` pair shared by ``QueryBuilder``,
``SchemaBuilder`` and all clause-level sub-builders into a single cohesive
object.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from clauseql.compile.base import SQLCompiler
from clauseql.schema.dialect import DialectOptions


@dataclass(frozen=True)
class CompilationContext:
    """Immutable context shared by every build of one builder.

    Attributes:
        compiler: Dialect-specific SQL compiler (quoting, placeholders).
        options: Separator, placeholder prefix and type-map overrides.
    """

    compiler: SQLCompiler
    options: DialectOptions = field(default_factory=DialectOptions)

    @property
    def separator(self) -> str:
        return self.options.separator
