"""Dialect registry.

``CompilerFactory`` maps dialect target names, and any aliases they go by
(``postgresql`` for ``postgres``, ``sqlite3`` for ``sqlite``), to
:class:`~clauseql.compile.base.SQLCompiler` classes.  Besides bare
compilers it hands out a wired :class:`DialectBuilders` pair, so callers get
a ``QueryBuilder`` and a ``SchemaBuilder`` that share one compiler and one
set of options::

    builders = CompilerFactory.builders("mysql", DialectOptions(separator="\\n"))
    builders.schema.create_table("users", {"id": "pk"})
    builders.query.insert("users", {"id": 1})

New dialects register without touching the pipeline::

    @CompilerFactory.register("duckdb", "duck")
    class DuckDBCompiler(SQLCompiler):
        ...
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import ClassVar, NamedTuple

from clauseql.compile.base import SQLCompiler
from clauseql.compile.builder import QueryBuilder
from clauseql.compile.schema_builder import SchemaBuilder
from clauseql.errors import CompilationError
from clauseql.schema.dialect import DialectOptions


class DialectBuilders(NamedTuple):
    """Statement and DDL builders bound to the same dialect compiler."""

    query: QueryBuilder
    schema: SchemaBuilder


class CompilerFactory:
    """Registry of dialect compilers keyed by canonical target name.

    Names are matched case-insensitively.  Aliases resolve to the
    canonical name they were registered with.
    """

    _compilers: ClassVar[dict[str, type[SQLCompiler]]] = {}
    _aliases: ClassVar[dict[str, str]] = {}

    @classmethod
    def register(
        cls, name: str, *aliases: str
    ) -> Callable[[type[SQLCompiler]], type[SQLCompiler]]:
        """Decorator form of :meth:`register_class`."""

        def decorator(compiler_cls: type[SQLCompiler]) -> type[SQLCompiler]:
            cls.register_class(name, compiler_cls, aliases)
            return compiler_cls

        return decorator

    @classmethod
    def register_class(
        cls,
        name: str,
        compiler_cls: type[SQLCompiler],
        aliases: Iterable[str] = (),
    ) -> None:
        """Register ``compiler_cls`` under ``name`` and its ``aliases``.

        Re-registering a name replaces the previous compiler.
        """
        canonical = _normalize(name)
        cls._compilers[canonical] = compiler_cls
        for alias in aliases:
            cls._aliases[_normalize(alias)] = canonical

    @classmethod
    def unregister(cls, name: str) -> None:
        """Remove a dialect together with every alias pointing at it."""
        canonical = cls.resolve(name)
        del cls._compilers[canonical]
        for alias in [a for a, target in cls._aliases.items() if target == canonical]:
            del cls._aliases[alias]

    @classmethod
    def resolve(cls, name: str) -> str:
        """Return the canonical target name for ``name`` or one of its aliases.

        Raises:
            CompilationError: If nothing is registered under ``name``.
        """
        key = _normalize(name)
        canonical = cls._aliases.get(key, key)
        if canonical not in cls._compilers:
            raise CompilationError(
                f"Unsupported dialect target: '{name}'. "
                f"Registered targets: {cls.registered_targets()}."
            )
        return canonical

    @classmethod
    def create(cls, name: str) -> SQLCompiler:
        """Instantiate the compiler registered for ``name``."""
        return cls._compilers[cls.resolve(name)]()

    @classmethod
    def builders(cls, name: str, options: DialectOptions | None = None) -> DialectBuilders:
        """Return query and schema builders sharing one compiler instance."""
        compiler = cls.create(name)
        options = options or DialectOptions()
        return DialectBuilders(
            query=QueryBuilder(compiler, options),
            schema=SchemaBuilder(compiler, options),
        )

    @classmethod
    def registered_targets(cls) -> list[str]:
        """Return the sorted canonical target names."""
        return sorted(cls._compilers)


def _normalize(name: str) -> str:
    return name.strip().lower()
