"""Pydantic model for per-builder dialect configuration.

``DialectOptions`` carries the settings that a builder receives at
construction time and that stay fixed for every statement it compiles::

    from clauseql import DialectOptions, QueryBuilder, SQLiteCompiler

    builder = QueryBuilder(
        SQLiteCompiler(),
        DialectOptions(separator="\\n", type_map={"string": "text"}),
    )
"""
from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator

_PREFIX_RE = re.compile(r"^[A-Za-z_]\w*$")


class DialectOptions(BaseModel):
    """Builder-level configuration.

    Attributes:
        separator: Joins top-level SELECT clauses and JOIN entries.
        param_prefix: Prefix of generated placeholder names; the collection
            size at generation time is appended (``qp0``, ``qp1``, ...).
        type_map: Abstract-type overrides merged over the dialect's
            default :attr:`~clauseql.compile.base.SQLCompiler.type_map`.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    separator: str = " "
    param_prefix: str = "qp"
    type_map: dict[str, str] = Field(default_factory=dict)

    @field_validator("param_prefix")
    @classmethod
    def _check_prefix(cls, value: str) -> str:
        if not _PREFIX_RE.match(value):
            raise ValueError(
                f"param_prefix must be a valid identifier prefix, got {value!r}"
            )
        return value
