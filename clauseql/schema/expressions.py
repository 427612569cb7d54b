"""Value types shared by the condition and statement models.

``Expression`` is the only sanctioned way to put raw SQL into a value
position: its text is inlined verbatim and its own named parameters are
merged into the statement's parameter collection unchanged.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from clauseql.errors import UnknownOperatorError


class Expression(BaseModel):
    """A trusted SQL fragment with its own named parameters.

    Example::

        Expression("NOW() - INTERVAL :days DAY", {"days": 3})

    The caller is responsible for the safety of ``text`` and for choosing
    parameter names that do not collide with generated placeholders.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    text: str
    params: dict[str, Any] = Field(default_factory=dict)

    def __init__(self, text: str, params: dict[str, Any] | None = None, **data: Any) -> None:
        super().__init__(text=text, params=params or {}, **data)

    def __str__(self) -> str:
        return self.text


# ---------------------------------------------------------------------------
# Condition operators
# ---------------------------------------------------------------------------


class ConditionOp(str, Enum):
    """Operator tokens recognised at the head of an operator-form condition."""

    AND = "AND"
    OR = "OR"
    BETWEEN = "BETWEEN"
    NOT_BETWEEN = "NOT BETWEEN"
    IN = "IN"
    NOT_IN = "NOT IN"
    LIKE = "LIKE"
    NOT_LIKE = "NOT LIKE"
    OR_LIKE = "OR LIKE"
    OR_NOT_LIKE = "OR NOT LIKE"
    EQ = "="
    NE = "<>"
    NE_ALT = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="

    @classmethod
    def parse(cls, token: Any) -> ConditionOp:
        """Resolve ``token`` case-insensitively.

        Raises:
            UnknownOperatorError: If ``token`` is not a known operator.
        """
        if isinstance(token, cls):
            return token
        if not isinstance(token, str):
            raise UnknownOperatorError(token)
        try:
            return cls(" ".join(token.split()).upper())
        except ValueError:
            raise UnknownOperatorError(token) from None


class SortDirection(str, Enum):
    """ORDER BY direction.  Ascending is the implicit default."""

    ASC = "ASC"
    DESC = "DESC"
