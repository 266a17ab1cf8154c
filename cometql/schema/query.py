"""Pydantic models for the abstract, dialect-independent Query.

A ``Query`` is accumulated by :class:`~cometql.execute.query_executor.QueryExecutor`
and handed, read-only, to a dialect compiler.
"""
from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

#: Operator whose value is spliced into the SQL text instead of being bound.
IN_OPERATOR = "IN"


class WhereClause(BaseModel):
    """A single ``<field> [NOT] <operator> <value>`` filter.

    For the ``IN`` operator ``value`` holds a pre-rendered placeholder group
    such as ``"(?,?,?)"`` and is embedded verbatim in the SQL.

    Attributes:
        field: Column name.
        operator: SQL comparison operator (``=``, ``>``, ``LIKE``, ``IN`` ...).
        value: Bound value, or the placeholder group for ``IN``.
        negated: Prefix the operator with ``NOT``.
    """

    model_config = ConfigDict(extra="forbid")

    field: str
    operator: str
    value: Any = None
    negated: bool = False

    @property
    def is_in(self) -> bool:
        return self.operator == IN_OPERATOR


class OrderClause(BaseModel):
    """A single ORDER BY item.  ``direction`` is upper-cased on input."""

    model_config = ConfigDict(extra="forbid")

    field: str
    direction: Literal["ASC", "DESC"] = "ASC"

    @field_validator("direction", mode="before")
    @classmethod
    def _upper(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


class Query(BaseModel):
    """Abstract SELECT-shaped request.

    Attributes:
        table: Table to select from.
        fields: Projected columns; ``["*"]`` selects every column.
        wheres: Filters, ANDed together in order.
        orders: Ordering items, in order.
        limit: Maximum rows, or ``None``.
        offset: Rows to skip, or ``None``.
        includes: Relation names to include.  Stored only; never expanded.
    """

    model_config = ConfigDict(extra="forbid")

    table: str
    fields: list[str] = Field(default_factory=lambda: ["*"])
    wheres: list[WhereClause] = Field(default_factory=list)
    orders: list[OrderClause] = Field(default_factory=list)
    limit: int | None = None
    offset: int | None = None
    includes: list[str] = Field(default_factory=list)
