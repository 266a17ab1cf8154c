"""Clause-level SQL builders.

Each class handles exactly one SQL clause (or, for DDL, one column).  Every
query-side builder receives the shared :class:`RuntimeContext` so bound
arguments are numbered across the whole statement.

Classes
-------
SelectClauseBuilder     — ``SELECT <fields> FROM <table>``
WhereClauseBuilder      — ``WHERE <clause> AND <clause> …``
OrderByClauseBuilder    — ``ORDER BY <field> <direction>, …``
ColumnDefinitionBuilder — one column of a ``CREATE TABLE`` body
"""
from __future__ import annotations

from typing import Any

from cometql.compile.context import CompilationContext, RuntimeContext
from cometql.compile.type_mapper import resolve_column_type
from cometql.schema.models import DefaultNow, FieldSchema
from cometql.schema.query import OrderClause, Query, WhereClause


class SelectClauseBuilder:
    """Builds ``SELECT <fields> FROM <table>``."""

    def build(self, query: Query) -> str:
        fields = ", ".join(query.fields) if query.fields else "*"
        return f"SELECT {fields} FROM {query.table}"


class WhereClauseBuilder:
    """Builds ``WHERE …`` from the query's filters, binding their values.

    ``IN`` clauses embed their pre-rendered value in the SQL text and bind
    nothing.  Negation prefixes the operator itself: ``status NOT = ?``.
    """

    def __init__(self, ctx: CompilationContext, runtime: RuntimeContext) -> None:
        self._ctx = ctx
        self._runtime = runtime

    def build(self, wheres: list[WhereClause]) -> str:
        return "WHERE " + " AND ".join(self._build_clause(w) for w in wheres)

    def _build_clause(self, where: WhereClause) -> str:
        operator = f"NOT {where.operator}" if where.negated else where.operator
        if where.is_in:
            return f"{where.field} {operator} {where.value}"
        position = self._runtime.add_value(where.value)
        placeholder = self._ctx.compiler.param_placeholder(position)
        return f"{where.field} {operator} {placeholder}"


class OrderByClauseBuilder:
    """Builds ``ORDER BY <field> <direction>, …``."""

    def build(self, orders: list[OrderClause]) -> str:
        return "ORDER BY " + ", ".join(f"{o.field} {o.direction}" for o in orders)


class ColumnDefinitionBuilder:
    """Builds one column definition of a ``CREATE TABLE`` body.

    Token order is fixed: name, type, ``PRIMARY KEY`` (plus the dialect's
    auto-increment keyword), ``UNIQUE``, ``NOT NULL``, ``DEFAULT …``.
    """

    def __init__(self, ctx: CompilationContext) -> None:
        self._ctx = ctx

    def build(self, field: FieldSchema) -> str:
        compiler = self._ctx.compiler
        parts: list[str] = [field.name]

        if field.is_surrogate_key:
            parts.append(compiler.auto_increment_type)
        else:
            parts.append(resolve_column_type(field.type, compiler.dialect_name))

        if field.primary:
            parts.append("PRIMARY KEY")
            if field.auto and compiler.auto_increment_keyword:
                parts.append(compiler.auto_increment_keyword)

        if field.unique and not field.primary:
            parts.append("UNIQUE")

        if not field.optional and not field.primary:
            parts.append("NOT NULL")

        if field.has_default:
            parts.append(f"DEFAULT {self._default_literal(field.default)}")

        return " ".join(parts)

    def _default_literal(self, value: Any) -> str:
        if isinstance(value, DefaultNow):
            return "CURRENT_TIMESTAMP"
        if isinstance(value, bool):
            return self._ctx.compiler.boolean_literal(value)
        if isinstance(value, (int, float)):
            return str(value)
        escaped = str(value).replace("'", "''")
        return f"'{escaped}'"
