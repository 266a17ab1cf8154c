"""Compiler abstractions: CompiledSQL and the SQLCompiler ABC.

The Template Method pattern (GoF) is used:
- ``SQLCompiler`` defines the algorithm skeleton for query compilation and
  ``CREATE TABLE`` generation.
- ``PostgresCompiler``, ``MySQLCompiler`` and ``SQLiteCompiler`` override the
  dialect-specific steps (placeholder style, boolean literals, auto-increment
  column syntax, table trailer).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from cometql.schema.models import ModelSchema, Schema
    from cometql.schema.query import Query


@dataclass
class CompiledSQL:
    """The output of a successful compilation.

    Attributes:
        sql: The compiled SQL string with positional placeholders.
        args: Values for the placeholders, in left-to-right order.
        dialect: The target dialect name.
    """

    sql: str
    args: list[Any] = field(default_factory=list)
    dialect: str = ""

    def __iter__(self):
        # Allows ``sql, args = compiler.compile(query)``.
        yield self.sql
        yield self.args


class SQLCompiler(ABC):
    """Abstract base for dialect-specific SQL compilers.

    Subclasses implement the dialect hooks; :meth:`compile` and
    :meth:`build_create_table` drive the shared algorithm through
    :class:`~cometql.compile.builder.QueryBuilder` and
    :class:`~cometql.compile.ddl.DDLBuilder`.
    """

    # ------------------------------------------------------------------
    # Template methods
    # ------------------------------------------------------------------

    def compile(self, query: Query) -> CompiledSQL:
        """Compile ``query`` to SQL text plus ordered arguments."""
        from cometql.compile.builder import QueryBuilder

        return QueryBuilder(self).build(query)

    def build_create_table(self, model: ModelSchema) -> str:
        """Return the ``CREATE TABLE IF NOT EXISTS`` statement for ``model``."""
        from cometql.compile.ddl import DDLBuilder

        return DDLBuilder(self).build(model)

    def build_create_tables(self, schema: Schema) -> list[str]:
        """Return one ``CREATE TABLE`` statement per model, in schema order."""
        return [self.build_create_table(m) for m in schema.models]

    # ------------------------------------------------------------------
    # Dialect hooks
    # ------------------------------------------------------------------

    @property
    @abstractmethod
    def dialect_name(self) -> str:
        """Return the canonical dialect name."""

    @abstractmethod
    def param_placeholder(self, position: int) -> str:
        """Return the placeholder for the ``position``-th bound argument.

        Args:
            position: 1-based index among bound arguments only.
        """

    @abstractmethod
    def boolean_literal(self, value: bool) -> str:
        """Return the SQL literal for a boolean column default."""

    @property
    @abstractmethod
    def auto_increment_type(self) -> str:
        """Column type used for a primary key the database generates."""

    @property
    def auto_increment_keyword(self) -> str:
        """Keyword emitted after ``PRIMARY KEY`` for generated keys, if any."""
        return ""

    @property
    def table_options(self) -> str:
        """Trailer appended after the closing parenthesis of ``CREATE TABLE``."""
        return ""
