"""PostgreSQL dialect compiler."""

from __future__ import annotations

from cometql.compile.base import SQLCompiler


class PostgresCompiler(SQLCompiler):
    """Compiles to PostgreSQL-flavoured positional SQL.

    Parameter style: ``$1``, ``$2`` … numbered by bound argument, as
    expected by ``asyncpg`` and PostgreSQL's own ``PREPARE``.
    Generated primary keys use ``SERIAL``.
    """

    @property
    def dialect_name(self) -> str:
        return "postgres"

    def param_placeholder(self, position: int) -> str:
        return f"${position}"

    def boolean_literal(self, value: bool) -> str:
        return "TRUE" if value else "FALSE"

    @property
    def auto_increment_type(self) -> str:
        return "SERIAL"
