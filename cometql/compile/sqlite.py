"""SQLite dialect compiler."""
from __future__ import annotations

from cometql.compile.base import SQLCompiler


class SQLiteCompiler(SQLCompiler):
    """Compiles to SQLite-flavoured positional SQL.

    Parameter style: ``?`` – compatible with Python's built-in ``sqlite3``
    positional execution (``cursor.execute(sql, args)``).

    Note: SQLite has no boolean type; booleans are stored as ``1`` / ``0``.
    Generated keys are ``INTEGER PRIMARY KEY AUTOINCREMENT``.
    """

    @property
    def dialect_name(self) -> str:
        return "sqlite"

    def param_placeholder(self, position: int) -> str:
        return "?"

    def boolean_literal(self, value: bool) -> str:
        return "1" if value else "0"

    @property
    def auto_increment_type(self) -> str:
        return "INTEGER"

    @property
    def auto_increment_keyword(self) -> str:
        return "AUTOINCREMENT"
