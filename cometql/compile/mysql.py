"""MySQL dialect compiler."""

from __future__ import annotations

from cometql.compile.base import SQLCompiler

MYSQL_TABLE_OPTIONS = "ENGINE=InnoDB DEFAULT CHARSET=utf8mb4"


class MySQLCompiler(SQLCompiler):
    """Compiles to MySQL-flavoured positional SQL.

    Parameter style: bare ``?`` placeholders.

    Generated primary keys are ``INT AUTO_INCREMENT`` and every table is
    created with ``ENGINE=InnoDB DEFAULT CHARSET=utf8mb4``.
    """

    @property
    def dialect_name(self) -> str:
        return "mysql"

    def param_placeholder(self, position: int) -> str:
        return "?"

    def boolean_literal(self, value: bool) -> str:
        return "TRUE" if value else "FALSE"

    @property
    def auto_increment_type(self) -> str:
        return "INT AUTO_INCREMENT"

    @property
    def table_options(self) -> str:
        return MYSQL_TABLE_OPTIONS
