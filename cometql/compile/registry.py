"""Dialect name → compiler lookup.

The dialect set is closed: postgres, mysql and sqlite.  ``CompilerFactory``
maps each name to its :class:`~cometql.compile.base.SQLCompiler` subclass
through a fixed table; there is no runtime registration.

Usage::

    from cometql.compile.registry import CompilerFactory

    compiler = CompilerFactory.create("mysql")
    sql, args = compiler.compile(query)
"""

from __future__ import annotations

from typing import ClassVar

from cometql.compile.base import SQLCompiler
from cometql.compile.mysql import MySQLCompiler
from cometql.compile.postgres import PostgresCompiler
from cometql.compile.sqlite import SQLiteCompiler
from cometql.errors import CompilationError


class CompilerFactory:
    """Creates the :class:`SQLCompiler` for a dialect name.

    Compilers are stateless, so one shared instance per dialect is handed
    out.

    Example::

        compiler = CompilerFactory.create("postgres")
    """

    _compilers: ClassVar[dict[str, SQLCompiler]] = {
        "postgres": PostgresCompiler(),
        "mysql": MySQLCompiler(),
        "sqlite": SQLiteCompiler(),
    }

    @classmethod
    def create(cls, name: str) -> SQLCompiler:
        """Return the compiler for ``name``.

        Args:
            name: The dialect name (``'postgres'``, ``'mysql'`` or ``'sqlite'``).

        Raises:
            CompilationError: If ``name`` is not a supported dialect.
        """
        compiler = cls._compilers.get(name)
        if compiler is None:
            raise CompilationError(
                f"Unsupported dialect: '{name}'. Supported dialects: {cls.dialect_names()}."
            )
        return compiler

    @classmethod
    def dialect_names(cls) -> list[str]:
        """Return the sorted list of supported dialect names."""
        return sorted(cls._compilers)
