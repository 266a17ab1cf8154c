"""Dialect driver: the capability contract shared by every backend.

A :class:`Driver` bundles, for one dialect:

- ``create_table`` / ``create_tables``: DDL for the schema IR
- ``build_query``: compiled SQL and positional args for a :class:`Query`
- ``dialect``: the canonical dialect name
- ``connect``: an :class:`~cometql.execute.executors.Executor` for a DSN
- ``migrate``: not implemented; always raises

Usage::

    driver = Driver("sqlite")
    executor = driver.connect("sqlite://./blog.db")
    for ddl in driver.create_tables(schema):
        executor.execute_script(ddl)
"""
from __future__ import annotations

import logging
import sqlite3

from cometql.compile.base import CompiledSQL, SQLCompiler
from cometql.compile.registry import CompilerFactory
from cometql.errors import MigrationNotImplementedError
from cometql.execute.executors import SQLAlchemyExecutor, SQLiteExecutor
from cometql.schema.models import ModelSchema, Schema
from cometql.schema.query import Query

logger = logging.getLogger(__name__)

_SQLITE_PREFIXES = ("sqlite://", "file:")


class Driver:
    """Capability bundle for one dialect.

    Args:
        dialect: ``'postgres'``, ``'mysql'`` or ``'sqlite'``.

    Raises:
        CompilationError: If ``dialect`` is not supported.
    """

    def __init__(self, dialect: str) -> None:
        self._compiler: SQLCompiler = CompilerFactory.create(dialect)

    @property
    def dialect(self) -> str:
        return self._compiler.dialect_name

    @property
    def compiler(self) -> SQLCompiler:
        return self._compiler

    def create_table(self, model: ModelSchema) -> str:
        return self._compiler.build_create_table(model)

    def create_tables(self, schema: Schema) -> list[str]:
        return self._compiler.build_create_tables(schema)

    def build_query(self, query: Query) -> CompiledSQL:
        return self._compiler.compile(query)

    def connect(self, dsn: str) -> SQLiteExecutor | SQLAlchemyExecutor:
        """Open a connection and wrap it in an executor.

        sqlite DSNs may carry a ``sqlite://`` or ``file:`` prefix, which is
        stripped; foreign-key enforcement is switched on.  Other dialects
        are handed to SQLAlchemy's ``create_engine`` unchanged.
        """
        if self.dialect == "sqlite":
            return _connect_sqlite(dsn)

        try:
            from sqlalchemy import create_engine
        except ImportError as exc:
            raise ImportError(
                f"SQLAlchemy is required to connect to {self.dialect}. "
                'Install it with: pip install "cometql[sqlalchemy]"'
            ) from exc
        logger.debug("connecting %s engine", self.dialect)
        return SQLAlchemyExecutor(create_engine(dsn))

    def migrate(self, schema: Schema) -> None:
        """Apply ``schema`` to the database.  Not implemented.

        Raises:
            MigrationNotImplementedError: Always.
        """
        raise MigrationNotImplementedError(self.dialect)


def _connect_sqlite(dsn: str) -> SQLiteExecutor:
    path = dsn
    for prefix in _SQLITE_PREFIXES:
        path = path.removeprefix(prefix)
    logger.debug("connecting sqlite database %s", path)
    conn = sqlite3.connect(path)
    try:
        conn.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error:
        conn.close()
        raise
    return SQLiteExecutor(conn)
