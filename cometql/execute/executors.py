"""Execution collaborators: run compiled SQL and return rows.

The query layer depends only on the :class:`Executor` protocol.  Two
implementations are provided:

``SQLiteExecutor``
    Wraps a standard-library :class:`sqlite3.Connection`.  Honours an
    :class:`~cometql.execute.context.ExecutionContext` deadline by
    interrupting the running statement.

``SQLAlchemyExecutor``
    Wraps a SQLAlchemy :class:`~sqlalchemy.engine.Engine` and runs SQL with
    ``exec_driver_sql``.  The compiled placeholder style must match the
    engine's DBAPI paramstyle (``?`` for ``sqlite``/qmark drivers, ``$N``
    for numeric drivers such as ``asyncpg``).

Install the optional dependency before using ``SQLAlchemyExecutor``::

    pip install "cometql[sqlalchemy]"
"""
from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from cometql.execute.context import ExecutionContext

if TYPE_CHECKING:
    from sqlalchemy import Engine

logger = logging.getLogger(__name__)

Row = Mapping[str, Any]

# Number of SQLite VM instructions between deadline checks.
_PROGRESS_STEPS = 1000


@runtime_checkable
class Executor(Protocol):
    """Runs positional-parameter SQL.

    ``ctx`` is whatever the caller passed to the terminal query operation;
    implementations may honour or ignore it.
    """

    def fetch_all(self, sql: str, args: Sequence[Any], ctx: Any = None) -> list[Row]:
        """Run ``sql`` and return every row as a mapping of column -> value."""
        ...

    def fetch_scalar(self, sql: str, args: Sequence[Any], ctx: Any = None) -> Any:
        """Run ``sql`` and return the first column of the first row, or ``None``."""
        ...


class SQLiteExecutor:
    """Executor over a :class:`sqlite3.Connection`.

    The connection's own ``row_factory`` is left untouched; rows are read
    through a cursor configured with :class:`sqlite3.Row`.

    Args:
        connection: An open sqlite3 connection.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._conn = connection

    @property
    def connection(self) -> sqlite3.Connection:
        return self._conn

    def fetch_all(self, sql: str, args: Sequence[Any], ctx: Any = None) -> list[Row]:
        rows = self._run(sql, args, ctx, sqlite3.Cursor.fetchall)
        return [dict(row) for row in rows]

    def fetch_scalar(self, sql: str, args: Sequence[Any], ctx: Any = None) -> Any:
        row = self._run(sql, args, ctx, sqlite3.Cursor.fetchone)
        return None if row is None else row[0]

    def execute_script(self, script: str) -> None:
        """Run several ``;``-separated statements, e.g. generated DDL."""
        self._conn.executescript(script)

    def close(self) -> None:
        self._conn.close()

    def _run(
        self,
        sql: str,
        args: Sequence[Any],
        ctx: Any,
        fetch: Callable[[sqlite3.Cursor], Any],
    ) -> Any:
        """Execute ``sql`` and ``fetch`` its rows under ``ctx``'s deadline.

        The progress handler stays installed until the fetch completes; an
        interrupted statement is reported as ``TimeoutError``.
        """
        deadline_ctx = ctx if isinstance(ctx, ExecutionContext) else None
        if deadline_ctx is not None:
            deadline_ctx.check()
            self._conn.set_progress_handler(lambda: int(deadline_ctx.done), _PROGRESS_STEPS)
        try:
            logger.debug("sqlite: %s %r", sql, list(args))
            cursor = self._conn.cursor()
            cursor.row_factory = sqlite3.Row
            cursor.execute(sql, tuple(args))
            return fetch(cursor)
        except sqlite3.OperationalError as exc:
            if deadline_ctx is not None and deadline_ctx.done:
                raise deadline_ctx.timeout_error() from exc
            raise
        finally:
            if deadline_ctx is not None:
                self._conn.set_progress_handler(None, 0)


class SQLAlchemyExecutor:
    """Executor over a SQLAlchemy :class:`~sqlalchemy.engine.Engine`.

    Each call checks out a connection for the duration of the statement.

    Args:
        engine: A SQLAlchemy engine.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine

    def fetch_all(self, sql: str, args: Sequence[Any], ctx: Any = None) -> list[Row]:
        _check(ctx)
        logger.debug("sqlalchemy: %s %r", sql, list(args))
        with self._engine.connect() as conn:
            result = conn.exec_driver_sql(sql, tuple(args))
            return [dict(row) for row in result.mappings()]

    def fetch_scalar(self, sql: str, args: Sequence[Any], ctx: Any = None) -> Any:
        _check(ctx)
        logger.debug("sqlalchemy: %s %r", sql, list(args))
        with self._engine.connect() as conn:
            return conn.exec_driver_sql(sql, tuple(args)).scalar()

    def execute_script(self, script: str) -> None:
        """Run several ``;``-separated statements inside one transaction."""
        with self._engine.begin() as conn:
            for statement in script.split(";"):
                if statement.strip():
                    conn.exec_driver_sql(statement)

    def close(self) -> None:
        self._engine.dispose()


def _check(ctx: Any) -> None:
    if isinstance(ctx, ExecutionContext):
        ctx.check()
