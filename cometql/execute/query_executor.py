"""Fluent query façade: accumulate a :class:`Query`, then run it.

``QueryExecutor`` is single-use and not safe for concurrent mutation; every
builder call mutates the underlying query in place and returns ``self``::

    users = (
        QueryExecutor("users", executor, model_decoder(User), config=config)
        .where("age", ">", 18)
        .where_not("status", "=", "archived")
        .order_by("created_at", "desc")
        .limit(10)
        .all(ctx)
    )

Terminal operations compile the query with the configured dialect, hand the
SQL to the injected :class:`~cometql.execute.executors.Executor` together
with the caller's ``ctx``, and decode rows with the injected decoder.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any, Generic, TypeVar, overload

from pydantic import BaseModel

from cometql.compile.base import CompiledSQL
from cometql.compile.registry import CompilerFactory
from cometql.config import CometConfig
from cometql.errors import NoRowsError, NotInitializedError
from cometql.execute.executors import Executor
from cometql.schema.query import IN_OPERATOR, OrderClause, Query, WhereClause

logger = logging.getLogger(__name__)

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

COUNT_PROJECTION = "COUNT(*)"


def dict_decoder(row: Mapping[str, Any]) -> dict[str, Any]:
    """Default decoder: the row as a plain ``dict``."""
    return dict(row)


def model_decoder(model_cls: type[M]) -> Callable[[Mapping[str, Any]], M]:
    """Build a decoder that validates each row into ``model_cls``."""

    def decode(row: Mapping[str, Any]) -> M:
        return model_cls.model_validate(dict(row))

    return decode


class LazyResults(Sequence, Generic[T]):
    """Rows fetched eagerly, decoded on first access and cached.

    Decoding errors surface from the access that triggers them, with
    ``note`` (if given) attached to the exception.
    """

    def __init__(
        self,
        rows: list[Mapping[str, Any]],
        decoder: Callable[[Mapping[str, Any]], T],
        note: str | None = None,
    ) -> None:
        self._rows = rows
        self._decoder = decoder
        self._note = note
        self._decoded: dict[int, T] = {}

    def __len__(self) -> int:
        return len(self._rows)

    @overload
    def __getitem__(self, index: int) -> T: ...

    @overload
    def __getitem__(self, index: slice) -> list[T]: ...

    def __getitem__(self, index: int | slice) -> T | list[T]:
        if isinstance(index, slice):
            return [self[i] for i in range(*index.indices(len(self._rows)))]
        if index < 0:
            index += len(self._rows)
        if not 0 <= index < len(self._rows):
            raise IndexError("result index out of range")
        if index not in self._decoded:
            self._decoded[index] = self._decode(self._rows[index])
        return self._decoded[index]

    def _decode(self, row: Mapping[str, Any]) -> T:
        try:
            return self._decoder(row)
        except Exception as exc:
            if self._note:
                exc.add_note(self._note)
            raise

    def __iter__(self) -> Iterator[T]:
        for i in range(len(self._rows)):
            yield self[i]

    def __repr__(self) -> str:
        return f"LazyResults({len(self._rows)} rows)"


class QueryExecutor(Generic[T]):
    """Single-use fluent builder and runner for one query.

    Args:
        table: Table to query.
        executor: Execution collaborator.  Terminal operations raise
            :class:`NotInitializedError` while this is ``None``.
        decoder: Row -> domain object.  Defaults to :func:`dict_decoder`.
        config: Dialect and identity-field settings.
    """

    def __init__(
        self,
        table: str,
        executor: Executor | None = None,
        decoder: Callable[[Mapping[str, Any]], T] | None = None,
        *,
        config: CometConfig | None = None,
    ) -> None:
        self._query = Query(table=table)
        self._executor = executor
        self._decoder = decoder or dict_decoder
        self._config = config or CometConfig()

    @property
    def query(self) -> Query:
        """The query accumulated so far."""
        return self._query

    # ------------------------------------------------------------------
    # Builder
    # ------------------------------------------------------------------

    def select(self, *fields: str) -> QueryExecutor[T]:
        self._query.fields = list(fields)
        return self

    def where(self, field: str, operator: str, value: Any) -> QueryExecutor[T]:
        self._query.wheres.append(WhereClause(field=field, operator=operator, value=value))
        return self

    def where_not(self, field: str, operator: str, value: Any) -> QueryExecutor[T]:
        """Add a negated filter, rendered as ``<field> NOT <operator> <placeholder>``."""
        self._query.wheres.append(
            WhereClause(field=field, operator=operator, value=value, negated=True)
        )
        return self

    def where_in(self, field: str, values: Sequence[Any]) -> QueryExecutor[T]:
        """Add an ``IN`` filter.

        Only a ``(?,?,…)`` group with one ``?`` per value is stored; the
        values themselves are not bound by the compiler.
        """
        group = "(" + ",".join("?" for _ in values) + ")"
        self._query.wheres.append(WhereClause(field=field, operator=IN_OPERATOR, value=group))
        return self

    def order_by(self, field: str, direction: str = "ASC") -> QueryExecutor[T]:
        self._query.orders.append(OrderClause(field=field, direction=direction))
        return self

    def limit(self, limit: int) -> QueryExecutor[T]:
        self._query.limit = limit
        return self

    def offset(self, offset: int) -> QueryExecutor[T]:
        self._query.offset = offset
        return self

    def include(self, *relations: str) -> QueryExecutor[T]:
        """Record relations to include.  Stored only; no joins are emitted."""
        self._query.includes.extend(relations)
        return self

    def to_sql(self) -> CompiledSQL:
        """Compile the current query without running it."""
        return CompilerFactory.create(self._config.dialect).compile(self._query)

    # ------------------------------------------------------------------
    # Terminal operations
    # ------------------------------------------------------------------

    def all(self, ctx: Any = None) -> LazyResults[T]:
        """Run the query; an empty result is an empty sequence."""
        executor = self._require_executor()
        compiled = self.to_sql()
        rows = self._call(executor.fetch_all, compiled, ctx)
        return LazyResults(rows, self._decoder, self._decode_note(compiled))

    def first(self, ctx: Any = None) -> T:
        """Run the query with ``LIMIT 1``.

        Raises:
            NoRowsError: If no row matches.
        """
        executor = self._require_executor()
        self._query.limit = 1
        compiled = self.to_sql()
        rows = self._call(executor.fetch_all, compiled, ctx)
        if not rows:
            raise NoRowsError(self._query.table, compiled.sql)
        return self._call_decoder(rows[0], compiled)

    def last(self, ctx: Any = None) -> T:
        """Like :meth:`first`, ordering by the identity field descending
        when no ordering was given."""
        if not self._query.orders:
            self._query.orders.append(
                OrderClause(field=self._config.identity_field, direction="DESC")
            )
        return self.first(ctx)

    def count(self, ctx: Any = None) -> int:
        """Count matching rows; ordering, limit and offset are ignored."""
        executor = self._require_executor()
        count_query = Query(
            table=self._query.table,
            fields=[COUNT_PROJECTION],
            wheres=list(self._query.wheres),
        )
        compiled = CompilerFactory.create(self._config.dialect).compile(count_query)
        value = self._call(executor.fetch_scalar, compiled, ctx)
        return int(value or 0)

    def exists(self, ctx: Any = None) -> bool:
        return self.count(ctx) > 0

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _require_executor(self) -> Executor:
        if self._executor is None:
            raise NotInitializedError(self._query.table)
        return self._executor

    def _call(self, fn: Callable[..., Any], compiled: CompiledSQL, ctx: Any) -> Any:
        logger.debug("executing on %s: %s", self._query.table, compiled.sql)
        try:
            return fn(compiled.sql, compiled.args, ctx)
        except Exception as exc:
            exc.add_note(f"while querying '{self._query.table}': {compiled.sql}")
            raise

    def _decode_note(self, compiled: CompiledSQL) -> str:
        return f"while decoding a row of '{self._query.table}': {compiled.sql}"

    def _call_decoder(self, row: Mapping[str, Any], compiled: CompiledSQL) -> T:
        try:
            return self._decoder(row)
        except Exception as exc:
            exc.add_note(self._decode_note(compiled))
            raise
