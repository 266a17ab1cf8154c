"""Core Query → SQL compilation logic.

``QueryBuilder`` is the top-level orchestrator.  It wires together the
clause-level sub-builders and drives the compilation algorithm.  All
dialect-specific behaviour is delegated to the injected ``SQLCompiler``.

Sub-builder hierarchy
---------------------
QueryBuilder
  ├── SelectClauseBuilder   (clause_builders.py)
  ├── WhereClauseBuilder    (clause_builders.py)
  └── OrderByClauseBuilder  (clause_builders.py)

Clause order is fixed: SELECT/FROM, WHERE, ORDER BY, LIMIT, OFFSET.  Present
clauses are joined with a single space.
"""
from __future__ import annotations

import logging

from cometql.compile.base import CompiledSQL, SQLCompiler
from cometql.compile.clause_builders import (
    OrderByClauseBuilder,
    SelectClauseBuilder,
    WhereClauseBuilder,
)
from cometql.compile.context import CompilationContext, RuntimeContext
from cometql.schema.query import Query

logger = logging.getLogger(__name__)


class QueryBuilder:
    """Compiles an abstract :class:`Query` to positional-parameter SQL.

    Args:
        compiler: Dialect-specific compiler instance.
    """

    def __init__(self, compiler: SQLCompiler) -> None:
        self._ctx = CompilationContext(compiler=compiler)

    def build(self, query: Query) -> CompiledSQL:
        """Compile ``query``.

        The query is only read; the returned args list is fresh per call.
        """
        runtime = RuntimeContext()
        parts: list[str] = [SelectClauseBuilder().build(query)]

        if query.wheres:
            parts.append(WhereClauseBuilder(self._ctx, runtime).build(query.wheres))

        if query.orders:
            parts.append(OrderByClauseBuilder().build(query.orders))

        if query.limit is not None:
            parts.append(f"LIMIT {query.limit}")

        if query.offset is not None:
            parts.append(f"OFFSET {query.offset}")

        sql = " ".join(parts)
        dialect = self._ctx.compiler.dialect_name
        logger.debug("compiled [%s] %s args=%r", dialect, sql, runtime.args)
        return CompiledSQL(sql=sql, args=runtime.args, dialect=dialect)
