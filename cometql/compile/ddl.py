"""``CREATE TABLE`` generation from a :class:`~cometql.schema.models.ModelSchema`."""
from __future__ import annotations

import logging

from cometql.compile.base import SQLCompiler
from cometql.compile.clause_builders import ColumnDefinitionBuilder
from cometql.compile.context import CompilationContext
from cometql.schema.models import ModelSchema

logger = logging.getLogger(__name__)

COLUMN_SEPARATOR = ",\n  "


class DDLBuilder:
    """Renders ``CREATE TABLE IF NOT EXISTS`` for one model.

    Output is deterministic for a given model and compiler.

    Args:
        compiler: Dialect-specific compiler instance.
    """

    def __init__(self, compiler: SQLCompiler) -> None:
        self._ctx = CompilationContext(compiler=compiler)
        self._columns = ColumnDefinitionBuilder(self._ctx)

    def build(self, model: ModelSchema) -> str:
        columns = COLUMN_SEPARATOR.join(self._columns.build(f) for f in model.fields)
        sql = f"CREATE TABLE IF NOT EXISTS {model.table_name} (\n  {columns}\n)"
        if self._ctx.compiler.table_options:
            sql = f"{sql} {self._ctx.compiler.table_options}"
        logger.debug("generated DDL for %s [%s]", model.name, self._ctx.compiler.dialect_name)
        return sql
