"""cometql – schema-first models and a dialect-independent query builder.

Describe models once, get DDL and positional SQL for postgres, mysql and
sqlite.

Public API
----------
``parse_schema``
    Parse schema DSL text into the schema IR.

``create_table``
    Render ``CREATE TABLE`` for one model in a dialect.

``compile_query``
    Compile an abstract ``Query`` to SQL text plus ordered arguments.

``QueryExecutor``
    Fluent, single-use builder that compiles and runs a query through an
    injected ``Executor``.

Example::

    import sqlite3
    import cometql

    schema = cometql.parse_schema(open("blog.cmt").read())
    driver = cometql.Driver("sqlite")
    executor = cometql.SQLiteExecutor(sqlite3.connect(":memory:"))
    for ddl in driver.create_tables(schema):
        executor.execute_script(ddl)

    adults = (
        cometql.QueryExecutor("users", executor)
        .where("age", ">", 18)
        .order_by("name")
        .all()
    )
"""

from __future__ import annotations

from cometql.compile.base import CompiledSQL, SQLCompiler
from cometql.compile.builder import QueryBuilder
from cometql.compile.ddl import DDLBuilder
from cometql.compile.mysql import MySQLCompiler
from cometql.compile.postgres import PostgresCompiler
from cometql.compile.registry import CompilerFactory
from cometql.compile.sqlite import SQLiteCompiler
from cometql.compile.type_mapper import resolve_column_type
from cometql.config import CometConfig, CometConfigBuilder
from cometql.driver import Driver
from cometql.errors import (
    CometError,
    CompilationError,
    MigrationNotImplementedError,
    NoRowsError,
    NotInitializedError,
    SchemaParseError,
)
from cometql.execute.context import ExecutionContext
from cometql.execute.executors import Executor, SQLAlchemyExecutor, SQLiteExecutor
from cometql.execute.query_executor import (
    LazyResults,
    QueryExecutor,
    dict_decoder,
    model_decoder,
)
from cometql.parse.parser import SchemaParser, parse_schema
from cometql.schema.converters import schema_from_sqlalchemy
from cometql.schema.dialect import DIALECTS, DialectName
from cometql.schema.models import (
    NOW,
    DefaultNow,
    FieldSchema,
    ModelSchema,
    Relation,
    Schema,
)
from cometql.schema.printer import format_schema
from cometql.schema.query import OrderClause, Query, WhereClause

__all__ = [
    # Core pipeline
    "parse_schema",
    "create_table",
    "compile_query",
    # Schema IR
    "Schema",
    "ModelSchema",
    "FieldSchema",
    "Relation",
    "DefaultNow",
    "NOW",
    "SchemaParser",
    "format_schema",
    "schema_from_sqlalchemy",
    # Queries
    "Query",
    "WhereClause",
    "OrderClause",
    "QueryExecutor",
    "LazyResults",
    "dict_decoder",
    "model_decoder",
    # Compilation
    "DIALECTS",
    "DialectName",
    "CompiledSQL",
    "SQLCompiler",
    "CompilerFactory",
    "QueryBuilder",
    "DDLBuilder",
    "PostgresCompiler",
    "MySQLCompiler",
    "SQLiteCompiler",
    "resolve_column_type",
    "Driver",
    # Execution
    "Executor",
    "ExecutionContext",
    "SQLiteExecutor",
    "SQLAlchemyExecutor",
    # Config
    "CometConfig",
    "CometConfigBuilder",
    # Errors
    "CometError",
    "SchemaParseError",
    "CompilationError",
    "NotInitializedError",
    "NoRowsError",
    "MigrationNotImplementedError",
]


def create_table(model: ModelSchema, dialect: str) -> str:
    """Render ``CREATE TABLE IF NOT EXISTS`` for ``model`` in ``dialect``.

    Raises:
        CompilationError: If ``dialect`` is not supported.
    """
    return CompilerFactory.create(dialect).build_create_table(model)


def compile_query(query: Query, dialect: str) -> CompiledSQL:
    """Compile ``query`` for ``dialect``.

    Returns:
        ``CompiledSQL`` with ``sql`` text, ordered ``args`` and ``dialect``.

    Raises:
        CompilationError: If ``dialect`` is not supported.
    """
    return CompilerFactory.create(dialect).compile(query)
