"""cometql compilation layer: Query → positional SQL, ModelSchema → DDL."""
from cometql.compile.base import CompiledSQL, SQLCompiler
from cometql.compile.builder import QueryBuilder
from cometql.compile.ddl import DDLBuilder
from cometql.compile.mysql import MySQLCompiler
from cometql.compile.postgres import PostgresCompiler
from cometql.compile.registry import CompilerFactory
from cometql.compile.sqlite import SQLiteCompiler
from cometql.compile.type_mapper import resolve_column_type

__all__ = [
    "CompiledSQL",
    "SQLCompiler",
    "QueryBuilder",
    "DDLBuilder",
    "CompilerFactory",
    "MySQLCompiler",
    "PostgresCompiler",
    "SQLiteCompiler",
    "resolve_column_type",
]
