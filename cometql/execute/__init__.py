"""cometql execution layer: fluent queries and execution collaborators."""
from cometql.execute.context import ExecutionContext
from cometql.execute.executors import Executor, SQLAlchemyExecutor, SQLiteExecutor
from cometql.execute.query_executor import (
    LazyResults,
    QueryExecutor,
    dict_decoder,
    model_decoder,
)

__all__ = [
    "ExecutionContext",
    "Executor",
    "SQLAlchemyExecutor",
    "SQLiteExecutor",
    "LazyResults",
    "QueryExecutor",
    "dict_decoder",
    "model_decoder",
]
