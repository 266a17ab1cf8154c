"""cometql schema models: the schema IR, the abstract Query, dialect names."""
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
    "DIALECTS",
    "DialectName",
    "NOW",
    "DefaultNow",
    "FieldSchema",
    "ModelSchema",
    "Relation",
    "Schema",
    "format_schema",
    "OrderClause",
    "Query",
    "WhereClause",
]
