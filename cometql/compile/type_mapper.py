"""Abstract field type -> concrete column type, per dialect."""
from __future__ import annotations

from cometql.schema.dialect import DialectName

FALLBACK_TYPE = "TEXT"

_COLUMN_TYPES: dict[str, dict[str, str]] = {
    "postgres": {
        "Int": "INTEGER",
        "Int64": "BIGINT",
        "String": "VARCHAR(255)",
        "Boolean": "BOOLEAN",
        "Float": "DOUBLE PRECISION",
        "DateTime": "TIMESTAMP",
    },
    "mysql": {
        "Int": "INT",
        "Int64": "BIGINT",
        "String": "VARCHAR(255)",
        "Boolean": "BOOLEAN",
        "Float": "DOUBLE",
        "DateTime": "TIMESTAMP",
    },
    "sqlite": {
        "Int": "INTEGER",
        "Int64": "INTEGER",
        "String": "TEXT",
        "Boolean": "INTEGER",
        "Float": "REAL",
        "DateTime": "DATETIME",
    },
}


def resolve_column_type(abstract_type: str, dialect: DialectName | str) -> str:
    """Return the column type for ``abstract_type`` in ``dialect``.

    Never fails: a trailing ``?`` is ignored, unknown abstract types map to
    ``TEXT`` and unknown dialects are treated as sqlite.
    """
    base = abstract_type.removesuffix("?")
    table = _COLUMN_TYPES.get(dialect, _COLUMN_TYPES["sqlite"])
    return table.get(base, FALLBACK_TYPE)
