"""Build a schema IR from an existing database.

SQLAlchemy converter
--------------------
:func:`schema_from_sqlalchemy` reflects a live database engine and returns a
:class:`~cometql.schema.models.Schema`, ready for
:func:`~cometql.schema.printer.format_schema` or DDL generation for another
dialect.

Install the optional dependency before using this module::

    pip install "cometql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from cometql.schema.converters import schema_from_sqlalchemy

    engine = create_engine("sqlite:///blog.db")
    schema = schema_from_sqlalchemy(engine)
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Any

from cometql.schema.models import NOW, DefaultValue, FieldSchema, ModelSchema, Relation, Schema
from cometql.schema.naming import singularize, to_camel_case, to_pascal_case

if TYPE_CHECKING:
    from sqlalchemy import Column, Engine, MetaData, Table

_NOW_DEFAULTS = frozenset({"CURRENT_TIMESTAMP", "NOW()", "CURRENT_TIMESTAMP()"})


def schema_from_sqlalchemy(
    engine: Engine,
    *,
    include_tables: list[str] | None = None,
    schema: str | None = None,
) -> Schema:
    """Build a :class:`Schema` by reflecting a SQLAlchemy engine.

    All tables visible to the engine (or a subset via *include_tables*) are
    reflected using SQLAlchemy's :class:`~sqlalchemy.schema.MetaData`.

    **Naming**

    Each table becomes a model named after the PascalCase singular of the
    table name (``blog_posts`` -> ``BlogPost``); the reflected table name is
    kept verbatim as ``table_name``.

    **Relations**

    Every foreign key yields two relations: a ``belongsTo`` on the
    referencing model (named after the referenced model, e.g. ``user``) and a
    ``hasMany`` on the referenced model (named after the referencing table,
    e.g. ``posts``).  A self-referential FK, or several FKs between the same
    pair of tables, is disambiguated with the FK column name.

    Args:
        engine: A connected :class:`sqlalchemy.engine.Engine` instance.
        include_tables: Optional allowlist of table names to reflect.
        schema: Optional database schema name (e.g. ``"public"``).

    Returns:
        A fully populated :class:`Schema`.

    Raises:
        ImportError: If ``sqlalchemy`` is not installed.
    """
    try:
        from sqlalchemy import MetaData as _MetaData
    except ImportError as exc:
        raise ImportError(
            "SQLAlchemy is required for schema_from_sqlalchemy(). "
            'Install it with: pip install "cometql[sqlalchemy]"'
        ) from exc

    metadata = _MetaData()
    with engine.connect() as conn:
        metadata.reflect(bind=conn, only=include_tables, schema=schema)
    return _metadata_to_schema(metadata)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _metadata_to_schema(metadata: MetaData) -> Schema:
    """Convert a reflected :class:`~sqlalchemy.schema.MetaData` into a
    :class:`Schema`.

    Separated from :func:`schema_from_sqlalchemy` so callers that already hold
    a ``MetaData`` (reflected or declared) can reuse it.
    """
    tables = metadata.sorted_tables

    fk_pair_count: dict[tuple[str, str], int] = defaultdict(int)
    for table in tables:
        for fk in table.foreign_keys:
            fk_pair_count[(table.name, fk.column.table.name)] += 1

    relations: dict[str, list[Relation]] = {t.name: [] for t in tables}
    for table in tables:
        for fk in table.foreign_keys:
            from_col = fk.parent.name
            to_table = fk.column.table.name
            ambiguous = table.name == to_table or fk_pair_count[(table.name, to_table)] > 1

            owner_name = to_camel_case(from_col) if ambiguous else to_camel_case(singularize(to_table))
            relations[table.name].append(
                Relation(
                    name=owner_name,
                    kind="belongsTo",
                    target=_model_name(to_table),
                    fields=[from_col],
                    references=[fk.column.name],
                )
            )
            if to_table in relations:
                many_name = to_camel_case(table.name)
                if ambiguous:
                    many_name += "By" + to_pascal_case(from_col)
                relations[to_table].append(
                    Relation(name=many_name, kind="hasMany", target=_model_name(table.name))
                )

    return Schema(
        models=[
            ModelSchema(
                name=_model_name(table.name),
                table_name=table.name,
                fields=[_field(table, col) for col in table.columns],
                relations=relations[table.name],
            )
            for table in tables
        ]
    )


def _model_name(table_name: str) -> str:
    return to_pascal_case(singularize(table_name))


def _field(table: Table, col: Column) -> FieldSchema:
    abstract = _abstract_type(col.type)
    primary = bool(col.primary_key)
    auto = (
        primary
        and abstract in ("Int", "Int64")
        and len(table.primary_key.columns) == 1
        and col.autoincrement in (True, "auto")
    )
    return FieldSchema(
        name=col.name,
        type=abstract,
        optional=bool(col.nullable) and not primary,
        unique=not primary and _is_unique(table, col),
        primary=primary,
        auto=auto,
        default=_default(col, abstract),
    )


def _abstract_type(sql_type: Any) -> str:
    """Map a SQLAlchemy type instance back to an abstract type tag."""
    from sqlalchemy import types as sqltypes

    if isinstance(sql_type, sqltypes.Boolean):
        return "Boolean"
    if isinstance(sql_type, sqltypes.BigInteger):
        return "Int64"
    if isinstance(sql_type, sqltypes.Integer):
        return "Int"
    # Float is not a Numeric subclass in every SQLAlchemy 2.x release.
    if isinstance(sql_type, (sqltypes.Float, sqltypes.Numeric)):
        return "Float"
    if isinstance(sql_type, (sqltypes.DateTime, sqltypes.Date)):
        return "DateTime"
    if isinstance(sql_type, sqltypes.String):
        return "String"
    return str(sql_type)


def _is_unique(table: Table, col: Column) -> bool:
    """True when a single-column unique constraint or index covers ``col``."""
    from sqlalchemy import UniqueConstraint

    if col.unique:
        return True
    for constraint in table.constraints:
        if isinstance(constraint, UniqueConstraint) and list(constraint.columns.keys()) == [col.name]:
            return True
    for index in table.indexes:
        if index.unique and [c.name for c in index.columns] == [col.name]:
            return True
    return False


def _default(col: Column, abstract: str) -> DefaultValue:
    """Recover a literal server default, or ``None``."""
    server_default = col.server_default
    if server_default is None:
        return None
    raw = str(getattr(server_default, "arg", server_default)).strip()
    if raw.upper() in _NOW_DEFAULTS:
        return NOW
    if abstract == "Boolean" and raw.upper() in ("1", "TRUE", "0", "FALSE"):
        return raw.upper() in ("1", "TRUE")
    if len(raw) >= 2 and raw[0] == raw[-1] == "'":
        return raw[1:-1].replace("''", "'")
    return raw
