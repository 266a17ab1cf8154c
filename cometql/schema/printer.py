"""Render a :class:`~cometql.schema.models.Schema` back to schema DSL text.

For any IR the parser produced, re-parsing the output yields an equal IR.
Numeric defaults are written bare and therefore come back as strings.
"""
from __future__ import annotations

from cometql.schema.models import DefaultNow, FieldSchema, ModelSchema, Relation, Schema


def format_schema(schema: Schema) -> str:
    """Return DSL text for every model in ``schema``, separated by blank lines."""
    return "\n\n".join(format_model(m) for m in schema.models) + "\n"


def format_model(model: ModelSchema) -> str:
    rows = [_field_row(f) for f in model.fields] + [_relation_row(r) for r in model.relations]
    name_width = max((len(r[0]) for r in rows), default=0)
    type_width = max((len(r[1]) for r in rows), default=0)
    lines = [f"model {model.name} {{"]
    for name, type_, attrs in rows:
        line = f"  {name.ljust(name_width)} {type_.ljust(type_width)}"
        lines.append(f"{line} {attrs}".rstrip() if attrs else line.rstrip())
    lines.append("}")
    return "\n".join(lines)


def _field_row(field: FieldSchema) -> tuple[str, str, str]:
    attrs: list[str] = []
    if field.primary:
        attrs.append("@id")
    if field.auto:
        attrs.append("@auto")
    if field.unique:
        attrs.append("@unique")
    if field.has_default:
        attrs.append(f"@default({_default_literal(field.default)})")
    type_ = field.type + ("?" if field.optional else "")
    return field.name, type_, " ".join(attrs)


def _default_literal(value: object) -> str:
    if isinstance(value, DefaultNow):
        return "now()"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return f'"{value}"'


def _relation_row(relation: Relation) -> tuple[str, str, str]:
    args = [f'"{relation.name}"']
    if relation.fields:
        args.append(f"fields: [{', '.join(relation.fields)}]")
    if relation.references:
        args.append(f"references: [{', '.join(relation.references)}]")
    return relation.name, f"{relation.target}[]", f"@relation({', '.join(args)})"
