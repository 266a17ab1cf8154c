"""Pydantic models for the schema intermediate representation (IR).

The IR is produced by :class:`~cometql.parse.parser.SchemaParser` (or by
:func:`~cometql.schema.converters.schema_from_sqlalchemy`) and consumed by the
DDL generators and any code-emission step.  Every model is frozen: once a
parse completes the IR is never mutated.
"""
from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

_FROZEN = ConfigDict(extra="forbid", frozen=True)

RelationKind = Literal["hasMany", "belongsTo"]


class DefaultNow(BaseModel):
    """Sentinel default meaning "the current timestamp at insert time".

    Rendered as ``DEFAULT CURRENT_TIMESTAMP`` in every dialect.
    """

    model_config = _FROZEN

    kind: Literal["now"] = "now"


#: The shared sentinel instance.
NOW = DefaultNow()

#: A field default: absent (``None``), a literal, or :data:`NOW`.
DefaultValue = DefaultNow | bool | int | float | str | None


class FieldSchema(BaseModel):
    """A scalar column of a model.

    Attributes:
        name: Column name.
        type: Abstract type tag (``'Int'``, ``'String'``, ...), without ``?``.
        optional: Column accepts NULL.  Meaningless when ``primary``.
        unique: Column carries a UNIQUE constraint.
        primary: Column is the primary key.
        auto: Value is generated by the database (auto-increment).
        default: Default value, or ``None`` when the column has none.
    """

    model_config = _FROZEN

    name: str
    type: str
    optional: bool = False
    unique: bool = False
    primary: bool = False
    auto: bool = False
    default: DefaultValue = None

    @property
    def is_surrogate_key(self) -> bool:
        """True for a primary key whose values the database generates."""
        return self.primary and self.auto

    @property
    def has_default(self) -> bool:
        return self.default is not None


class Relation(BaseModel):
    """A relation from one model to another.

    Attributes:
        name: Relation name (the ``@relation`` label, else the field name).
        kind: ``'hasMany'`` or ``'belongsTo'``.
        target: Name of the related model.
        fields: Owning-side column names (``belongsTo`` only).
        references: Referenced column names on ``target``.
    """

    model_config = _FROZEN

    name: str
    kind: RelationKind = "hasMany"
    target: str
    fields: list[str] = Field(default_factory=list)
    references: list[str] = Field(default_factory=list)


class ModelSchema(BaseModel):
    """One ``model`` block.

    Attributes:
        name: PascalCase model name.
        table_name: Derived snake_case, pluralised table name.
        fields: Scalar fields, in declaration order.
        relations: Relations, in declaration order.
    """

    model_config = _FROZEN

    name: str
    table_name: str
    fields: list[FieldSchema] = Field(default_factory=list)
    relations: list[Relation] = Field(default_factory=list)

    def get_field(self, name: str) -> FieldSchema | None:
        """Returns the field called ``name``, or ``None``."""
        for field in self.fields:
            if field.name == name:
                return field
        return None

    def get_relation(self, name: str) -> Relation | None:
        """Returns the relation called ``name``, or ``None``."""
        for relation in self.relations:
            if relation.name == name:
                return relation
        return None

    @property
    def primary_field(self) -> FieldSchema | None:
        """The first field flagged primary, if any."""
        for field in self.fields:
            if field.primary:
                return field
        return None

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]


class Schema(BaseModel):
    """An ordered collection of models produced by one parse."""

    model_config = _FROZEN

    models: list[ModelSchema] = Field(default_factory=list)

    def get_model(self, name: str) -> ModelSchema | None:
        """Returns the model called ``name``, or ``None``."""
        for model in self.models:
            if model.name == name:
                return model
        return None

    @property
    def model_names(self) -> list[str]:
        return [m.name for m in self.models]
