"""Unit tests for cometql.schema.converters.schema_from_sqlalchemy."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    text,
)
from sqlalchemy.engine import Engine

from cometql.compile.registry import CompilerFactory
from cometql.parse.parser import parse_schema
from cometql.schema.converters import _metadata_to_schema, schema_from_sqlalchemy
from cometql.schema.models import NOW
from cometql.schema.printer import format_schema


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_engine() -> Engine:
    """Return an in-memory SQLite engine."""
    return create_engine("sqlite:///:memory:")


def _blog_tables(engine: Engine) -> None:
    """Create users -> posts (FK) with a few defaults."""
    with engine.begin() as conn:
        conn.execute(
            text(
                """
                CREATE TABLE users (
                    id         INTEGER PRIMARY KEY,
                    email      VARCHAR(255) NOT NULL,
                    nickname   TEXT,
                    is_active  BOOLEAN NOT NULL DEFAULT 1,
                    created_at DATETIME NOT NULL DEFAULT CURRENT_TIMESTAMP,
                    UNIQUE (email)
                )
                """
            )
        )
        conn.execute(
            text(
                """
                CREATE TABLE posts (
                    id        INTEGER PRIMARY KEY,
                    author_id INTEGER NOT NULL,
                    title     TEXT NOT NULL,
                    status    TEXT NOT NULL DEFAULT 'draft',
                    FOREIGN KEY (author_id) REFERENCES users(id)
                )
                """
            )
        )


@pytest.fixture()
def blog_engine() -> Iterator[Engine]:
    engine = _make_engine()
    _blog_tables(engine)
    yield engine
    engine.dispose()


# ---------------------------------------------------------------------------
# Reflection
# ---------------------------------------------------------------------------


class TestSchemaFromSQLAlchemy:
    def test_models_named_from_tables(self, blog_engine):
        schema = schema_from_sqlalchemy(blog_engine)
        assert sorted(schema.model_names) == ["Post", "User"]
        assert schema.get_model("User").table_name == "users"

    def test_field_flags(self, blog_engine):
        user = schema_from_sqlalchemy(blog_engine).get_model("User")
        id_ = user.get_field("id")
        assert id_.primary and id_.auto and not id_.optional
        assert user.get_field("email").unique
        assert user.get_field("email").type == "String"
        assert user.get_field("nickname").optional

    def test_defaults_recovered(self, blog_engine):
        schema = schema_from_sqlalchemy(blog_engine)
        user = schema.get_model("User")
        assert user.get_field("is_active").default is True
        assert user.get_field("created_at").default == NOW
        assert schema.get_model("Post").get_field("status").default == "draft"

    def test_foreign_key_relations(self, blog_engine):
        schema = schema_from_sqlalchemy(blog_engine)
        author = schema.get_model("Post").get_relation("user")
        assert author.kind == "belongsTo"
        assert author.target == "User"
        assert author.fields == ["author_id"]
        assert author.references == ["id"]

        posts = schema.get_model("User").get_relation("posts")
        assert posts.kind == "hasMany"
        assert posts.target == "Post"

    def test_include_tables(self, blog_engine):
        schema = schema_from_sqlalchemy(blog_engine, include_tables=["users"])
        assert schema.model_names == ["User"]
        assert schema.get_model("User").relations == []

    def test_reflected_schema_prints_and_reparses(self, blog_engine):
        schema = schema_from_sqlalchemy(blog_engine)
        reparsed = parse_schema(format_schema(schema))
        assert reparsed.model_names == schema.model_names
        for original, again in zip(schema.models, reparsed.models):
            assert original.fields == again.fields

    def test_reflected_schema_generates_ddl(self, blog_engine):
        schema = schema_from_sqlalchemy(blog_engine)
        ddl = CompilerFactory.create("postgres").build_create_table(schema.get_model("User"))
        assert "id SERIAL PRIMARY KEY" in ddl
        assert "email VARCHAR(255) UNIQUE NOT NULL" in ddl


# ---------------------------------------------------------------------------
# Declared metadata
# ---------------------------------------------------------------------------


class TestMetadataToSchema:
    def test_type_mapping(self):
        metadata = MetaData()
        Table(
            "measurements",
            metadata,
            Column("id", BigInteger, primary_key=True),
            Column("value", Float, nullable=False),
            Column("ok", Boolean, nullable=False),
            Column("taken_at", DateTime, nullable=True),
        )
        model = _metadata_to_schema(metadata).models[0]
        assert model.name == "Measurement"
        assert [f.type for f in model.fields] == ["Int64", "Float", "Boolean", "DateTime"]
        assert model.get_field("id").auto

    def test_float_and_numeric_columns_are_float(self):
        from sqlalchemy import Numeric

        metadata = MetaData()
        Table(
            "prices",
            metadata,
            Column("id", Integer, primary_key=True),
            Column("ratio", Float, nullable=False),
            Column("amount", Numeric(10, 2), nullable=False),
        )
        model = _metadata_to_schema(metadata).models[0]
        assert model.get_field("ratio").type == "Float"
        assert model.get_field("amount").type == "Float"
        ddl = CompilerFactory.create("postgres").build_create_table(model)
        assert "ratio DOUBLE PRECISION NOT NULL" in ddl

    def test_reflected_real_column_is_float(self):
        engine = _make_engine()
        with engine.begin() as conn:
            conn.execute(text("CREATE TABLE readings (id INTEGER PRIMARY KEY, value REAL)"))
        try:
            model = schema_from_sqlalchemy(engine).models[0]
        finally:
            engine.dispose()
        assert model.get_field("value").type == "Float"

    def test_composite_primary_key_is_not_auto(self):
        metadata = MetaData()
        Table(
            "post_tags",
            metadata,
            Column("post_id", Integer, primary_key=True),
            Column("tag_id", Integer, primary_key=True),
        )
        model = _metadata_to_schema(metadata).models[0]
        assert all(f.primary and not f.auto for f in model.fields)

    def test_self_reference_uses_column_name(self):
        metadata = MetaData()
        Table(
            "employees",
            metadata,
            Column("id", Integer, primary_key=True),
            Column("manager_id", Integer, ForeignKey("employees.id")),
        )
        model = _metadata_to_schema(metadata).models[0]
        names = {r.name: r.kind for r in model.relations}
        assert names == {"managerId": "belongsTo", "employeesByManagerId": "hasMany"}

    def test_two_fks_to_same_table_disambiguated(self):
        metadata = MetaData()
        Table("users", metadata, Column("id", Integer, primary_key=True))
        Table(
            "messages",
            metadata,
            Column("id", Integer, primary_key=True),
            Column("sender_id", Integer, ForeignKey("users.id")),
            Column("recipient_id", Integer, ForeignKey("users.id")),
        )
        schema = _metadata_to_schema(metadata)
        message = schema.get_model("Message")
        assert sorted(r.name for r in message.relations) == ["recipientId", "senderId"]
        user = schema.get_model("User")
        assert sorted(r.name for r in user.relations) == [
            "messagesByRecipientId",
            "messagesBySenderId",
        ]

    def test_unknown_type_kept_verbatim(self):
        from sqlalchemy import LargeBinary

        metadata = MetaData()
        Table(
            "blobs",
            metadata,
            Column("id", Integer, primary_key=True),
            Column("data", LargeBinary),
        )
        field = _metadata_to_schema(metadata).models[0].get_field("data")
        assert field.type == "BLOB"
        assert field.optional
        assert CompilerFactory.create("sqlite").build_create_table(
            _metadata_to_schema(metadata).models[0]
        ).count("data TEXT") == 1

    def test_string_column_maps_to_string(self):
        metadata = MetaData()
        Table(
            "notes",
            metadata,
            Column("id", Integer, primary_key=True),
            Column("body", String(40), nullable=False, unique=True),
        )
        body = _metadata_to_schema(metadata).models[0].get_field("body")
        assert body.type == "String"
        assert body.unique
        assert not body.optional
