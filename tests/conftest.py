"""Shared pytest fixtures for cometql unit and integration tests."""
from __future__ import annotations

import sqlite3
from collections.abc import Iterator

import pytest

from cometql.compile.mysql import MySQLCompiler
from cometql.compile.postgres import PostgresCompiler
from cometql.compile.sqlite import SQLiteCompiler
from cometql.schema.models import ModelSchema, Schema
from tests.fixtures import load_schema


@pytest.fixture(scope="session")
def blog_schema() -> Schema:
    """Canonical blog schema shared across all tests."""
    return load_schema("blog")


@pytest.fixture(scope="session")
def user_model(blog_schema: Schema) -> ModelSchema:
    model = blog_schema.get_model("User")
    assert model is not None
    return model


@pytest.fixture(scope="session")
def pg() -> PostgresCompiler:
    return PostgresCompiler()


@pytest.fixture(scope="session")
def my() -> MySQLCompiler:
    return MySQLCompiler()


@pytest.fixture(scope="session")
def sq() -> SQLiteCompiler:
    return SQLiteCompiler()


@pytest.fixture()
def memory_db() -> Iterator[sqlite3.Connection]:
    conn = sqlite3.connect(":memory:")
    yield conn
    conn.close()
