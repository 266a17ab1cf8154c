"""Unit tests for the QueryExecutor façade, using a recording fake executor."""

from __future__ import annotations

from typing import Any

import pytest
from pydantic import BaseModel, ValidationError

from cometql.config import CometConfig
from cometql.errors import NoRowsError, NotInitializedError
from cometql.execute.context import ExecutionContext
from cometql.execute.executors import Executor
from cometql.execute.query_executor import (
    LazyResults,
    QueryExecutor,
    dict_decoder,
    model_decoder,
)


class FakeExecutor:
    """Returns canned rows and records every call."""

    def __init__(self, rows: list[dict[str, Any]] | None = None, scalar: Any = None) -> None:
        self.rows = rows or []
        self.scalar = scalar
        self.calls: list[tuple[str, str, list[Any], Any]] = []

    def fetch_all(self, sql, args, ctx=None):
        self.calls.append(("all", sql, list(args), ctx))
        return self.rows

    def fetch_scalar(self, sql, args, ctx=None):
        self.calls.append(("scalar", sql, list(args), ctx))
        return self.scalar


class FailingExecutor:
    def fetch_all(self, sql, args, ctx=None):
        raise ConnectionError("database is gone")

    def fetch_scalar(self, sql, args, ctx=None):
        raise ConnectionError("database is gone")


class User(BaseModel):
    id: int
    name: str


_ROWS = [{"id": 1, "name": "ann"}, {"id": 2, "name": "bob"}]


def test_fake_satisfies_protocol():
    assert isinstance(FakeExecutor(), Executor)


class TestBuilder:
    def test_chain_accumulates_query(self):
        q = (
            QueryExecutor("users")
            .select("id", "name")
            .where("age", ">", 18)
            .where_not("status", "=", "archived")
            .order_by("name")
            .limit(5)
            .offset(10)
            .include("posts", "profile")
        )
        assert q.query.fields == ["id", "name"]
        assert [w.negated for w in q.query.wheres] == [False, True]
        assert q.query.orders[0].direction == "ASC"
        assert (q.query.limit, q.query.offset) == (5, 10)
        assert q.query.includes == ["posts", "profile"]

    def test_where_not_scenario(self):
        compiled = QueryExecutor("posts").where_not("status", "=", "archived").to_sql()
        assert compiled.sql == "SELECT * FROM posts WHERE status NOT = ?"
        assert compiled.args == ["archived"]

    def test_where_in_stores_placeholder_group(self):
        q = QueryExecutor("users").where_in("id", [1, 2, 3])
        assert q.query.wheres[0].value == "(?,?,?)"
        compiled = q.to_sql()
        assert compiled.sql == "SELECT * FROM users WHERE id IN (?,?,?)"
        assert compiled.args == []

    def test_order_direction_normalised(self):
        q = QueryExecutor("users").order_by("created_at", "desc")
        assert q.query.orders[0].direction == "DESC"

    def test_bad_order_direction_rejected(self):
        with pytest.raises(ValidationError):
            QueryExecutor("users").order_by("id", "sideways")

    def test_to_sql_uses_configured_dialect(self):
        config = CometConfig(dialect="postgres")
        compiled = QueryExecutor("users", config=config).where("age", ">", 18).to_sql()
        assert compiled.sql == "SELECT * FROM users WHERE age > $1"
        assert compiled.dialect == "postgres"


class TestNotInitialized:
    @pytest.mark.parametrize("op", ["all", "first", "last", "count", "exists"])
    def test_terminal_without_executor(self, op):
        with pytest.raises(NotInitializedError, match="users"):
            getattr(QueryExecutor("users"), op)()

    def test_builder_works_without_executor(self):
        assert QueryExecutor("users").where("a", "=", 1).to_sql().args == [1]


class TestAll:
    def test_returns_decoded_rows(self):
        fake = FakeExecutor(_ROWS)
        results = QueryExecutor("users", fake).where("age", ">", 18).all()
        assert isinstance(results, LazyResults)
        assert list(results) == _ROWS
        assert fake.calls == [("all", "SELECT * FROM users WHERE age > ?", [18], None)]

    def test_empty_result_is_empty_sequence(self):
        results = QueryExecutor("users", FakeExecutor()).all()
        assert len(results) == 0
        assert list(results) == []

    def test_ctx_passed_through_unchanged(self):
        fake = FakeExecutor(_ROWS)
        ctx = ExecutionContext.with_timeout(30)
        QueryExecutor("users", fake).all(ctx)
        assert fake.calls[0][3] is ctx

    def test_model_decoder(self):
        results = QueryExecutor("users", FakeExecutor(_ROWS), model_decoder(User)).all()
        assert results[1] == User(id=2, name="bob")


class TestFirstLast:
    def test_first_sets_limit_one(self):
        fake = FakeExecutor(_ROWS[:1])
        row = QueryExecutor("users", fake).where("name", "=", "ann").first()
        assert row == _ROWS[0]
        assert fake.calls[0][1] == "SELECT * FROM users WHERE name = ? LIMIT 1"

    def test_first_on_empty_raises_no_rows(self):
        with pytest.raises(NoRowsError) as exc_info:
            QueryExecutor("users", FakeExecutor()).first()
        assert exc_info.value.table == "users"
        assert exc_info.value.sql.endswith("LIMIT 1")
        assert isinstance(exc_info.value, LookupError)

    def test_last_defaults_to_identity_desc(self):
        fake = FakeExecutor(_ROWS[1:])
        QueryExecutor("users", fake).last()
        assert fake.calls[0][1] == "SELECT * FROM users ORDER BY id DESC LIMIT 1"

    def test_last_uses_configured_identity_field(self):
        fake = FakeExecutor(_ROWS[1:])
        config = CometConfig.builder().identity_field("uuid").build()
        QueryExecutor("users", fake, config=config).last()
        assert "ORDER BY uuid DESC" in fake.calls[0][1]

    def test_last_keeps_explicit_ordering(self):
        fake = FakeExecutor(_ROWS[1:])
        QueryExecutor("users", fake).order_by("name").last()
        assert fake.calls[0][1] == "SELECT * FROM users ORDER BY name ASC LIMIT 1"

    def test_last_on_empty_raises_no_rows(self):
        with pytest.raises(NoRowsError):
            QueryExecutor("users", FakeExecutor()).last()


class TestCount:
    def test_count_ignores_projection_order_and_paging(self):
        fake = FakeExecutor(scalar=7)
        n = (
            QueryExecutor("users", fake)
            .select("id")
            .where("age", ">", 18)
            .order_by("name")
            .limit(3)
            .offset(6)
            .count()
        )
        assert n == 7
        assert fake.calls == [
            ("scalar", "SELECT COUNT(*) FROM users WHERE age > ?", [18], None)
        ]

    def test_count_none_is_zero(self):
        assert QueryExecutor("users", FakeExecutor(scalar=None)).count() == 0

    def test_exists(self):
        assert QueryExecutor("users", FakeExecutor(scalar=1)).exists() is True
        assert QueryExecutor("users", FakeExecutor(scalar=0)).exists() is False


class TestErrorPropagation:
    def test_executor_error_propagates_with_note(self):
        with pytest.raises(ConnectionError) as exc_info:
            QueryExecutor("users", FailingExecutor()).where("a", "=", 1).all()
        notes = getattr(exc_info.value, "__notes__", [])
        assert any("users" in n and "SELECT * FROM users" in n for n in notes)

    def test_count_error_propagates(self):
        with pytest.raises(ConnectionError):
            QueryExecutor("users", FailingExecutor()).count()

    def test_first_decoder_error_propagates(self):
        def decoder(row):
            raise KeyError("email")

        q = QueryExecutor("users", FakeExecutor(_ROWS[:1]), decoder)
        with pytest.raises(KeyError) as exc_info:
            q.first()
        assert any("decoding" in n for n in exc_info.value.__notes__)

    def test_all_decoder_error_carries_same_note(self):
        def decoder(row):
            raise KeyError("email")

        results = QueryExecutor("users", FakeExecutor(_ROWS), decoder).where("id", ">", 0).all()
        with pytest.raises(KeyError) as exc_info:
            results[1]
        assert exc_info.value.__notes__ == [
            "while decoding a row of 'users': SELECT * FROM users WHERE id > ?"
        ]

    def test_model_decoder_validation_error_propagates(self):
        rows = [{"id": "not-a-number", "name": "x"}]
        with pytest.raises(ValidationError):
            QueryExecutor("users", FakeExecutor(rows), model_decoder(User)).all()[0]


class TestLazyResults:
    def test_decodes_once_and_caches(self):
        seen: list[int] = []

        def decoder(row):
            seen.append(row["id"])
            return row["id"] * 10

        results = LazyResults(_ROWS, decoder)
        assert seen == []
        assert results[0] == 10
        assert results[0] == 10
        assert seen == [1]

    def test_negative_index_and_slice(self):
        results = LazyResults(_ROWS, dict_decoder)
        assert results[-1] == _ROWS[1]
        assert results[0:2] == _ROWS

    def test_out_of_range(self):
        with pytest.raises(IndexError):
            LazyResults(_ROWS, dict_decoder)[5]

    def test_decode_error_surfaces_on_access(self):
        def boom(row):
            raise ValueError("bad row")

        results = LazyResults(_ROWS, boom, note="while decoding")
        assert len(results) == 2
        with pytest.raises(ValueError, match="bad row") as exc_info:
            results[0]
        assert exc_info.value.__notes__ == ["while decoding"]
