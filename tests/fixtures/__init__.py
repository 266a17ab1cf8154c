"""Test fixtures: sample schema DSL files."""

from __future__ import annotations

from pathlib import Path

from cometql.parse.parser import parse_schema
from cometql.schema.models import Schema

_FIXTURES_DIR = Path(__file__).parent

#: Models declared in blog.cmt, in declaration order.
ALL_MODELS = ["User", "Category", "Post", "Tag", "Profile"]


def load_schema_text(name: str = "blog") -> str:
    """Return the raw DSL text of ``<name>.cmt``."""
    return (_FIXTURES_DIR / f"{name}.cmt").read_text()


def load_schema(name: str = "blog") -> Schema:
    """Parse ``<name>.cmt`` into a :class:`Schema`."""
    return parse_schema(load_schema_text(name))
