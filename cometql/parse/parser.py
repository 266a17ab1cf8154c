"""Schema DSL front end: schema text -> :class:`~cometql.schema.models.Schema`.

The DSL is line oriented::

    // comments are skipped
    model User {
      id        Int       @id @auto
      email     String    @unique
      name      String?
      active    Boolean   @default(true)
      createdAt DateTime  @default(now())
      updatedAt DateTime  @updatedAt
      posts     Post[]
    }

    model Post {
      id       Int   @id @auto
      authorId Int
      author   User[] @relation("PostAuthor", fields: [authorId], references: [id])
    }

Block structure and field/relation classification are decided per line;
annotation text is handed to :class:`~cometql.parse.annotations.AnnotationParser`.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from cometql.errors import SchemaParseError
from cometql.parse.annotations import Annotation, AnnotationParser
from cometql.schema.models import (
    NOW,
    DefaultValue,
    FieldSchema,
    ModelSchema,
    Relation,
    Schema,
)
from cometql.schema.naming import table_name_for

logger = logging.getLogger(__name__)

MODEL_KEYWORD = "model"
LIST_MARKER = "[]"
OPTIONAL_MARKER = "?"


@dataclass
class _ModelDraft:
    """Mutable accumulator for the model block currently being parsed."""

    name: str
    fields: list[FieldSchema] = field(default_factory=list)
    relations: list[Relation] = field(default_factory=list)

    def freeze(self) -> ModelSchema:
        return ModelSchema(
            name=self.name,
            table_name=table_name_for(self.name),
            fields=self.fields,
            relations=self.relations,
        )


class SchemaParser:
    """Parses schema DSL text into a frozen :class:`Schema`.

    A parser instance holds no state between calls; ``parse`` may be called
    repeatedly and concurrently.
    """

    def parse(self, text: str) -> Schema:
        """Parse ``text`` and return its IR.

        Raises:
            SchemaParseError: On the first malformed declaration line.  No
                partial IR is returned.
        """
        models: list[ModelSchema] = []
        current: _ModelDraft | None = None

        for line_no, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith("//"):
                continue

            if _is_model_header(line):
                if current is not None:
                    models.append(self._commit(current))
                name, rest = _split_header(line)
                current = _ModelDraft(name=name)
                if rest:
                    current = self._body_line(rest, line_no, current, models)
                continue

            if current is None:
                continue

            current = self._body_line(line, line_no, current, models)

        # An unclosed block at end of input is still committed.
        if current is not None:
            models.append(self._commit(current))

        return Schema(models=models)

    def parse_file(self, path: str | Path) -> Schema:
        """Read ``path`` as UTF-8 and parse it."""
        return self.parse(Path(path).read_text(encoding="utf-8"))

    # ------------------------------------------------------------------
    # Block handling
    # ------------------------------------------------------------------

    def _body_line(
        self,
        line: str,
        line_no: int,
        current: _ModelDraft,
        models: list[ModelSchema],
    ) -> _ModelDraft | None:
        """Handle one line inside a block; returns the still-open draft or None."""
        if line == "}":
            models.append(self._commit(current))
            return None
        closes = line.endswith("}")
        if closes:
            line = line[:-1].rstrip()
        self._declaration(line, line_no, current)
        if closes:
            models.append(self._commit(current))
            return None
        return current

    @staticmethod
    def _commit(draft: _ModelDraft) -> ModelSchema:
        model = draft.freeze()
        logger.debug(
            "parsed model %s -> %s (%d fields, %d relations)",
            model.name,
            model.table_name,
            len(model.fields),
            len(model.relations),
        )
        return model

    # ------------------------------------------------------------------
    # Declarations
    # ------------------------------------------------------------------

    def _declaration(self, line: str, line_no: int, draft: _ModelDraft) -> None:
        parts = line.split()
        if len(parts) < 2:
            raise SchemaParseError(
                "invalid field definition: expected '<name> <Type>'",
                line_no=line_no,
                line=line,
            )
        name, declared_type = parts[0], parts[1]
        annotations = self._annotations(line, line_no, _after_second_token(line))

        if declared_type.endswith(LIST_MARKER):
            draft.relations.append(
                _build_relation(name, declared_type[: -len(LIST_MARKER)], annotations)
            )
        else:
            draft.fields.append(_build_field(name, declared_type, annotations))

    @staticmethod
    def _annotations(line: str, line_no: int, start: int) -> list[Annotation]:
        try:
            return AnnotationParser(line, start).parse()
        except SchemaParseError as exc:
            raise SchemaParseError(
                exc.reason, line_no=line_no, line=line, column=exc.column
            ) from exc


def parse_schema(text: str) -> Schema:
    """Parse schema DSL ``text`` into a :class:`Schema`."""
    return SchemaParser().parse(text)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _is_model_header(line: str) -> bool:
    head, _, _ = line.partition(" ")
    return head == MODEL_KEYWORD and len(line) > len(MODEL_KEYWORD)


def _split_header(line: str) -> tuple[str, str]:
    """``model User { id Int`` -> ``("User", "id Int")``."""
    body = line[len(MODEL_KEYWORD):].strip()
    name, brace, rest = body.partition("{")
    return name.strip(), rest.strip() if brace else ""


def _after_second_token(line: str) -> int:
    """Offset just past the second whitespace-separated token of ``line``."""
    pos = 0
    for _ in range(2):
        while pos < len(line) and line[pos].isspace():
            pos += 1
        while pos < len(line) and not line[pos].isspace():
            pos += 1
    return pos


def _build_field(name: str, declared_type: str, annotations: list[Annotation]) -> FieldSchema:
    optional = declared_type.endswith(OPTIONAL_MARKER)
    values: dict = {
        "name": name,
        "type": declared_type.rstrip(OPTIONAL_MARKER) if optional else declared_type,
        "optional": optional,
    }
    for ann in annotations:
        if ann.name == "id":
            values["primary"] = True
        elif ann.name == "auto":
            values["auto"] = True
        elif ann.name == "unique":
            values["unique"] = True
        elif ann.name == "default":
            values["default"] = _default_value(ann)
        elif ann.name == "updatedAt":
            values["type"] = "DateTime"
            values["default"] = NOW
    return FieldSchema(**values)


def _default_value(ann: Annotation) -> DefaultValue:
    args = ann.positional()
    if not args or isinstance(args[0].value, list):
        return None
    value = args[0].value.strip("\"'")
    if value == "now()":
        return NOW
    if value == "true":
        return True
    if value == "false":
        return False
    return value


def _build_relation(name: str, target: str, annotations: list[Annotation]) -> Relation:
    values: dict = {"name": name, "target": target}
    for ann in annotations:
        if ann.name != "relation":
            continue
        labels = [a for a in ann.positional() if isinstance(a.value, str)]
        if labels:
            values["name"] = labels[0].value
        for key in ("fields", "references"):
            arg = ann.keyword(key)
            if arg is not None:
                values[key] = arg.value if isinstance(arg.value, list) else [arg.value]
    if values.get("fields") and values.get("references"):
        values["kind"] = "belongsTo"
    return Relation(**values)
