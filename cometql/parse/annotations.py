"""Recursive-descent parser for ``@name`` / ``@name(args)`` annotations.

Grammar (whitespace allowed between tokens)::

    annotations := ( annotation | <any other character> )*
    annotation  := "@" IDENT [ "(" [ arg ( "," arg )* ] ")" ]
    arg         := KEY ":" value | value
    value       := STRING | list | call | BARE
    list        := "[" [ IDENT ( "," IDENT )* ] "]"
    call        := IDENT "(" ")"
    KEY         := IDENT starting with a letter or "_"; the ":" must be
                   followed by whitespace, "[" or a quote

Text between annotations is skipped, so ``@id @auto`` and
``foo @unique bar`` both yield their annotations.  Unknown annotation names
are returned like any other; interpretation is left to the caller.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from cometql.errors import SchemaParseError

_BARE_STOP = frozenset(",()[]\"' \t")


@dataclass(frozen=True)
class AnnotationArg:
    """One argument.  ``value`` is a ``str`` or, for ``[...]``, a ``list[str]``.

    ``quoted`` is True when the value was written as a string literal.
    """

    value: str | list[str]
    key: str | None = None
    quoted: bool = False


@dataclass(frozen=True)
class Annotation:
    """A parsed ``@name(args)`` token.  ``column`` is its offset in the line."""

    name: str
    args: list[AnnotationArg] = field(default_factory=list)
    column: int = 0

    def positional(self) -> list[AnnotationArg]:
        return [a for a in self.args if a.key is None]

    def keyword(self, key: str) -> AnnotationArg | None:
        for arg in self.args:
            if arg.key == key:
                return arg
        return None


class AnnotationParser:
    """Parses every annotation in ``text`` starting at offset ``start``.

    Args:
        text: The full (stripped) declaration line.
        start: Offset at which annotation scanning begins.

    Raises:
        SchemaParseError: On an unterminated argument list, string, or list,
            with ``column`` set to the offending offset.
    """

    def __init__(self, text: str, start: int = 0) -> None:
        self._text = text
        self._pos = start

    def parse(self) -> list[Annotation]:
        annotations: list[Annotation] = []
        while self._pos < len(self._text):
            if self._text[self._pos] == "@" and self._is_ident_char(self._peek(1)):
                annotations.append(self._annotation())
            else:
                self._pos += 1
        return annotations

    # ------------------------------------------------------------------
    # Productions
    # ------------------------------------------------------------------

    def _annotation(self) -> Annotation:
        column = self._pos
        self._pos += 1  # "@"
        name = self._ident()
        args: list[AnnotationArg] = []
        if self._peek() == "(":
            args = self._arguments()
        return Annotation(name=name, args=args, column=column)

    def _arguments(self) -> list[AnnotationArg]:
        open_at = self._pos
        self._pos += 1  # "("
        args: list[AnnotationArg] = []
        self._skip_ws()
        if self._peek() == ")":
            self._pos += 1
            return args
        while True:
            self._skip_ws()
            if self._pos >= len(self._text):
                raise self._error("unterminated argument list", open_at)
            args.append(self._arg())
            self._skip_ws()
            ch = self._peek()
            if ch == ",":
                self._pos += 1
                continue
            if ch == ")":
                self._pos += 1
                return args
            if ch == "":
                raise self._error("unterminated argument list", open_at)
            raise self._error(f"unexpected character '{ch}'", self._pos)

    def _arg(self) -> AnnotationArg:
        # key: letter-initial identifier, colon, then a separator
        ch = self._peek()
        if ch.isalpha() or ch == "_":
            save = self._pos
            ident = self._ident()
            self._skip_ws()
            if self._peek() == ":" and self._peek(1) in (" ", "\t", "[", '"', "'"):
                self._pos += 1
                self._skip_ws()
                value, quoted = self._value()
                return AnnotationArg(value=value, key=ident, quoted=quoted)
            self._pos = save
        value, quoted = self._value()
        return AnnotationArg(value=value, quoted=quoted)

    def _value(self) -> tuple[str | list[str], bool]:
        ch = self._peek()
        if ch in ('"', "'"):
            return self._string(), True
        if ch == "[":
            return self._list(), False
        return self._bare(), False

    def _string(self) -> str:
        quote = self._text[self._pos]
        open_at = self._pos
        end = self._text.find(quote, self._pos + 1)
        if end == -1:
            raise self._error("unterminated string literal", open_at)
        self._pos = end + 1
        return self._text[open_at + 1:end]

    def _list(self) -> list[str]:
        open_at = self._pos
        close = self._text.find("]", self._pos)
        if close == -1:
            raise self._error("unterminated list", open_at)
        body = self._text[self._pos + 1:close]
        self._pos = close + 1
        return [item.strip() for item in body.split(",") if item.strip()]

    def _bare(self) -> str:
        start = self._pos
        while self._pos < len(self._text) and self._text[self._pos] not in _BARE_STOP:
            self._pos += 1
        word = self._text[start:self._pos]
        if not word:
            raise self._error("expected a value", start)
        # call form: now()
        if self._text.startswith("()", self._pos):
            self._pos += 2
            return word + "()"
        return word

    def _ident(self) -> str:
        start = self._pos
        while self._is_ident_char(self._peek()):
            self._pos += 1
        return self._text[start:self._pos]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _peek(self, ahead: int = 0) -> str:
        i = self._pos + ahead
        return self._text[i] if i < len(self._text) else ""

    def _skip_ws(self) -> None:
        while self._peek() in (" ", "\t"):
            self._pos += 1

    @staticmethod
    def _is_ident_char(ch: str) -> bool:
        return ch != "" and (ch.isalnum() or ch == "_")

    def _error(self, reason: str, column: int) -> SchemaParseError:
        return SchemaParseError(reason, line=self._text, column=column)


def parse_annotations(text: str, start: int = 0) -> list[Annotation]:
    """Convenience wrapper: ``AnnotationParser(text, start).parse()``."""
    return AnnotationParser(text, start).parse()
