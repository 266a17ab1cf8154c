"""Custom exception hierarchy for cometql.

All public errors inherit from CometError so callers can catch the base
class for any cometql-specific failure.  Failures raised by an execution
collaborator (database driver, row decoder) are never wrapped in these
types; they propagate unchanged.
"""
from __future__ import annotations


class CometError(Exception):
    """Base exception for all cometql errors."""


class SchemaParseError(CometError):
    """Raised when schema DSL text cannot be parsed.

    Args:
        message: Human-readable reason.
        line_no: 1-based line number of the offending line.
        line: The raw offending line text.
        column: 0-based offset within the stripped line, when known.
    """

    def __init__(
        self,
        message: str,
        line_no: int | None = None,
        line: str | None = None,
        column: int | None = None,
    ) -> None:
        self.reason = message
        self.line_no = line_no
        self.line = line
        self.column = column
        super().__init__(self._format())

    def _format(self) -> str:
        if self.line_no is None:
            return self.reason
        where = f"line {self.line_no}"
        if self.column is not None:
            where += f", column {self.column + 1}"
        return f"{where}: {self.reason} in '{self.line}'"


class CompilationError(CometError):
    """Raised when SQL cannot be produced, e.g. for an unknown dialect.

    Args:
        message: Human-readable description.
        clause: The clause being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class NotInitializedError(CometError):
    """Raised when a terminal query operation runs without an executor."""

    def __init__(self, table: str) -> None:
        super().__init__(
            f"Database not initialized: no executor configured for query on '{table}'."
        )
        self.table = table


class NoRowsError(CometError, LookupError):
    """Raised by ``first()`` / ``last()`` when the query matches zero rows."""

    def __init__(self, table: str, sql: str) -> None:
        super().__init__(f"No rows in result set for '{table}'.")
        self.table = table
        self.sql = sql


class MigrationNotImplementedError(CometError, NotImplementedError):
    """Raised by every ``Driver.migrate`` call; migrations are not implemented."""

    def __init__(self, dialect: str) -> None:
        super().__init__(f"Migrations not implemented yet for '{dialect}'.")
        self.dialect = dialect
