"""Compilation context value objects.

``CompilationContext`` carries the static configuration shared by every
clause builder; ``RuntimeContext`` accumulates bound arguments for a single
compilation run.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from cometql.compile.base import SQLCompiler


@dataclass(frozen=True)
class CompilationContext:
    """Immutable context for a single compilation run.

    Attributes:
        compiler: Dialect-specific SQL compiler instance.
    """

    compiler: SQLCompiler


@dataclass
class RuntimeContext:
    """Accumulates positional arguments during one compilation run.

    Positions count bound arguments only, so text spliced into the SQL
    (the ``IN`` group) never advances them.
    """

    args: list[Any] = field(default_factory=list)

    def add_value(self, value: Any) -> int:
        """Store ``value`` and return its 1-based position."""
        self.args.append(value)
        return len(self.args)
