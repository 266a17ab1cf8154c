"""Cancellation / deadline carrier passed to every terminal query operation.

The query layer never inspects it; it is handed unchanged to the executor,
which decides how to honour it.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field


@dataclass
class ExecutionContext:
    """Deadline and cancellation state for one logical operation.

    Attributes:
        deadline: ``time.monotonic()`` value after which work must stop,
            or ``None`` for no deadline.
    """

    deadline: float | None = None
    _cancelled: bool = field(default=False, repr=False)

    @classmethod
    def with_timeout(cls, seconds: float) -> ExecutionContext:
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        """True once cancelled or past the deadline."""
        if self._cancelled:
            return True
        return self.deadline is not None and time.monotonic() >= self.deadline

    def timeout_error(self) -> TimeoutError:
        """The ``TimeoutError`` describing why this context is done."""
        if self._cancelled:
            return TimeoutError("operation cancelled")
        return TimeoutError("deadline exceeded")

    def check(self) -> None:
        """Raise ``TimeoutError`` if the context is done."""
        if self.done:
            raise self.timeout_error()
