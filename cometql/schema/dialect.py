"""The closed set of supported SQL dialects."""
from __future__ import annotations

from typing import Literal, get_args

#: Supported compiler targets.
DialectName = Literal["postgres", "mysql", "sqlite"]

#: All dialect names, in declaration order.
DIALECTS: tuple[str, ...] = get_args(DialectName)
