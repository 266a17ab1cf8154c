"""Runtime configuration for query execution.

Create a config directly or through the fluent builder::

    from cometql import CometConfig

    config = CometConfig.builder().dialect("postgres").identity_field("uuid").build()

Loading configuration from files or the environment is left to the caller.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from cometql.schema.dialect import DialectName


class CometConfig(BaseModel):
    """Settings shared by drivers and query executors.

    Attributes:
        dialect: Dialect used to compile queries.
        identity_field: Column ``last()`` orders by when no ordering is given.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    dialect: DialectName = "sqlite"
    identity_field: str = "id"

    @classmethod
    def builder(cls) -> CometConfigBuilder:
        """Return a :class:`CometConfigBuilder` starting from the defaults."""
        return CometConfigBuilder()


class CometConfigBuilder:
    """Fluent builder for :class:`CometConfig`.

    Always obtained via :meth:`CometConfig.builder`.
    """

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def dialect(self, name: DialectName) -> CometConfigBuilder:
        self._values["dialect"] = name
        return self

    def identity_field(self, name: str) -> CometConfigBuilder:
        self._values["identity_field"] = name
        return self

    def build(self) -> CometConfig:
        """Validate and return the config.

        Raises:
            pydantic.ValidationError: If a value is invalid (e.g. unknown dialect).
        """
        return CometConfig(**self._values)
