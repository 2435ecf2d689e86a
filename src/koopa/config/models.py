"""Pydantic models for on-disk koopa configuration.

``.koopa/shells.toml`` is a single flat table of string keys to string
values.  Anything else (nested tables, arrays, numbers) is rejected.
"""

from __future__ import annotations

from pydantic import RootModel, StrictStr, field_validator

from koopa.domain.errors import ShellKeyError
from koopa.domain.keys import validate_key
from koopa.domain.shells import ShellMap


class ShellsFile(RootModel[dict[str, StrictStr]]):
    """Contents of a ``shells.toml`` file."""

    model_config = {"frozen": True}

    @field_validator("root")
    @classmethod
    def _keys_are_valid(cls, value: dict[str, str]) -> dict[str, str]:
        for name in value:
            try:
                validate_key(name)
            except ShellKeyError as exc:
                raise ValueError(exc.message) from exc
        return value

    def to_shells(self) -> ShellMap:
        """Convert to a map with every key promoted to a koopa key."""
        return ShellMap.from_mapping(self.root)
