"""Key/value bindings and the override-on-merge map."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from koopa.domain.errors import ShellParseMissingEq
from koopa.domain.keys import Key, Value


@dataclass(frozen=True)
class Shell:
    """One binding of a key to its value."""

    key: Key
    value: Value

    @classmethod
    def parse(cls, raw: str) -> Shell:
        """Parse ``key=value`` as given on the command line.

        Splits on the first ``=``; the key is validated and promoted to a
        recognized key, the value is kept verbatim.

        Examples:
            >>> Shell.parse("project=demo").key.name
            'koopa.project'
            >>> Shell.parse("eq=a=b").value
            'a=b'
        """
        name, sep, value = raw.partition("=")
        if not sep:
            raise ShellParseMissingEq(raw)
        return cls(Key.parse(name).into_koopa_key(), value)


class ShellMap:
    """Mapping of :class:`Key` to value where later writes win."""

    def __init__(self, shells: Iterable[Shell] = ()) -> None:
        self._inner: dict[Key, Value] = {}
        for shell in shells:
            self.insert(shell)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Value]) -> ShellMap:
        """Build a map from plain ``{name: value}`` data, recognizing every key."""
        return cls(Shell(Key.parse(name).into_koopa_key(), value) for name, value in data.items())

    def insert(self, shell: Shell) -> Value | None:
        """Insert *shell*, returning the value it replaced (if any)."""
        previous = self._inner.get(shell.key)
        self._inner[shell.key] = shell.value
        return previous

    def get(self, key: Key) -> Value | None:
        return self._inner.get(key)

    def merge(self, other: ShellMap) -> None:
        """Insert every entry of *other*, overwriting existing keys."""
        for key, value in other.items():
            self.insert(Shell(key, value))

    def copy(self) -> ShellMap:
        clone = ShellMap()
        clone._inner = dict(self._inner)
        return clone

    def items(self) -> Iterator[tuple[Key, Value]]:
        return iter(self._inner.items())

    def sorted_items(self) -> list[tuple[Key, Value]]:
        return sorted(self._inner.items())

    def __contains__(self, key: object) -> bool:
        return key in self._inner

    def __len__(self) -> int:
        return len(self._inner)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ShellMap):
            return NotImplemented
        return self._inner == other._inner

    def __repr__(self) -> str:
        body = ", ".join(f"{k.name}={v!r}" for k, v in self.sorted_items())
        return f"ShellMap({body})"
