"""Shell keys: validation and recognized/passthrough classification.

A key is the identifier written between ``{{`` and ``}}``.  Keys that
start with :data:`KEY_PREFIX` are *recognized*: they are validated strictly
and an unbound recognized key is an error.  Every other key is
*passthrough*: it is never validated and, when unbound, is written back
out unchanged.

INVARIANT: the kind of a key is decided once, when the key is built, and
travels with it as data.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TypeAlias

from koopa.domain.errors import (
    KeyContainsMoreDots,
    KeyContainsNewline,
    KeyContainsOneDot,
    KeyContainsWhitespace,
)

KEY_PREFIX = "koopa."
KEY_SEPARATOR = "."

Value: TypeAlias = str


class KeyKind(StrEnum):
    """Whether koopa owns the key or merely passes it through."""

    RECOGNIZED = "recognized"
    PASSTHROUGH = "passthrough"


def validate_key(raw: str) -> None:
    """Raise a key error if *raw* is not a well-formed key.

    Checks, in order: more than one whitespace-separated token, an embedded
    newline, then the dot rules (one dot after the prefix for recognized
    keys, none at all otherwise).
    """
    if len(raw.split()) > 1:
        raise KeyContainsWhitespace(raw)
    if "\n" in raw:
        raise KeyContainsNewline(raw)
    dots = raw.count(KEY_SEPARATOR)
    if raw.strip().startswith(KEY_PREFIX):
        if dots > 1:
            raise KeyContainsMoreDots(raw)
    elif dots > 0:
        raise KeyContainsOneDot(raw)


@dataclass(frozen=True, order=True)
class Key:
    """A trimmed placeholder identifier.

    Equality, hashing, and ordering use the trimmed name only.
    """

    name: str
    kind: KeyKind = field(compare=False)

    @classmethod
    def from_placeholder(cls, raw: str) -> Key:
        """Classify *raw* without validating it."""
        name = raw.strip()
        kind = KeyKind.RECOGNIZED if name.startswith(KEY_PREFIX) else KeyKind.PASSTHROUGH
        return cls(name, kind)

    @classmethod
    def parse(cls, raw: str) -> Key:
        """Validate *raw* and build a key from it."""
        validate_key(raw)
        return cls.from_placeholder(raw)

    @classmethod
    def koopa(cls, name: str) -> Key:
        """Build the recognized key ``koopa.<name>``."""
        return cls(f"{KEY_PREFIX}{name}", KeyKind.RECOGNIZED)

    @property
    def recognized(self) -> bool:
        return self.kind is KeyKind.RECOGNIZED

    def into_koopa_key(self) -> Key:
        """Return the recognized form of this key (idempotent)."""
        if self.recognized:
            return self
        return Key.koopa(self.name)

    def __str__(self) -> str:
        return self.name


# The built-in shell exposing the destination file name (without extension).
NAME_KEY = Key.koopa("name")
