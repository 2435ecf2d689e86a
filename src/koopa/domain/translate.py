"""Translate engine — single-pass placeholder substitution.

The engine walks the text once, character by character, through four
states::

    NORMAL --'{'--> LEFT_BRACE --'{'--> PLACEHOLDER --'}'--> RIGHT_BRACE --'}'--> NORMAL
                        |                    ^                    |
                        +--other--> NORMAL   +-------other--------+

A lone ``{`` is copied through untouched.  A single ``}`` inside a
placeholder is part of the key.  Line numbers and the column of the most
recent opening brace are carried in local counters so errors can point at
the placeholder that caused them.

INVARIANT: text that contains no ``{{`` comes back unchanged.
"""

from __future__ import annotations

import logging
from enum import StrEnum

from koopa.domain.errors import KeyInvalid, KeyUnknown, ShellKeyError
from koopa.domain.keys import Key, validate_key
from koopa.domain.shells import ShellMap

logger = logging.getLogger(__name__)

OPEN = "{{"
CLOSE = "}}"


class ParseState(StrEnum):
    NORMAL = "normal"
    LEFT_BRACE = "left_brace"
    PLACEHOLDER = "placeholder"
    RIGHT_BRACE = "right_brace"


def indent_value(value: str, width: int) -> str:
    """Indent every line after the first of *value* by *width* spaces."""
    if "\n" not in value:
        return value
    return ("\n" + " " * width).join(value.split("\n"))


def translate(
    text: str,
    shells: ShellMap,
    *,
    force: bool = False,
    warnings: list[str] | None = None,
) -> str:
    """Replace every ``{{ key }}`` in *text* with its bound value.

    Args:
        text: The template text.
        shells: The effective bindings.
        force: Reproduce unknown recognized keys literally instead of failing.
        warnings: Receives a message for every placeholder skipped under *force*.

    Raises:
        KeyInvalid: A recognized key is malformed.
        KeyUnknown: A recognized key is unbound and *force* is off.
    """
    out: list[str] = []
    pending: list[str] = []
    state = ParseState.NORMAL

    line = 1
    column = 0
    open_line = open_column = 0

    for ch in text:
        column += 1

        if state is ParseState.NORMAL:
            out.append(ch)
            if ch == "{":
                open_line, open_column = line, column
                state = ParseState.LEFT_BRACE
        elif state is ParseState.LEFT_BRACE:
            if ch == "{":
                out.pop()
                state = ParseState.PLACEHOLDER
            else:
                out.append(ch)
                state = ParseState.NORMAL
        elif state is ParseState.PLACEHOLDER:
            if ch == "}":
                state = ParseState.RIGHT_BRACE
            else:
                pending.append(ch)
        elif ch == "}":
            out.append(
                _substitute(
                    "".join(pending),
                    shells,
                    line=open_line,
                    column=open_column,
                    force=force,
                    warnings=warnings,
                )
            )
            pending.clear()
            state = ParseState.NORMAL
        else:
            pending.append("}")
            pending.append(ch)
            state = ParseState.PLACEHOLDER

        if ch == "\n":
            line += 1
            column = 0

    # Unterminated placeholder at end of input is written back out verbatim.
    if state is ParseState.PLACEHOLDER or state is ParseState.RIGHT_BRACE:
        tail = "}" if state is ParseState.RIGHT_BRACE else ""
        out.append(OPEN + "".join(pending) + tail)
        logger.debug(
            "Unterminated placeholder at line %d, column %d", open_line, open_column
        )

    return "".join(out)


def _substitute(
    raw: str,
    shells: ShellMap,
    *,
    line: int,
    column: int,
    force: bool,
    warnings: list[str] | None,
) -> str:
    """Resolve one closed placeholder whose inner text is *raw*."""
    key = Key.from_placeholder(raw)
    if key.recognized:
        try:
            validate_key(raw)
        except ShellKeyError as exc:
            raise KeyInvalid(key.name, line, column, exc.message) from exc

    value = shells.get(key)
    if value is not None:
        return indent_value(value, column - 1)

    if key.recognized:
        if not force:
            raise KeyUnknown(key.name, line, column)
        msg = f"skipping unknown key {key.name} at line {line}, column {column}"
        logger.info(msg)
        if warnings is not None:
            warnings.append(msg)

    return OPEN + raw + CLOSE
