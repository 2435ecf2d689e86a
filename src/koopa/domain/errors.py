"""Error taxonomy for koopa.

Every failure the domain, config, and infrastructure layers raise is a
:class:`KoopaError`.  Each class carries a stable ``code`` and a ``detail``
dict so the service layer can convert it into a ``ServiceError`` without
inspecting the message text.

Categories:
- Configuration: malformed shells file, malformed ignore file, read failure.
- Key: malformed key syntax, unknown or invalid key at substitution time.
- Destination: already exists, missing directories, missing file name.
- Wrappers: translation failure (key error + source file), rollback failure.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, ClassVar


class KoopaError(Exception):
    """Base class for all koopa failures."""

    code: ClassVar[str] = "KOOPA_ERROR"

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail: dict[str, Any] = detail


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------


class FileReadError(KoopaError):
    code = "FILE_READ"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"failed to read file {str(path)!r}: {reason}", path=str(path))
        self.path = path
        self.reason = reason


class TomlParseError(KoopaError):
    code = "TOML_PARSE"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"failed to parse toml file {str(path)!r}: {reason}", path=str(path))
        self.path = path
        self.reason = reason


class IgnoreParseError(KoopaError):
    code = "IGNORE_PARSE"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"failed to parse ignore file {str(path)!r}: {reason}", path=str(path))
        self.path = path
        self.reason = reason


# ---------------------------------------------------------------------------
# Key errors
# ---------------------------------------------------------------------------


class ShellKeyError(KoopaError):
    """Base for every key-related failure."""

    code = "KEY_ERROR"


class ShellParseMissingEq(ShellKeyError):
    code = "SHELL_MISSING_EQ"

    def __init__(self, raw: str) -> None:
        super().__init__(f"missing '=' sign in shell {raw!r}", raw=raw)


class KeyContainsWhitespace(ShellKeyError):
    code = "KEY_WHITESPACE"

    def __init__(self, raw: str) -> None:
        super().__init__(f"key {raw!r} contains whitespace", key=raw)


class KeyContainsNewline(ShellKeyError):
    code = "KEY_NEWLINE"

    def __init__(self, raw: str) -> None:
        super().__init__(f"key {raw!r} contains a newline", key=raw)


class KeyContainsMoreDots(ShellKeyError):
    code = "KEY_MORE_DOTS"

    def __init__(self, raw: str) -> None:
        super().__init__(f"key {raw!r} contains more than one dot", key=raw)


class KeyContainsOneDot(ShellKeyError):
    code = "KEY_ONE_DOT"

    def __init__(self, raw: str) -> None:
        super().__init__(f"key {raw!r} contains a dot but is not a koopa key", key=raw)


class KeyInvalid(ShellKeyError):
    code = "KEY_INVALID"

    def __init__(self, key: str, line: int, column: int, reason: str) -> None:
        super().__init__(
            f"invalid key {key!r} at line {line}, column {column}: {reason}",
            key=key,
            line=line,
            column=column,
        )
        self.key = key
        self.line = line
        self.column = column
        self.reason = reason


class KeyUnknown(ShellKeyError):
    code = "KEY_UNKNOWN"

    def __init__(self, key: str, line: int, column: int) -> None:
        super().__init__(
            f"unknown key {key!r} at line {line}, column {column}",
            key=key,
            line=line,
            column=column,
        )
        self.key = key
        self.line = line
        self.column = column


class TranslationFailed(KoopaError):
    """A key error raised while translating a specific source file."""

    code = "TRANSLATION_FAILED"

    def __init__(self, path: Path, cause: ShellKeyError) -> None:
        super().__init__(
            f"failed to translate {str(path)!r}: {cause.message}",
            path=str(path),
            cause=cause.code,
            **cause.detail,
        )
        self.path = path
        self.cause = cause


# ---------------------------------------------------------------------------
# Destination errors
# ---------------------------------------------------------------------------


class DestinationExists(KoopaError):
    code = "DESTINATION_EXISTS"

    def __init__(self, path: Path) -> None:
        super().__init__(f"destination {str(path)!r} already exists", path=str(path))
        self.path = path


class DestinationMissingDirectories(KoopaError):
    code = "DESTINATION_MISSING_DIRS"

    def __init__(self, path: Path) -> None:
        super().__init__(
            f"destination base path {str(path)!r} does not exist",
            path=str(path),
        )
        self.path = path


class DestinationMissingFileName(KoopaError):
    code = "DESTINATION_MISSING_NAME"

    def __init__(self, path: Path) -> None:
        super().__init__(
            f"destination {str(path)!r} does not end in a file name",
            path=str(path),
        )
        self.path = path


class RollbackFailed(KoopaError):
    """Rolling back a partial directory copy failed after the copy itself failed."""

    code = "ROLLBACK_FAILED"

    def __init__(self, path: Path, original: BaseException, cleanup: OSError) -> None:
        super().__init__(
            f"{original}; additionally failed to remove partial destination "
            f"{str(path)!r}: {cleanup}",
            path=str(path),
            original=str(original),
            cleanup=str(cleanup),
        )
        self.path = path
        self.original = original
        self.cleanup = cleanup
