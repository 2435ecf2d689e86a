"""Ignore rules and deterministic source walking.

Pure path handling lives here; copying and rollback live in
:mod:`koopa.infrastructure.transfer`.
"""

from __future__ import annotations

from pathlib import Path
from typing import NamedTuple

import pathspec

from koopa.domain.errors import FileReadError, IgnoreParseError

# The shells file never shows up as a source, at any depth.
SHELLS_FILENAME = "shells.toml"


class SourceEntry(NamedTuple):
    """A discovered entry: path relative to the walk root, and absolute path."""

    relative: Path
    absolute: Path


class IgnoreRules:
    """Gitignore-syntax predicate over paths relative to a config root."""

    def __init__(self, lines: list[str]) -> None:
        self._spec = pathspec.GitIgnoreSpec.from_lines(lines)

    @classmethod
    def from_file(cls, path: Path) -> IgnoreRules:
        """Load rules from *path*.

        Raises:
            FileReadError: The file exists but cannot be read.
            IgnoreParseError: A pattern is not valid gitignore syntax.
        """
        try:
            raw = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise FileReadError(path, str(exc)) from exc
        try:
            return cls(raw.splitlines())
        except ValueError as exc:
            raise IgnoreParseError(path, str(exc)) from exc

    def matches(self, relative: Path, *, is_dir: bool = False) -> bool:
        """Whether *relative* is excluded.  Directories are matched with a trailing ``/``."""
        candidate = relative.as_posix()
        if is_dir:
            candidate += "/"
        return self._spec.match_file(candidate)

    def __len__(self) -> int:
        return len(self._spec.patterns)


def walk_entries(
    root: Path,
    *,
    ignore: IgnoreRules | None = None,
    skip_hidden: bool = True,
) -> list[SourceEntry]:
    """List every file and directory below *root*, sorted by relative path.

    Directories are listed themselves, not only their contents.  An entry
    excluded by *ignore* (or hidden, when *skip_hidden*) hides everything
    beneath it.  Returns an empty list when *root* is not a directory.
    """
    entries: list[SourceEntry] = []
    if root.is_dir():
        _visit(root, root, entries, ignore=ignore, skip_hidden=skip_hidden)
    return sorted(entries)


def _visit(
    root: Path,
    directory: Path,
    entries: list[SourceEntry],
    *,
    ignore: IgnoreRules | None,
    skip_hidden: bool,
) -> None:
    for path in directory.iterdir():
        if skip_hidden and path.name.startswith("."):
            continue
        is_dir = path.is_dir()
        if not is_dir and path.name == SHELLS_FILENAME:
            continue
        relative = path.relative_to(root)
        if ignore is not None and ignore.matches(relative, is_dir=is_dir):
            continue
        entries.append(SourceEntry(relative, path))
        if is_dir:
            _visit(root, path, entries, ignore=ignore, skip_hidden=skip_hidden)
