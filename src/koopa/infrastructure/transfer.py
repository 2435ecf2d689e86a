"""Copy engine — translate-and-write for files, all-or-nothing for trees.

Directory copies are guarded by :class:`RollbackGuard`, a compensation
scope armed before the destination root is created and disarmed only once
every file has been written.  On failure the whole destination tree is
removed before the error propagates.  The delete is best-effort; if it
fails too, both errors surface together as :class:`RollbackFailed`.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from types import TracebackType

from koopa.domain.errors import (
    DestinationExists,
    DestinationMissingDirectories,
    DestinationMissingFileName,
    FileReadError,
    RollbackFailed,
    ShellKeyError,
    TranslationFailed,
)
from koopa.domain.keys import NAME_KEY
from koopa.domain.shells import Shell, ShellMap
from koopa.domain.translate import translate
from koopa.infrastructure.filesystem import walk_entries

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------


def has_permission(dest: Path, force: bool) -> None:
    """Raise :class:`DestinationExists` unless *dest* is free or *force* is set."""
    if not force and dest.exists():
        raise DestinationExists(dest)


def destination_stem(dest: Path) -> str:
    """Return the file name of *dest* up to its first dot.

    Examples:
        >>> destination_stem(Path("out/fifo.vhd"))
        'fifo'
        >>> destination_stem(Path("archive.tar.gz"))
        'archive'
    """
    if not dest.name:
        raise DestinationMissingFileName(dest)
    return dest.name.split(".", 1)[0]


def remove_tree(path: Path) -> None:
    """Delete *path* whether it is a directory tree, a file, or missing."""
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


# ---------------------------------------------------------------------------
# Rollback scope
# ---------------------------------------------------------------------------


class RollbackGuard:
    """Remove *root* on exit unless :meth:`disarm` was called.

    Usage::

        with RollbackGuard(dest) as guard:
            ...  # build the tree
            guard.disarm()
    """

    def __init__(self, root: Path) -> None:
        self.root = root
        self.armed = True

    def disarm(self) -> None:
        self.armed = False

    def __enter__(self) -> RollbackGuard:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is None or not self.armed:
            return
        logger.info("Rolling back partial copy at %s", self.root)
        try:
            remove_tree(self.root)
        except OSError as cleanup:
            raise RollbackFailed(self.root, exc, cleanup) from exc


# ---------------------------------------------------------------------------
# Copy operations
# ---------------------------------------------------------------------------


def copy_file(
    src: Path,
    dest: Path,
    shells: ShellMap,
    *,
    force: bool = False,
    warnings: list[str] | None = None,
) -> int:
    """Translate *src* and write the result to *dest*.

    When the destination directory is missing, *force* creates it and
    retries the write once; otherwise the write fails with
    :class:`DestinationMissingDirectories`.

    Returns the number of bytes written.
    """
    try:
        text = src.read_bytes().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadError(src, str(exc)) from exc

    try:
        translated = translate(text, shells, force=force, warnings=warnings)
    except ShellKeyError as exc:
        raise TranslationFailed(src, exc) from exc

    data = translated.encode("utf-8")
    try:
        dest.write_bytes(data)
    except FileNotFoundError as exc:
        base = dest.parent
        if not force:
            raise DestinationMissingDirectories(base) from exc
        logger.debug("Creating missing directories %s", base)
        base.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(data)

    logger.debug("Copied %s -> %s (%d bytes)", src, dest, len(data))
    return len(data)


def _first_missing(path: Path) -> Path:
    """Return the outermost ancestor of *path* (or *path* itself) that does not exist."""
    root = path
    while root.parent != root and not root.parent.exists():
        root = root.parent
    return root


def copy_dir(
    src: Path,
    dest: Path,
    shells: ShellMap,
    *,
    force: bool = False,
    warnings: list[str] | None = None,
    copied: list[Path] | None = None,
) -> int:
    """Copy every file below *src* into *dest*, all or nothing.

    Hidden files are included.  Before each file is copied, ``koopa.name``
    is bound to that file's destination stem in a working copy of *shells*,
    so a template can refer to its own resulting name.  With *force*, an
    existing *dest* is deleted first.  On failure every directory this
    call created is removed again, including missing parents of *dest*.

    Args:
        copied: Receives the destination path of every file written.

    Returns the total number of bytes written.
    """
    files = [entry for entry in walk_entries(src, skip_hidden=False) if entry.absolute.is_file()]

    has_permission(dest, force)
    if force and dest.exists():
        logger.debug("Removing existing destination %s", dest)
        remove_tree(dest)

    working = shells.copy()
    total = 0
    with RollbackGuard(_first_missing(dest)) as guard:
        dest.mkdir(parents=True, exist_ok=True)
        for entry in files:
            target = dest / entry.relative
            target.parent.mkdir(parents=True, exist_ok=True)
            working.insert(Shell(NAME_KEY, destination_stem(target)))
            total += copy_file(entry.absolute, target, working, force=force, warnings=warnings)
            if copied is not None:
                copied.append(target)
        guard.disarm()

    return total
