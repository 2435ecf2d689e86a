"""Config cascade — ordered snapshots merged into one effective view.

Precedence (lowest to highest):
  1. Home directory ``~/.koopa``
  2. Working-directory ancestors, filesystem root first, cwd last
  3. Explicit ``-s key=value`` shells from the command line

Shells are merged once at construction.  Source resolution walks the
snapshots in the same order and keeps the last hit, so a nearer folder
overrides a farther one.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from koopa.config.discovery import ConfigSnapshot, candidate_dirs
from koopa.domain.shells import ShellMap
from koopa.infrastructure.filesystem import SourceEntry

logger = logging.getLogger(__name__)


class Cascade:
    """Immutable, ordered list of :class:`ConfigSnapshot` plus explicit shells."""

    def __init__(
        self,
        snapshots: Sequence[ConfigSnapshot],
        explicit: ShellMap | None = None,
    ) -> None:
        self._snapshots = tuple(snapshots)
        self._explicit = explicit.copy() if explicit is not None else ShellMap()

        merged = ShellMap()
        for snapshot in self._snapshots:
            merged.merge(snapshot.get_shells())
        merged.merge(self._explicit)
        self._shells = merged

    @classmethod
    def discover(
        cls,
        *,
        home: Path | None = None,
        work: Path | None = None,
        explicit: ShellMap | None = None,
    ) -> Cascade:
        """Load a snapshot for every candidate directory.

        Pass ``home=None`` or ``work=None`` to leave that part of the
        cascade out.
        """
        snapshots = []
        for directory in candidate_dirs(home=home, work=work):
            snapshot = ConfigSnapshot.load(directory)
            if len(snapshot.shells) or snapshot.ignore is not None:
                logger.debug(
                    "Loaded config %s (%d shells)", snapshot.root, len(snapshot.shells)
                )
            snapshots.append(snapshot)
        return cls(snapshots, explicit)

    @property
    def snapshots(self) -> tuple[ConfigSnapshot, ...]:
        return self._snapshots

    def shells(self) -> ShellMap:
        """The effective shells.  Returns a copy callers may extend."""
        return self._shells.copy()

    def resolve_source(self, path: Path) -> Path:
        """Resolve *path* against every snapshot; the last hit wins.

        Returns *path* unchanged when no snapshot contains it.
        """
        resolved = path
        for snapshot in self._snapshots:
            hit = snapshot.resolve_source(path)
            if hit is not None:
                resolved = hit
        return resolved

    def sources(self) -> list[SourceEntry]:
        """Every visible template source, nearer folders shadowing farther ones."""
        found: dict[Path, SourceEntry] = {}
        for snapshot in self._snapshots:
            for entry in snapshot.sources():
                found[entry.relative] = entry
        return sorted(found.values())
