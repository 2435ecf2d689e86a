"""KoopaService — the copy and list operations behind ``kp``.

Copy pipeline: BIND → RESOLVE → CHECK → COPY → RESPOND

- BIND: ``koopa.name`` (destination stem) under the cascade's shells.
- RESOLVE: map a relative source onto the nearest ``.koopa/`` folder holding it.
- CHECK: refuse to overwrite an existing destination unless forced.
- COPY: single file, or an all-or-nothing directory tree.
"""

from __future__ import annotations

import logging
from pathlib import Path

from koopa.domain.errors import KoopaError
from koopa.domain.keys import NAME_KEY
from koopa.domain.shells import Shell, ShellMap
from koopa.infrastructure.transfer import copy_dir, copy_file, destination_stem, has_permission
from koopa.services.base import BaseService
from koopa.services.result import ServiceResult, error_result

logger = logging.getLogger(__name__)


class KoopaService(BaseService):
    """Copies templates and reports what the cascade provides."""

    def effective_shells(self, dest: Path) -> ShellMap:
        """Shells for copying to *dest*: built-in name, then the whole cascade."""
        shells = ShellMap([Shell(NAME_KEY, destination_stem(dest))])
        shells.merge(self._cascade.shells())
        return shells

    def copy(self, src: Path, dest: Path) -> ServiceResult:
        """Copy *src* to *dest*, filling in placeholders along the way."""
        op = "copy"
        force = self._settings.force
        warnings: list[str] = []
        copied: list[Path] = []

        try:
            shells = self.effective_shells(dest)

            resolved = self._cascade.resolve_source(src)
            if resolved != src:
                logger.info("Resolved source path to %s", resolved)
            source = self._settings.resolve_path(resolved)
            target = self._settings.resolve_path(dest)

            has_permission(target, force)

            if source.is_dir():
                written = copy_dir(
                    source, target, shells, force=force, warnings=warnings, copied=copied
                )
            else:
                written = copy_file(source, target, shells, force=force, warnings=warnings)
                copied.append(target)
        except (KoopaError, OSError) as exc:
            logger.debug("Copy %s -> %s failed", src, dest, exc_info=True)
            return error_result(op, exc, warnings=warnings)

        logger.info("Successfully copied %d bytes to %s", written, target)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "src": str(source),
                "dest": str(target),
                "bytes": written,
                "files": len(copied),
            },
            warnings=warnings,
        )

    def list_sources(self) -> ServiceResult:
        """List every visible template source and the effective shells."""
        op = "list"
        try:
            entries = self._cascade.sources()
        except OSError as exc:
            return error_result(op, exc)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "files": [
                    {"path": entry.relative.as_posix(), "source": str(entry.absolute)}
                    for entry in entries
                ],
                "shells": [
                    {"key": key.name, "value": value}
                    for key, value in self._cascade.shells().sorted_items()
                ],
            },
        )
