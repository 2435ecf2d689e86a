"""Per-directory config discovery and loading.

Every candidate directory may hold a ``.koopa/`` folder containing:

- ``shells.toml``: flat ``key = "value"`` bindings.
- ``.koopaignore``: gitignore-syntax rules hiding template sources.
- any other files or folders: templates resolvable by relative path.

Candidates are the home directory followed by every ancestor of the
working directory, outermost first, similar to how git walks up to find
``.git/`` but keeping every level instead of the nearest one.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from koopa.config.models import ShellsFile
from koopa.domain.errors import FileReadError, TomlParseError
from koopa.domain.shells import ShellMap
from koopa.infrastructure.filesystem import SHELLS_FILENAME, IgnoreRules, SourceEntry, walk_entries

CONFIG_DIR = ".koopa"
CONFIG_FILE = SHELLS_FILENAME
IGNORE_FILE = ".koopaignore"


def candidate_dirs(*, home: Path | None = None, work: Path | None = None) -> list[Path]:
    """Return config candidates in increasing precedence.

    *home* comes first, then each ancestor of *work* from the filesystem
    root down to *work* itself.  Either may be None to skip it.
    """
    dirs: list[Path] = []
    if home is not None:
        dirs.append(home)
    if work is not None:
        work = work.absolute()
        dirs.extend(reversed([work, *work.parents]))
    return dirs


def load_shells(config_root: Path) -> ShellMap:
    """Load ``shells.toml`` from *config_root*; empty when the file is absent."""
    path = config_root / CONFIG_FILE
    if not path.is_file():
        return ShellMap()

    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileReadError(path, str(exc)) from exc

    try:
        data: dict[str, Any] = tomllib.loads(raw)
    except tomllib.TOMLDecodeError as exc:
        raise TomlParseError(path, str(exc)) from exc

    try:
        return ShellsFile.model_validate(data).to_shells()
    except ValidationError as exc:
        reasons = "; ".join(
            f"{'.'.join(str(part) for part in err['loc']) or 'root'}: {err['msg']}"
            for err in exc.errors()
        )
        raise TomlParseError(path, reasons) from exc


def load_ignore(config_root: Path) -> IgnoreRules | None:
    """Load ``.koopaignore`` from *config_root*; None when the file is absent."""
    path = config_root / IGNORE_FILE
    if not path.is_file():
        return None
    return IgnoreRules.from_file(path)


@dataclass(frozen=True)
class ConfigSnapshot:
    """Bindings and ignore rules of one ``.koopa/`` folder, fixed at load time."""

    root: Path
    shells: ShellMap = field(default_factory=ShellMap, compare=False)
    ignore: IgnoreRules | None = field(default=None, compare=False)

    @classmethod
    def load(cls, directory: Path) -> ConfigSnapshot:
        """Read the ``.koopa/`` folder inside *directory* (which need not exist)."""
        root = directory / CONFIG_DIR
        return cls(root=root, shells=load_shells(root), ignore=load_ignore(root))

    def get_shells(self) -> ShellMap:
        return self.shells.copy()

    def resolve_source(self, path: Path) -> Path | None:
        """Return ``root / path`` if *path* is relative and exists in this folder.

        A path naming the current directory (``.``) never resolves, so it
        cannot select the whole ``.koopa/`` folder.
        """
        if path.is_absolute() or not path.parts:
            return None
        candidate = self.root / path
        if candidate.exists():
            return candidate
        return None

    def sources(self) -> list[SourceEntry]:
        """Visible template sources in this folder (hidden and ignored skipped)."""
        return walk_entries(self.root, ignore=self.ignore, skip_hidden=True)
