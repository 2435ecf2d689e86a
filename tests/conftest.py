"""Shared pytest fixtures and test helpers for koopa tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from koopa.domain.keys import Key
from koopa.domain.shells import Shell, ShellMap


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Undo handler and level changes made by configure_logging."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    koopa_logger = logging.getLogger("koopa")
    koopa_level = koopa_logger.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    koopa_logger.setLevel(koopa_level)


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def home_dir(tmp_path: Path) -> Path:
    """Stand-in home directory (no ``.koopa`` folder until a test adds one)."""
    home = tmp_path / "home"
    home.mkdir()
    return home


@pytest.fixture
def work_dir(tmp_path: Path) -> Path:
    """Stand-in working directory, two levels below the temp root."""
    work = tmp_path / "workspace" / "project"
    work.mkdir(parents=True)
    return work


@pytest.fixture
def _isolated_env(home_dir: Path, work_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point koopa at the temp home and change CWD into the temp work dir.

    Use via ``@pytest.mark.usefixtures("_isolated_env")`` on command test
    classes so the real home directory never leaks into a test.
    """
    for name in ("FORCE", "VERBOSE", "LIST_MODE", "IGNORE_HOME", "IGNORE_WORK", "WORK_DIR"):
        monkeypatch.delenv(f"KOOPA_{name}", raising=False)
    monkeypatch.setenv("KOOPA_HOME_DIR", str(home_dir))
    monkeypatch.chdir(work_dir)


# ---------------------------------------------------------------------------
# Shared test helpers
# ---------------------------------------------------------------------------


def write(path: Path, text: str) -> Path:
    """Write *text* to *path*, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def shells(**values: str) -> ShellMap:
    """Build a ShellMap of recognized keys: ``shells(foo="x")`` binds ``koopa.foo``."""
    return ShellMap(Shell(Key.koopa(name), value) for name, value in values.items())
