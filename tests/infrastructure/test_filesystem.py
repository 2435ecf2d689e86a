"""Tests for ignore rules and deterministic source walking."""

from pathlib import Path

import pytest

from koopa.domain.errors import FileReadError
from koopa.infrastructure.filesystem import IgnoreRules, SourceEntry, walk_entries
from tests.conftest import write


def _relatives(entries: list[SourceEntry]) -> list[str]:
    return [entry.relative.as_posix() for entry in entries]


class TestIgnoreRules:
    def test_glob(self) -> None:
        rules = IgnoreRules(["*.bak"])
        assert rules.matches(Path("a.bak"))
        assert rules.matches(Path("deep/down/a.bak"))
        assert not rules.matches(Path("a.txt"))

    def test_directory_only_pattern(self) -> None:
        rules = IgnoreRules(["build/"])
        assert rules.matches(Path("build"), is_dir=True)
        assert not rules.matches(Path("build"))

    def test_negation(self) -> None:
        rules = IgnoreRules(["*.log", "!keep.log"])
        assert rules.matches(Path("debug.log"))
        assert not rules.matches(Path("keep.log"))

    def test_comments_and_blank_lines(self) -> None:
        rules = IgnoreRules(["# comment", "", "*.tmp"])
        assert rules.matches(Path("x.tmp"))
        assert not rules.matches(Path("comment"))

    def test_from_file(self, tmp_path: Path) -> None:
        path = write(tmp_path / ".koopaignore", "*.bak\n")
        rules = IgnoreRules.from_file(path)
        assert rules.matches(Path("x.bak"))

    def test_from_file_unreadable(self, tmp_path: Path) -> None:
        with pytest.raises(FileReadError):
            IgnoreRules.from_file(tmp_path / "missing")


class TestWalkEntries:
    def test_missing_root(self, tmp_path: Path) -> None:
        assert walk_entries(tmp_path / "nope") == []

    def test_sorted_and_lists_directories(self, tmp_path: Path) -> None:
        write(tmp_path / "b.txt", "")
        write(tmp_path / "a" / "z.txt", "")
        write(tmp_path / "a" / "y" / "x.txt", "")
        assert _relatives(walk_entries(tmp_path)) == ["a", "a/y", "a/y/x.txt", "a/z.txt", "b.txt"]

    def test_absolute_paths(self, tmp_path: Path) -> None:
        write(tmp_path / "a.txt", "")
        [entry] = walk_entries(tmp_path)
        assert entry.absolute == tmp_path / "a.txt"

    def test_hidden_skipped_by_default(self, tmp_path: Path) -> None:
        write(tmp_path / ".hidden", "")
        write(tmp_path / ".git" / "config", "")
        write(tmp_path / "shown.txt", "")
        assert _relatives(walk_entries(tmp_path)) == ["shown.txt"]

    def test_hidden_included_on_request(self, tmp_path: Path) -> None:
        write(tmp_path / ".hidden", "")
        write(tmp_path / "shown.txt", "")
        assert _relatives(walk_entries(tmp_path, skip_hidden=False)) == [".hidden", "shown.txt"]

    def test_shells_file_never_listed(self, tmp_path: Path) -> None:
        write(tmp_path / "shells.toml", "")
        write(tmp_path / "sub" / "shells.toml", "")
        write(tmp_path / "sub" / "kept.txt", "")
        assert _relatives(walk_entries(tmp_path, skip_hidden=False)) == ["sub", "sub/kept.txt"]

    def test_ignore_patterns(self, tmp_path: Path) -> None:
        write(tmp_path / "keep.py", "")
        write(tmp_path / "drop.bak", "")
        write(tmp_path / "build" / "out.o", "")
        rules = IgnoreRules(["*.bak", "build/"])
        assert _relatives(walk_entries(tmp_path, ignore=rules)) == ["keep.py"]
