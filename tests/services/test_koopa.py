"""Tests for KoopaService copy and list operations."""

from pathlib import Path

from koopa.config.cascade import Cascade
from koopa.config.discovery import CONFIG_DIR, CONFIG_FILE, ConfigSnapshot
from koopa.config.settings import KoopaSettings
from koopa.domain.keys import NAME_KEY
from koopa.domain.shells import ShellMap
from koopa.services.koopa import KoopaService
from tests.conftest import shells, write


def _service(
    work: Path,
    *,
    explicit: ShellMap | None = None,
    force: bool = False,
) -> KoopaService:
    cascade = Cascade([ConfigSnapshot.load(work)], explicit=explicit)
    settings = KoopaSettings(home_dir=work, work_dir=work, force=force)
    return KoopaService(cascade, settings)


class TestEffectiveShells:
    def test_name_from_destination(self, tmp_path: Path) -> None:
        result = _service(tmp_path).effective_shells(Path("out/fifo.vhd"))
        assert result.get(NAME_KEY) == "fifo"

    def test_cascade_overrides_builtin_name(self, tmp_path: Path) -> None:
        result = _service(tmp_path, explicit=shells(name="custom")).effective_shells(
            Path("fifo.vhd")
        )
        assert result.get(NAME_KEY) == "custom"


class TestCopy:
    def test_copies_local_file(self, tmp_path: Path) -> None:
        write(tmp_path / "in.txt", "module {{ koopa.name }} by {{ koopa.user }}\n")
        service = _service(tmp_path, explicit=shells(user="vader"))

        result = service.copy(Path("in.txt"), Path("fifo.vhd"))

        assert result.ok
        assert result.op == "copy"
        assert (tmp_path / "fifo.vhd").read_text() == "module fifo by vader\n"
        assert result.data["bytes"] == len("module fifo by vader\n")
        assert result.data["files"] == 1
        assert result.data["dest"] == str(tmp_path / "fifo.vhd")

    def test_resolves_source_from_config_folder(self, tmp_path: Path) -> None:
        write(tmp_path / CONFIG_DIR / CONFIG_FILE, 'project = "demo"\n')
        write(tmp_path / CONFIG_DIR / "basic.py", "# {{ koopa.project }}\n")

        result = _service(tmp_path).copy(Path("basic.py"), Path("app.py"))

        assert result.ok
        assert result.data["src"] == str(tmp_path / CONFIG_DIR / "basic.py")
        assert (tmp_path / "app.py").read_text() == "# demo\n"

    def test_copies_directory(self, tmp_path: Path) -> None:
        write(tmp_path / CONFIG_DIR / "prj" / "main.cpp", "// {{ koopa.name }}\n")
        write(tmp_path / CONFIG_DIR / "prj" / "include" / "util.hpp", "// {{ koopa.name }}\n")

        result = _service(tmp_path).copy(Path("prj"), Path("demo"))

        assert result.ok
        assert result.data["files"] == 2
        assert (tmp_path / "demo" / "main.cpp").read_text() == "// main\n"
        assert (tmp_path / "demo" / "include" / "util.hpp").read_text() == "// util\n"

    def test_destination_exists(self, tmp_path: Path) -> None:
        write(tmp_path / "in.txt", "new")
        write(tmp_path / "out.txt", "old")

        result = _service(tmp_path).copy(Path("in.txt"), Path("out.txt"))

        assert not result.ok
        assert result.error is not None
        assert result.error.code == "DESTINATION_EXISTS"
        assert (tmp_path / "out.txt").read_text() == "old"

    def test_unknown_key_fails(self, tmp_path: Path) -> None:
        write(tmp_path / "in.txt", "\n  {{ koopa.missing }}")

        result = _service(tmp_path).copy(Path("in.txt"), Path("out.txt"))

        assert not result.ok
        assert result.error is not None
        assert result.error.code == "TRANSLATION_FAILED"
        assert result.error.detail["key"] == "koopa.missing"
        assert (result.error.detail["line"], result.error.detail["column"]) == (2, 3)
        assert not (tmp_path / "out.txt").exists()

    def test_force_reports_skipped_keys(self, tmp_path: Path) -> None:
        write(tmp_path / "in.txt", "{{ koopa.missing }}")

        result = _service(tmp_path, force=True).copy(Path("in.txt"), Path("out.txt"))

        assert result.ok
        assert len(result.warnings) == 1
        assert "koopa.missing" in result.warnings[0]

    def test_missing_source(self, tmp_path: Path) -> None:
        result = _service(tmp_path).copy(Path("nope.txt"), Path("out.txt"))
        assert not result.ok
        assert result.error is not None
        assert result.error.code == "FILE_READ"

    def test_directory_rollback(self, tmp_path: Path) -> None:
        write(tmp_path / "tmpl" / "a.txt", "ok")
        write(tmp_path / "tmpl" / "b.txt", "{{ koopa.missing }}")

        result = _service(tmp_path).copy(Path("tmpl"), Path("out"))

        assert not result.ok
        assert not (tmp_path / "out").exists()


class TestListSources:
    def test_lists_files_and_shells(self, tmp_path: Path) -> None:
        write(tmp_path / CONFIG_DIR / CONFIG_FILE, 'user = "vader"\n')
        write(tmp_path / CONFIG_DIR / "basic.py", "")
        write(tmp_path / CONFIG_DIR / "prj" / "main.cpp", "")

        result = _service(tmp_path, explicit=shells(extra="1")).list_sources()

        assert result.ok
        assert result.op == "list"
        assert [f["path"] for f in result.data["files"]] == ["basic.py", "prj", "prj/main.cpp"]
        assert result.data["shells"] == [
            {"key": "koopa.extra", "value": "1"},
            {"key": "koopa.user", "value": "vader"},
        ]

    def test_empty(self, tmp_path: Path) -> None:
        result = _service(tmp_path).list_sources()
        assert result.data == {"files": [], "shells": []}

    def test_builtin_name_is_not_listed(self, tmp_path: Path) -> None:
        result = _service(tmp_path).list_sources()
        assert NAME_KEY.name not in [s["key"] for s in result.data["shells"]]
