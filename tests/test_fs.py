"""Tests for the store file helpers."""

import json
import stat
from pathlib import Path
from typing import Any

import pytest

from datestore.errors import StoreAccessError
from datestore.fs import mkdirp, read_json, write_json


class TestMkdirp:
    def test_creates_intermediate_directories(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "c"

        assert mkdirp(target) == target
        assert target.is_dir()

    def test_existing_directory_is_fine(self, tmp_path: Path) -> None:
        mkdirp(tmp_path)
        assert tmp_path.is_dir()

    def test_lost_creation_race_is_success(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        real_mkdir = Path.mkdir

        def racing_mkdir(self: Path, *args: Any, **kwargs: Any) -> None:
            # another process creates the directory first
            real_mkdir(self, *args, **kwargs)
            raise FileExistsError(17, "File exists", str(self))

        monkeypatch.setattr(Path, "mkdir", racing_mkdir)
        target = tmp_path / "x" / "y"

        assert mkdirp(target) == target
        assert target.is_dir()

    def test_file_in_the_way_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")

        with pytest.raises(OSError):
            mkdirp(blocker)
        with pytest.raises(OSError):
            mkdirp(blocker / "child")


class TestReadJson:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert read_json(tmp_path / "missing.json") == {}

    def test_valid_object(self, tmp_path: Path) -> None:
        path = tmp_path / "s.json"
        path.write_text('{"a": "b"}')

        assert read_json(path) == {"a": "b"}

    @pytest.mark.parametrize("content", ["", "{", "null", '"text"', "[]"])
    def test_corrupt_content(self, tmp_path: Path, content: str) -> None:
        path = tmp_path / "s.json"
        path.write_text(content)

        assert read_json(path) == {}

    def test_binary_content(self, tmp_path: Path) -> None:
        path = tmp_path / "s.json"
        path.write_bytes(b"\xff\xfe\x00garbage")

        assert read_json(path) == {}


class TestWriteJson:
    def test_writes_indented_json(self, tmp_path: Path) -> None:
        path = tmp_path / "nested" / "s.json"
        write_json(path, {"a": "b"}, indent=2)

        assert path.read_text() == json.dumps({"a": "b"}, indent=2)

    def test_restricts_permissions(self, tmp_path: Path) -> None:
        path = tmp_path / "s.json"
        path.write_text("{}")
        path.chmod(0o644)

        write_json(path, {}, mode=0o600)

        assert stat.S_IMODE(path.stat().st_mode) == 0o600

    def test_unwritable_parent_raises_access_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "file"
        blocker.write_text("")

        with pytest.raises(StoreAccessError) as exc_info:
            write_json(blocker / "s.json", {})

        assert exc_info.value.operation == "write"
        assert isinstance(exc_info.value.__cause__, OSError)
