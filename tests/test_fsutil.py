"""Tests for input reads and atomic output writes."""

import os
import pathlib
import stat

import pytest

from cart_bundler import fsutil
from cart_bundler.errors import InputReadError, OutputWriteError


def _leftovers(directory: pathlib.Path) -> list[str]:
    return sorted(p.name for p in directory.iterdir() if p.name.endswith(".tmp"))


def test_write_atomic_default_mode_follows_umask(tmp_path: pathlib.Path) -> None:
    out = tmp_path / "page.html"

    fsutil.write_atomic(out, b"<html></html>")

    assert out.read_bytes() == b"<html></html>"
    assert stat.S_IMODE(out.stat().st_mode) == 0o666 & ~fsutil._UMASK
    assert _leftovers(tmp_path) == []


def test_write_atomic_explicit_mode(tmp_path: pathlib.Path) -> None:
    out = tmp_path / "nested" / "game"

    fsutil.write_atomic(out, b"\x7fELF", mode=0o770)

    assert stat.S_IMODE(out.stat().st_mode) == 0o770


def test_write_atomic_chmod_failure(tmp_path: pathlib.Path, monkeypatch: pytest.MonkeyPatch) -> None:
    out = tmp_path / "game"

    def _fail_chmod(path: object, mode: int) -> None:
        raise PermissionError(1, "Operation not permitted")

    monkeypatch.setattr(os, "chmod", _fail_chmod)

    with pytest.raises(OutputWriteError) as excinfo:
        fsutil.write_atomic(out, b"data", mode=0o770)

    assert excinfo.value.path == out
    assert "permissions" in str(excinfo.value)
    assert out.exists() is False
    assert _leftovers(tmp_path) == []


def test_write_atomic_directory_target(tmp_path: pathlib.Path) -> None:
    out = tmp_path / "outdir"
    out.mkdir()

    with pytest.raises(OutputWriteError) as excinfo:
        fsutil.write_atomic(out, b"data")

    assert excinfo.value.path == out
    assert out.is_dir()
    assert _leftovers(tmp_path) == []


def test_write_atomic_parent_is_a_file(tmp_path: pathlib.Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_bytes(b"")

    with pytest.raises(OutputWriteError):
        fsutil.write_atomic(blocker / "game.html", b"data")


def test_read_text_rejects_invalid_utf8(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "wasm4.js"
    path.write_bytes(b"\xff\xfe")

    with pytest.raises(InputReadError) as excinfo:
        fsutil.read_text(path, what="runtime script")

    assert excinfo.value.path == path
