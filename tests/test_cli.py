"""Tests for the command line interface."""

import pathlib

import pytest

from cart_bundler.cli import _build_parser, _request_from_args, main
from cart_bundler.config import ASSETS_ENV_VAR, resolve_config
from cart_bundler.request import IconFile, IconUrl, Platform


def test_request_from_args() -> None:
    ns = _build_parser().parse_args(
        [
            "bundle",
            "cart.wasm",
            "--html",
            "out/index.html",
            "--linux",
            "out/game",
            "--title",
            "My Game",
            "--description",
            "desc",
            "--icon-url",
            "https://example.com/i.png",
            "--timestamp",
        ]
    )
    request = _request_from_args(ns)

    assert request.html == pathlib.Path("out/index.html")
    assert request.natives == {Platform.LINUX: pathlib.Path("out/game")}
    assert request.options.title == "My Game"
    assert request.options.description == "desc"
    assert request.options.icon == IconUrl(url="https://example.com/i.png")
    assert request.options.timestamp is True


def test_request_from_args_icon_file() -> None:
    ns = _build_parser().parse_args(["bundle", "c.wasm", "--html", "i.html", "--icon-file", "icon.png"])
    assert _request_from_args(ns).options.icon == IconFile(path=pathlib.Path("icon.png"))


def test_icon_options_are_mutually_exclusive() -> None:
    with pytest.raises(SystemExit) as excinfo:
        _build_parser().parse_args(["bundle", "c.wasm", "--icon-file", "a.png", "--icon-url", "http://x"])
    assert excinfo.value.code == 2


def test_main_without_outputs_fails(cart_file: pathlib.Path, assets_dir: pathlib.Path) -> None:
    assert main(["bundle", str(cart_file), "--assets-dir", str(assets_dir), "-q"]) == 1


def test_main_bundles_html(cart_file: pathlib.Path, assets_dir: pathlib.Path, tmp_path: pathlib.Path) -> None:
    html_file = tmp_path / "site" / "index.html"

    code = main(["bundle", str(cart_file), "--html", str(html_file), "--assets-dir", str(assets_dir), "-q"])

    assert code == 0
    assert html_file.exists()


def test_main_reports_missing_cart(assets_dir: pathlib.Path, tmp_path: pathlib.Path) -> None:
    code = main(
        [
            "bundle",
            str(tmp_path / "missing.wasm"),
            "--linux",
            str(tmp_path / "game"),
            "--assets-dir",
            str(assets_dir),
            "-qq",
        ]
    )

    assert code == 1
    assert (tmp_path / "game").exists() is False


def test_resolve_config_prefers_env_var(monkeypatch: pytest.MonkeyPatch, tmp_path: pathlib.Path) -> None:
    monkeypatch.setenv(ASSETS_ENV_VAR, str(tmp_path))
    assert resolve_config().assets_dir == tmp_path
    assert resolve_config(assets_dir=tmp_path / "x").assets_dir == tmp_path / "x"


def test_resolve_config_defaults_to_package_assets(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(ASSETS_ENV_VAR, raising=False)
    config = resolve_config()
    assert (config.template_dir / "html-page.html").is_file()
    assert config.generator_content.startswith("WASM-4 ")


def test_main_rejects_unencodable_title(cart_file: pathlib.Path, assets_dir: pathlib.Path, tmp_path: pathlib.Path) -> None:
    html_file = tmp_path / "index.html"

    code = main(
        [
            "bundle",
            str(cart_file),
            "--html",
            str(html_file),
            "--title",
            "G\udcff",
            "--assets-dir",
            str(assets_dir),
            "-qq",
        ]
    )

    assert code == 1
    assert html_file.exists() is False
