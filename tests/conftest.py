"""Shared fixtures: a throwaway assets directory laid out like the shipped one."""

import os
import pathlib
import shutil
import sys

import pytest

PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from cart_bundler.config import BundlerConfig  # noqa: E402

PACKAGE_TEMPLATE = pathlib.Path(PROJECT_ROOT) / "cart_bundler" / "assets" / "bundle" / "html-page.html"

RUNTIME_JS = 'console.log("runtime"); const closer = "</script>";\n'
RUNTIME_CSS = "body { background: #000; } /* </style> */\n"

# Fake runtime images; only their sizes and bytes matter.
NATIVE_IMAGES = {
    "wasm4-windows.exe": b"MZ" + b"\x90" * 62,
    "wasm4-mac": b"\xcf\xfa\xed\xfe" + b"\x00" * 28,
    "wasm4-linux": b"\x7fELF" + b"\x02\x01\x01" + b"\x00" * 41,
}


@pytest.fixture
def assets_dir(tmp_path: pathlib.Path) -> pathlib.Path:
    root = tmp_path / "assets"
    (root / "bundle").mkdir(parents=True)
    (root / "runtime").mkdir()
    (root / "natives").mkdir()

    shutil.copyfile(PACKAGE_TEMPLATE, root / "bundle" / "html-page.html")
    (root / "runtime" / "wasm4.js").write_text(RUNTIME_JS, encoding="utf-8")
    (root / "runtime" / "wasm4.css").write_text(RUNTIME_CSS, encoding="utf-8")
    for name, data in NATIVE_IMAGES.items():
        (root / "natives" / name).write_bytes(data)
    return root


@pytest.fixture
def config(assets_dir: pathlib.Path) -> BundlerConfig:
    return BundlerConfig(tool_name="WASM-4", version="9.9.9", assets_dir=assets_dir)


@pytest.fixture
def cart_file(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "cart.wasm"
    path.write_bytes(bytes(range(1, 11)))
    return path
