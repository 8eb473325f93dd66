"""Bundler configuration.

Everything the composers need that is not part of a request: which tool and
version to name in generated pages, and where the shipped runtime assets live.
"""

from dataclasses import dataclass
import os
import pathlib

from cart_bundler import TOOL_NAME, __version__

ASSETS_ENV_VAR: str = "CART_BUNDLER_ASSETS"

_PACKAGE_ASSETS_DIR: pathlib.Path = pathlib.Path(__file__).resolve().parent / "assets"


@dataclass(frozen=True, slots=True)
class BundlerConfig:
    """Static bundler configuration.

    :ivar tool_name: Tool name written to the ``generator`` meta tag.
    :ivar version: Tool version written to the ``generator`` meta tag.
    :ivar assets_dir: Directory holding ``bundle/``, ``runtime/`` and ``natives/``.
    """

    tool_name: str
    version: str
    assets_dir: pathlib.Path

    @property
    def generator_content(self) -> str:
        return f"{self.tool_name} {self.version}"

    @property
    def template_dir(self) -> pathlib.Path:
        return self.assets_dir / "bundle"

    @property
    def runtime_script_path(self) -> pathlib.Path:
        return self.assets_dir / "runtime" / "wasm4.js"

    @property
    def runtime_style_path(self) -> pathlib.Path:
        return self.assets_dir / "runtime" / "wasm4.css"

    @property
    def natives_dir(self) -> pathlib.Path:
        return self.assets_dir / "natives"


def resolve_config(*, assets_dir: pathlib.Path | None = None) -> BundlerConfig:
    """Resolve the bundler configuration.

    The assets directory is taken from ``assets_dir``, then from the
    ``CART_BUNDLER_ASSETS`` environment variable, then from the assets shipped
    inside the package.

    :param assets_dir: Optional explicit assets directory.
    :returns: Resolved config.
    """

    root: pathlib.Path
    if assets_dir is not None:
        root = assets_dir
    else:
        env_value: str | None = os.environ.get(ASSETS_ENV_VAR)
        if env_value is not None and env_value != "":
            root = pathlib.Path(env_value)
        else:
            root = _PACKAGE_ASSETS_DIR

    return BundlerConfig(tool_name=TOOL_NAME, version=__version__, assets_dir=root)
