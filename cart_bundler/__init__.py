"""cart-bundler.

A small build utility that bundles a compiled cartridge into a single,
self-contained HTML page and/or native executables built on a pre-compiled
runtime player.
"""

__all__: list[str] = ["TOOL_NAME", "__version__"]

TOOL_NAME: str = "WASM-4"

__version__: str = "2.7.1"
