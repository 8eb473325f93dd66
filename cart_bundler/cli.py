"""Command line interface for cart-bundler."""

import argparse
import logging
import pathlib
import sys

from cart_bundler import __version__
from cart_bundler.bundler import bundle
from cart_bundler.config import BundlerConfig, resolve_config
from cart_bundler.errors import BundleError
from cart_bundler.request import (
    DEFAULT_TITLE,
    BundleOptions,
    BundleRequest,
    IconFile,
    IconSource,
    IconUrl,
    Platform,
)


def _configure_logging(*, verbose: int, quiet: int) -> logging.Logger:
    """Configure the cart-bundler logger.

    :param verbose: Verbosity count (0+).
    :param quiet: Quietness count (0+).
    :returns: Configured logger.
    """

    level: int = logging.INFO
    if quiet >= 2:
        level = logging.ERROR
    elif quiet >= 1:
        level = logging.WARNING
    elif verbose >= 1:
        level = logging.DEBUG

    logger: logging.Logger = logging.getLogger("cart_bundler")
    logger.setLevel(level)
    logger.propagate = False

    handler: logging.Handler = logging.StreamHandler(stream=sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger.handlers.clear()
    logger.addHandler(handler)
    return logger


def _build_parser() -> argparse.ArgumentParser:
    parser: argparse.ArgumentParser = argparse.ArgumentParser(
        prog="cart-bundler",
        description="Bundle a cartridge into a standalone HTML page and/or native executables.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    p_bundle = subparsers.add_parser(
        "bundle",
        help="Bundle a cartridge for distribution.",
    )
    p_bundle.add_argument(
        "cart",
        type=pathlib.Path,
        help="Path to the compiled cartridge.",
    )
    p_bundle.add_argument(
        "--html",
        type=pathlib.Path,
        default=None,
        help="Output path for a standalone HTML page.",
    )
    for platform in Platform:
        p_bundle.add_argument(
            f"--{platform.value}",
            type=pathlib.Path,
            default=None,
            help=f"Output path for a {platform.value} native executable.",
        )
    p_bundle.add_argument(
        "--title",
        type=str,
        default=DEFAULT_TITLE,
        help=f"Game title (default: {DEFAULT_TITLE!r}).",
    )
    p_bundle.add_argument(
        "--description",
        type=str,
        default=None,
        help="Page description (HTML output only).",
    )
    icon_group = p_bundle.add_mutually_exclusive_group()
    icon_group.add_argument(
        "--icon-file",
        type=pathlib.Path,
        default=None,
        help="Icon file embedded as a data URL (HTML output only).",
    )
    icon_group.add_argument(
        "--icon-url",
        type=str,
        default=None,
        help="Icon URL referenced as-is (HTML output only).",
    )
    p_bundle.add_argument(
        "--timestamp",
        action="store_true",
        help="Embed a creation timestamp in the HTML page.",
    )
    p_bundle.add_argument(
        "--assets-dir",
        type=pathlib.Path,
        default=None,
        help="Directory with bundle/, runtime/ and natives/ assets (overrides $CART_BUNDLER_ASSETS).",
    )
    p_bundle.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=None,
        help="Maximum number of outputs built concurrently (default: all).",
    )
    p_bundle.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Enable verbose logging. Pass multiple times for more detail.",
    )
    p_bundle.add_argument(
        "-q",
        "--quiet",
        action="count",
        default=0,
        help="Reduce logging. Pass multiple times to suppress more output.",
    )
    return parser


def _request_from_args(ns: argparse.Namespace) -> BundleRequest:
    """Build a bundle request from parsed arguments.

    :param ns: Parsed ``bundle`` arguments.
    :returns: Bundle request.
    """

    icon: IconSource | None = None
    if ns.icon_file is not None:
        icon = IconFile(path=ns.icon_file)
    elif ns.icon_url is not None:
        icon = IconUrl(url=ns.icon_url)

    natives: dict[Platform, pathlib.Path] = {}
    for platform in Platform:
        output: pathlib.Path | None = getattr(ns, platform.value)
        if output is not None:
            natives[platform] = output

    return BundleRequest(
        html=ns.html,
        natives=natives,
        options=BundleOptions(
            title=ns.title,
            description=ns.description,
            icon=icon,
            timestamp=ns.timestamp,
        ),
    )


def main(argv: list[str] | None = None) -> int:
    """Run the cart-bundler CLI.

    :param argv: Optional argv list (excluding program name).
    :returns: Exit code.
    """

    parser: argparse.ArgumentParser = _build_parser()
    ns = parser.parse_args(argv)
    if ns.command == "bundle":
        logger: logging.Logger = _configure_logging(verbose=ns.verbose, quiet=ns.quiet)
        config: BundlerConfig = resolve_config(assets_dir=ns.assets_dir)
        request: BundleRequest = _request_from_args(ns)

        try:
            bundle(
                cart_file=ns.cart,
                request=request,
                config=config,
                logger=logger,
                jobs=ns.jobs,
            )
        except BundleError as exc:
            logger.error(f"cart-bundler: {exc}")
            return 1
        return 0

    raise AssertionError(f"Unhandled command: {ns.command}")
