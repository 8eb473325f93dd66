"""HTML page bundles.

The page is a single file: the cartridge travels as Z85 text inside a
``<script type="application/json">`` element, and the runtime player's script
and stylesheet are inlined next to it.
"""

from dataclasses import dataclass
import datetime
import html
import logging
import pathlib

from cart_bundler import z85
from cart_bundler.config import BundlerConfig
from cart_bundler.escape import (
    escape_css_content_to_inline,
    escape_js_content_to_inline,
    stringify_for_json_script,
)
from cart_bundler.fsutil import read_bytes, read_text, write_atomic
from cart_bundler.icon import resolve_icon_url
from cart_bundler.request import Artifact, BundleOptions
from cart_bundler.template import TemplateRenderer

PAGE_TEMPLATE_ID: str = "html-page"

CART_KEY: str = "WASM4_CART"
CART_SIZE_KEY: str = "WASM4_CART_SIZE"


@dataclass(frozen=True, slots=True)
class MetaTag:
    """A ``<meta name=... content=...>`` tag.

    :ivar name: Tag name.
    :ivar content: Tag content.
    """

    name: str
    content: str

    def to_html(self) -> str:
        return f'<meta name="{html.escape(self.name)}" content="{html.escape(self.content)}">'


def utc_timestamp(now: datetime.datetime | None = None) -> str:
    """Format a UTC timestamp like JS ``Date.prototype.toISOString``.

    :param now: Moment to format; defaults to the current time.
    :returns: e.g. ``2024-01-31T12:00:00.000Z``.
    """

    if now is None:
        now = datetime.datetime.now(datetime.timezone.utc)
    now = now.astimezone(datetime.timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def encode_cart_json(cartridge: bytes) -> str:
    """Build the script-safe JSON document that carries the cartridge.

    :param cartridge: Raw cartridge bytes.
    :returns: JSON text with the Z85 payload and the exact byte length.
    """

    return stringify_for_json_script(
        {
            CART_KEY: z85.encode(cartridge),
            CART_SIZE_KEY: len(cartridge),
        }
    )


class HtmlComposer:
    """Composes and writes single-file HTML bundles."""

    def __init__(
        self,
        *,
        config: BundlerConfig,
        renderer: TemplateRenderer,
        logger: logging.Logger | None = None,
    ) -> None:
        if logger is None:
            logger = logging.getLogger("cart_bundler")
        self.config: BundlerConfig = config
        self.renderer: TemplateRenderer = renderer
        self.logger: logging.Logger = logger

    def metadata(self, *, timestamp: bool, now: datetime.datetime | None = None) -> list[MetaTag]:
        """Build the generated-by metadata.

        :param timestamp: Include a ``created`` tag.
        :param now: Override for the creation time.
        :returns: Meta tags in document order.
        """

        tags: list[MetaTag] = [MetaTag(name="generator", content=self.config.generator_content)]
        if timestamp is True:
            tags.append(MetaTag(name="created", content=utc_timestamp(now)))
        return tags

    def compose(
        self,
        *,
        cartridge: bytes,
        runtime_script: str,
        runtime_style: str,
        icon_url: str | None,
        title: str,
        description: str | None,
        timestamp: bool,
        template_id: str = PAGE_TEMPLATE_ID,
        now: datetime.datetime | None = None,
    ) -> str:
        """Render the HTML document.

        :param cartridge: Raw cartridge bytes.
        :param runtime_script: Runtime player JS, unescaped.
        :param runtime_style: Runtime player CSS, unescaped.
        :param icon_url: Icon URL (data or remote), if any.
        :param title: Page title.
        :param description: Optional page description.
        :param timestamp: Embed a ``created`` timestamp.
        :param template_id: Template to render.
        :param now: Override for the creation time.
        :returns: HTML text.
        """

        meta_lines: list[str] = []
        for tag in self.metadata(timestamp=timestamp, now=now):
            meta_lines.append(f"    {tag.to_html()}\n")

        description_meta: str = ""
        if description is not None:
            description_meta = f"    {MetaTag(name='description', content=description).to_html()}\n"

        icon_link: str = ""
        if icon_url is not None:
            icon_link = f'    <link rel="icon" href="{html.escape(icon_url)}">\n'

        return self.renderer.render(
            template_id,
            {
                "TITLE": html.escape(title),
                "DESCRIPTION_META": description_meta,
                "METADATA": "".join(meta_lines),
                "ICON_LINK": icon_link,
                "CART_JSON": encode_cart_json(cartridge),
                "RUNTIME_CSS": escape_css_content_to_inline(runtime_style),
                "RUNTIME_JS": escape_js_content_to_inline(runtime_script),
            },
        )

    def bundle(self, *, cart_file: pathlib.Path, output_file: pathlib.Path, options: BundleOptions) -> Artifact:
        """Read all inputs, compose the page, and write it.

        :param cart_file: Cartridge path.
        :param output_file: Destination HTML path (parent directories are created).
        :param options: Shared request metadata.
        :returns: The written artifact.
        :raises InputReadError: If the cartridge, a runtime asset, the template, or the icon is unreadable.
        :raises OutputWriteError: If the page cannot be written.
        """

        cartridge: bytes = read_bytes(cart_file, what="cartridge")
        runtime_style: str = read_text(self.config.runtime_style_path, what="runtime stylesheet")
        runtime_script: str = read_text(self.config.runtime_script_path, what="runtime script")
        icon_url: str | None = resolve_icon_url(options.icon)

        if self.logger.isEnabledFor(logging.DEBUG) is True:
            self.logger.debug(
                f"cart-bundler: html cart={len(cartridge)} bytes js={len(runtime_script)} chars "
                f"css={len(runtime_style)} chars icon={'yes' if icon_url is not None else 'no'}"
            )

        page: str = self.compose(
            cartridge=cartridge,
            runtime_script=runtime_script,
            runtime_style=runtime_style,
            icon_url=icon_url,
            title=options.title,
            description=options.description,
            timestamp=options.timestamp,
        )
        data: bytes = page.encode("utf-8")
        write_atomic(output_file, data)
        return Artifact(kind="html", path=output_file, size=len(data))
