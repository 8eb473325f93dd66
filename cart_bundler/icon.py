"""Icon resolution for HTML bundles."""

import base64
import mimetypes
import pathlib

from cart_bundler.fsutil import read_bytes
from cart_bundler.request import IconFile, IconSource, IconUrl

# mimetypes does not know .ico on every platform.
_EXTRA_TYPES: dict[str, str] = {
    ".ico": "image/x-icon",
    ".svg": "image/svg+xml",
    ".webp": "image/webp",
}


def guess_icon_mime_type(path: pathlib.Path) -> str:
    """Guess an icon's MIME type from its file extension.

    :param path: Icon file path.
    :returns: MIME type, ``application/octet-stream`` when unknown.
    """

    suffix: str = path.suffix.lower()
    extra: str | None = _EXTRA_TYPES.get(suffix)
    if extra is not None:
        return extra

    guessed: str | None = mimetypes.guess_type(path.name)[0]
    if guessed is None:
        return "application/octet-stream"
    return guessed


def icon_to_base64_data_url(path: pathlib.Path) -> str:
    """Read an icon file into a ``data:`` URL.

    :param path: Icon file path.
    :returns: ``data:<mime>;base64,<payload>``.
    :raises InputReadError: If the icon cannot be read.
    """

    data: bytes = read_bytes(path, what="icon file")
    b64: str = base64.b64encode(data).decode("ascii")
    return f"data:{guess_icon_mime_type(path)};base64,{b64}"


def resolve_icon_url(icon: IconSource | None) -> str | None:
    """Turn an icon source into the URL placed in the page.

    :param icon: Icon source, if any.
    :returns: Data URL for a local file, the URL itself for a remote icon, else ``None``.
    """

    if icon is None:
        return None
    if isinstance(icon, IconFile):
        return icon_to_base64_data_url(icon.path)
    if isinstance(icon, IconUrl):
        return icon.url
    raise TypeError(f"Unsupported icon source: {icon!r}")
