"""Native executable bundles.

A native bundle is the pre-built runtime image with the cartridge appended,
followed by a fixed 136-byte trailer the runtime reads by seeking back from the
end of its own executable::

    offset   size  field
    0        4     magic (u32 LE, 1414676803)
    4        128   title (UTF-8, at most 123 bytes, NUL-padded)
    132      4     cartridge length (u32 LE)
"""

from dataclasses import dataclass
import logging
import pathlib
import struct

from cart_bundler.errors import BundleError
from cart_bundler.fsutil import read_bytes, write_atomic
from cart_bundler.request import Artifact

TRAILER_MAGIC: int = 1414676803
TRAILER_SIZE: int = 136
TITLE_MAX_BYTES: int = 123

# Title field spans offsets 4-131; bytes past TITLE_MAX_BYTES stay NUL.
_TRAILER_STRUCT: struct.Struct = struct.Struct("<I128sI")

EXECUTABLE_MODE: int = 0o770


def truncate_utf8(text: str, max_bytes: int) -> bytes:
    """Encode ``text`` as UTF-8, truncated to ``max_bytes`` without splitting a character.

    :param text: Text to encode.
    :param max_bytes: Byte budget.
    :returns: At most ``max_bytes`` bytes of valid UTF-8.
    """

    data: bytes = text.encode("utf-8")
    if len(data) <= max_bytes:
        return data

    end: int = max_bytes
    # Back off over continuation bytes (0b10xxxxxx) to a lead byte boundary.
    while end > 0 and (data[end] & 0xC0) == 0x80:
        end -= 1
    return data[0:end]


@dataclass(frozen=True, slots=True)
class TrailerRecord:
    """Metadata appended after the cartridge in a native bundle.

    :ivar title: Window title.
    :ivar cart_length: Exact cartridge size in bytes.
    """

    title: str
    cart_length: int

    def pack(self) -> bytes:
        """Serialize the trailer.

        :returns: Exactly :data:`TRAILER_SIZE` bytes.
        :raises BundleError: If the cartridge length does not fit in 32 bits.
        """

        if self.cart_length < 0 or self.cart_length > 0xFFFFFFFF:
            raise BundleError(f"Cartridge of {self.cart_length} bytes is too large for a native bundle.")

        title_bytes: bytes = truncate_utf8(self.title, TITLE_MAX_BYTES)
        return _TRAILER_STRUCT.pack(TRAILER_MAGIC, title_bytes, self.cart_length)


def compose_executable(*, runtime_binary: bytes, cartridge: bytes, title: str) -> bytes:
    """Build a native bundle in memory.

    :param runtime_binary: Pre-built runtime image.
    :param cartridge: Raw cartridge bytes.
    :param title: Window title stored in the trailer.
    :returns: ``runtime_binary + cartridge + trailer``.
    """

    trailer: bytes = TrailerRecord(title=title, cart_length=len(cartridge)).pack()
    return b"".join((runtime_binary, cartridge, trailer))


def bundle_executable(
    *,
    cart_file: pathlib.Path,
    runtime_file: pathlib.Path,
    output_file: pathlib.Path,
    title: str,
    kind: str = "native",
    logger: logging.Logger | None = None,
) -> Artifact:
    """Read the runtime image and cartridge, compose, write, and mark executable.

    :param cart_file: Cartridge path.
    :param runtime_file: Runtime image path.
    :param output_file: Destination path (parent directories are created).
    :param title: Window title stored in the trailer.
    :param kind: Artifact kind reported back (the platform name).
    :param logger: Optional logger for debug output.
    :returns: The written artifact.
    :raises InputReadError: If the runtime image or cartridge is unreadable.
    :raises OutputWriteError: If the file cannot be written or its mode cannot be set.
    """

    if logger is None:
        logger = logging.getLogger("cart_bundler")

    runtime_binary: bytes = read_bytes(runtime_file, what="runtime image")
    cartridge: bytes = read_bytes(cart_file, what="cartridge")

    if logger.isEnabledFor(logging.DEBUG) is True:
        logger.debug(
            f"cart-bundler: {kind} runtime={runtime_file} ({len(runtime_binary)} bytes) "
            f"cart={len(cartridge)} bytes"
        )

    output: bytes = compose_executable(runtime_binary=runtime_binary, cartridge=cartridge, title=title)
    write_atomic(output_file, output, mode=EXECUTABLE_MODE)
    return Artifact(kind=kind, path=output_file, size=len(output))
