"""Z85 binary-to-text codec.

Z85 (ZeroMQ RFC 32) maps every 4 input bytes to 5 printable characters. The
alphabet contains no quote, backslash, or control characters, so encoded text
can be placed inside a double-quoted JSON string without further escaping.

Strict Z85 only accepts inputs whose length is a multiple of 4. Here the input
is padded with zero bytes instead, and callers carry the original length next to
the encoded text so the padding can be dropped again when decoding.
"""

import struct

ALPHABET: str = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ.-:+=^!/*?&<>()[]{}@%$#"

_DECODE_MAP: dict[str, int] = {ch: i for i, ch in enumerate(ALPHABET)}

_POW85: tuple[int, ...] = (85**4, 85**3, 85**2, 85, 1)


class Z85DecodeError(ValueError):
    """Raised when text is not valid Z85."""


def padded_size(size: int) -> int:
    """Round ``size`` up to the next multiple of 4.

    :param size: Byte count.
    :returns: Byte count after zero-padding.
    """

    return (size + 3) // 4 * 4


def encode(data: bytes) -> str:
    """Encode bytes as Z85 text, zero-padding to a multiple of 4 bytes.

    :param data: Arbitrary bytes (may be empty).
    :returns: Encoded text, ``5 * padded_size(len(data)) // 4`` characters long.
    """

    pad: int = padded_size(len(data)) - len(data)
    if pad > 0:
        data = bytes(data) + b"\x00" * pad

    words: tuple[int, ...] = struct.unpack(f">{len(data) // 4}I", data)
    chars: list[str] = []
    for value in words:
        for divisor in _POW85:
            chars.append(ALPHABET[value // divisor % 85])
    return "".join(chars)


def decode(text: str, size: int | None = None) -> bytes:
    """Decode Z85 text.

    :param text: Encoded text; its length must be a multiple of 5.
    :param size: Original byte length. When given, trailing padding is dropped.
    :returns: Decoded bytes.
    :raises Z85DecodeError: If the text is malformed or ``size`` does not fit.
    """

    if len(text) % 5 != 0:
        raise Z85DecodeError(f"Z85 text length must be a multiple of 5, got {len(text)}.")

    words: list[int] = []
    for i in range(0, len(text), 5):
        value: int = 0
        for ch in text[i : i + 5]:
            digit: int | None = _DECODE_MAP.get(ch)
            if digit is None:
                raise Z85DecodeError(f"Invalid Z85 character {ch!r} at offset {i}.")
            value = value * 85 + digit
        if value > 0xFFFFFFFF:
            raise Z85DecodeError(f"Z85 group at offset {i} overflows 32 bits.")
        words.append(value)

    out: bytes = struct.pack(f">{len(words)}I", *words)
    if size is None:
        return out

    if size < 0 or padded_size(size) != len(out):
        raise Z85DecodeError(f"Size {size} does not match {len(out)} decoded bytes.")
    return out[0:size]
