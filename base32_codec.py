"""
RFC4648 base32 codec for TOTP secrets.

Only the upper-case alphabet is accepted; no case folding or whitespace
stripping is done on input.
"""
import base64

from errors import DecodeFailure

ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
PADDING_CHAR = "="

# A full 8-char block encodes 5 bytes; 1..4 trailing bytes leave 6, 4, 3 or 1 pads
ALLOWED_PADDING_COUNTS = (6, 4, 3, 1, 0)

_CHAR_VALUES = {char: index for index, char in enumerate(ALPHABET)}


def _strip_padding(text: str) -> str:
    """
    Validate padding and return the text without it.

    Raises:
        DecodeFailure: padding count not allowed, or padding not trailing
    """
    padding_count = text.count(PADDING_CHAR)
    if padding_count not in ALLOWED_PADDING_COUNTS:
        raise DecodeFailure(f"Invalid padding length: {padding_count}")

    if padding_count and not text.endswith(PADDING_CHAR * padding_count):
        raise DecodeFailure("Padding characters must be trailing")

    return text[:-padding_count] if padding_count else text


def _bit_string(chars: str) -> str:
    bits = []
    for char in chars:
        value = _CHAR_VALUES.get(char)
        if value is None:
            raise DecodeFailure(f"Invalid base32 character: {char!r}")
        bits.append(format(value, "05b"))
    return "".join(bits)


def _bits_to_bytes(bits: str) -> bytes:
    # trailing partial byte is dropped
    usable = len(bits) - len(bits) % 8
    return bytes(int(bits[i:i + 8], 2) for i in range(0, usable, 8))


def decode(text: str) -> bytes:
    """
    Decode base32 text to bytes.

    The result has floor(n * 5 / 8) bytes, n being the number of
    non-padding characters.

    Args:
        text: base32 string, optionally padded with '='

    Returns:
        Decoded bytes (empty for empty input)

    Raises:
        DecodeFailure: bad padding or a character outside the alphabet
    """
    if not text:
        return b""

    chars = _strip_padding(text)

    # 1. Turn every 8-char block into its bit string
    bits = "".join(_bit_string(chars[i:i + 8]) for i in range(0, len(chars), 8))

    # 2. Slice the bit string into bytes
    return _bits_to_bytes(bits)


def decode_blocks(text: str) -> bytes:
    """
    Decode base32 text block by block, zero-filling a short final block.

    Every 8-char block yields 5 bytes. This is how existing authenticator
    secrets (including unpadded ones such as "SECRET") have always been
    turned into HMAC keys. For canonically encoded input the result equals
    decode(text) followed by zero bytes only.

    Raises:
        DecodeFailure: same rules as decode()
    """
    if not text:
        return b""

    chars = _strip_padding(text)

    bits = []
    for i in range(0, len(chars), 8):
        block = _bit_string(chars[i:i + 8])
        bits.append(block.ljust(40, "0"))

    return _bits_to_bytes("".join(bits))


def encode(data: bytes) -> str:
    """
    Encode bytes as padded base32 text.

    Args:
        data: raw bytes

    Returns:
        Base32 string, padded with '=' to a multiple of 8 characters
    """
    return base64.b32encode(data).decode("utf-8")
