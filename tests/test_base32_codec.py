import base64

import pytest

from base32_codec import ALPHABET, decode, decode_blocks, encode
from errors import DecodeFailure

RFC4648_VECTORS = [
    (b"", ""),
    (b"f", "MY======"),
    (b"fo", "MZXQ===="),
    (b"foo", "MZXW6==="),
    (b"foob", "MZXW6YQ="),
    (b"fooba", "MZXW6YTB"),
    (b"foobar", "MZXW6YTBOI======"),
]


@pytest.mark.parametrize("raw,text", RFC4648_VECTORS)
def test_encode_matches_rfc4648(raw, text):
    assert encode(raw) == text


@pytest.mark.parametrize("raw,text", RFC4648_VECTORS)
def test_decode_matches_rfc4648(raw, text):
    assert decode(text) == raw


def test_alphabet_has_32_distinct_symbols():
    assert len(set(ALPHABET)) == 32
    assert ALPHABET == "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"


def test_round_trip_of_every_byte_value():
    raw = bytes(range(256))
    assert decode(encode(raw)) == raw


def test_decode_valid_secret():
    assert decode("JBSWY3DPEHPK3PXP") == b"Hello!\xde\xad\xbe\xef"


def test_decode_with_single_padding_character():
    decoded = decode("JBSWY3DPEHPK3PXP=")
    assert len(decoded) == 10


def test_decode_empty_secret():
    assert decode("") == b""
    assert decode_blocks("") == b""


def test_decode_drops_partial_byte():
    # 6 chars = 30 bits -> 3 whole bytes
    assert decode("SECRET") == bytes.fromhex("910512")


def test_decode_blocks_zero_fills_short_block():
    assert decode_blocks("SECRET") == bytes.fromhex("9105124c00")


def test_decode_blocks_of_canonical_text_only_adds_zero_bytes():
    assert decode_blocks("MZXW6===") == b"foo\x00\x00"
    assert decode_blocks("MZXW6YTB") == b"fooba"


@pytest.mark.parametrize(
    "text",
    [
        "JBSWY3DPEHPK3PXP==",  # 2 padding chars is never valid
        "JBSWY3DPEHPK3PXP=====",  # 5
        "MZ=XW6YQ",  # padding not trailing
        "MZXW6=Q=",
        "INVALIDBASE32?!",
        "jbswy3dpehpk3pxp",  # lower case is not folded
        "MZXW1YTB",  # '1' is not in the alphabet
    ],
)
def test_malformed_input_is_rejected(text):
    with pytest.raises(DecodeFailure):
        decode(text)
    with pytest.raises(DecodeFailure):
        decode_blocks(text)


def test_decode_failure_is_a_value_error():
    with pytest.raises(ValueError):
        decode("?")


@pytest.mark.parametrize("raw", [b"\x00", b"Hello!\xde\xad\xbe\xef", bytes(range(7)), b"\xff" * 13])
def test_encode_matches_base64_module(raw):
    assert encode(raw) == base64.b32encode(raw).decode("ascii")
