import io

import pytest

from pubcrypt.codec import (
    decode_pairs,
    encode_pairs,
    pairs_from_bytes,
    parse_words,
    read_pairs,
    read_up_to,
)
from pubcrypt.crypto.modexp import NUM_MAX
from pubcrypt.errors import FormatError

PAIRS = [(1, 2), (NUM_MAX, 0), (123456789, 987654321)]


def test_parse_words():
    assert parse_words("  10\t20\n", 2) == [10, 20]
    assert parse_words(f"{NUM_MAX}", 1) == [NUM_MAX]


@pytest.mark.parametrize(
    "text,message",
    [
        ("1 2 3", "too many"),
        ("1", "not enough"),
        ("1 two", "failed to parse"),
        ("1 +2", "failed to parse"),
        ("1 ²", "failed to parse"),
        (f"1 {NUM_MAX + 1}", "does not fit"),
    ],
)
def test_parse_words_errors(text, message):
    with pytest.raises(FormatError, match=message):
        parse_words(text, 2)


def test_binary_layout():
    data = encode_pairs([(1, 2)], "binary")
    assert data == (1).to_bytes(8, "big") + (2).to_bytes(8, "big")
    assert decode_pairs(encode_pairs(PAIRS, "binary"), "binary") == PAIRS


def test_binary_rejects_partial_pair():
    with pytest.raises(FormatError):
        list(pairs_from_bytes(b"\x00" * 17))


def test_text_layout():
    data = encode_pairs(PAIRS, "text")
    assert data.decode().splitlines()[1] == f"{NUM_MAX} 0"
    assert decode_pairs(data, "text") == PAIRS


def test_text_skips_blank_lines():
    assert decode_pairs(b"\n1 2\n\n   \n3 4\n", "text") == [(1, 2), (3, 4)]


def test_text_error_names_the_line():
    with pytest.raises(FormatError, match="line 2"):
        decode_pairs(b"1 2\n3 4 5\n", "text")


def test_text_rejects_non_ascii():
    with pytest.raises(FormatError):
        decode_pairs("1 2\n3 é\n".encode("utf-8"), "text")


def test_unknown_encoding():
    with pytest.raises(ValueError):
        encode_pairs(PAIRS, "base64")


def test_read_pairs_streams_both_encodings():
    for encoding in ("binary", "text"):
        reader = io.BytesIO(encode_pairs(PAIRS, encoding))
        assert list(read_pairs(reader, encoding)) == PAIRS


def test_read_up_to_stops_at_end():
    reader = io.BytesIO(b"abcdef")
    assert read_up_to(reader, 4) == b"abcd"
    assert read_up_to(reader, 4) == b"ef"
    assert read_up_to(reader, 4) == b""
