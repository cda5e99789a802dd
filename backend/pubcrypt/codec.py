from typing import Iterable, Iterator, List, Tuple

from pubcrypt.crypto.modexp import NUM_BYTES, NUM_MAX
from pubcrypt.errors import FormatError

ENCODINGS = ("binary", "text")
PAIR_BYTES = NUM_BYTES * 2


def parse_words(s: str, count: int) -> List[int]:
    """Parse exactly `count` whitespace-separated unsigned integers from `s`."""
    words = s.split()
    if len(words) > count:
        raise FormatError(f"too many values encountered while parsing (expected {count})")
    if len(words) < count:
        raise FormatError(f"not enough values to parse (expected {count}, got {len(words)})")

    values = []
    for word in words:
        if not (word.isascii() and word.isdigit()):
            raise FormatError(f"failed to parse data: {word!r}")
        value = int(word)
        if value > NUM_MAX:
            raise FormatError(f"value does not fit in {NUM_BYTES} bytes: {word}")
        values.append(value)
    return values


def check_encoding(encoding: str) -> None:
    if encoding not in ENCODINGS:
        raise ValueError(f"unknown encoding {encoding!r}, expected one of {ENCODINGS}")


# ── Binary ─────────────────────────────────────────
def pair_to_bytes(c1: int, c2: int) -> bytes:
    return c1.to_bytes(NUM_BYTES, "big") + c2.to_bytes(NUM_BYTES, "big")


def pairs_from_bytes(data: bytes) -> Iterator[Tuple[int, int]]:
    if len(data) % PAIR_BYTES:
        raise FormatError(f"binary ciphertext must have a multiple of {PAIR_BYTES} bytes, got {len(data)}")
    for offset in range(0, len(data), PAIR_BYTES):
        c1 = int.from_bytes(data[offset:offset + NUM_BYTES], "big")
        c2 = int.from_bytes(data[offset + NUM_BYTES:offset + PAIR_BYTES], "big")
        yield c1, c2


# ── Text ───────────────────────────────────────────
def pair_to_line(c1: int, c2: int) -> str:
    return f"{c1} {c2}\n"


def pairs_from_lines(lines: Iterable[str]) -> Iterator[Tuple[int, int]]:
    for lineno, line in enumerate(lines, start=1):
        if not line.strip():
            continue
        try:
            c1, c2 = parse_words(line, 2)
        except FormatError as exc:
            raise FormatError(f"line {lineno}: {exc}") from exc
        yield c1, c2


def encode_pairs(pairs: Iterable[Tuple[int, int]], encoding: str = "binary") -> bytes:
    check_encoding(encoding)
    if encoding == "binary":
        return b"".join(pair_to_bytes(c1, c2) for c1, c2 in pairs)
    return "".join(pair_to_line(c1, c2) for c1, c2 in pairs).encode("ascii")


def decode_pairs(data: bytes, encoding: str = "binary") -> List[Tuple[int, int]]:
    check_encoding(encoding)
    if encoding == "binary":
        return list(pairs_from_bytes(data))
    try:
        text = data.decode("ascii")
    except UnicodeDecodeError as exc:
        raise FormatError("text ciphertext must be ASCII") from exc
    return list(pairs_from_lines(text.splitlines()))


# ── Streams ────────────────────────────────────────
def read_up_to(reader, size: int) -> bytes:
    """Read `size` bytes, or fewer only when the stream ends first."""
    chunks = []
    remaining = size
    while remaining:
        chunk = reader.read(remaining)
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def read_pairs(reader, encoding: str = "binary") -> Iterator[Tuple[int, int]]:
    """Lazily read ciphertext pairs from a binary stream."""
    check_encoding(encoding)
    if encoding == "text":
        lines = (_ascii_line(raw) for raw in reader)
        yield from pairs_from_lines(lines)
        return

    while True:
        chunk = read_up_to(reader, PAIR_BYTES)
        if not chunk:
            return
        if len(chunk) < PAIR_BYTES:
            raise FormatError(f"binary ciphertext must have a multiple of {PAIR_BYTES} bytes")
        yield from pairs_from_bytes(chunk)


def write_pair(writer, c1: int, c2: int, encoding: str = "binary") -> None:
    if encoding == "binary":
        writer.write(pair_to_bytes(c1, c2))
    else:
        writer.write(pair_to_line(c1, c2).encode("ascii"))


def _ascii_line(raw: bytes) -> str:
    try:
        return raw.decode("ascii")
    except UnicodeDecodeError as exc:
        raise FormatError("text ciphertext must be ASCII") from exc
