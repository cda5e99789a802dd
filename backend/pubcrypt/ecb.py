import io
from typing import Iterable, Iterator, List, Tuple

from pubcrypt.codec import check_encoding, read_pairs, read_up_to, write_pair
from pubcrypt.crypto.elgamal import BLOCK_BYTES, Key, decrypt_block, encrypt_block
from pubcrypt.errors import DecodeError


def pad_block(buf: bytearray, pad_bytes: int, rng) -> None:
    """Fill the last `pad_bytes` of `buf` with random bytes ending in the pad count."""
    if not 1 <= pad_bytes <= len(buf):
        raise ValueError(f"pad count {pad_bytes} does not fit a {len(buf)}-byte block")

    pad_start = len(buf) - pad_bytes
    pad_end = len(buf) - 1
    buf[pad_start:pad_end] = rng.randbytes(pad_end - pad_start)
    buf[pad_end] = pad_bytes


def encrypt_stream(reader, key: Key, rng) -> Iterator[Tuple[int, int]]:
    """Yield one ciphertext pair per block read from the binary stream `reader`.

    The last block always carries the pad: its final byte counts the pad bytes
    (1 to BLOCK_BYTES) and the rest of the pad is random. A stream that ends on
    a block boundary gets one extra, fully padded block.
    """
    while True:
        chunk = read_up_to(reader, BLOCK_BYTES)
        if len(chunk) == BLOCK_BYTES:
            yield encrypt_block(int.from_bytes(chunk, "big"), key, rng)
            continue

        buf = bytearray(BLOCK_BYTES)
        buf[:len(chunk)] = chunk
        pad_block(buf, BLOCK_BYTES - len(chunk), rng)
        yield encrypt_block(int.from_bytes(buf, "big"), key, rng)
        return


def decrypt_pairs(pairs: Iterable[Tuple[int, int]], key: Key) -> Iterator[bytes]:
    """Yield the plaintext of each pair, with the pad stripped from the last one."""
    pending = None
    for c1, c2 in pairs:
        if pending is not None:
            yield pending
        pending = decrypt_block(c1, c2, key).to_bytes(BLOCK_BYTES, "big")

    if pending is None:
        raise DecodeError("ciphertext contains no blocks")

    pad_bytes = pending[-1]
    if not 1 <= pad_bytes <= BLOCK_BYTES:
        raise DecodeError(f"invalid pad count {pad_bytes} in final block")
    yield pending[:BLOCK_BYTES - pad_bytes]


def encrypt_bytes(data: bytes, key: Key, rng) -> List[Tuple[int, int]]:
    return list(encrypt_stream(io.BytesIO(data), key, rng))


def decrypt_bytes(pairs: Iterable[Tuple[int, int]], key: Key) -> bytes:
    return b"".join(decrypt_pairs(pairs, key))


def encrypt_file(reader, writer, key: Key, rng, encoding: str = "binary") -> int:
    """Encrypt `reader` into `writer`; returns the number of blocks written."""
    check_encoding(encoding)
    count = 0
    for c1, c2 in encrypt_stream(reader, key, rng):
        write_pair(writer, c1, c2, encoding)
        count += 1
    return count


def decrypt_file(reader, writer, key: Key, encoding: str = "binary") -> int:
    """Decrypt `reader` into `writer`; returns the number of plaintext bytes written."""
    written = 0
    for chunk in decrypt_pairs(read_pairs(reader, encoding), key):
        writer.write(chunk)
        written += len(chunk)
    return written
