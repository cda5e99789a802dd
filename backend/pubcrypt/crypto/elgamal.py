from dataclasses import dataclass
from typing import Tuple

from pubcrypt.codec import parse_words
from pubcrypt.crypto.modexp import NUM_BYTES, NUM_MAX, mod_exp
from pubcrypt.crypto.primes import pick_random_with_root
from pubcrypt.errors import DecodeError, FormatError

BLOCK_BYTES = 4
BLOCK_MAX = (1 << (BLOCK_BYTES * 8)) - 1
# keeps every block value a residue mod the prime
PRIME_MIN = BLOCK_MAX + 1
PRIME_MAX = NUM_MAX


@dataclass(frozen=True)
class Key:
    prime: int
    root: int
    value: int

    KEY_BYTES = NUM_BYTES * 3

    def serialize(self) -> bytes:
        """Big-endian (prime, root, value), NUM_BYTES each."""
        return b"".join(v.to_bytes(NUM_BYTES, "big") for v in (self.prime, self.root, self.value))

    @classmethod
    def deserialize(cls, data: bytes) -> "Key":
        if len(data) != cls.KEY_BYTES:
            raise FormatError(f"binary key must be {cls.KEY_BYTES} bytes, got {len(data)}")
        prime, root, value = (
            int.from_bytes(data[i:i + NUM_BYTES], "big") for i in range(0, cls.KEY_BYTES, NUM_BYTES)
        )
        return cls(prime=prime, root=root, value=value)

    def to_text(self) -> str:
        return f"{self.prime} {self.root} {self.value}\n"

    @classmethod
    def from_text(cls, text: str) -> "Key":
        prime, root, value = parse_words(text, 3)
        return cls(prime=prime, root=root, value=value)


@dataclass(frozen=True)
class KeyPair:
    public: Key
    private: Key

    @classmethod
    def generate(cls, rng, min_prime: int = PRIME_MIN, max_prime: int = PRIME_MAX) -> "KeyPair":
        """Generate a matched public/private pair from a fresh prime and primitive root.

        Raises PrimeError if no prime can be found in [min_prime, max_prime].
        """
        if min_prime <= BLOCK_MAX:
            raise ValueError(f"prime must exceed the largest block value {BLOCK_MAX}")

        prime, root = pick_random_with_root(min_prime, max_prime, rng)
        priv_exp = rng.randint(1, prime - 2)
        pub_value = mod_exp(root, priv_exp, prime)

        return cls(
            public=Key(prime=prime, root=root, value=pub_value),
            private=Key(prime=prime, root=root, value=priv_exp),
        )


def encrypt_block_det(block: int, key: Key, r: int) -> Tuple[int, int]:
    """Encrypt `block` under public `key` with the given ephemeral exponent `r`."""
    assert key.prime > BLOCK_MAX
    if not 0 <= block <= BLOCK_MAX:
        raise ValueError(f"block out of range: {block}")
    if not 0 < r < key.prime - 1:
        raise ValueError(f"ephemeral exponent out of range: {r}")

    shared = mod_exp(key.value, r, key.prime)
    c1 = mod_exp(key.root, r, key.prime)
    c2 = (block * shared) % key.prime
    return c1, c2


def encrypt_block(block: int, key: Key, rng) -> Tuple[int, int]:
    return encrypt_block_det(block, key, rng.randint(1, key.prime - 2))


def decrypt_block(c1: int, c2: int, key: Key) -> int:
    """Decrypt the pair (c1, c2) with private `key`.

    c1^(p - x - 1) is the inverse of the shared secret by Fermat's little theorem.
    """
    if not 0 <= key.value < key.prime - 1:
        raise FormatError("private exponent out of range for the key's prime")

    inverse = mod_exp(c1, key.prime - key.value - 1, key.prime)
    block = (inverse * (c2 % key.prime)) % key.prime

    if block > BLOCK_MAX:
        raise DecodeError("ciphertext does not decrypt to a valid block; wrong key or corrupt data")
    return block
