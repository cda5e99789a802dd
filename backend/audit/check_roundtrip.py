"""Encrypts and decrypts random streams under a fresh key in every ciphertext encoding."""

import io
import random
import sys

from pubcrypt.codec import ENCODINGS
from pubcrypt.crypto.elgamal import BLOCK_BYTES, KeyPair
from pubcrypt.ecb import decrypt_file, encrypt_file


def check(rounds: int = 20, seed=None) -> dict:
    rng = random.Random(seed)
    keys = KeyPair.generate(rng)

    # empty, exact multiples of the block width, and ragged tails
    lengths = [0, 1, BLOCK_BYTES - 1, BLOCK_BYTES, BLOCK_BYTES * 2, BLOCK_BYTES * 2 + 1]
    lengths += [rng.randint(0, 256) for _ in range(rounds)]

    violations = []
    for encoding in ENCODINGS:
        for length in lengths:
            plaintext = rng.randbytes(length)
            ciphertext = io.BytesIO()
            encrypt_file(io.BytesIO(plaintext), ciphertext, keys.public, rng, encoding)

            ciphertext.seek(0)
            recovered = io.BytesIO()
            decrypt_file(ciphertext, recovered, keys.private, encoding)
            if recovered.getvalue() != plaintext:
                violations.append(f"{encoding}: {length}-byte stream did not survive the round trip")

    return {
        "check": "ecb_roundtrip",
        "streams_checked": len(lengths) * len(ENCODINGS),
        "violations": violations,
        "passed": len(violations) == 0,
    }


if __name__ == "__main__":
    result = check()
    status = "✅ PASS" if result["passed"] else "❌ FAIL"
    print(f"{status} – ECB round trip: {result['streams_checked']} stream(s), {len(result['violations'])} violation(s)")
    for v in result["violations"]:
        print(f"  ⚠️  {v}")
    sys.exit(0 if result["passed"] else 1)
