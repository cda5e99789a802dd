"""Verifies the prime density oracle against a sieve: a guaranteed range must hold a prime."""

import sys

from pubcrypt.crypto.primes import prime_bound

MAX_REPORTED = 20


def sieve(limit: int) -> list[bool]:
    flags = [True] * (limit + 1)
    flags[0] = flags[1] = False
    for i in range(2, int(limit ** 0.5) + 1):
        if flags[i]:
            flags[i * i::i] = [False] * len(range(i * i, limit + 1, i))
    return flags


def check(limit: int = 100_000) -> dict:
    # every bound below `limit` stays under 2 * limit
    size = 2 * limit + 2
    flags = sieve(size)

    next_prime = [0] * (size + 1)
    nxt = size + 1
    for n in range(size, -1, -1):
        if flags[n]:
            nxt = n
        next_prime[n] = nxt

    violations = []
    for low in range(limit):
        bound = prime_bound(low)
        if next_prime[low] > bound:
            violations.append(f"[{low}, {bound}] reported as holding a prime but holds none")
            if len(violations) >= MAX_REPORTED:
                break

    return {
        "check": "density_oracle_soundness",
        "ranges_checked": limit,
        "violations": violations,
        "passed": len(violations) == 0,
    }


if __name__ == "__main__":
    result = check()
    status = "✅ PASS" if result["passed"] else "❌ FAIL"
    print(f"{status} – Density oracle: {result['ranges_checked']} range(s), {len(result['violations'])} violation(s)")
    for v in result["violations"]:
        print(f"  ⚠️  {v}")
    sys.exit(0 if result["passed"] else 1)
