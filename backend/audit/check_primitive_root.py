"""Confirms by brute force that every primitive root found for a small prime generates the whole group."""

import sys

from audit.check_density_oracle import sieve
from pubcrypt.crypto.primes import primitive_root


def multiplicative_order(g: int, p: int) -> int:
    x = g % p
    k = 1
    while x != 1:
        x = (x * g) % p
        k += 1
    return k


def check(limit: int = 2000) -> dict:
    flags = sieve(limit)
    primes = [p for p in range(3, limit + 1) if flags[p]]

    violations = []
    for p in primes:
        g = primitive_root(p)
        order = multiplicative_order(g, p)
        if order != p - 1:
            violations.append(f"{g} has order {order} mod {p}, expected {p - 1}")

    return {
        "check": "primitive_root_order",
        "primes_checked": len(primes),
        "violations": violations,
        "passed": len(violations) == 0,
    }


if __name__ == "__main__":
    result = check()
    status = "✅ PASS" if result["passed"] else "❌ FAIL"
    print(f"{status} – Primitive roots: {result['primes_checked']} prime(s), {len(result['violations'])} violation(s)")
    for v in result["violations"]:
        print(f"  ⚠️  {v}")
    sys.exit(0 if result["passed"] else 1)
