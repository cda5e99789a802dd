"""Cross-checks mod_exp against the built-in three-argument pow."""

import random
import sys

from pubcrypt.crypto.modexp import NUM_MAX, mod_exp

EDGE_VALUES = [0, 1, 2, 3, 127, 128, 1 << 32, (1 << 32) - 1, (1 << 32) + 1, NUM_MAX - 1, NUM_MAX]


def check(samples: int = 2000, seed=None) -> dict:
    rng = random.Random(seed)
    violations = []

    cases = [(b, e, m) for b in EDGE_VALUES for e in EDGE_VALUES for m in EDGE_VALUES if m > 0]
    cases += [(rng.randint(0, NUM_MAX), rng.randint(0, NUM_MAX), rng.randint(1, NUM_MAX)) for _ in range(samples)]

    for base, exponent, modulus in cases:
        expected = pow(base, exponent, modulus)
        got = mod_exp(base, exponent, modulus)
        if got != expected:
            violations.append({"base": base, "exponent": exponent, "modulus": modulus, "expected": expected, "got": got})

    return {
        "check": "mod_exp_agreement",
        "cases": len(cases),
        "violations": violations,
        "passed": len(violations) == 0,
    }


if __name__ == "__main__":
    result = check()
    status = "✅ PASS" if result["passed"] else "❌ FAIL"
    print(f"{status} – mod_exp: {result['cases']} case(s), {len(result['violations'])} violation(s)")
    for v in result["violations"]:
        print(f"  ⚠️  {v}")
    sys.exit(0 if result["passed"] else 1)
