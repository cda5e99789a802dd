import math
import os
import secrets
from typing import Tuple

from pubcrypt.crypto.modexp import NUM_MAX, check_num, mod_exp
from pubcrypt.errors import InvalidRangeError, PrimeNotFoundError


def _parse_witness_count(raw: str) -> int:
    count = int(raw)
    if count < 1:
        raise ValueError(f"PUBCRYPT_WITNESS_COUNT must be at least 1, got {count}")
    return count


# ── Configuration ──────────────────────────────────
# 25 witnesses bound the false-positive rate by 4^-25
WITNESS_COUNT = _parse_witness_count(os.getenv("PUBCRYPT_WITNESS_COUNT", "25"))
# attempts per candidate in ranges without a density guarantee
ATTEMPTS_PER_CANDIDATE = 10

SMALL_PRIMES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71, 73, 79, 83, 89, 97)

# lower limits of the prime gap theorems used by the density oracle
NAGURA_MIN = 25
DUSART_1998_MIN = 3275
DUSART_2016_MIN = 89693
# relative slack so floating-point error can only widen a bound
_WIDEN = 1 + 1e-9


def _default_rng(rng):
    return rng if rng is not None else secrets.SystemRandom()


def _check_odd(n: int) -> None:
    if n < 3 or n % 2 == 0:
        raise ValueError(f"witness test needs an odd integer >= 3, got {n}")


# ── Miller-Rabin ───────────────────────────────────
def is_witness(n: int, val: int) -> bool:
    """Return True if `val` is a witness for the compositeness of odd `n`."""
    _check_odd(n)

    # n - 1 == 2^k * q with q odd
    k = 0
    q = n - 1
    while q % 2 == 0:
        q >>= 1
        k += 1

    assert (1 << k) * q == n - 1
    assert k > 0 and q % 2 == 1

    if mod_exp(val, q, n) == 1:
        return False
    return all(mod_exp(val, (1 << i) * q, n) != n - 1 for i in range(k))


def check_random_witnesses(n: int, witness_count: int, rng=None) -> bool:
    """Try `witness_count` random values in [2, n-2]; True once one proves `n` composite."""
    _check_odd(n)
    if witness_count < 1:
        raise ValueError(f"witness_count must be at least 1, got {witness_count}")
    if n == 3:
        # no candidates in [2, 1], and 3 has no witnesses anyway
        return False

    rng = _default_rng(rng)
    return any(is_witness(n, rng.randint(2, n - 2)) for _ in range(witness_count))


def is_prime(n: int, rng=None) -> bool:
    """Probabilistic primality decision. Primes are never reported composite."""
    if n < 2:
        return False
    if n in SMALL_PRIMES:
        return True
    if any(n % p == 0 for p in SMALL_PRIMES):
        return False
    return not check_random_witnesses(n, WITNESS_COUNT, rng)


# ── Density oracle ─────────────────────────────────
def prime_bound(low: int) -> int:
    """Smallest `high` for which a theorem guarantees a prime in [low, high]."""
    if low < NAGURA_MIN:
        # Bertrand's postulate: a prime in (n, 2n] for n >= 1
        return 2 * max(low, 1)

    if low < DUSART_1998_MIN:
        # Nagura (1952)
        epsilon = 1 / 5
    elif low < DUSART_2016_MIN:
        # Dusart (1998)
        epsilon = 1 / (2 * math.log(low) ** 2)
    else:
        # Dusart (2016)
        epsilon = 1 / math.log(low) ** 3

    return low + math.ceil(low * epsilon * _WIDEN)


def range_contains_known_prime(low: int, high: int) -> bool:
    """Conservative: True only when a prime in [low, high] is guaranteed."""
    if low > high:
        return False
    return high >= prime_bound(low)


# ── Prime search ───────────────────────────────────
def pick_random_prime(low: int, high: int, rng) -> int:
    """Pick a uniformly drawn prime in the closed range [low, high].

    Raises InvalidRangeError if `low > high` or `high < 3`, and
    PrimeNotFoundError when the capped search runs out of attempts.
    """
    check_num("low", low)
    check_num("high", high)
    if low > high or high < 3:
        raise InvalidRangeError(f"no supported primes in [{low}, {high}]")

    # the search only deals in odd primes
    low = max(low, 3)

    if low == high:
        if is_prime(low, rng):
            return low
        raise PrimeNotFoundError(f"{low} is not prime")

    if range_contains_known_prime(low, high):
        while True:
            candidate = rng.randint(low, high)
            if is_prime(candidate, rng):
                return candidate

    attempts = min(ATTEMPTS_PER_CANDIDATE * (high - low + 1), NUM_MAX)
    for _ in range(attempts):
        candidate = rng.randint(low, high)
        if is_prime(candidate, rng):
            return candidate

    raise PrimeNotFoundError(f"no prime found in [{low}, {high}] after {attempts} attempts")


# ── Primitive roots ────────────────────────────────
def _pollard_brent(n: int, c: int) -> int:
    """One run of Brent's variant of Pollard's rho; may return `n` on failure."""
    y, r, q, g = 2, 1, 1, 1
    batch = 128
    x = ys = y

    while g == 1:
        x = y
        for _ in range(r):
            y = (y * y + c) % n
        k = 0
        while k < r and g == 1:
            ys = y
            for _ in range(min(batch, r - k)):
                y = (y * y + c) % n
                q = q * abs(x - y) % n
            g = math.gcd(q, n)
            k += batch
        r *= 2

    if g == n:
        # the batched product overshot; step through one at a time
        g = 1
        while g == 1:
            ys = (ys * ys + c) % n
            g = math.gcd(abs(x - ys), n)

    return g


def _find_divisor(n: int) -> int:
    root = math.isqrt(n)
    if root * root == n:
        return root

    c = 1
    while True:
        d = _pollard_brent(n, c)
        if 1 < d < n:
            return d
        c += 1


def prime_factors(n: int, rng=None) -> set:
    """Distinct prime factors of `n`."""
    factors = set()
    for p in SMALL_PRIMES:
        if n % p == 0:
            factors.add(p)
            while n % p == 0:
                n //= p

    pending = [n] if n > 1 else []
    while pending:
        m = pending.pop()
        if m == 1:
            continue
        if is_prime(m, rng):
            factors.add(m)
            continue
        d = _find_divisor(m)
        pending.extend((d, m // d))

    return factors


def is_primitive_root(g: int, prime: int, factors) -> bool:
    order = prime - 1
    return all(mod_exp(g, order // f, prime) != 1 for f in factors)


def primitive_root(prime: int, rng=None) -> int:
    """Smallest generator of the multiplicative group modulo `prime`."""
    if prime < 3:
        raise ValueError(f"primitive root search needs a prime >= 3, got {prime}")

    factors = prime_factors(prime - 1, rng)
    for g in range(2, prime):
        if is_primitive_root(g, prime, factors):
            return g

    raise ValueError(f"{prime} has no primitive root; it is not prime")


def pick_random_with_root(low: int, high: int, rng) -> Tuple[int, int]:
    """Pick a random prime in [low, high] and a primitive root for it."""
    prime = pick_random_prime(low, high, rng)
    return prime, primitive_root(prime, rng)
