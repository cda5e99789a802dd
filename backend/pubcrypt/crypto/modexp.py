from typing import Optional

NUM_BITS = 64
NUM_BYTES = NUM_BITS // 8
NUM_MAX = (1 << NUM_BITS) - 1


def check_num(name: str, value: int) -> None:
    if not 0 <= value <= NUM_MAX:
        raise ValueError(f"{name} out of range: {value}")


def _shortcut(base: int, exponent: int, modulus: int) -> Optional[int]:
    """Identities that settle the result without exponentiating.

    `base` is already reduced mod `modulus`, so `n^x` shows up here as `0^x`.
    """
    if exponent == 0:
        # x^0 == 1
        return 1 % modulus
    if base == 0 or modulus == 1:
        # 0^x == 0, x % 1 == 0
        return 0
    if base == 1 or modulus == 2:
        # 1^x == 1, and parity survives repeated self-multiplication so x^y == x (mod 2)
        return base % modulus
    return None


def mod_exp(base: int, exponent: int, modulus: int) -> int:
    """Compute `base` raised to `exponent` modulo `modulus`.

    All three values must fit in NUM_BITS unsigned bits and the modulus must be
    positive. The square-and-multiply loop always walks NUM_BITS exponent bits.
    """
    check_num("base", base)
    check_num("exponent", exponent)
    check_num("modulus", modulus)
    if modulus == 0:
        raise ValueError("modulus must be positive")

    base %= modulus
    shortcut = _shortcut(base, exponent, modulus)
    if shortcut is not None:
        return shortcut

    result = 1
    mask = 1 << (NUM_BITS - 1)
    for _ in range(NUM_BITS):
        result = (result * result) % modulus
        if exponent & mask:
            result = (result * base) % modulus
        mask >>= 1

    return result
