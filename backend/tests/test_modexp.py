from itertools import product

import pytest

from pubcrypt.crypto.modexp import NUM_MAX, mod_exp

# test values that avoid the special cases 0 and 1
SAFE_VALS = [
    2, 3, 4, 8, 9, 10, 50, 99, 100, 127, 128, 129, 256, 512, 999, 1024, 5008, 7777, 9998, 9999,
    10000, 12500, 15000, 20000, 50000, 100000, 1000000, 10000000, 10000000000, 10000000000000,
    10000000000000000, 10000000000000000000, NUM_MAX,
]


def test_zero_exponent_is_one():
    for base, modulus in product(SAFE_VALS + [0, 1], SAFE_VALS):
        assert mod_exp(base, 0, modulus) == 1


def test_zero_exponent_mod_one_is_zero():
    assert mod_exp(5, 0, 1) == 0


def test_zero_base_is_zero():
    for exponent, modulus in product(SAFE_VALS, SAFE_VALS):
        assert mod_exp(0, exponent, modulus) == 0


def test_modulus_as_base_is_zero():
    for n, exponent in product(SAFE_VALS, SAFE_VALS):
        assert mod_exp(n, exponent, n) == 0


def test_mod_two_keeps_parity():
    for base, exponent in product(SAFE_VALS, SAFE_VALS):
        assert mod_exp(base, exponent, 2) == base % 2


@pytest.mark.parametrize(
    "base,exponent,modulus,expected",
    [
        (1, 1, 1, 0),
        (16, 4, 13, 3),
        (23, 20, 29, 24),
        (23, 391, 55, 12),
        (31, 397, 55, 26),
        (NUM_MAX, 2, 100, 25),
        (NUM_MAX, NUM_MAX, (1 << 32) - 1, 0),
        (NUM_MAX, NUM_MAX, NUM_MAX, 0),
    ],
)
def test_known_values(base, exponent, modulus, expected):
    assert mod_exp(base, exponent, modulus) == expected


def test_matches_builtin_pow_on_wide_values():
    cases = [
        (NUM_MAX - 1, NUM_MAX - 2, NUM_MAX - 58),
        (0xDEADBEEFCAFEBABE, 0x123456789ABCDEF, 0xFFFFFFFFFFFFFFC5),
        (3, NUM_MAX, 1 << 63),
    ]
    for base, exponent, modulus in cases:
        assert mod_exp(base, exponent, modulus) == pow(base, exponent, modulus)


def test_rejects_zero_modulus():
    with pytest.raises(ValueError):
        mod_exp(2, 3, 0)


@pytest.mark.parametrize("args", [(-1, 2, 5), (2, -1, 5), (2, 3, NUM_MAX + 1), (NUM_MAX + 1, 1, 7)])
def test_rejects_values_outside_num_width(args):
    with pytest.raises(ValueError):
        mod_exp(*args)
