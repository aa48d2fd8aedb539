# -----------------------------------------------------------------------------
#  Number-theoretic custom conditions
# -----------------------------------------------------------------------------

from __future__ import annotations

from math import isqrt

from sympy import divisor_sigma, isprime
from sympy.ntheory.primetest import is_square

from fizzbuzz.registry import token_rule


@token_rule(
    label="Prime",
    description="i is a prime number.",
    priority=3,
)
def is_prime(i: int):
    return isprime(i)


@token_rule(
    label="Square",
    description="i is a perfect square; the token names the root, e.g. Square(7).",
    priority=3,
)
def is_perfect_square(i: int):
    if not is_square(i):
        return False, None
    return True, f"Square({isqrt(i)})"


@token_rule(
    label="Fibonacci",
    description="i is a Fibonacci number (5i² ± 4 is a perfect square).",
    priority=3,
)
def is_fibonacci(i: int):
    return is_square(5 * i * i + 4) or is_square(5 * i * i - 4)


@token_rule(
    label="Perfect",
    description="i equals the sum of its proper divisors (6, 28, 496, ...).",
    priority=4,
)
def is_perfect(i: int):
    return int(divisor_sigma(i)) == 2 * i
