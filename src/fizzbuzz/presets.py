# src/fizzbuzz/presets.py
"""
Preset rule sets. They double as examples of how to put the rule variants
together for variants of the game.
"""

from __future__ import annotations

from fizzbuzz.fmt import FormattingOptions
from fizzbuzz.rules import FixedToken, Numeric, Rule, StreakToken
from fizzbuzz.tokenizer import Tokenizer

DEFAULT_SUFFIX = "+"
NEWLINE = FormattingOptions(separator="\n")


def _rivals(divisor: int, other: int) -> tuple[int, ...]:
    # invalid values pass through for StreakToken to reject
    if isinstance(other, int) and isinstance(divisor, int) and other >= 1 and divisor % other == 0:
        return ()
    return (other,)


def traditional_rules(f: int, b: int, suffix: str = DEFAULT_SUFFIX) -> list[Rule]:
    """
    Fizz/Buzz streaks with a FizzBuzz rule on top:
      - multiples of f  → Fizz, Fizz+, Fizz++ … while b stays quiet
      - multiples of b  → Buzz, Buzz+, … while f stays quiet
      - multiples of both → FizzBuzz
      - anything else → the number

    A divisor that divides the other one (f == b included) cannot rival it:
    that streak runs without rivals and FizzBuzz claims every shared
    division by priority.
    """
    return [
        Numeric(),
        StreakToken("Fizz", suffix, 1, f, _rivals(f, b)),
        StreakToken("Buzz", suffix, 1, b, _rivals(b, f)),
        FixedToken("FizzBuzz", 2, (f, b)),
    ]


def classic_rules(f: int = 3, b: int = 5) -> list[Rule]:
    """Plain FizzBuzz without streaks."""
    return [
        Numeric(),
        FixedToken("Fizz", 1, (f,)),
        FixedToken("Buzz", 1, (b,)),
        FixedToken("FizzBuzz", 2, (f, b)),
    ]


def play_traditional(t: int, f: int, b: int, options: FormattingOptions | None = None) -> str:
    tokenizer = Tokenizer(traditional_rules(f, b))
    return tokenizer.produce_output(t, options or NEWLINE)
