# -----------------------------------------------------------------------------
#  Digit-based custom conditions
# -----------------------------------------------------------------------------

from __future__ import annotations

from fizzbuzz.registry import token_rule


@token_rule(
    label="Palindrome",
    description="i reads the same backwards (two digits or more).",
    priority=3,
)
def is_palindrome(i: int):
    s = str(i)
    return len(s) > 1 and s == s[::-1]


@token_rule(
    label="Lucky",
    description="i contains the digit 7; the token repeats once per 7, e.g. Lucky77.",
    priority=2,
)
def has_sevens(i: int):
    sevens = str(i).count("7")
    if not sevens:
        return False, None
    return True, "Lucky" + "7" * sevens
