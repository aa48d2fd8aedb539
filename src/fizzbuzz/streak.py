# src/fizzbuzz/streak.py
from __future__ import annotations

from collections.abc import Iterable


def last_division(i: int, rival: int) -> int | None:
    """
    Most recent iteration in 1..=i that `rival` divides cleanly, or None if
    the rival has not fired yet (rival > i).
    """
    last = i - i % rival
    return last if last >= 1 else None


def count_uninterrupted(i: int, divisor: int, rivals: Iterable[int] = ()) -> int:
    """
    Number of clean divisions by `divisor` within 1..=i, counted backwards
    from i up to the last clean division by any member of `rivals`.
    Returns 0 if `divisor` does not divide `i`.

    E.g. i = 8, divisor = 2, rivals = [5]:
      8 and 6 are clean divisions by 2 with no rival division in between;
      the division at 4 lies before the rival's division at 5.
      Result: 2.

    A rival dividing the interruption point together with `divisor` (the
    "FizzBuzz" case, including i itself) counts as an interruption.

    Assumes neither `divisor` nor any rival is zero; a zero raises
    ZeroDivisionError.
    """
    if i % divisor != 0:
        return 0

    # first clean division
    if i == divisor:
        return 1

    rivals = tuple(rivals)
    if not rivals or i < min(rivals):
        return i // divisor

    bound: int | None = None
    for r in rivals:
        last = last_division(i, r)
        if last is None:
            continue
        delta = i - last
        fizz_buzz = delta % divisor == 0
        streak = delta // divisor + (0 if fizz_buzz else 1)
        bound = streak if bound is None else min(bound, streak)

    return i // divisor if bound is None else bound
