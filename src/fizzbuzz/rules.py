# src/fizzbuzz/rules.py
"""
Token rules of the FizzBuzz game.

A rule answers three questions for an iteration `i`: does it apply
(`condition`), which token does it produce (`tokenize`) and how strongly
does it compete with other rules (`priority`). The rule variants form a
closed set of frozen dataclasses; `condition`, `tokenize` and `priority`
dispatch over them. `CustomToken` wraps an arbitrary function for
conditions the other variants cannot express.

All variants validate their parameters on construction and are immutable
afterwards.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import Any

from fizzbuzz.errors import (
    InvalidRuleConfigurationError,
    InvalidTokenConfigurationError,
    NonZeroValueError,
)
from fizzbuzz.streak import count_uninterrupted

NUMERIC_PRIORITY = 0


# ---------- Validation helpers ------------------------------------------------

def _check_natural(what: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRuleConfigurationError(f"{what} must be an integer, got {type(value).__name__} {value!r}")
    if value < 1:
        raise NonZeroValueError(what, value)
    return value


def _check_naturals(what: str, values: Iterable[Any]) -> tuple[int, ...]:
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise InvalidRuleConfigurationError(f"{what} must be a list of integers, got {values!r}")
    out: list[int] = []
    for v in values:
        v = _check_natural(what, v)
        if v not in out:
            out.append(v)
    return tuple(out)


def _check_priority(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRuleConfigurationError(f"priority must be an integer, got {value!r}")
    if value < NUMERIC_PRIORITY:
        raise InvalidRuleConfigurationError(f"priority must not be negative, got {value}")
    return value


def _check_text(what: str, value: Any) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidTokenConfigurationError(f"{what} must be a non-empty string, got {value!r}")
    return value


def _coerce_result(res: Any) -> tuple[bool, str | None]:
    """Normalize a custom condition's return value into (ok, token)."""
    if isinstance(res, tuple):
        if not res:
            return False, None
        ok, *rest = res
        token = rest[0] if rest else None
        return bool(ok), (str(token) if token is not None else None)
    return bool(res), None


# ---------- Variants ----------------------------------------------------------

@dataclass(frozen=True)
class FixedToken:
    """
    Produces `token` when every member of `divisors` divides the iteration
    cleanly. A single divisor gives "Fizz"-like output, several divisors
    give "FizzBuzz"-like output.
    """
    token: str
    priority: int
    divisors: tuple[int, ...]

    def __post_init__(self) -> None:
        _check_text("token", self.token)
        _check_priority(self.priority)
        divisors = _check_naturals("divisor", self.divisors)
        if not divisors:
            raise InvalidRuleConfigurationError(f"fixed token '{self.token}' needs at least one divisor")
        object.__setattr__(self, "divisors", divisors)


@dataclass(frozen=True)
class StreakToken:
    """
    Produces `token` followed by `suffix` once per prior clean division by
    `divisor` that no member of `rivals` interrupted. The first division of
    a streak carries no suffix.
    """
    token: str
    suffix: str
    priority: int
    divisor: int
    rivals: tuple[int, ...] = ()

    def __post_init__(self) -> None:
        _check_text("token", self.token)
        _check_text("suffix", self.suffix)
        _check_priority(self.priority)
        _check_natural("divisor", self.divisor)
        rivals = _check_naturals("rival", self.rivals)
        # a rival dividing the divisor fires on every division: the streak never starts
        blocking = [r for r in rivals if self.divisor % r == 0]
        if blocking:
            raise InvalidRuleConfigurationError(
                f"streak token '{self.token}' on {self.divisor} can never fire, "
                f"rival(s) {', '.join(map(str, blocking))} divide it"
            )
        object.__setattr__(self, "rivals", rivals)

    def streak(self, i: int) -> int:
        return count_uninterrupted(i, self.divisor, self.rivals)


@dataclass(frozen=True)
class Numeric:
    """
    Fallback rule: always applies, has the smallest possible priority and
    tokenizes to the iteration number itself.
    """
    priority: int = field(default=NUMERIC_PRIORITY, init=False)


@dataclass(frozen=True)
class CustomToken:
    """
    Wraps a function `func(i)` returning a bool or an `(ok, token)` tuple.
    When the function supplies no token, `label` is used.
    """
    label: str
    priority: int
    func: Callable[[int], Any] = field(compare=False)
    description: str = ""

    def __post_init__(self) -> None:
        _check_text("label", self.label)
        _check_priority(self.priority)
        if not callable(self.func):
            raise InvalidRuleConfigurationError(f"custom condition '{self.label}' is not callable")


Rule = FixedToken | StreakToken | Numeric | CustomToken
RULE_TYPES: tuple[type, ...] = (FixedToken, StreakToken, Numeric, CustomToken)


def is_rule(obj: object) -> bool:
    return isinstance(obj, RULE_TYPES)


# ---------- Dispatch ----------------------------------------------------------

def condition(rule: Rule, i: int) -> bool:
    if isinstance(rule, FixedToken):
        return all(i % d == 0 for d in rule.divisors)
    if isinstance(rule, StreakToken):
        return rule.streak(i) > 0
    if isinstance(rule, Numeric):
        return True
    if isinstance(rule, CustomToken):
        ok, _ = _coerce_result(rule.func(i))
        return ok
    raise InvalidRuleConfigurationError(f"unsupported rule type {type(rule).__name__}")


def tokenize(rule: Rule, i: int) -> str:
    if isinstance(rule, FixedToken):
        return rule.token
    if isinstance(rule, StreakToken):
        pluses = max(0, rule.streak(i) - 1)  # first occurrence without suffix
        return rule.token + rule.suffix * pluses
    if isinstance(rule, Numeric):
        return str(i)
    if isinstance(rule, CustomToken):
        _, token = _coerce_result(rule.func(i))
        return token or rule.label
    raise InvalidRuleConfigurationError(f"unsupported rule type {type(rule).__name__}")


def resolve(rule: Rule, i: int) -> str | None:
    """
    Token of `rule` for `i`, or None if it does not apply. Unlike calling
    `condition` and then `tokenize`, a custom function runs only once.
    """
    if isinstance(rule, StreakToken):
        n = rule.streak(i)
        return rule.token + rule.suffix * (n - 1) if n > 0 else None
    if isinstance(rule, CustomToken):
        ok, token = _coerce_result(rule.func(i))
        return (token or rule.label) if ok else None
    return tokenize(rule, i) if condition(rule, i) else None


def priority(rule: Rule) -> int:
    return rule.priority


def describe(rule: Rule) -> str:
    """One-line human readable summary, used by listings and the debug trace."""
    if isinstance(rule, FixedToken):
        divs = " & ".join(str(d) for d in rule.divisors)
        return f"{rule.token} (fixed, divisible by {divs}, p{rule.priority})"
    if isinstance(rule, StreakToken):
        rivals = ", ".join(str(r) for r in rule.rivals) or "none"
        return f"{rule.token}{rule.suffix}… (streak on {rule.divisor}, rivals {rivals}, p{rule.priority})"
    if isinstance(rule, Numeric):
        return f"<number> (fallback, p{rule.priority})"
    if isinstance(rule, CustomToken):
        return f"{rule.label} (custom, p{rule.priority})"
    return repr(rule)
