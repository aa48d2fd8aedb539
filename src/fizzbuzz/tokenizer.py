# src/fizzbuzz/tokenizer.py
from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import Literal

from fizzbuzz.errors import InvalidRuleConfigurationError, NonZeroValueError
from fizzbuzz.fmt import FormattingOptions
from fizzbuzz.rules import Rule, StreakToken, describe, is_rule, priority, resolve

TieBreak = Literal["last", "first", "strict"]
TIE_BREAKS: tuple[str, ...] = ("last", "first", "strict")


# ---------- Data models -------------------------------------------------------

@dataclass(frozen=True)
class Evaluation:
    i: int
    candidates: tuple[Rule, ...]       # matching rules, rule-set order
    winner: Rule | None
    token: str | None                  # formatted; None for a silent iteration
    candidate_tokens: tuple[str, ...] = ()   # unformatted, aligned with candidates

    @property
    def silent(self) -> bool:
        return self.token is None


# ---------- Rule set validation -----------------------------------------------

def validate_rule_set(rules: Sequence[Rule], tie_break: TieBreak = "last") -> None:
    """
    Structural checks of a rule set. Each rule validated itself on
    construction; this covers what only the set as a whole can tell.
    """
    if tie_break not in TIE_BREAKS:
        raise InvalidRuleConfigurationError(
            f"tie break must be one of {', '.join(TIE_BREAKS)}, got {tie_break!r}"
        )
    if not rules:
        raise InvalidRuleConfigurationError("the rule set is empty")
    for r in rules:
        if not is_rule(r):
            raise InvalidRuleConfigurationError(f"{r!r} is not a token rule")

    if tie_break == "strict":
        # identical streaks at equal priority would tie on every match
        seen: dict[tuple[int, frozenset[int], int], StreakToken] = {}
        for r in rules:
            if not isinstance(r, StreakToken):
                continue
            key = (r.divisor, frozenset(r.rivals), r.priority)
            if key in seen:
                raise InvalidRuleConfigurationError(
                    f"streak tokens '{seen[key].token}' and '{r.token}' share divisor, rivals "
                    f"and priority and can never be told apart"
                )
            seen[key] = r


# ---------- Tokenizer ---------------------------------------------------------

class Tokenizer:
    """
    Plays the FizzBuzz game over 1..=t with a fixed set of rules.

    Per iteration the matching rule with the highest priority wins. Equal
    priorities are resolved by `tie_break`:
      "last"   the last matching rule in rule-set order (default)
      "first"  the first matching rule in rule-set order
      "strict" raise InvalidRuleConfigurationError
    Iterations without any matching rule produce no token.
    """

    def __init__(self, rules: Iterable[Rule], *, tie_break: TieBreak = "last"):
        rules = tuple(rules)
        validate_rule_set(rules, tie_break)
        self._rules: tuple[Rule, ...] = rules
        self.tie_break: TieBreak = tie_break

    @property
    def rules(self) -> tuple[Rule, ...]:
        return self._rules

    def _select(self, i: int, candidates: tuple[Rule, ...]) -> int | None:
        """Position of the winning candidate, or None when nothing matched."""
        if not candidates:
            return None
        top = max(priority(c) for c in candidates)
        best = [k for k, c in enumerate(candidates) if priority(c) == top]
        if len(best) > 1 and self.tie_break == "strict":
            names = ", ".join(describe(candidates[k]) for k in best)
            raise InvalidRuleConfigurationError(f"iteration {i} is claimed by equal priority rules: {names}")
        return best[0] if self.tie_break == "first" else best[-1]

    def evaluate(self, i: int, t: int | None = None, options: FormattingOptions | None = None) -> Evaluation:
        """Evaluate iteration `i` (of `t`, used for formatting only)."""
        opts = options or FormattingOptions()
        matched: list[Rule] = []
        tokens: list[str] = []
        for r in self._rules:
            tok = resolve(r, i)
            if tok is not None:
                matched.append(r)
                tokens.append(tok)
        candidates = tuple(matched)
        raw = tuple(tokens)
        pos = self._select(i, candidates)
        winner = token = None
        if pos is not None:
            winner = candidates[pos]
            token = opts.apply_formatting(raw[pos], i, t if t is not None else i)
        # no candidate: silent iteration, include Numeric() for a token on every i
        return Evaluation(i=i, candidates=candidates, winner=winner, token=token, candidate_tokens=raw)

    def iter_evaluations(self, t: int, options: FormattingOptions | None = None) -> Iterator[Evaluation]:
        if isinstance(t, bool) or not isinstance(t, int):
            raise InvalidRuleConfigurationError(f"iterations must be an integer, got {t!r}")
        if t < 1:
            raise NonZeroValueError("iterations", t)
        for i in range(1, t + 1):
            yield self.evaluate(i, t, options)

    def run(self, t: int, options: FormattingOptions | None = None) -> list[Evaluation]:
        return list(self.iter_evaluations(t, options))

    def produce_output(self, t: int, options: FormattingOptions | None = None) -> str:
        """
        Tokens of all non-silent iterations in 1..=t, joined by the
        separator of `options`. Raises a FizzBuzzError before producing any
        output if `t` or the rule set is invalid.
        """
        opts = options or FormattingOptions()
        return output_from(self.run(t, opts), opts)


def output_from(evaluations: Iterable[Evaluation], options: FormattingOptions) -> str:
    return options.join(e.token for e in evaluations if e.token is not None)


def fizz_buzz(
    t: int,
    rules: Iterable[Rule],
    options: FormattingOptions | None = None,
    *,
    tie_break: TieBreak = "last",
) -> str:
    """Validate `rules` and play 1..=t in one call."""
    if isinstance(t, int) and not isinstance(t, bool) and t < 1:
        raise NonZeroValueError("iterations", t)
    return Tokenizer(rules, tie_break=tie_break).produce_output(t, options)
