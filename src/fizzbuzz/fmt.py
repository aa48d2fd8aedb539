# src/fizzbuzz/fmt.py
from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from fizzbuzz.errors import InvalidTokenConfigurationError

Case = Literal["lower", "upper", "none"]
CASES: tuple[str, ...] = ("lower", "upper", "none")

# Single source of truth for ANSI stripping
ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


@dataclass(frozen=True)
class FormattingOptions:
    """
    Shape of the output string.

      separator: inserted between tokens (not after the last one)
      case:      "lower" | "upper" | "none", applied to every token
    """
    separator: str = ""
    case: Case = "none"

    def __post_init__(self) -> None:
        if not isinstance(self.separator, str):
            raise InvalidTokenConfigurationError(f"separator must be a string, got {self.separator!r}")
        c = str(self.case or "none").strip().lower()
        if c not in CASES:
            raise InvalidTokenConfigurationError(
                f"case must be one of {', '.join(CASES)}, got {self.case!r}"
            )
        object.__setattr__(self, "case", c)

    def apply_formatting(self, token: str, i: int, t: int) -> str:
        """
        Format one token. `i` and `t` (current and total iteration) are not
        used by the case transforms but are part of the signature so that
        position-dependent formatting can be added here.
        """
        if self.case == "lower":
            return token.lower()
        if self.case == "upper":
            return token.upper()
        return token

    def join(self, tokens: Iterable[str]) -> str:
        return self.separator.join(tokens).rstrip()


def strip_ansi(s: str) -> str:
    return ANSI_RE.sub("", s)


def visible_len(s: str) -> int:
    return len(strip_ansi(s))


def escape_visible(s: str) -> str:
    """Render control characters of a separator readable, e.g. '\\n'."""
    return s.encode("unicode_escape").decode("ascii")
