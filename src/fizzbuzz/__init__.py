from __future__ import annotations

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _pkg_version

# Version
try:
    __version__ = _pkg_version("fizzbuzz-streaks")
except PackageNotFoundError:
    __version__ = "0+unknown"

# Public API re-exports
from .errors import (
    FizzBuzzError,
    InvalidRuleConfigurationError,
    InvalidTokenConfigurationError,
    NonZeroValueError,
    UserInputError,
)
from .fmt import FormattingOptions
from .presets import classic_rules, play_traditional, traditional_rules
from .registry import discover, token_rule
from .rules import CustomToken, FixedToken, Numeric, Rule, StreakToken, condition, priority, resolve, tokenize
from .streak import count_uninterrupted
from .tokenizer import Evaluation, Tokenizer, fizz_buzz

__all__ = [
    "CustomToken",
    "Evaluation",
    "FixedToken",
    "FizzBuzzError",
    "FormattingOptions",
    "InvalidRuleConfigurationError",
    "InvalidTokenConfigurationError",
    "NonZeroValueError",
    "Numeric",
    "Rule",
    "StreakToken",
    "Tokenizer",
    "UserInputError",
    "__version__",
    "classic_rules",
    "condition",
    "count_uninterrupted",
    "discover",
    "fizz_buzz",
    "play_traditional",
    "priority",
    "resolve",
    "token_rule",
    "tokenize",
    "traditional_rules",
]
