# src/fizzbuzz/errors.py
from __future__ import annotations


class UserInputError(Exception):
    pass


class FizzBuzzError(UserInputError):
    """Base class of every error raised by the rule engine."""


class NonZeroValueError(FizzBuzzError):
    def __init__(self, what: str | None = None, value: object = 0):
        self.what = what
        self.value = value
        msg = "Passed zero! FizzBuzz only operates on `natural numbers` (integers bigger than zero)."
        if what:
            msg += f" Offending value: {what} = {value!r}."
        super().__init__(msg)


class InvalidRuleConfigurationError(FizzBuzzError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"The rule configuration is invalid! {reason}.")


class InvalidTokenConfigurationError(FizzBuzzError):
    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"The token tokenization rule does not comply with the provided conditions! {reason}.")
