# tests/test_config.py
"""
Tests for TOML profiles: lookup, loading and conversion into rules.

Run: pytest -v
"""

from __future__ import annotations

import textwrap

import pytest

from fizzbuzz import config
from fizzbuzz.config import (
    has_profile,
    list_all_profiles,
    list_profiles_with_descriptions,
    load_settings,
    profile_path,
    rule_from_table,
    settings_from_dict,
)
from fizzbuzz.errors import (
    InvalidRuleConfigurationError,
    InvalidTokenConfigurationError,
    NonZeroValueError,
    UserInputError,
)
from fizzbuzz.registry import discover
from fizzbuzz.rules import CustomToken, FixedToken, Numeric, StreakToken
from fizzbuzz.tokenizer import Tokenizer

# ---------- helpers -----------------------------------------------------------

SIMPLE_PROFILE = """\
[PROFILE]
name = "simple"
description = "  Fizz   on two  "

[FORMATTING]
SEPARATOR = "|"
CASE = "lower"

[BEHAVIOUR]
ITERATIONS = 4

[[RULES]]
kind = "numeric"

[[RULES]]
kind = "fixed"
token = "Fizz"
priority = 1
divisors = [2]
"""


def _write(path, text: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text), encoding="utf-8")
    return path


def _play(settings, t=None) -> str:
    tokenizer = Tokenizer(settings.rules, tie_break=settings.tie_break)
    return tokenizer.produce_output(t or settings.iterations, settings.formatting)


# ---------- packaged profiles -------------------------------------------------


def test_packaged_profiles_are_listed():
    names = list_all_profiles()
    for expected in ("traditional", "classic", "primes"):
        assert expected in names
        assert has_profile(expected)


def test_traditional_profile():
    settings = load_settings("traditional")
    assert settings.name == "traditional"
    assert settings.iterations == 100
    assert settings.formatting.separator == "\n"
    assert settings.tie_break == "last"
    assert len(settings.rules) == 4
    assert isinstance(settings.rules[0], Numeric)
    assert settings.rules[1] == StreakToken("Fizz", "+", 1, 3, (5,))
    expected = "1,2,Fizz,4,Buzz,Fizz,7,8,Fizz+,Buzz,11,Fizz,13,14,FizzBuzz"
    assert _play(settings, 15).split("\n") == expected.split(",")


def test_default_profile_is_traditional():
    assert load_settings(None).name == "traditional"


def test_classic_profile_is_strict():
    settings = load_settings("classic")
    assert settings.tie_break == "strict"
    assert _play(settings, 15).split("\n")[-1] == "FizzBuzz"


def test_primes_profile_uses_custom_conditions():
    settings = load_settings("primes")
    labels = [r.label for r in settings.rules if isinstance(r, CustomToken)]
    assert labels == ["Prime", "Perfect"]
    assert _play(settings, 7) == "1, PRIME, PRIME, 4, PRIME, PERFECT, PRIME"


def test_profile_descriptions():
    items = dict(list_profiles_with_descriptions())
    assert items["classic"].startswith("Plain FizzBuzz")


# ---------- workspace & path profiles -----------------------------------------


def test_workspace_profile(isolated_workspace):
    _write(isolated_workspace / "profiles" / "simple.toml", SIMPLE_PROFILE)
    assert "simple" in list_all_profiles()
    settings = load_settings("simple")
    assert settings.description == "Fizz on two"
    assert settings.formatting.case == "lower"
    assert _play(settings) == "1|fizz|3|fizz"


def test_workspace_profile_shadows_packaged(isolated_workspace):
    path = _write(isolated_workspace / "profiles" / "classic.toml", SIMPLE_PROFILE)
    assert profile_path("classic") == path
    assert load_settings("classic").name == "simple"


def test_profile_by_path(tmp_path):
    path = _write(tmp_path / "elsewhere" / "mine.toml", SIMPLE_PROFILE)
    settings = load_settings(str(path))
    assert settings._source == path
    assert _play(settings) == "1|fizz|3|fizz"


def test_profile_name_falls_back_to_file_stem(tmp_path):
    path = _write(tmp_path / "nameless.toml", '[[RULES]]\nkind = "numeric"\n')
    settings = load_settings(str(path))
    assert settings.name == "nameless"
    assert settings.description == "(no description)"
    assert settings.iterations is None


def test_missing_profile():
    assert not has_profile("does-not-exist")
    with pytest.raises(UserInputError):
        load_settings("does-not-exist")


def test_malformed_toml_names_the_position(tmp_path):
    path = _write(tmp_path / "broken.toml", "[PROFILE\nname = 1\n")
    with pytest.raises(UserInputError, match="broken.toml"):
        load_settings(str(path))


def test_unreadable_profile_is_listed_with_error(isolated_workspace):
    _write(isolated_workspace / "profiles" / "broken.toml", "[PROFILE\n")
    items = dict(list_profiles_with_descriptions())
    assert items["broken"].startswith("(unreadable:")


# ---------- rule tables -------------------------------------------------------

RULE_TABLES = [
    ({"kind": "numeric"}, Numeric()),
    ({"kind": "fixed", "token": "Fizz", "priority": 1, "divisors": [3]}, FixedToken("Fizz", 1, (3,))),
    ({"kind": "streak", "token": "Fizz", "priority": 1, "divisor": 3, "rivals": [5]},
     StreakToken("Fizz", "+", 1, 3, (5,))),
    ({"kind": "Streak", "token": "Buzz", "suffix": "!", "priority": 1, "divisor": 5},
     StreakToken("Buzz", "!", 1, 5, ())),
]


@pytest.mark.parametrize("table,expected", RULE_TABLES, ids=[t["kind"] for t, _ in RULE_TABLES])
def test_rule_from_table(table, expected):
    assert rule_from_table(table) == expected


BAD_TABLES = [
    ({"kind": "wizard"}, InvalidRuleConfigurationError),
    ({"token": "Fizz"}, InvalidRuleConfigurationError),
    ({"kind": "fixed", "token": "Fizz", "priority": 1}, InvalidRuleConfigurationError),
    ({"kind": "fixed", "token": "Fizz", "priority": 1, "divisors": [3], "colour": "red"},
     InvalidRuleConfigurationError),
    ({"kind": "fixed", "token": "Fizz", "priority": 1, "divisors": [0]}, NonZeroValueError),
    ({"kind": "streak", "token": "Fizz", "priority": 1, "divisor": 3, "rivals": [0]}, NonZeroValueError),
    ({"kind": "streak", "token": "Fizz", "priority": 1, "divisor": 3, "rivals": [3]},
     InvalidRuleConfigurationError),
    ({"kind": "streak", "token": "Fizz", "suffix": "", "priority": 1, "divisor": 3},
     InvalidTokenConfigurationError),
    ({"kind": "custom", "label": "NoSuchCondition"}, InvalidRuleConfigurationError),
    ("numeric", InvalidRuleConfigurationError),
]


@pytest.mark.parametrize("table,error", BAD_TABLES, ids=[f"bad{i}" for i in range(len(BAD_TABLES))])
def test_rule_from_table_rejects(table, error):
    with pytest.raises(error):
        rule_from_table(table)


def test_custom_rule_table_with_priority_override():
    rule = rule_from_table({"kind": "custom", "label": "Prime", "priority": 9})
    assert isinstance(rule, CustomToken)
    assert rule.priority == 9


# ---------- settings ----------------------------------------------------------


def test_settings_from_dict_defaults():
    settings = settings_from_dict({"RULES": [{"kind": "numeric"}]})
    assert settings.name == "custom"
    assert settings.formatting.separator == ""
    assert settings.formatting.case == "none"
    assert settings.tie_break == "last"
    assert _play(settings, 3) == "123"


@pytest.mark.parametrize(
    "data,error",
    [
        ({"RULES": []}, InvalidRuleConfigurationError),
        ({"RULES": {"kind": "numeric"}}, InvalidRuleConfigurationError),
        ({"RULES": [{"kind": "numeric"}], "BEHAVIOUR": {"TIE_BREAK": "coin"}}, InvalidRuleConfigurationError),
        ({"RULES": [{"kind": "numeric"}], "BEHAVIOUR": {"ITERATIONS": "10"}}, InvalidRuleConfigurationError),
        ({"RULES": [{"kind": "numeric"}], "FORMATTING": {"CASE": "title"}}, InvalidTokenConfigurationError),
    ],
    ids=["no rules", "rules not an array", "tie break", "iterations", "case"],
)
def test_settings_from_dict_rejects(data, error):
    with pytest.raises(error):
        settings_from_dict(data)


def test_strict_profile_rejects_identical_streaks():
    streak = {"kind": "streak", "token": "Fizz", "priority": 1, "divisor": 2}
    data = {
        "BEHAVIOUR": {"TIE_BREAK": "strict"},
        "RULES": [streak, dict(streak, token="Buzz")],
    }
    with pytest.raises(InvalidRuleConfigurationError):
        settings_from_dict(data)


@pytest.mark.parametrize(
    "tables,expected_calls",
    [
        ([{"kind": "numeric"}, {"kind": "custom", "label": "Prime"}, {"kind": "custom", "label": "Square"}], 1),
        ([{"kind": "numeric"}, {"kind": "fixed", "token": "Fizz", "priority": 1, "divisors": [3]}], 0),
    ],
    ids=["custom rules", "no custom rules"],
)
def test_custom_conditions_are_discovered_once_per_profile(monkeypatch, tables, expected_calls):
    calls = []

    def counting_discover(workspace=None):
        calls.append(workspace)
        return discover(workspace)

    monkeypatch.setattr(config, "discover", counting_discover)
    settings = settings_from_dict({"RULES": tables})
    assert len(settings.rules) == len(tables)
    assert len(calls) == expected_calls
