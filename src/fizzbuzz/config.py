from __future__ import annotations

from dataclasses import dataclass, field
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from pathlib import Path
from typing import Any

try:
    import tomllib as toml
except ImportError:  # Python < 3.11
    import tomli as toml  # type: ignore

from fizzbuzz.errors import InvalidRuleConfigurationError, UserInputError
from fizzbuzz.fmt import FormattingOptions
from fizzbuzz.presets import DEFAULT_SUFFIX
from fizzbuzz.registry import Index, discover
from fizzbuzz.rules import FixedToken, Numeric, Rule, StreakToken
from fizzbuzz.tokenizer import TIE_BREAKS, TieBreak, validate_rule_set
from fizzbuzz.workspace import workspace_dir, workspace_subdir

# accepted keys per rule kind (besides "kind")
_RULE_KEYS: dict[str, set[str]] = {
    "fixed": {"token", "priority", "divisors"},
    "streak": {"token", "suffix", "priority", "divisor", "rivals"},
    "numeric": set(),
    "custom": {"label", "priority"},
}


@dataclass(frozen=True)
class Settings:
    """
    A loaded profile: the rule set plus how to play and print it.

      name:        resolved profile name ([PROFILE].name or file stem)
      description: one-line description or "(no description)"
      iterations:  default t, or None when the profile leaves it to the caller
    """
    name: str
    description: str
    rules: tuple[Rule, ...]
    formatting: FormattingOptions = field(default_factory=FormattingOptions)
    tie_break: TieBreak = "last"
    iterations: int | None = None
    _source: Path | None = None


# --- Paths -----------------------------------------------------------------

def _packaged_profile(name: str) -> Path | None:
    ref = pkg_files("fizzbuzz") / "profiles" / f"{name}.toml"
    with as_file(ref) as real:
        p = Path(real)
        return p if p.is_file() else None


def profile_path(name: str) -> Path | None:
    """
    Resolve a profile:
      1) an existing *.toml path
      2) <workspace>/profiles/<name>.toml
      3) packaged fizzbuzz/profiles/<name>.toml
    """
    if name.lower().endswith(".toml"):
        p = Path(name).expanduser()
        return p if p.is_file() else None
    ws = workspace_subdir("profiles") / f"{name}.toml"
    if ws.is_file():
        return ws
    return _packaged_profile(name)


def has_profile(name: str) -> bool:
    return profile_path(name) is not None


# --- I/O -------------------------------------------------------------------

def _load_toml(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            return toml.load(f)
    except toml.TOMLDecodeError as e:
        lineno = getattr(e, "lineno", None)
        colno = getattr(e, "colno", None)
        msg = getattr(e, "msg", str(e))
        where = []
        if lineno is not None:
            where.append(f"line {lineno}")
        if colno is not None:
            where.append(f"column {colno}")
        loc = f" (at {', '.join(where)})" if where else ""
        # No traceback chaining
        raise UserInputError(f"reading {path.name}: {msg}{loc}.") from None
    except OSError as e:
        raise UserInputError(f"reading {path}: {e.strerror or e}.") from None


def _sanitize_oneline(s: str) -> str:
    return " ".join(str(s).split()) or "(no description)"


def _split_profile_data(raw: dict[str, Any], fallback_name: str) -> tuple[dict[str, Any], str, str]:
    """
    Extract [PROFILE] meta (name, description) and return:
      (settings_without_profile, resolved_name, resolved_description)
    """
    meta = raw.get("PROFILE") or {}
    data = {k: v for k, v in raw.items() if k != "PROFILE"}
    name = str(meta.get("name") or fallback_name)
    description = _sanitize_oneline(str(meta.get("description") or ""))
    return data, name, description


# --- Rules from TOML tables ------------------------------------------------

def _kind(tbl: Any) -> str:
    return str(tbl.get("kind", "")).strip().lower() if isinstance(tbl, dict) else ""


def rule_from_table(tbl: dict[str, Any], index: Index | None = None) -> Rule:
    """Build one rule from a [[RULES]] table."""
    if not isinstance(tbl, dict):
        raise InvalidRuleConfigurationError(f"rule entries must be tables, got {tbl!r}")
    kind = _kind(tbl)
    if kind not in _RULE_KEYS:
        raise InvalidRuleConfigurationError(
            f"rule kind must be one of {', '.join(_RULE_KEYS)}, got {tbl.get('kind')!r}"
        )
    unknown = set(tbl) - _RULE_KEYS[kind] - {"kind"}
    if unknown:
        raise InvalidRuleConfigurationError(f"unknown key(s) for a {kind} rule: {', '.join(sorted(unknown))}")

    def need(key: str) -> Any:
        if key not in tbl:
            raise InvalidRuleConfigurationError(f"{kind} rule is missing '{key}'")
        return tbl[key]

    if kind == "fixed":
        return FixedToken(need("token"), need("priority"), need("divisors"))
    if kind == "streak":
        return StreakToken(
            need("token"),
            tbl.get("suffix", DEFAULT_SUFFIX),
            need("priority"),
            need("divisor"),
            tbl.get("rivals", ()),
        )
    if kind == "numeric":
        return Numeric()
    if index is None:
        index = discover(workspace_dir())
    return index.make_rule(str(need("label")), tbl.get("priority"))


def settings_from_dict(
    data: dict[str, Any],
    name: str = "custom",
    description: str = "(no description)",
    *,
    index: Index | None = None,
    source: Path | None = None,
) -> Settings:
    fmt = data.get("FORMATTING", {}) or {}
    beh = data.get("BEHAVIOUR", {}) or {}

    formatting = FormattingOptions(
        separator=fmt.get("SEPARATOR", ""),
        case=fmt.get("CASE", "none"),
    )

    tie_break = str(beh.get("TIE_BREAK", "last")).strip().lower()
    if tie_break not in TIE_BREAKS:
        raise InvalidRuleConfigurationError(
            f"TIE_BREAK must be one of {', '.join(TIE_BREAKS)}, got {beh.get('TIE_BREAK')!r}"
        )

    iterations = beh.get("ITERATIONS")
    if iterations is not None and (isinstance(iterations, bool) or not isinstance(iterations, int)):
        raise InvalidRuleConfigurationError(f"ITERATIONS must be an integer, got {iterations!r}")

    tables = data.get("RULES", [])
    if not isinstance(tables, list):
        raise InvalidRuleConfigurationError("RULES must be an array of tables ([[RULES]])")
    if index is None and any(_kind(t) == "custom" for t in tables):
        index = discover(workspace_dir())
    rules = tuple(rule_from_table(t, index) for t in tables)
    validate_rule_set(rules, tie_break)

    return Settings(
        name=name,
        description=description,
        rules=rules,
        formatting=formatting,
        tie_break=tie_break,
        iterations=iterations,
        _source=source,
    )


# --- Public API ------------------------------------------------------------

def list_all_profiles() -> list[str]:
    """Names of all workspace and packaged profiles (workspace first on clashes)."""
    names: set[str] = set()
    ws = workspace_subdir("profiles")
    if ws.is_dir():
        names.update(p.stem for p in ws.glob("*.toml"))
    with as_file(pkg_files("fizzbuzz") / "profiles") as real:
        names.update(p.stem for p in Path(real).glob("*.toml"))
    return sorted(names)


def list_profiles_with_descriptions() -> list[tuple[str, str]]:
    """
    Return [(name, description), ...] for all profiles.
    Unreadable profiles are listed with the error as description.
    """
    items: list[tuple[str, str]] = []
    for stem in list_all_profiles():
        path = profile_path(stem)
        if path is None:
            continue
        try:
            _, nm, desc = _split_profile_data(_load_toml(path), stem)
        except UserInputError as e:
            nm, desc = stem, f"(unreadable: {e})"
        items.append((nm, desc))
    return sorted(items, key=lambda t: t[0].lower())


def load_settings(name: str | None, *, index: Index | None = None) -> Settings:
    """
    Load a profile by name or path (default 'traditional') and turn it
    into validated rules and options.
    """
    if not name:
        name = "traditional"

    path = profile_path(name)
    if path is None:
        raise UserInputError(f"Profile '{name}' not found (workspace: {workspace_subdir('profiles')})")

    raw = _load_toml(path)
    data, resolved_name, description = _split_profile_data(raw, path.stem)
    return settings_from_dict(data, resolved_name, description, index=index, source=path)
