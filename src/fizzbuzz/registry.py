# src/fizzbuzz/registry.py
from __future__ import annotations

import inspect
import sys
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass, field
from importlib import import_module
from importlib.resources import as_file
from importlib.resources import files as pkg_files
from importlib.util import module_from_spec, spec_from_file_location
from pathlib import Path

from fizzbuzz.errors import InvalidRuleConfigurationError
from fizzbuzz.rules import CustomToken

DEFAULT_CUSTOM_PRIORITY = 3


# --------------------- Discovery → Index ----------------------

@dataclass
class Index:
    funcs: dict[str, Callable[[int], object]]      # label -> func
    descriptions: dict[str, str]                   # label -> short description
    priorities: dict[str, int]                     # label -> default priority
    sources: dict[str, str] = field(default_factory=dict)           # label -> "ws:file.py" | "pkg:module"
    failed: list[tuple[str, str]] = field(default_factory=list)     # (source, error)
    skipped_duplicates: list[tuple[str, str, str]] = field(default_factory=list)  # (label, skipped, kept)

    def labels(self) -> list[str]:
        return list(self.funcs)

    def make_rule(self, label: str, priority: int | None = None) -> CustomToken:
        fn = self.funcs.get(label)
        if fn is None:
            known = ", ".join(self.funcs) or "none"
            raise InvalidRuleConfigurationError(f"unknown custom condition '{label}' (known: {known})")
        return CustomToken(
            label=label,
            priority=self.priorities[label] if priority is None else priority,
            func=fn,
            description=self.descriptions.get(label, ""),
        )


def _is_token_rule(obj) -> bool:
    return callable(obj) and getattr(obj, "__is_token_rule__", False)


def _import_module_from_file(path: Path, name_hint: str):
    spec = spec_from_file_location(name_hint, path)
    if not spec or not spec.loader:
        raise ImportError(f"Cannot import {path}")
    mod = module_from_spec(spec)
    sys.modules[name_hint] = mod
    spec.loader.exec_module(mod)  # type: ignore[attr-defined]
    return mod


def _collect_from_module(mod) -> list[Callable[[int], object]]:
    return [o for _, o in inspect.getmembers(mod) if _is_token_rule(o)]


# ---------- Decorator (only tags the function; no side effects) ----------

def token_rule(*, label: str, description: str = "", priority: int = DEFAULT_CUSTOM_PRIORITY):
    """
    Tag `fn(i)` as a custom condition. The function returns a bool, or a
    tuple (ok, token) to emit something other than `label`.
    """
    def deco(fn: Callable[[int], object]):
        fn.__is_token_rule__ = True
        fn.label = label
        fn.description = description
        fn.priority = int(priority)
        return fn
    return deco


def discover(workspace: Path | None = None) -> Index:
    """
    Collect custom conditions from <workspace>/conditions/*.py, then from the
    packaged fizzbuzz.conditions modules. The first module providing a label
    keeps it. Modules failing to import are recorded in `Index.failed`.
    """
    idx = Index(funcs=OrderedDict(), descriptions={}, priorities={})

    def _add_from_module(mod, source: str) -> None:
        for fn in _collect_from_module(mod):
            label = fn.label
            if label in idx.funcs:
                idx.skipped_duplicates.append((label, source, idx.sources[label]))
                continue
            idx.funcs[label] = fn
            idx.descriptions[label] = getattr(fn, "description", "")
            idx.priorities[label] = getattr(fn, "priority", DEFAULT_CUSTOM_PRIORITY)
            idx.sources[label] = source

    # 1) Workspace (*.py)
    if workspace:
        ws_dir = workspace / "conditions"
        if ws_dir.is_dir():
            for file in sorted(ws_dir.glob("*.py")):
                if file.name == "__init__.py":
                    continue
                modname = f"_fb_user_cond_{file.stem}"
                try:
                    mod = _import_module_from_file(file, modname)
                except Exception as e:
                    sys.modules.pop(modname, None)
                    idx.failed.append((f"ws:{file.name}", f"{type(e).__name__}: {e}"))
                    continue
                _add_from_module(mod, f"ws:{file.name}")

    # 2) Packaged (fizzbuzz.conditions.*)
    pkg_dir = pkg_files("fizzbuzz") / "conditions"
    with as_file(pkg_dir) as real:
        for file in sorted(Path(real).glob("*.py")):
            if file.name == "__init__.py":
                continue
            modname = f"fizzbuzz.conditions.{file.stem}"
            try:
                mod = import_module(modname)
            except Exception as e:
                idx.failed.append((f"pkg:{modname}", f"{type(e).__name__}: {e}"))
                continue
            _add_from_module(mod, f"pkg:{modname}")

    return idx
