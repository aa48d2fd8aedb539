# src/fizzbuzz/display.py
from __future__ import annotations

import shutil
import sys
from collections.abc import Iterable, Sequence
from typing import TextIO

from colorama import Fore, Style

from fizzbuzz.fmt import FormattingOptions, escape_visible, visible_len
from fizzbuzz.registry import Index
from fizzbuzz.rules import Rule, describe, priority
from fizzbuzz.tokenizer import Evaluation

_LABEL_WIDTH = 14


def get_terminal_width(default: int = 80) -> int:
    try:
        return shutil.get_terminal_size((default, 24)).columns
    except OSError:
        return default


def _dotted(label: str, value: object) -> str:
    return f"  {label:.<{_LABEL_WIDTH}} {value}"


def print_configuration(
    *,
    iterations: int,
    rules: Sequence[Rule],
    options: FormattingOptions,
    tie_break: str,
    profile: str | None = None,
    out: TextIO | None = None,
) -> None:
    """Echo the configuration of a run before its output."""
    out = out or sys.stdout
    print(f"{Fore.YELLOW}{Style.BRIGHT}Running FizzBuzz with following configuration:{Style.RESET_ALL}", file=out)
    print(_dotted("iterations", iterations), file=out)
    if profile:
        print(_dotted("profile", profile), file=out)
    print(_dotted("separator", repr(escape_visible(options.separator))), file=out)
    print(_dotted("case", options.case), file=out)
    print(_dotted("tie break", tie_break), file=out)
    print("  rules:", file=out)
    for r in sorted(rules, key=priority, reverse=True):
        print(f"    - {describe(r)}", file=out)
    print("\n", file=out)


def _fmt_candidate(rule: Rule, token: str) -> str:
    return f"{token} (p{priority(rule)})"


def print_evaluation(ev: Evaluation, out: TextIO | None = None) -> None:
    """One debug line per iteration: winner and all matching candidates (STDERR)."""
    out = out or sys.stderr
    idx = f"{Style.DIM}[{ev.i:>5}]{Style.RESET_ALL}"
    if ev.silent:
        line = f"{idx} {Fore.YELLOW}{Style.BRIGHT}SILENT{Style.RESET_ALL}"
    else:
        line = f"{idx} {Fore.GREEN}{Style.BRIGHT}{ev.token:<12}{Style.RESET_ALL}"

    if ev.candidates:
        width = max(60, get_terminal_width())
        tail = ", ".join(_fmt_candidate(c, tok) for c, tok in zip(ev.candidates, ev.candidate_tokens))
        max_tail = max(10, width - visible_len(line) - 5)
        if len(tail) > max_tail:
            tail = tail[: max_tail - 1] + "…"
        line += f" ← {Style.DIM}{tail}{Style.RESET_ALL}"

    print(line, file=out)


def print_evaluation_trace(evaluations: Iterable[Evaluation], elapsed_ms: float, n_rules: int,
                           out: TextIO | None = None) -> None:
    out = out or sys.stderr
    count = 0
    silent = 0
    for ev in evaluations:
        print_evaluation(ev, out)
        count += 1
        silent += ev.silent
    print(
        f"[debug] evaluated {count} iterations with {n_rules} rules in {elapsed_ms:.2f} ms"
        + (f" ({silent} silent)" if silent else ""),
        file=out,
    )


def print_profiles_with_descriptions(items: Sequence[tuple[str, str]], out: TextIO | None = None) -> None:
    out = out or sys.stdout
    if not items:
        print("No profiles found.", file=out)
        return
    width = max(len(nm) for nm, _ in items)
    print(f"{Fore.YELLOW}{Style.BRIGHT}Available profiles:{Style.RESET_ALL}", file=out)
    for nm, desc in items:
        print(f"  {Fore.CYAN}{nm:<{width}}{Style.RESET_ALL}  {desc}", file=out)


def show_condition_list(index: Index, out: TextIO | None = None) -> None:
    """List custom conditions with default priority, source and description."""
    out = out or sys.stdout
    labels = index.labels()
    if not labels:
        print("No custom conditions found.", file=out)
        return
    width = max(len(lbl) for lbl in labels)
    print(f"{Fore.YELLOW}{Style.BRIGHT}Custom conditions:{Style.RESET_ALL}", file=out)
    for lbl in labels:
        prio = index.priorities.get(lbl)
        src = index.sources.get(lbl, "")
        print(f"  {Fore.CYAN}{lbl:<{width}}{Style.RESET_ALL}  p{prio}  {Style.DIM}{src}{Style.RESET_ALL}", file=out)
        desc = index.descriptions.get(lbl)
        if desc:
            print(f"  {'':<{width}}  {desc}", file=out)


def print_discovery_report(index: Index, out: TextIO | None = None) -> None:
    out = out or sys.stderr
    print(f"[debug] discovered custom conditions: {len(index.funcs)}", file=out)
    for source, err in index.failed:
        print(f"[discovery] {Fore.RED}FAIL{Style.RESET_ALL} {source}: {err}", file=out)
    if index.skipped_duplicates:
        print(
            f"[discovery] {Fore.YELLOW}SKIP{Style.RESET_ALL} {len(index.skipped_duplicates)} duplicate label(s) skipped.",
            file=out,
        )
