# src/fizzbuzz/cli.py

"""
FizzBuzz with streaks - command line interface

Description:
    Plays an extended FizzBuzz game over 1..T. Multiples of F print Fizz,
    multiples of B print Buzz, multiples of both print FizzBuzz. A Fizz
    that repeats without a Buzz in between grows a '+' per repetition
    (Fizz, Fizz+, Fizz++, ...), and the other way round.

    Rule sets and formatting can also come from TOML profiles.

usage: see fizzbuzz -h
"""

from __future__ import annotations

import argparse
import sys
import textwrap
import time

from colorama import Fore, Style, just_fix_windows_console

from fizzbuzz import __version__
from fizzbuzz.config import list_profiles_with_descriptions, load_settings
from fizzbuzz.display import (
    print_configuration,
    print_discovery_report,
    print_evaluation_trace,
    print_profiles_with_descriptions,
    show_condition_list,
)
from fizzbuzz.errors import UserInputError
from fizzbuzz.fmt import CASES, FormattingOptions
from fizzbuzz.presets import NEWLINE, traditional_rules
from fizzbuzz.registry import discover
from fizzbuzz.tokenizer import TIE_BREAKS, Tokenizer, output_from
from fizzbuzz.workspace import workspace_dir


def _print_user_error(msg: str) -> None:
    """Uniform, one-line friendly error."""
    prefix = f"{Fore.RED}Error:{Style.RESET_ALL}"
    if not msg.startswith("Error:"):
        msg = f"{prefix} {msg}"
    print(msg, file=sys.stderr)


def decode_escapes(s: str) -> str:
    r"""Turn shell-typed escapes like '\n' or '\t' into the real characters."""
    try:
        return s.encode("latin-1", "backslashreplace").decode("unicode_escape")
    except UnicodeDecodeError:
        raise UserInputError(f"invalid escape in separator {s!r}") from None


# ---- argparse ----
def _build_parser() -> argparse.ArgumentParser:

    epilog = textwrap.dedent("""\
    examples:
      fizzbuzz -t 20 -f 2 -b 7
          Traditional game with streaks, one token per line.

      fizzbuzz -t 15 -f 3 -b 5 --separator ", " --case upper
          Same rules, comma separated and upper case.

      fizzbuzz --profile classic -t 30
          Play a packaged or workspace profile (see --list-profiles).

    workspace:
      $FIZZBUZZ_HOME (default ~/.fizzbuzz) may hold profiles/*.toml and
      conditions/*.py with @token_rule functions.
    """)

    p = argparse.ArgumentParser(
        prog="fizzbuzz",
        description="Command line application to run an extended version of the well known FizzBuzz game.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=epilog,
    )
    p.add_argument("-t", type=int, default=None, help="How many iterations of the FizzBuzz game to play")
    p.add_argument("-f", type=int, default=None, help="Multiples of F are going to print out Fizz")
    p.add_argument("-b", type=int, default=None, help="Multiples of B are going to print out Buzz")
    p.add_argument("--profile", default=None, help="Play a profile (name or path to a .toml file) instead of -f/-b")
    p.add_argument("--separator", default=None, help=r"Text between tokens, escapes allowed (default '\n')")
    p.add_argument("--case", choices=CASES, default=None, help="Case transformation of every token")
    p.add_argument("--tie-break", choices=TIE_BREAKS, default=None,
                   help="Which rule wins when several share the top priority (default: last)")
    p.add_argument("--list-profiles", action="store_true", help="List available profiles and exit")
    p.add_argument("--list-conditions", action="store_true", help="List custom conditions and exit")
    p.add_argument("--quiet", action="store_true", help="Print only the game output, no configuration echo")
    p.add_argument("--debug", action="store_true", help="Trace every iteration's candidates and show tracebacks")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return p


def main(argv=None) -> int:
    """Thin wrapper: catch friendly errors, hide tracebacks unless debug."""
    try:
        return _main_impl(argv)
    except UserInputError as e:
        _print_user_error(str(e))
        return 2
    except KeyboardInterrupt:
        print("Aborted by user.", file=sys.stderr)
        return 130
    except Exception as e:
        debug = "--debug" in (argv if argv is not None else sys.argv)
        if debug:
            raise
        print(f"Unexpected error: {e.__class__.__name__}: {e}", file=sys.stderr)
        print("Run with --debug for a full traceback.", file=sys.stderr)
        return 1


# ---- main ----
def _main_impl(argv=None) -> int:

    just_fix_windows_console()

    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.list_profiles:
        print_profiles_with_descriptions(list_profiles_with_descriptions())
        return 0

    # custom conditions are only needed for listings, debug and custom rules in profiles
    index = None
    if args.list_conditions or args.debug:
        index = discover(workspace_dir())
        if args.debug:
            print_discovery_report(index)
    if args.list_conditions:
        show_condition_list(index)
        return 0

    # --- rules & options: profile or traditional -f/-b ---
    profile_name = None
    if args.profile:
        if args.f is not None or args.b is not None:
            parser.error("-f/-b cannot be combined with --profile")
        settings = load_settings(args.profile, index=index)
        profile_name = settings.name
        rules = settings.rules
        options = settings.formatting
        tie_break = settings.tie_break
        t = args.t if args.t is not None else settings.iterations
        if t is None:
            parser.error(f"-t is required: profile '{settings.name}' defines no ITERATIONS")
        if args.debug:
            print(f"[debug] profile file: {settings._source}", file=sys.stderr)
    else:
        missing = [flag for flag, v in (("-t", args.t), ("-f", args.f), ("-b", args.b)) if v is None]
        if missing:
            parser.error("the following arguments are required: " + ", ".join(missing))
        t = args.t
        rules = traditional_rules(args.f, args.b)
        options = NEWLINE
        tie_break = "last"

    # --- command line overrides ---
    options = FormattingOptions(
        separator=decode_escapes(args.separator) if args.separator is not None else options.separator,
        case=args.case or options.case,
    )
    tie_break = args.tie_break or tie_break

    tokenizer = Tokenizer(rules, tie_break=tie_break)

    # evaluate before printing anything: errors leave no partial output
    t0 = time.perf_counter()
    evaluations = tokenizer.run(t, options)
    dt = (time.perf_counter() - t0) * 1000.0

    if not args.quiet:
        print_configuration(
            iterations=t,
            rules=tokenizer.rules,
            options=options,
            tie_break=tie_break,
            profile=profile_name,
        )
    if args.debug:
        print_evaluation_trace(evaluations, dt, len(tokenizer.rules))

    print(output_from(evaluations, options))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
