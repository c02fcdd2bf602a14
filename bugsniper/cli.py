"""
Bug Sniper CLI - Command-line interface for the engine.

Usage:
    bugsniper validate [problems_dir]    Load and validate problem files
    bugsniper play [options]             Play a session in the terminal
"""

import argparse
import logging
import sys
import time
from collections import Counter

from .utils import setup_logging, get_logger

logger = get_logger(__name__)


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Bug Sniper - Timed code review game",
        prog="bugsniper",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Validate command
    validate_parser = subparsers.add_parser("validate", help="Validate problem files")
    validate_parser.add_argument(
        "problems_dir", nargs="?", default=None,
        help="Directory of problem files (defaults to the bundled problems)",
    )

    # Play command
    play_parser = subparsers.add_parser("play", help="Play a session in the terminal")
    play_parser.add_argument("--code-language", default="all", help="Code language or 'all'")
    play_parser.add_argument("--ui-language", default="en", choices=["ja", "en"])
    play_parser.add_argument("--seed", type=int, default=None, help="Seed for the problem pool")
    play_parser.add_argument("--problems-dir", default=None, help="Directory of problem files")

    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    if args.command == "validate":
        return cmd_validate(args)
    elif args.command == "play":
        return cmd_play(args)
    else:
        parser.print_help()
        return 1


def _make_repository(problems_dir):
    from .problems import FileProblemRepository, default_repository

    if problems_dir:
        return FileProblemRepository(problems_dir)
    return default_repository()


def cmd_validate(args) -> int:
    """Load and validate problem files."""
    from .problems import ProblemLoadError

    repository = _make_repository(args.problems_dir)
    print(f"Validating: {repository.root}")

    try:
        problems = repository.all_problems()
    except ProblemLoadError as e:
        print(f"\nErrors ({len(e.errors)}):")
        for error in e.errors:
            print(f"  - {error}")
        return 1

    counts = Counter((p.code_language, p.level) for p in problems)
    print(f"Problems: {len(problems)}")
    print(f"Issues: {sum(p.issue_count for p in problems)}")
    for (language, level), count in sorted(counts.items()):
        print(f"  {language:<12} level {level}: {count}")

    empty = [p.problem_id for p in problems if not p.issues]
    if empty:
        print("\nWarnings:")
        for problem_id in empty:
            print(f"  - {problem_id} has no issues")
    return 0


def cmd_play(args) -> int:
    """Play a session in the terminal."""
    from .config import load_config
    from .problems import is_valid_language_filter, ProblemLoadError
    from .session import SessionManager

    if not is_valid_language_filter(args.code_language):
        print(f"Error: Unknown code language: {args.code_language}")
        return 1

    try:
        manager = SessionManager(_make_repository(args.problems_dir), load_config())
        session = manager.create_session(
            code_language=args.code_language,
            ui_language=args.ui_language,
            seed=args.seed,
        )
    except ProblemLoadError as e:
        print(f"Error: {e}")
        for error in e.errors:
            print(f"  - {error}")
        return 1

    logger.debug("Playing session %s (seed=%s)", session.session_id, args.seed)
    print("Tap a line by typing its number, 's' to skip, 'q' to quit.")
    last_clock = time.monotonic()

    while session.is_active():
        _print_problem(session)
        try:
            command = input("> ").strip().lower()
        except EOFError:
            break

        # Wall-clock seconds since the last input become timer ticks
        now = time.monotonic()
        elapsed = int(now - last_clock)
        last_clock += elapsed
        for _ in range(elapsed):
            if not session.is_active():
                break
            session.tick()
        if not session.is_active():
            print("Time is up!")
            break

        if command == "q":
            break
        if command == "s":
            result = session.skip()
        elif command.isdigit():
            result = session.tap(int(command))
        else:
            print("Type a line number, 's' or 'q'.")
            continue

        if result.issue:
            print(f"  +{result.points} {result.issue.describe(session.ui_language)}")
        elif result.outcome is not None:
            print(f"  {result.outcome.value} ({result.points:+d})")
        if result.bonus:
            print(f"  All issues found! +{result.bonus}")

    if session.is_active():
        manager.end_session(session.session_id)
        print("Game abandoned.")
        return 0

    summary = session.result
    print("\nGame Over!")
    print(f"Score: {summary.score}")
    print(f"Problems: {summary.problems_solved}")
    print(f"Issues found: {summary.issues_found}/{summary.total_issues} "
          f"({summary.accuracy:.0%})")
    return 0


def _print_problem(session):
    state = session.state
    problem = state.current_problem
    print(
        f"\n[{state.remaining_time}s] score {state.score}  combo {state.combo}  "
        f"level {state.current_level}  ({problem.problem_id}, "
        f"{len(state.solved_issue_ids)}/{problem.issue_count} found)"
    )
    for number, line in enumerate(problem.code, start=1):
        marker = "*" if number in state.tapped_lines else " "
        print(f"{marker}{number:>3} | {line}")
    if state.current_problem_complete:
        print("All issues found - 's' to collect the bonus.")


if __name__ == "__main__":
    sys.exit(main())
