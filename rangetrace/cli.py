#!/usr/bin/env python3
"""
rangetrace CLI

Thin wrapper over the history walker.
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path

from rangetrace.data_structures import ChangeRecord, LineRange
from rangetrace.errors import RangeTraceError
from rangetrace.walker import Direction, HistoryWalker

DEFAULT_COMMENT_PREFIX = "//"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rangetrace",
        description="Find the nearest commit that changed a range of lines in a file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rangetrace show src/app.py --lines 26:94
  rangetrace show src/app.py --lines 40:52 --anchor 1a2b3c4 --direction newer
  rangetrace show src/app.py --write-dir /tmp/rangetrace
        """,
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log every git call and candidate commit, show tracebacks",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        metavar="{show}",
    )

    show_parser = subparsers.add_parser(
        "show",
        help="Show the change that last touched a line range",
    )
    show_parser.add_argument("path", help="File inside a Git working tree")
    show_parser.add_argument(
        "--lines",
        type=LineRange.parse,
        default=None,
        metavar="START:END",
        help="1-indexed inclusive line range (default: whole file)",
    )
    show_parser.add_argument(
        "--direction",
        choices=[d.value for d in Direction],
        default=Direction.OLDER.value,
        help="Search toward older or newer commits (default: older)",
    )
    show_parser.add_argument(
        "--anchor",
        default=None,
        help="Commit from a previous result to continue from (excluded)",
    )
    show_parser.add_argument(
        "--write-dir",
        type=Path,
        default=None,
        help="Also write before/after files into this directory",
    )
    show_parser.add_argument(
        "--comment-prefix",
        default=DEFAULT_COMMENT_PREFIX,
        help=f"Line comment marker for written file headers (default: {DEFAULT_COMMENT_PREFIX})",
    )

    return parser


def _header(change: ChangeRecord, line_range: LineRange, prefix: str) -> str:
    lines = [
        f"commit: {change.commit.hash}",
        f"author: {change.commit.author_name}",
        f"author email: {change.commit.author_email}",
        f"start line: {line_range.start}",
        f"end line: {line_range.end}",
    ]
    return "\n".join(f"{prefix} {line}" for line in lines) + "\n\n"


def write_change_files(
    change: ChangeRecord,
    out_dir: Path,
    prefix: str = DEFAULT_COMMENT_PREFIX,
) -> tuple[Path, Path]:
    """Write both sides of a change as before<ext> / after<ext>."""
    out_dir.mkdir(parents=True, exist_ok=True)
    extension = Path(change.path).suffix
    before_path = out_dir / f"before{extension}"
    after_path = out_dir / f"after{extension}"

    before_path.write_text(
        _header(change, change.before_range, prefix) + change.before, encoding="utf-8"
    )
    after_path.write_text(
        _header(change, change.after_range, prefix) + change.after, encoding="utf-8"
    )
    return before_path, after_path


def _print_change(change: ChangeRecord) -> None:
    commit = change.commit
    print(f"Commit: {commit.hash}")
    print(f"Author: {commit.author_name} <{commit.author_email}>")
    if commit.subject:
        print(f"Subject: {commit.subject}")
    print(f"Before: lines {change.before_range}")
    print(f"After:  lines {change.after_range}")
    print()
    print("-" * 70)
    print(change.before)
    print("-" * 70)
    print(change.after)
    print("-" * 70)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "show":
        file_path = Path(args.path).resolve()

        if not file_path.is_file():
            print(f"Error: File does not exist: {file_path}", file=sys.stderr)
            return 1

        try:
            change = HistoryWalker().find(
                file_path,
                direction=args.direction,
                anchor=args.anchor,
                line_range=args.lines,
            )
        except (RangeTraceError, ValueError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except Exception:
            print("Internal error while searching history.", file=sys.stderr)
            if args.debug:
                traceback.print_exc()
            else:
                print("Run with --debug for details.", file=sys.stderr)
            return 2

        if change is None:
            print("No git history found for selection.")
            return 0

        _print_change(change)

        if args.write_dir is not None:
            before_path, after_path = write_change_files(
                change, args.write_dir, args.comment_prefix
            )
            print(f"Wrote {before_path}")
            print(f"Wrote {after_path}")

        return 0

    # This should never happen because argparse enforces commands
    parser.error(f"Unknown command: {args.command}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
