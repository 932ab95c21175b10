"""diffparser CLI entry point.

Usage:
    diffparser parse [--config PATH] [--format json|markdown] [--mode worktree|staged|pr]
    diffparser parse --diff-file PATH   # parse a saved diff file ("-" for stdin)
    diffparser changed [options]        # print added line numbers per file
    python -m diffparser parse [options]
"""

from __future__ import annotations

import argparse
import json
import subprocess
import sys
from pathlib import Path

from diffparser.config import DiffParserConfig
from diffparser.diff_parser import DiffParseError, parse_diff
from diffparser.models import Diff
from diffparser.reporters.json_reporter import JSONReporter
from diffparser.reporters.markdown_reporter import MarkdownReporter

_REPORT_FILES = {"json": "diff.json", "markdown": "diff.md"}


def _get_diff(mode: str, target_branch: str = "main", context_lines: int = 3) -> str:
    """Get diff text from git.

    Args:
        mode: 'worktree' for unstaged changes, 'staged' for the index,
            'pr' for the branch diff against ``target_branch``.
        target_branch: Target branch for PR mode diff.
        context_lines: Number of context lines around each change.

    Returns:
        The unified diff text.
    """
    if mode == "staged":
        cmd = ["git", "diff", "--cached"]
    elif mode == "pr":
        cmd = ["git", "diff", f"{target_branch}...HEAD"]
    else:
        cmd = ["git", "diff"]
    cmd.append(f"--unified={context_lines}")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
        return result.stdout
    except subprocess.CalledProcessError as e:
        print(f"Error running git diff: {e.stderr}", file=sys.stderr)
        sys.exit(1)
    except FileNotFoundError:
        print("Error: git is not installed or not in PATH", file=sys.stderr)
        sys.exit(1)


def _read_diff_text(args: argparse.Namespace, config: DiffParserConfig) -> str:
    """Read diff text from the source selected on the command line."""
    if args.diff_file == "-":
        return sys.stdin.read()
    if args.diff_file:
        return Path(args.diff_file).read_text(encoding="utf-8")
    return _get_diff(args.mode, args.target_branch, config.context_lines)


def _load_config(args: argparse.Namespace) -> DiffParserConfig:
    """Load config and apply command line overrides."""
    config = DiffParserConfig.load(args.config)
    if args.mode:
        config.mode = args.mode
    else:
        args.mode = config.mode
    if args.target_branch:
        config.target_branch = args.target_branch
    else:
        args.target_branch = config.target_branch
    return config


def _load_diff(args: argparse.Namespace, config: DiffParserConfig) -> Diff | None:
    """Acquire and parse the diff, dropping excluded files.

    Returns None when there is nothing to parse. Exits on parse errors.
    """
    diff_text = _read_diff_text(args, config)
    if not diff_text.strip():
        print("ℹ️  No changes to parse.", file=sys.stderr)
        return None

    try:
        diff = parse_diff(diff_text)
    except DiffParseError as e:
        print(f"Error parsing diff: {e}", file=sys.stderr)
        sys.exit(1)

    kept = [f for f in diff.files if not config.is_path_excluded(f.path)]
    if len(kept) != len(diff.files):
        print(f"Skipping {len(diff.files) - len(kept)} excluded file(s)", file=sys.stderr)
    return Diff(raw=diff.raw, files=kept)


def parse_command(args: argparse.Namespace) -> int:
    """Execute the parse command."""
    config = _load_config(args)
    diff = _load_diff(args, config)
    if diff is None:
        return 0

    print(f"📄 Parsed {len(diff.files)} file(s)", file=sys.stderr)

    formats = args.format if args.format else config.report_formats
    reporters = {"json": JSONReporter(), "markdown": MarkdownReporter()}

    unknown = [fmt for fmt in formats if fmt not in reporters]
    if unknown:
        print(f"Error: unknown report format(s): {', '.join(unknown)}", file=sys.stderr)
        return 1

    for fmt in formats:
        print(reporters[fmt].render(diff))

    output_dir = args.output_dir or config.output_dir
    if output_dir:
        for fmt in formats:
            reporters[fmt].write(diff, f"{output_dir}/{_REPORT_FILES[fmt]}")
        print(f"📁 Reports written to {output_dir}/", file=sys.stderr)

    return 0


def changed_command(args: argparse.Namespace) -> int:
    """Execute the changed command."""
    config = _load_config(args)
    diff = _load_diff(args, config)
    if diff is None:
        print(json.dumps({}))
        return 0

    print(json.dumps(diff.changed(), indent=2, ensure_ascii=False))
    return 0


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the diff source options shared by every subcommand."""
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to .diffparser.yml config file",
    )
    parser.add_argument(
        "--diff-file",
        type=str,
        default=None,
        help="Path to a saved diff file to parse, or '-' for stdin (instead of git diff)",
    )
    parser.add_argument(
        "--mode",
        type=str,
        choices=["worktree", "staged", "pr"],
        default=None,
        help="Git diff mode: worktree (unstaged), staged (index), or pr (branch diff)",
    )
    parser.add_argument(
        "--target-branch",
        type=str,
        default=None,
        help="Target branch for PR mode diff (default: main)",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="diffparser",
        description="diffparser — parse unified diffs into files, hunks and lines",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # parse subcommand
    parse_parser = subparsers.add_parser("parse", help="Parse a diff and render it")
    _add_source_arguments(parse_parser)
    parse_parser.add_argument(
        "--format",
        type=str,
        nargs="+",
        choices=["json", "markdown"],
        default=None,
        help="Output format(s)",
    )
    parse_parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory to write report files to",
    )

    # changed subcommand
    changed_parser = subparsers.add_parser(
        "changed",
        help="Print the added line numbers of each file as JSON",
    )
    _add_source_arguments(changed_parser)

    return parser


def main() -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "parse":
        sys.exit(parse_command(args))
    elif args.command == "changed":
        sys.exit(changed_command(args))
    else:
        parser.print_help()
        sys.exit(0)


if __name__ == "__main__":  # pragma: no cover
    main()
