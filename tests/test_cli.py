"""Tests for the CLI entry point (__main__.py)."""

import io
import json
import subprocess
from unittest.mock import MagicMock, patch

import pytest

from diffparser.__main__ import (
    _get_diff,
    build_parser,
    changed_command,
    main,
    parse_command,
)

_BAD_DIFF = """\
diff --git a/x.py b/x.py
@@ broken @@
+x
"""


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path, monkeypatch):
    """Keep a stray .diffparser.yml in the working directory out of the tests."""
    monkeypatch.chdir(tmp_path)


class TestBuildParser:
    def test_parser_has_parse_command(self):
        args = build_parser().parse_args(["parse"])
        assert args.command == "parse"

    def test_parser_has_changed_command(self):
        args = build_parser().parse_args(["changed"])
        assert args.command == "changed"

    def test_parse_defaults(self):
        args = build_parser().parse_args(["parse"])
        assert args.mode is None
        assert args.target_branch is None
        assert args.format is None
        assert args.diff_file is None
        assert args.output_dir is None

    def test_parse_with_options(self):
        args = build_parser().parse_args(
            [
                "parse",
                "--mode",
                "pr",
                "--format",
                "json",
                "markdown",
                "--target-branch",
                "develop",
            ]
        )
        assert args.mode == "pr"
        assert args.format == ["json", "markdown"]
        assert args.target_branch == "develop"

    def test_rejects_unknown_format(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["parse", "--format", "sarif"])


class TestGetDiff:
    def test_worktree_mode(self):
        with patch("diffparser.__main__.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="diff output")
            result = _get_diff("worktree")
            assert result == "diff output"
            mock_run.assert_called_once()
            cmd = mock_run.call_args[0][0]
            assert cmd == ["git", "diff", "--unified=3"]

    def test_staged_mode(self):
        with patch("diffparser.__main__.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="diff output")
            _get_diff("staged", context_lines=5)
            cmd = mock_run.call_args[0][0]
            assert "--cached" in cmd
            assert "--unified=5" in cmd

    def test_pr_mode(self):
        with patch("diffparser.__main__.subprocess.run") as mock_run:
            mock_run.return_value = MagicMock(stdout="diff output")
            _get_diff("pr", "develop")
            cmd = mock_run.call_args[0][0]
            assert "develop...HEAD" in cmd

    def test_git_error_exits(self):
        with patch("diffparser.__main__.subprocess.run") as mock_run:
            mock_run.side_effect = subprocess.CalledProcessError(1, "git", stderr="error")
            with pytest.raises(SystemExit):
                _get_diff("worktree")

    def test_git_not_found_exits(self):
        with patch("diffparser.__main__.subprocess.run") as mock_run:
            mock_run.side_effect = FileNotFoundError()
            with pytest.raises(SystemExit):
                _get_diff("worktree")


class TestParseCommand:
    def test_parse_diff_file_json(self, diff_file, capsys):
        args = build_parser().parse_args(
            ["parse", "--diff-file", str(diff_file), "--format", "json"]
        )
        exit_code = parse_command(args)
        assert exit_code == 0
        data = json.loads(capsys.readouterr().out)
        assert [f["new_name"] for f in data["files"]] == ["config.py", "removed.py"]

    def test_parse_markdown_format(self, diff_file, capsys):
        args = build_parser().parse_args(
            ["parse", "--diff-file", str(diff_file), "--format", "markdown"]
        )
        assert parse_command(args) == 0
        assert "# Diff Summary" in capsys.readouterr().out

    def test_parse_from_stdin(self, sample_diff_text, capsys):
        args = build_parser().parse_args(["parse", "--diff-file", "-", "--format", "json"])
        with patch("sys.stdin", io.StringIO(sample_diff_text)):
            assert parse_command(args) == 0
        data = json.loads(capsys.readouterr().out)
        assert len(data["files"]) == 2

    def test_parse_empty_diff(self, tmp_path, capsys):
        empty = tmp_path / "empty.diff"
        empty.write_text("")
        args = build_parser().parse_args(["parse", "--diff-file", str(empty)])
        assert parse_command(args) == 0
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "No changes" in captured.err

    def test_parse_error_exits(self, tmp_path, capsys):
        bad = tmp_path / "bad.diff"
        bad.write_text(_BAD_DIFF)
        args = build_parser().parse_args(["parse", "--diff-file", str(bad)])
        with pytest.raises(SystemExit) as exc_info:
            parse_command(args)
        assert exc_info.value.code == 1
        assert "Malformed hunk header" in capsys.readouterr().err

    def test_parse_with_output_dir(self, diff_file, tmp_path):
        out_dir = tmp_path / "reports"
        args = build_parser().parse_args(
            [
                "parse",
                "--diff-file",
                str(diff_file),
                "--format",
                "json",
                "markdown",
                "--output-dir",
                str(out_dir),
            ]
        )
        parse_command(args)
        assert (out_dir / "diff.json").exists()
        assert (out_dir / "diff.md").exists()

    def test_parse_uses_git_diff_when_no_file(self):
        args = build_parser().parse_args(["parse", "--format", "json"])
        with patch("diffparser.__main__._get_diff", return_value="") as mock_diff:
            exit_code = parse_command(args)
            assert exit_code == 0
            mock_diff.assert_called_once_with("worktree", "main", 3)

    def test_config_supplies_mode_and_exclusions(self, tmp_path, diff_file, capsys):
        (tmp_path / ".diffparser.yml").write_text(
            "source:\n  mode: staged\nexclusions:\n  paths: ['removed.py']\n"
        )
        args = build_parser().parse_args(["parse", "--diff-file", str(diff_file)])
        assert parse_command(args) == 0
        assert args.mode == "staged"
        data = json.loads(capsys.readouterr().out)
        assert [f["new_name"] for f in data["files"]] == ["config.py"]

    def test_default_formats_from_config(self, tmp_path, diff_file, capsys):
        (tmp_path / ".diffparser.yml").write_text("reporting:\n  format: [markdown]\n")
        args = build_parser().parse_args(["parse", "--diff-file", str(diff_file)])
        assert parse_command(args) == 0
        assert "# Diff Summary" in capsys.readouterr().out

    def test_unknown_format_from_config(self, tmp_path, diff_file, capsys):
        (tmp_path / ".diffparser.yml").write_text("reporting:\n  format: [html]\n")
        args = build_parser().parse_args(["parse", "--diff-file", str(diff_file)])
        assert parse_command(args) == 1
        assert "html" in capsys.readouterr().err

    def test_empty_format_in_config_uses_json(self, tmp_path, diff_file, capsys):
        (tmp_path / ".diffparser.yml").write_text("reporting:\n  format:\n")
        args = build_parser().parse_args(["parse", "--diff-file", str(diff_file)])
        assert parse_command(args) == 0
        data = json.loads(capsys.readouterr().out)
        assert len(data["files"]) == 2


class TestChangedCommand:
    def test_changed_lines(self, diff_file, capsys):
        args = build_parser().parse_args(["changed", "--diff-file", str(diff_file)])
        assert changed_command(args) == 0
        assert json.loads(capsys.readouterr().out) == {"config.py": [2]}

    def test_changed_empty_diff(self, tmp_path, capsys):
        empty = tmp_path / "empty.diff"
        empty.write_text("\n")
        args = build_parser().parse_args(["changed", "--diff-file", str(empty)])
        assert changed_command(args) == 0
        assert json.loads(capsys.readouterr().out) == {}


class TestMain:
    def test_main_no_command(self):
        with patch("sys.argv", ["diffparser"]):
            with pytest.raises(SystemExit) as exc_info:
                main()
            assert exc_info.value.code == 0

    def test_main_parse_command(self, diff_file):
        with patch("sys.argv", ["diffparser", "parse", "--diff-file", str(diff_file)]):
            with pytest.raises(SystemExit) as exc_info:
                main()
            assert exc_info.value.code == 0

    def test_main_changed_command(self, diff_file, capsys):
        with patch("sys.argv", ["diffparser", "changed", "--diff-file", str(diff_file)]):
            with pytest.raises(SystemExit) as exc_info:
                main()
            assert exc_info.value.code == 0
        assert json.loads(capsys.readouterr().out) == {"config.py": [2]}
