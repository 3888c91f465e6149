"""
Minimal CLI test for rangetrace.cli.

Tests only:
  - Happy path (tracked file, found change)
  - Writing before/after files
  - Error paths (missing file, non-Git directory, bad line range)

Does NOT test output formatting beyond key markers.
"""
import subprocess
import sys
import tempfile
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from rangetrace.cli import main


def _git(path: Path, *args: str) -> str:
    result = subprocess.run(["git", *args], cwd=path, check=True, capture_output=True, text=True)
    return result.stdout.strip()


def _init_git_repo(path: Path) -> str:
    """Initialize a Git repo with two commits to notes.txt; return the last hash."""
    _git(path, "init")
    _git(path, "config", "user.email", "test@example.com")
    _git(path, "config", "user.name", "Test User")

    notes = path / "notes.txt"
    notes.write_text("alpha\nbeta\ngamma\ndelta\n")
    _git(path, "add", "notes.txt")
    _git(path, "commit", "-m", "init")

    notes.write_text("alpha\nBETA\ngamma\ndelta\n")
    _git(path, "commit", "-am", "shout beta")
    return _git(path, "rev-parse", "HEAD")


def _run_cli(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "rangetrace.cli", *args],
        cwd=ROOT,
        capture_output=True,
        text=True,
    )


class TestCLI:

    def test_show_finds_change(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            repo = Path(tmpdir)
            head = _init_git_repo(repo)

            result = _run_cli("show", str(repo / "notes.txt"), "--lines", "2:3")

            assert result.returncode == 0, f"CLI failed: {result.stderr}"
            assert f"Commit: {head}" in result.stdout
            assert "Test User <test@example.com>" in result.stdout
            assert "BETA" in result.stdout

    def test_show_writes_before_and_after(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            repo = Path(tmpdir) / "repo"
            repo.mkdir()
            head = _init_git_repo(repo)
            out_dir = Path(tmpdir) / "out"

            result = _run_cli(
                "show", str(repo / "notes.txt"),
                "--lines", "2",
                "--write-dir", str(out_dir),
                "--comment-prefix", "#",
            )

            assert result.returncode == 0, f"CLI failed: {result.stderr}"
            before = (out_dir / "before.txt").read_text()
            after = (out_dir / "after.txt").read_text()
            assert before.startswith(f"# commit: {head}\n")
            assert "# start line: 2" in before
            assert before.endswith("beta")
            assert after.endswith("BETA")

    def test_no_history_for_newer_search(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            repo = Path(tmpdir)
            head = _init_git_repo(repo)

            result = _run_cli(
                "show", str(repo / "notes.txt"), "--direction", "newer", "--anchor", head
            )

            assert result.returncode == 0
            assert "No git history found" in result.stdout

    def test_nonexistent_file_returns_error(self):
        result = _run_cli("show", "/nonexistent/path/file.txt")
        assert result.returncode == 1
        assert "does not exist" in result.stderr

    def test_non_git_directory_returns_error(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            loose = Path(tmpdir) / "loose.txt"
            loose.write_text("x\n")

            result = _run_cli("show", str(loose))

            assert result.returncode == 1
            assert "Not a Git repository" in result.stderr

    def test_bad_line_range_is_rejected(self):
        result = _run_cli("show", "whatever.txt", "--lines", "9:2")
        assert result.returncode == 2

    def test_main_in_process(self, capsys):
        with tempfile.TemporaryDirectory() as tmpdir:
            repo = Path(tmpdir)
            head = _init_git_repo(repo)

            code = main(["show", str(repo / "notes.txt"), "--lines", "1:1"])

            out = capsys.readouterr().out
            assert code == 0
            # alpha never changed: the walk ends at the creating commit
            assert f"Commit: {head}" not in out
            assert "Before: lines 1:1" in out
