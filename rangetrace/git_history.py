"""
Git history access for a single file.

Handles:
- Repository root discovery
- Per-file commit log (first-parent, oldest-first)
- File content at a revision

Uses subprocess (no GitPython dependency). Nothing is written to the
repository.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import List, Optional, Protocol, Tuple

from .data_structures import CommitRef
from .errors import (
    PathNotTracked,
    RepositoryNotFound,
    RevisionNotFound,
    SnapshotUnavailable,
)

logger = logging.getLogger(__name__)

DEFAULT_GIT = "git"

_FIELD_SEP = "\x1f"

# git stderr for a revision or path with no content
_NO_CONTENT_MARKERS = (
    "does not exist",
    "exists on disk, but not in",
    "not a valid object name",
    "invalid object name",
)


class RepositoryAccessor(Protocol):
    def resolve_root(self, path: Path) -> Path:
        ...

    def log(
        self,
        root: Path,
        relative_path: str,
        after: Optional[str] = None,
        before: Optional[str] = None,
    ) -> List[CommitRef]:
        ...

    def show_at(self, root: Path, rev: str, relative_path: str) -> Optional[str]:
        ...


class GitRepository:
    """RepositoryAccessor over the git command line."""

    def __init__(self, git_executable: str = DEFAULT_GIT):
        self.git_executable = git_executable

    def _run_git(self, cwd: Path, args: List[str]) -> Tuple[int, str, str]:
        logger.debug("git %s (cwd=%s)", " ".join(args), cwd)
        result = subprocess.run(
            [self.git_executable] + args,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            env={**os.environ, "LC_ALL": "C"},
        )
        return result.returncode, result.stdout, result.stderr

    def resolve_root(self, path: Path) -> Path:
        path = Path(path)
        cwd = path if path.is_dir() else path.parent
        if not cwd.is_dir():
            raise RepositoryNotFound(f"Not a Git repository: {path}")

        code, stdout, _ = self._run_git(cwd, ["rev-parse", "--show-toplevel"])
        if code != 0 or not stdout.strip():
            raise RepositoryNotFound(f"Not a Git repository: {path}")
        return Path(stdout.strip()).resolve()

    def _verify(self, root: Path, rev: str) -> Optional[str]:
        code, stdout, _ = self._run_git(
            root, ["rev-parse", "--verify", "--quiet", f"{rev}^{{commit}}"]
        )
        return stdout.strip() if code == 0 and stdout.strip() else None

    def _has_history(self, root: Path, relative_path: str) -> bool:
        code, stdout, _ = self._run_git(
            root, ["log", "-1", "--format=%H", "HEAD", "--", relative_path]
        )
        return code == 0 and bool(stdout.strip())

    def log(
        self,
        root: Path,
        relative_path: str,
        after: Optional[str] = None,
        before: Optional[str] = None,
    ) -> List[CommitRef]:
        """
        Commits touching `relative_path`, oldest first.

        `after` and `before` are exclusive bounds; without `before` the
        log runs up to and including HEAD.
        """
        revs = ["HEAD"]
        before_hash = None
        if before is not None:
            before_hash = self._verify(root, before)
            if before_hash is None:
                raise RevisionNotFound(f"Unknown revision: {before}")
            revs = [before_hash]
        if after is not None:
            after_hash = self._verify(root, after)
            if after_hash is None:
                raise RevisionNotFound(f"Unknown revision: {after}")
            revs.append(f"^{after_hash}")

        code, stdout, stderr = self._run_git(
            root,
            [
                "log",
                "--first-parent",
                "--reverse",
                "--format=%H%x1f%an%x1f%ae%x1f%s",
            ]
            + revs
            + ["--", relative_path],
        )
        if code != 0:
            raise PathNotTracked(
                f"No history for {relative_path}: {stderr.strip()}"
            )

        commits: List[CommitRef] = []
        for line in stdout.splitlines():
            if not line:
                continue

            parts = line.split(_FIELD_SEP, 3)
            if len(parts) != 4:
                continue

            sha, name, email, subject = parts
            if sha == before_hash:
                continue
            commits.append(
                CommitRef(hash=sha, author_name=name, author_email=email, subject=subject)
            )

        if not commits and not self._has_history(root, relative_path):
            raise PathNotTracked(f"No history for {relative_path}")

        return commits

    def show_at(self, root: Path, rev: str, relative_path: str) -> Optional[str]:
        """
        Content of `relative_path` at `rev`.

        Returns None when `rev` does not resolve (such as the parent of the
        root commit) or the path does not exist there.
        """
        object_name = f"{rev}:{relative_path}"
        code, stdout, stderr = self._run_git(root, ["cat-file", "blob", object_name])
        if code == 0:
            return stdout

        message = stderr.lower()
        if any(marker in message for marker in _NO_CONTENT_MARKERS):
            return None
        raise SnapshotUnavailable(
            f"Cannot read {object_name}: {stderr.strip()}"
        )
