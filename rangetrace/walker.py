"""
History Walker

Walks one file's commit history, tracking a line range from snapshot to
snapshot, and stops at the first commit that changes content inside it.

older: the range lives in the newest snapshot of the walk. Candidates go
       newest to oldest; the snapshot AT each candidate is known, the one
       BEFORE it is discovered.
newer: the range lives in the snapshot at the anchor commit. Candidates go
       oldest to newest after the anchor; BEFORE is known, AT is discovered.
"""
import logging
import threading
from collections import deque
from enum import Enum
from pathlib import Path
from typing import Deque, List, Optional, Tuple, Union

from .data_structures import ChangeRecord, CommitRef, LineRange, Side, Snapshot
from .diff_mapper import translate
from .errors import PathNotTracked, SearchCancelled
from .git_history import GitRepository, RepositoryAccessor
from .line_diff import LineDiffer, SequenceLineDiffer

logger = logging.getLogger(__name__)


class Direction(Enum):
    OLDER = "older"
    NEWER = "newer"

    def log_bounds(self, anchor: Optional[str]) -> dict:
        """Exclusive log bounds for the candidate list."""
        if self is Direction.OLDER:
            return {"before": anchor}
        if anchor is None:
            raise ValueError("A newer search needs an anchor commit")
        return {"after": anchor}

    def next_candidate(self, pending: Deque[CommitRef]) -> CommitRef:
        # pending is oldest-first
        if self is Direction.OLDER:
            return pending.pop()
        return pending.popleft()

    def snapshot_revisions(self, commit: CommitRef) -> Tuple[str, str]:
        """(known, discovered) revisions for a candidate."""
        at, parent = commit.hash, f"{commit.hash}~1"
        if self is Direction.OLDER:
            return at, parent
        return parent, at

    def chronological(self, known, discovered) -> tuple:
        """Reorder a (known, discovered) pair as (before, after)."""
        if self is Direction.OLDER:
            return discovered, known
        return known, discovered


class HistoryWalker:
    """Finds the nearest commit touching a line range of one file."""

    def __init__(
        self,
        repository: Optional[RepositoryAccessor] = None,
        differ: Optional[LineDiffer] = None,
    ):
        self.repository = repository if repository is not None else GitRepository()
        self.differ = differ if differ is not None else SequenceLineDiffer()

    def _relative_path(self, root: Path, file_path: Path) -> str:
        try:
            return file_path.resolve().relative_to(root).as_posix()
        except ValueError:
            raise PathNotTracked(f"{file_path} is outside repository {root}") from None

    def _snapshot(self, root: Path, rev: str, relative_path: str) -> Snapshot:
        content = self.repository.show_at(root, rev, relative_path)
        if content is None:
            return Snapshot.missing(rev, relative_path)
        return Snapshot(revision=rev, path=relative_path, content=content)

    def find(
        self,
        file_path: Union[str, Path],
        direction: Union[Direction, str] = Direction.OLDER,
        anchor: Optional[str] = None,
        line_range: Optional[LineRange] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Optional[ChangeRecord]:
        """
        Search the history of `file_path` for the nearest commit whose
        change overlaps `line_range`.

        Args:
            file_path: File inside a Git working tree
            direction: "older" or "newer"
            anchor: Commit to resume from, excluded from the search
                (required for "newer")
            line_range: Range in the walk's starting snapshot; defaults
                to the whole file
            cancel: Checked before each candidate commit

        Returns:
            The ChangeRecord for the first touching commit, or None when
            the history is exhausted without one
        """
        direction = Direction(direction)
        bounds = direction.log_bounds(anchor)

        file_path = Path(file_path)
        root = self.repository.resolve_root(file_path)
        relative_path = self._relative_path(root, file_path)

        commits: List[CommitRef] = self.repository.log(root, relative_path, **bounds)
        pending = deque(commits)
        tracked = line_range
        check_bounds = line_range is not None

        logger.debug(
            "Searching %s %s from %s: %d candidate(s)",
            relative_path, direction.value, anchor or "HEAD", len(pending),
        )

        while pending:
            if cancel is not None and cancel.is_set():
                raise SearchCancelled(f"Search on {relative_path} cancelled")

            commit = direction.next_candidate(pending)
            logger.debug("Checking commit: %s", commit.hash)

            known_rev, discovered_rev = direction.snapshot_revisions(commit)
            known = self._snapshot(root, known_rev, relative_path)
            discovered = self._snapshot(root, discovered_rev, relative_path)

            if not known.exists:
                # the range has no coordinates in a file that is not there
                logger.info("%s does not exist at %s, stopping", relative_path, known_rev)
                return None

            if tracked is None:
                if known.line_count == 0:
                    logger.info("%s is empty at %s, nothing to track", relative_path, known_rev)
                    return None
                tracked = LineRange.spanning(known.line_count)
            elif check_bounds:
                if tracked.end > known.line_count:
                    raise ValueError(
                        f"Line range {tracked} is past the end of {relative_path} "
                        f"({known.line_count} lines at {known_rev})"
                    )
                check_bounds = False

            ops = self.differ.diff(known.content, discovered.content)
            result = translate(ops, tracked, Side.LEFT)

            if result.touched:
                mapped = result.mapped if discovered.exists else tracked
                logger.info("Range %s of %s changed in %s", tracked, relative_path, commit.short_hash)
                return _build_record(direction, commit, relative_path, known, tracked, discovered, mapped)

            tracked = result.mapped

        logger.info("No commit touching %s of %s", tracked, relative_path)
        return None


def _build_record(
    direction: Direction,
    commit: CommitRef,
    relative_path: str,
    known: Snapshot,
    known_range: LineRange,
    discovered: Snapshot,
    discovered_range: LineRange,
) -> ChangeRecord:
    before, after = direction.chronological(
        (known, known_range), (discovered, discovered_range)
    )
    (before_snapshot, before_range), (after_snapshot, after_range) = before, after
    return ChangeRecord(
        commit=commit,
        path=relative_path,
        before=before_snapshot.slice(before_range),
        after=after_snapshot.slice(after_range),
        before_range=before_range,
        after_range=after_range,
    )


def find_change(
    file_path: Union[str, Path],
    direction: Union[Direction, str] = Direction.OLDER,
    anchor: Optional[str] = None,
    line_range: Optional[LineRange] = None,
) -> Optional[ChangeRecord]:
    walker = HistoryWalker()
    return walker.find(
        file_path,
        direction=direction,
        anchor=anchor,
        line_range=line_range,
    )
