"""
rangetrace: follow a range of lines through a file's Git history.
"""
from .data_structures import ChangeRecord, CommitRef, DiffKind, DiffOp, LineRange, Side, Snapshot
from .diff_mapper import translate
from .errors import (
    PathNotTracked,
    RangeTraceError,
    RepositoryNotFound,
    RevisionNotFound,
    SearchCancelled,
    SnapshotUnavailable,
)
from .git_history import GitRepository
from .line_diff import SequenceLineDiffer, diff_lines
from .walker import Direction, HistoryWalker, find_change

__version__ = "0.1.0"

__all__ = [
    'ChangeRecord',
    'CommitRef',
    'DiffKind',
    'DiffOp',
    'Direction',
    'GitRepository',
    'HistoryWalker',
    'LineRange',
    'PathNotTracked',
    'RangeTraceError',
    'RepositoryNotFound',
    'RevisionNotFound',
    'SearchCancelled',
    'SequenceLineDiffer',
    'Side',
    'Snapshot',
    'SnapshotUnavailable',
    'diff_lines',
    'find_change',
    'translate',
]
