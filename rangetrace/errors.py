"""
Failures raised at the repository boundary.

A search that runs to completion without a match is not an error:
the walker returns None for that.
"""


class RangeTraceError(Exception):
    """Base class for all search failures."""


class RepositoryNotFound(RangeTraceError, ValueError):
    """The path has no enclosing Git repository."""


class PathNotTracked(RangeTraceError, ValueError):
    """The path has no commit history in its repository."""


class RevisionNotFound(RangeTraceError, ValueError):
    """A caller-supplied revision does not resolve to a commit."""


class SnapshotUnavailable(RangeTraceError, RuntimeError):
    """Content for a revision/path pair could not be read from storage."""


class SearchCancelled(RangeTraceError):
    """The caller asked the walk to stop."""
