"""
Diff Mapper

Translates a line range from one side of a diff into the other side.
Pure function: no I/O, no state.

The cursor counts reference lines consumed so far. A target-only op at
cursor p sits between reference lines p and p+1. Positions are always
compared against the unshifted reference range; shifts accumulate into
the mapped copy.
"""
from typing import Iterable

from .data_structures import DiffKind, DiffOp, LineRange, MapResult, Side

_ROLES = {
    # source side -> (target-only kind, reference-only kind)
    Side.LEFT:  (DiffKind.INSERTED, DiffKind.REMOVED),
    Side.RIGHT: (DiffKind.REMOVED, DiffKind.INSERTED),
}


def translate(
    diff: Iterable[DiffOp],
    line_range: LineRange,
    source: Side = Side.LEFT,
) -> MapResult:
    """
    Map `line_range`, expressed on the `source` side of `diff`, onto the
    other side.

    Returns the mapped range and whether any op changed lines inside the
    range. Insertions landing exactly on either edge of the range leave its
    content intact and do not count as touching it; lines that replace
    removed lines of the range extend it.
    """
    target_only, reference_only = _ROLES[Side(source)]

    start, end = line_range.start, line_range.end
    mapped_start, mapped_end = start, end
    touched = False
    cursor = 0
    # set while the previous op removed lines inside the range
    replacing = False

    for op in diff:
        count = op.count
        if count <= 0:
            continue

        if op.kind is target_only:
            # lines standing in for a removed part of the range belong to it
            if replacing or start <= cursor < end:
                touched = True
                mapped_end += count
            elif cursor < start:
                mapped_start += count
                mapped_end += count
            replacing = False

        elif op.kind is reference_only:
            first, last = cursor + 1, cursor + count
            above = max(0, min(last, start - 1) - cursor)
            inside = max(0, min(last, end) - max(first, start) + 1)

            mapped_start -= above
            mapped_end -= above
            if inside:
                touched = True
                mapped_end -= inside

            replacing = inside > 0
            cursor += count

        else:
            replacing = False
            cursor += count

    mapped_end = max(mapped_end, mapped_start)
    return MapResult(mapped=LineRange(mapped_start, mapped_end), touched=touched)
