"""
Line-level diffing.

Turns two texts into an ordered list of DiffOps using difflib.
A replaced block is reported as a removal followed by an insertion.
"""
from difflib import SequenceMatcher
from typing import List, Protocol

from .data_structures import DiffKind, DiffOp, split_lines


class LineDiffer(Protocol):
    def diff(self, reference: str, target: str) -> List[DiffOp]:
        ...


def diff_lines(reference: str, target: str) -> List[DiffOp]:
    """
    Diff `reference` against `target`.

    INSERTED ops are lines only in `target`, REMOVED ops are lines only
    in `reference`. Counts are exact line counts, in document order.
    """
    matcher = SequenceMatcher(None, split_lines(reference), split_lines(target), autojunk=False)
    ops: List[DiffOp] = []

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            ops.append(DiffOp(DiffKind.UNCHANGED, i2 - i1))
        elif tag == "delete":
            ops.append(DiffOp(DiffKind.REMOVED, i2 - i1))
        elif tag == "insert":
            ops.append(DiffOp(DiffKind.INSERTED, j2 - j1))
        else:  # replace
            ops.append(DiffOp(DiffKind.REMOVED, i2 - i1))
            ops.append(DiffOp(DiffKind.INSERTED, j2 - j1))

    return ops


class SequenceLineDiffer:
    """LineDiffer backed by difflib.SequenceMatcher."""

    def diff(self, reference: str, target: str) -> List[DiffOp]:
        return diff_lines(reference, target)
