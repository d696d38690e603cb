"""Interval model: which contiguous line ranges of a file carry which audit label.

The service is the authority on classification. Intervals it returns are
treated as a set: they may arrive unsorted and, although they should not,
may overlap. Overlaps are resolved per line by PRECEDENCE, first match wins.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum


class Label(str, Enum):
    """Read-side category of a single line."""

    REVIEWED = "Reviewed"
    MODIFIED = "Modified"
    IGNORED = "Ignored"
    UNSET = "Unset"  # no covering interval, rendered without decoration


class ReviewState(str, Enum):
    """Write-side label sent with a range mutation.

    CLEARED removes classification from the range; it never comes back from a read.
    """

    REVIEWED = "Reviewed"
    MODIFIED = "Modified"
    IGNORED = "Ignored"
    CLEARED = "Cleared"


# Checked in this order for every line; the first label with a covering interval wins.
PRECEDENCE: tuple[Label, ...] = (Label.REVIEWED, Label.MODIFIED, Label.IGNORED)


@dataclass(frozen=True)
class LabeledInterval:
    """Inclusive, zero-based line range ``[start, end]`` with one label."""

    start: int
    end: int
    label: Label

    def __post_init__(self):
        object.__setattr__(self, "label", Label(self.label))
        if self.label not in PRECEDENCE:
            raise ValueError(f"Interval label must be one of {[p.value for p in PRECEDENCE]}, got {self.label!r}")
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid interval [{self.start}, {self.end}]")

    def __contains__(self, line: int) -> bool:
        return self.start <= line <= self.end

    def __len__(self) -> int:
        return self.end - self.start + 1


def ordered_selection(start_line: int, end_line: int) -> tuple[int, int]:
    """Return a raw editor selection with its bounds in ascending order."""
    if end_line < start_line:
        return end_line, start_line
    return start_line, end_line


def classify(intervals: Iterable[LabeledInterval], total_line_count: int) -> dict[int, Label]:
    """Map every line in ``[0, total_line_count)`` to its label.

    Lines covered by no interval are ``Label.UNSET``; interval parts past the
    end of the file are ignored. Returns exactly ``total_line_count`` entries.
    """
    if total_line_count < 0:
        raise ValueError(f"total_line_count must be >= 0, got {total_line_count}")

    by_label: dict[Label, list[LabeledInterval]] = {label: [] for label in PRECEDENCE}
    for interval in intervals:
        by_label[interval.label].append(interval)

    labelled: dict[int, Label] = {}
    last_line = total_line_count - 1
    for label in PRECEDENCE:
        for interval in by_label[label]:
            for line in range(interval.start, min(interval.end, last_line) + 1):
                labelled.setdefault(line, label)

    return {line: labelled.get(line, Label.UNSET) for line in range(total_line_count)}


def normalize(intervals: Iterable[LabeledInterval]) -> list[LabeledInterval]:
    """Collapse overlapping or adjacent same-label intervals into their union.

    Different labels are never merged with each other, so overlap resolution
    stays with ``classify``. The result is sorted by start line and is a fixed
    point: ``normalize(normalize(x)) == normalize(x)``.
    """
    intervals = list(intervals)
    merged: list[LabeledInterval] = []
    for label in PRECEDENCE:
        current: LabeledInterval | None = None
        for interval in sorted((i for i in intervals if i.label is label), key=lambda i: (i.start, i.end)):
            if current is not None and interval.start <= current.end + 1:
                if interval.end > current.end:
                    current = LabeledInterval(current.start, interval.end, label)
                continue
            if current is not None:
                merged.append(current)
            current = interval
        if current is not None:
            merged.append(current)

    return sorted(merged, key=lambda i: (i.start, PRECEDENCE.index(i.label), i.end))


def intervals_from_ranges(ranges: Mapping[Label, Iterable[tuple[int, int]]]) -> list[LabeledInterval]:
    """Build intervals from per-label ``(start, end)`` lists (the wire shape)."""
    return [LabeledInterval(start, end, label) for label, pairs in ranges.items() for start, end in pairs]
