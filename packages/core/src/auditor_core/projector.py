"""Annotation projector: turn a per-line classification into render batches.

Runs of consecutive lines with the same label collapse into one range, so the
editor receives the fewest possible decoration requests per category.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from auditor_core.intervals import Label, LabeledInterval

# Inclusive [start_line, end_line], zero-based.
LineRange = tuple[int, int]


@dataclass
class Projection:
    """Decoration batches for one file, one list of ranges per visual category."""

    reviewed: list[LineRange] = field(default_factory=list)
    modified: list[LineRange] = field(default_factory=list)
    ignored: list[LineRange] = field(default_factory=list)

    def ranges(self, label: Label) -> list[LineRange]:
        if label is Label.REVIEWED:
            return self.reviewed
        if label is Label.MODIFIED:
            return self.modified
        if label is Label.IGNORED:
            return self.ignored
        raise ValueError(f"{label!r} has no decoration category")

    def to_intervals(self) -> list[LabeledInterval]:
        return [
            LabeledInterval(start, end, label)
            for label in (Label.REVIEWED, Label.MODIFIED, Label.IGNORED)
            for start, end in self.ranges(label)
        ]


def project(classification: Mapping[int, Label], total_line_count: int) -> Projection:
    """Build the minimal decoration batches for lines ``[0, total_line_count)``.

    Lines missing from ``classification`` count as unset; unset lines get no
    decoration in any category.
    """
    projection = Projection()
    run_label: Label | None = None
    run_start = 0
    # One step past the last line flushes the final run.
    for line in range(total_line_count + 1):
        label = classification.get(line, Label.UNSET) if line < total_line_count else None
        if label is run_label:
            continue
        if run_label is not None and run_label is not Label.UNSET:
            projection.ranges(run_label).append((run_start, line - 1))
        run_label, run_start = label, line
    return projection
