"""
Set algebra over half-open time ranges.

All functions are pure: they never mutate their input and return new, sorted
lists. ``union`` is commutative and associative, so per-person results can be
combined in any order.
"""

from typing import Iterable, List

from .models import TimeRange


def clip(time_range: TimeRange, within: TimeRange) -> TimeRange | None:
    """
    Clip a time range to fit within bounds.
    Returns None if the range is completely outside bounds or only touches them.
    """
    if not time_range.overlaps(within):
        return None

    clipped_start = max(time_range.start, within.start)
    clipped_end = min(time_range.end, within.end)

    return TimeRange(start=clipped_start, end=clipped_end)


def union(ranges: Iterable[TimeRange]) -> List[TimeRange]:
    """
    Merge overlapping or adjacent time ranges into maximal disjoint blocks.

    Example: [09:00-10:00, 10:00-11:00, 10:30-12:00] -> [09:00-12:00]
    """
    sorted_ranges = sorted(ranges, key=lambda r: (r.start, r.end))
    if not sorted_ranges:
        return []

    merged: List[TimeRange] = [sorted_ranges[0]]

    for current in sorted_ranges[1:]:
        last = merged[-1]

        # Touching ranges leave no gap, so they merge too
        if current.start <= last.end:
            if current.end > last.end:
                merged[-1] = TimeRange(start=last.start, end=current.end)
        else:
            merged.append(current)

    return merged


def complement(ranges: Iterable[TimeRange], within: TimeRange) -> List[TimeRange]:
    """
    Return the parts of ``within`` not covered by any of the given ranges.

    Example:
    Within: 09:00 - 17:00
    Ranges: [10:00-11:00, 14:00-15:00]
    Result: [09:00-10:00, 11:00-14:00, 15:00-17:00]
    """
    gaps: List[TimeRange] = []
    current_start = within.start

    for block in union(ranges):
        clipped = clip(block, within)
        if clipped is None:
            continue

        if current_start < clipped.start:
            gaps.append(TimeRange(start=current_start, end=clipped.start))

        current_start = max(current_start, clipped.end)

    if current_start < within.end:
        gaps.append(TimeRange(start=current_start, end=within.end))

    return gaps


def union_all(*range_sets: Iterable[TimeRange]) -> List[TimeRange]:
    """Union several range collections at once."""
    combined: List[TimeRange] = []
    for ranges in range_sets:
        combined.extend(ranges)
    return union(combined)
