"""
Interval algebra over integer minutes on a shared axis (one local day).
"""
from dataclasses import dataclass
from typing import Iterable, List

MIN_VIABLE_WIDTH = 5


@dataclass(frozen=True, order=True)
class Interval:
    """Half-open minute range [start, end)"""
    start: int
    end: int

    @property
    def width(self) -> int:
        return self.end - self.start

    def overlaps(self, other: "Interval") -> bool:
        return self.start < other.end and other.start < self.end


def _cut(interval: Interval, cut: Interval) -> List[Interval]:
    """Remove one cut from one interval: 0, 1 or 2 pieces remain"""
    if not interval.overlaps(cut):
        return [interval]

    pieces = []
    if interval.start < cut.start:
        pieces.append(Interval(interval.start, cut.start))
    if cut.end < interval.end:
        pieces.append(Interval(cut.end, interval.end))
    return pieces


def merge(intervals: Iterable[Interval]) -> List[Interval]:
    """Union of overlapping or adjacent intervals, sorted by start"""
    ordered = sorted(i for i in intervals if i.end > i.start)
    if not ordered:
        return []

    merged = [ordered[0]]
    for current in ordered[1:]:
        last = merged[-1]
        if current.start <= last.end:
            if current.end > last.end:
                merged[-1] = Interval(last.start, current.end)
        else:
            merged.append(current)
    return merged


def subtract(
        base: Iterable[Interval],
        cuts: Iterable[Interval],
        min_width: int = MIN_VIABLE_WIDTH
) -> List[Interval]:
    """
    Remove every cut from every base interval.

    The narrow-fragment filter runs once, after all cuts are applied, which
    keeps the result independent of the order of `cuts`.
    """
    current = list(base)
    for cut in cuts:
        if cut.end <= cut.start:
            continue
        remaining = []
        for interval in current:
            remaining.extend(_cut(interval, cut))
        current = remaining

    return sorted(i for i in current if i.width >= min_width)
