"""Silence-cut editor — compiles silence intervals into ffmpeg select filters."""

from typing import NamedTuple

from silencecut.errors import EmptySilenceList
from silencecut.models import Interval


class CutFilters(NamedTuple):
    audio: str
    video: str


def _num(value: float) -> str:
    # repr is the shortest string that round-trips, so no precision is lost
    return repr(float(value))


def compile_predicate(intervals: list[Interval]) -> str:
    """OR together one ``between(t,start,end)`` term per interval."""
    if not intervals:
        raise EmptySilenceList("Cannot compile a filter from an empty silence list")
    return "+".join(f"between(t,{_num(i.start)},{_num(i.end)})" for i in intervals)


def build_filters(intervals: list[Interval]) -> CutFilters:
    """Build matching audio/video filters that drop every interval.

    Both streams use the very same predicate and are re-timestamped from
    their sample/frame counters, so the output stays in sync with no gaps.
    """
    keep = f"not({compile_predicate(intervals)})"
    return CutFilters(
        audio=f"aselect='{keep}',asetpts=N/SR/TB",
        video=f"select='{keep}',setpts=N/FRAME_RATE/TB",
    )
