"""Validation and normalization of client-supplied silence lists."""

import json
import math
from numbers import Real
from typing import Any

from silencecut.errors import EmptySilenceList, InvalidSilenceList, InvalidSilenceRange
from silencecut.models import Interval


def load_interval_list(text: str | bytes) -> Any:
    """Decode the JSON payload of an interval list without validating it."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidSilenceList(f"Invalid silence JSON: {e}") from None


def _coerce(value: Any, key: str, index: int, element: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (Real, str)):
        number = None
    else:
        try:
            number = float(value)
        except (ValueError, OverflowError):
            number = None

    if number is None or not math.isfinite(number):
        raise InvalidSilenceRange(
            f"Silence #{index} has a non-numeric {key}: {value!r}",
            index=index,
            element=element,
        )
    return number


def validate_intervals(raw: Any) -> list[Interval]:
    """Turn a decoded silence list into Intervals, in input order.

    Raises on the first offending element; nothing is partially accepted.
    """
    if not isinstance(raw, list):
        raise InvalidSilenceList(
            f"Silence list must be a JSON array, got {type(raw).__name__}"
        )
    if not raw:
        raise EmptySilenceList("Empty silence list")

    intervals: list[Interval] = []
    for index, element in enumerate(raw):
        if not isinstance(element, dict):
            raise InvalidSilenceRange(
                f"Silence #{index} must be an object with start and end",
                index=index,
                element=element,
            )
        start = _coerce(element.get("start"), "start", index, element)
        end = _coerce(element.get("end"), "end", index, element)
        if start < 0 or start >= end:
            raise InvalidSilenceRange(
                f"Silence #{index} must satisfy 0 <= start < end (got {start}, {end})",
                index=index,
                element=element,
            )
        intervals.append(Interval(start=start, end=end))
    return intervals


def normalize_intervals(intervals: list[Interval]) -> list[Interval]:
    """Sort by start and merge ranges that overlap or touch."""
    merged: list[Interval] = []
    for interval in sorted(intervals, key=lambda i: (i.start, i.end)):
        if merged and interval.start <= merged[-1].end:
            last = merged[-1]
            if interval.end > last.end:
                merged[-1] = Interval(start=last.start, end=interval.end)
        else:
            merged.append(interval)
    return merged
