"""Silence detection analyzer — parses ffmpeg silencedetect logs."""

import logging
import math
import re
from dataclasses import dataclass

from silencecut.errors import MalformedDiagnostic
from silencecut.models import Interval

logger = logging.getLogger(__name__)

_START_RE = re.compile(r"silence_start:\s*(\S*)")
_END_RE = re.compile(r"silence_end:\s*(\S*)")


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class PendingSilence:
    start: float


ParserState = Idle | PendingSilence


def _parse_number(token: str, marker: str, lineno: int) -> float:
    try:
        value = float(token)
    except ValueError:
        raise MalformedDiagnostic(
            f"Non-numeric {marker} value {token!r} on line {lineno}",
            line=lineno,
        ) from None
    if not math.isfinite(value):
        raise MalformedDiagnostic(
            f"Non-finite {marker} value {token!r} on line {lineno}",
            line=lineno,
        )
    return value


def step(state: ParserState, line: str, lineno: int = 0) -> tuple[ParserState, Interval | None]:
    """Advance the parser by one log line.

    Returns the next state and the interval completed by this line, if any.
    A ``silence_end`` seen while idle is dropped.
    """
    m = _START_RE.search(line)
    if m:
        # ffmpeg can report a start a few ms before zero at stream start
        start = max(_parse_number(m.group(1), "silence_start", lineno), 0.0)
        return PendingSilence(start), None

    m = _END_RE.search(line)
    if m:
        if isinstance(state, Idle):
            logger.debug("Ignoring silence_end without a start on line %d", lineno)
            return state, None
        end = _parse_number(m.group(1), "silence_end", lineno)
        try:
            interval = Interval(start=state.start, end=end)
        except ValueError as e:
            raise MalformedDiagnostic(f"{e} on line {lineno}", line=lineno) from None
        return Idle(), interval

    return state, None


def parse_silence_log(text: str) -> list[Interval]:
    """Parse silencedetect output from ffmpeg stderr into Intervals.

    Intervals come back in log order. A trailing ``silence_start`` with no
    matching ``silence_end`` is dropped.
    """
    state: ParserState = Idle()
    intervals: list[Interval] = []

    for lineno, line in enumerate(text.splitlines(), 1):
        state, interval = step(state, line, lineno)
        if interval is not None:
            intervals.append(interval)

    if isinstance(state, PendingSilence):
        logger.debug("Discarding unterminated silence starting at %s", state.start)

    return intervals
