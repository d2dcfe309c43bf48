"""Shared data types used across silencecut."""

from dataclasses import dataclass, field
from pathlib import Path


def _round(value: float) -> float:
    return round(value, 2)


@dataclass(frozen=True)
class Interval:
    """A closed silence range in seconds.

    ``duration`` is always derived from the bounds; rounding only happens in
    :meth:`to_dict`, which is the display form.
    """

    start: float
    end: float

    def __post_init__(self):
        if self.start < 0:
            raise ValueError(f"Interval start cannot be negative: {self.start}")
        if self.end <= self.start:
            raise ValueError(
                f"Interval end ({self.end}) must be greater than start ({self.start})"
            )

    @property
    def duration(self) -> float:
        return self.end - self.start

    def to_dict(self) -> dict:
        return {
            "start": _round(self.start),
            "end": _round(self.end),
            "duration": _round(self.duration),
        }


@dataclass(frozen=True)
class SilenceReport:
    """Result of one silence analysis run."""

    intervals: tuple[Interval, ...] = ()

    @property
    def total_duration(self) -> float:
        return sum(i.duration for i in self.intervals)

    def to_dict(self) -> dict:
        return {
            "status": "ok",
            "silences": [i.to_dict() for i in self.intervals],
            "totalSilenceDuration": _round(self.total_duration),
        }


@dataclass(frozen=True)
class EngineResult:
    """Captured outcome of a single ffmpeg/ffprobe invocation."""

    returncode: int
    stdout: str = ""
    stderr: str = ""


@dataclass
class ApplyResult:
    """Outcome of a silence-removal transcode."""

    output_path: Path
    intervals: list[Interval] = field(default_factory=list)
    output_duration: float | None = None

    @property
    def removed_duration(self) -> float:
        return sum(i.duration for i in self.intervals)
