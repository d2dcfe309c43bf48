"""Worker and detection configuration.

Core code receives these dataclasses explicitly; the environment is only read
by :meth:`WorkerConfig.from_env`, which the CLI and app factory call.
"""

import json
import math
import os
import tempfile
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Mapping

# Noise floor per sensitivity; a higher sensitivity treats louder audio as silence.
SENSITIVITY_PRESETS: dict[str, float] = {
    "low": -40.0,
    "medium": -35.0,
    "high": -30.0,
}

DEFAULT_SENSITIVITY = "high"
DEFAULT_MIN_DURATION = 0.3
DEFAULT_MAX_UPLOAD_BYTES = 1024 * 1024 * 1024  # 1 GiB


def _default_scratch_dir() -> Path:
    return Path(tempfile.gettempdir()) / "silencecut"


@dataclass(frozen=True)
class SilenceDetectConfig:
    """Parameters for ffmpeg's silencedetect filter."""

    threshold_db: float = SENSITIVITY_PRESETS[DEFAULT_SENSITIVITY]
    min_duration: float = DEFAULT_MIN_DURATION

    @classmethod
    def from_options(
        cls,
        sensitivity: str | None = None,
        threshold_db: float | str | None = None,
        min_duration: float | str | None = None,
    ) -> "SilenceDetectConfig":
        """Build a config from user-facing options.

        An explicit ``threshold_db`` wins over ``sensitivity``.
        """
        if threshold_db not in (None, ""):
            threshold = float(threshold_db)
            if not math.isfinite(threshold):
                raise ValueError(f"threshold_db must be finite, got {threshold_db!r}")
        else:
            key = (sensitivity or DEFAULT_SENSITIVITY).strip().lower()
            if key not in SENSITIVITY_PRESETS:
                raise ValueError(
                    f"Unknown sensitivity {sensitivity!r}; "
                    f"expected one of {', '.join(SENSITIVITY_PRESETS)}"
                )
            threshold = SENSITIVITY_PRESETS[key]

        duration = DEFAULT_MIN_DURATION if min_duration in (None, "") else float(min_duration)
        if not math.isfinite(duration) or duration <= 0:
            raise ValueError(f"min_duration must be positive, got {duration}")
        return cls(threshold_db=threshold, min_duration=duration)


@dataclass
class WorkerConfig:
    """Process-level settings for the worker."""

    api_key: str | None = None
    port: int = 3000
    scratch_dir: Path = field(default_factory=_default_scratch_dir)
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    ffmpeg_binary: str = "ffmpeg"
    ffprobe_binary: str = "ffprobe"
    engine_timeout: float = 3600.0
    max_concurrent_jobs: int = 2

    def __post_init__(self):
        self.scratch_dir = Path(self.scratch_dir)
        if self.max_concurrent_jobs < 1:
            raise ValueError("max_concurrent_jobs must be at least 1")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "WorkerConfig":
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        if env.get("FFMPEG_API_KEY"):
            kwargs["api_key"] = env["FFMPEG_API_KEY"]
        if env.get("PORT"):
            kwargs["port"] = int(env["PORT"])
        if env.get("SCRATCH_DIR"):
            kwargs["scratch_dir"] = Path(env["SCRATCH_DIR"])
        if env.get("MAX_UPLOAD_BYTES"):
            kwargs["max_upload_bytes"] = int(env["MAX_UPLOAD_BYTES"])
        if env.get("FFMPEG_BINARY"):
            kwargs["ffmpeg_binary"] = env["FFMPEG_BINARY"]
        if env.get("FFPROBE_BINARY"):
            kwargs["ffprobe_binary"] = env["FFPROBE_BINARY"]
        if env.get("ENGINE_TIMEOUT"):
            kwargs["engine_timeout"] = float(env["ENGINE_TIMEOUT"])
        if env.get("MAX_CONCURRENT_JOBS"):
            kwargs["max_concurrent_jobs"] = int(env["MAX_CONCURRENT_JOBS"])

        return cls(**kwargs)


def load_config(path: str | Path) -> WorkerConfig:
    """Load a WorkerConfig from a JSON file; unknown keys are rejected."""
    path = Path(path)
    data = json.loads(path.read_text())

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a JSON object")

    known = {f.name for f in fields(WorkerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

    return WorkerConfig(**data)
