"""Orchestrator — sequences silence analysis and silence removal.

The pipeline keeps no per-request state; one instance is shared by every
request and only holds the ffmpeg client.
"""

import logging
from pathlib import Path
from typing import Any

from silencecut.analyzers.intervals import normalize_intervals, validate_intervals
from silencecut.analyzers.silence import parse_silence_log
from silencecut.config import SilenceDetectConfig, WorkerConfig
from silencecut.editors.captions import apply_captions
from silencecut.editors.cut import build_filters
from silencecut.errors import EngineError, TransformError
from silencecut.ffutil import FFmpegClient
from silencecut.models import ApplyResult, SilenceReport

logger = logging.getLogger(__name__)


def _discard_partial(path: Path) -> None:
    if path.exists():
        logger.warning("Removing partial output %s", path.name)
        path.unlink(missing_ok=True)


class SilencePipeline:
    def __init__(self, client: FFmpegClient):
        self.client = client

    @classmethod
    def from_config(cls, config: WorkerConfig) -> "SilencePipeline":
        return cls(FFmpegClient.from_config(config))

    def analyze(
        self,
        input_path: Path,
        detect: SilenceDetectConfig | None = None,
    ) -> SilenceReport:
        """Detect silent intervals in *input_path*.

        Raises AnalysisError if ffmpeg fails, MalformedDiagnostic if its log
        cannot be parsed.
        """
        detect = detect or SilenceDetectConfig()
        logger.debug(
            "analyze %s: AnalysisRunning (noise=%sdB, d=%s)",
            input_path.name, detect.threshold_db, detect.min_duration,
        )
        log = self.client.detect_silence(input_path, detect)

        logger.debug("analyze %s: LogCaptured (%d chars)", input_path.name, len(log))
        intervals = parse_silence_log(log)

        report = SilenceReport(intervals=tuple(intervals))
        logger.info(
            "analyze %s: %d silences, %.2fs total",
            input_path.name, len(report.intervals), report.total_duration,
        )
        return report

    def apply(
        self,
        input_path: Path,
        raw_intervals: Any,
        output_path: Path,
    ) -> ApplyResult:
        """Cut the given silences out of *input_path* into *output_path*.

        *raw_intervals* is the decoded client payload. It is validated and
        normalized before ffmpeg is started, so an invalid list never reaches
        the engine.
        """
        intervals = normalize_intervals(validate_intervals(raw_intervals))
        logger.debug("apply %s: Validated (%d intervals)", input_path.name, len(intervals))

        filters = build_filters(intervals)
        logger.debug("apply %s: Compiled", input_path.name)

        try:
            self.client.remove_ranges(input_path, filters.audio, filters.video, output_path)
            output_duration = self.client.probe_duration(output_path)
        except EngineError as e:
            _discard_partial(output_path)
            if isinstance(e, TransformError):
                raise
            raise TransformError(e.message, diagnostic=e.diagnostic) from e

        logger.info(
            "apply %s: Produced %s (%.2fs)", input_path.name, output_path.name, output_duration
        )
        return ApplyResult(
            output_path=output_path,
            intervals=intervals,
            output_duration=output_duration,
        )

    def extract_audio(self, input_path: Path, output_path: Path) -> Path:
        """Mono 16 kHz WAV extraction."""
        try:
            return self.client.extract_audio(input_path, output_path)
        except TransformError:
            _discard_partial(output_path)
            raise

    def burn_captions(
        self, input_path: Path, subtitle_path: Path, output_path: Path
    ) -> Path:
        try:
            return apply_captions(self.client, input_path, subtitle_path, output_path)
        except TransformError:
            _discard_partial(output_path)
            raise
