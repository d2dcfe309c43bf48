"""FFmpeg/ffprobe subprocess helpers."""

import logging
import shutil
import subprocess
import threading
from pathlib import Path

from silencecut.config import SilenceDetectConfig, WorkerConfig
from silencecut.errors import AnalysisError, EngineError, TransformError
from silencecut.models import EngineResult

logger = logging.getLogger(__name__)


class FFmpegNotFoundError(RuntimeError):
    pass


def check_ffmpeg(binaries: tuple[str, ...] = ("ffmpeg", "ffprobe")) -> None:
    """Raise FFmpegNotFoundError if ffmpeg/ffprobe are not on PATH."""
    for cmd in binaries:
        if shutil.which(cmd) is None:
            raise FFmpegNotFoundError(f"{cmd} not found on PATH")


def _backslash_escape(text: str, specials: str) -> str:
    return "".join("\\" + ch if ch in specials else ch for ch in text)


def escape_filter_path(path: Path) -> str:
    """Escape a file path for use as a filter option inside a filtergraph.

    ffmpeg unescapes twice: once for the option value, then once for the
    filtergraph description.
    """
    value = _backslash_escape(str(path), "\\':")
    return _backslash_escape(value, "\\'[],;")


class FFmpegClient:
    """The only component that starts ffmpeg processes.

    Commands are always argument lists. A bounded semaphore caps how many
    ffmpeg processes run at once across every request sharing the client.
    """

    def __init__(
        self,
        ffmpeg_binary: str = "ffmpeg",
        ffprobe_binary: str = "ffprobe",
        timeout: float | None = 3600.0,
        max_concurrent: int = 2,
    ):
        self.ffmpeg_binary = ffmpeg_binary
        self.ffprobe_binary = ffprobe_binary
        self.timeout = timeout
        self._slots = threading.BoundedSemaphore(max_concurrent)

    @classmethod
    def from_config(cls, config: WorkerConfig) -> "FFmpegClient":
        return cls(
            ffmpeg_binary=config.ffmpeg_binary,
            ffprobe_binary=config.ffprobe_binary,
            timeout=config.engine_timeout,
            max_concurrent=config.max_concurrent_jobs,
        )

    def run(self, args: list[str], error_cls: type[EngineError] = EngineError) -> EngineResult:
        """Run ``ffmpeg`` with *args* and return the captured output.

        On timeout the child is killed before the error is raised.
        """
        cmd = [self.ffmpeg_binary, *args]
        return self._run(cmd, error_cls)

    def _run(self, cmd: list[str], error_cls: type[EngineError]) -> EngineResult:
        logger.debug("Waiting for engine slot: %s", cmd[0])
        with self._slots:
            logger.info("Running: %s", " ".join(cmd))
            try:
                proc = subprocess.run(
                    cmd,
                    capture_output=True,
                    text=True,
                    errors="replace",
                    timeout=self.timeout,
                )
            except subprocess.TimeoutExpired as e:
                stderr = e.stderr if isinstance(e.stderr, str) else (e.stderr or b"").decode(errors="replace")
                logger.error("%s timed out after %ss", cmd[0], self.timeout)
                raise error_cls(f"{cmd[0]} timed out after {self.timeout}s", diagnostic=stderr) from e
            except OSError as e:
                logger.error("Could not start %s: %s", cmd[0], e)
                raise error_cls(f"Could not start {cmd[0]}: {e}") from e

        result = EngineResult(
            returncode=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
        if result.returncode != 0:
            logger.error("%s failed (rc=%s): %s", cmd[0], result.returncode, result.stderr[-500:])
            raise error_cls(
                f"{cmd[0]} failed (rc={result.returncode})",
                diagnostic=result.stderr,
            )
        return result

    # -- modes ---------------------------------------------------------------

    def detect_silence(self, input_path: Path, config: SilenceDetectConfig) -> str:
        """Run silencedetect in analysis mode and return the diagnostic log."""
        args = [
            "-hide_banner",
            "-nostats",
            "-i", str(input_path),
            "-af", f"silencedetect=noise={config.threshold_db}dB:d={config.min_duration}",
            "-f", "null", "-",
        ]
        result = self.run(args, error_cls=AnalysisError)
        return result.stderr

    def remove_ranges(
        self,
        input_path: Path,
        audio_filter: str,
        video_filter: str,
        output_path: Path,
    ) -> None:
        """Transcode *input_path* with the given select filters."""
        args = [
            "-y",
            "-i", str(input_path),
            "-af", audio_filter,
            "-vf", video_filter,
            str(output_path),
        ]
        self.run(args, error_cls=TransformError)

    def extract_audio(
        self, input_path: Path, output_path: Path, sample_rate: int = 16000
    ) -> Path:
        """Extract audio as mono 16-bit PCM WAV at the given sample rate."""
        args = [
            "-y",
            "-i", str(input_path),
            "-vn",
            "-acodec", "pcm_s16le",
            "-ar", str(sample_rate),
            "-ac", "1",
            str(output_path),
        ]
        self.run(args, error_cls=TransformError)
        return output_path

    def burn_captions(
        self, input_path: Path, subtitle_path: Path, output_path: Path
    ) -> None:
        """Hard-burn subtitles into video."""
        args = [
            "-y",
            "-i", str(input_path),
            "-vf", f"subtitles=filename={escape_filter_path(subtitle_path)}",
            str(output_path),
        ]
        self.run(args, error_cls=TransformError)

    def probe_duration(self, input_path: Path) -> float:
        """Container duration in seconds via ffprobe."""
        cmd = [
            self.ffprobe_binary,
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            str(input_path),
        ]
        result = self._run(cmd, EngineError)
        try:
            return float(result.stdout.strip())
        except ValueError as e:
            raise EngineError(
                f"ffprobe returned no duration for {input_path.name}",
                diagnostic=result.stdout + result.stderr,
            ) from e
