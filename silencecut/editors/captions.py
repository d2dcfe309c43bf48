"""Caption editor — burns an uploaded subtitle file into the video."""

from pathlib import Path

from silencecut.errors import InputMissing
from silencecut.ffutil import FFmpegClient

SUBTITLE_SUFFIXES = (".srt", ".vtt", ".ass", ".ssa")


def subtitle_suffix(filename: str | None) -> str:
    """Return the subtitle extension to stage the upload under.

    Files without an extension are assumed to be SRT.
    """
    suffix = Path(filename or "").suffix.lower()
    if not suffix:
        return ".srt"
    if suffix not in SUBTITLE_SUFFIXES:
        raise InputMissing(
            f"Unsupported subtitle format {suffix!r}; "
            f"expected one of {', '.join(SUBTITLE_SUFFIXES)}"
        )
    return suffix


def apply_captions(
    client: FFmpegClient,
    input_path: Path,
    subtitle_path: Path,
    output_path: Path,
) -> Path:
    """Hard-burn *subtitle_path* onto *input_path*."""
    if subtitle_path.stat().st_size == 0:
        raise InputMissing("Subtitle file is empty")
    client.burn_captions(input_path, subtitle_path, output_path)
    return output_path
