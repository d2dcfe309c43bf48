#!/usr/bin/env python3
"""Generate a synthetic clip for silence-cut testing.

Produces a 10-second video with tone+color segments separated by two
silence+black gaps:
  0-2s     440 Hz tone + blue
  2-3s     silence + black
  3-6s     880 Hz tone + red
  6-6.4s   silence + black
  6.4-10s  660 Hz tone + green
"""

import subprocess
import sys
from pathlib import Path

SEGMENTS = [
    # (tone_hz or None for silence, color, seconds)
    (440, "blue", 2.0),
    (None, "black", 1.0),
    (880, "red", 3.0),
    (None, "black", 0.4),
    (660, "green", 3.6),
]


def build_command(output: Path, ffmpeg: str = "ffmpeg") -> list[str]:
    audio_parts: list[str] = []
    video_parts: list[str] = []
    for i, (tone, color, seconds) in enumerate(SEGMENTS):
        if tone is None:
            audio_parts.append(f"anullsrc=r=44100:cl=mono,atrim=duration={seconds}[a{i}]")
        else:
            audio_parts.append(f"sine=f={tone}:r=44100:d={seconds}[a{i}]")
        video_parts.append(f"color=c={color}:s=320x240:d={seconds}:r=30[v{i}]")

    n = len(SEGMENTS)
    a_labels = "".join(f"[a{i}]" for i in range(n))
    v_labels = "".join(f"[v{i}]" for i in range(n))
    filter_complex = ";".join(
        audio_parts
        + video_parts
        + [
            f"{a_labels}concat=n={n}:v=0:a=1[aout]",
            f"{v_labels}concat=n={n}:v=1:a=0[vout]",
        ]
    )

    return [
        ffmpeg, "-y",
        "-filter_complex", filter_complex,
        "-map", "[vout]",
        "-map", "[aout]",
        "-c:v", "libx264",
        "-pix_fmt", "yuv420p",
        "-c:a", "pcm_s16le",
        str(output),
    ]


def generate_test_video(output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    subprocess.run(build_command(output), check=True, capture_output=True)
    return output


if __name__ == "__main__":
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("tests/fixtures/synthetic.mkv")
    generate_test_video(out)
    print(f"Generated: {out}")
