"""End-to-end run against a real ffmpeg on a generated clip."""

import shutil
from pathlib import Path

import pytest

from silencecut.config import SilenceDetectConfig, WorkerConfig
from silencecut.pipeline import SilencePipeline

pytestmark = [
    pytest.mark.integration,
    pytest.mark.skipif(
        shutil.which("ffmpeg") is None or shutil.which("ffprobe") is None,
        reason="ffmpeg/ffprobe not installed",
    ),
]


@pytest.fixture(scope="module")
def clip(tmp_path_factory) -> Path:
    from generate_test_video import generate_test_video

    return generate_test_video(tmp_path_factory.mktemp("media") / "clip.mkv")


def test_analyze_then_apply(clip, tmp_path):
    pipeline = SilencePipeline.from_config(WorkerConfig(scratch_dir=tmp_path))

    report = pipeline.analyze(clip, SilenceDetectConfig.from_options(sensitivity="medium"))
    body = report.to_dict()

    assert [(s["start"], s["end"]) for s in body["silences"]] == [
        pytest.approx((2.0, 3.0), abs=0.05),
        pytest.approx((6.0, 6.4), abs=0.05),
    ]
    assert body["totalSilenceDuration"] == pytest.approx(1.4, abs=0.1)

    result = pipeline.apply(clip, body["silences"], tmp_path / "cut.mkv")

    assert result.output_path.exists()
    assert result.output_duration == pytest.approx(8.6, abs=0.25)


def test_reanalysis_is_stable(clip):
    pipeline = SilencePipeline.from_config(WorkerConfig())
    detect = SilenceDetectConfig.from_options(sensitivity="medium")
    assert pipeline.analyze(clip, detect) == pipeline.analyze(clip, detect)
