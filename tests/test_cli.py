"""Tests for the command-line entry point."""

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from silencecut import cli
from silencecut.errors import EmptySilenceList
from silencecut.models import ApplyResult, Interval, SilenceReport


def _run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["silencecut", *argv])
    cli.main()


@pytest.fixture(autouse=True)
def ffmpeg_present():
    with patch("silencecut.cli.check_ffmpeg"):
        yield


def test_no_command_prints_help(monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch)
    assert exc.value.code == 0
    assert "serve" in capsys.readouterr().out


@patch("silencecut.cli.SilencePipeline.analyze")
def test_analyze_prints_report(mock_analyze, monkeypatch, capsys):
    mock_analyze.return_value = SilenceReport(intervals=(Interval(2.0, 3.0),))
    _run(monkeypatch, "analyze", "clip.mp4", "--sensitivity", "medium")

    out = json.loads(capsys.readouterr().out)
    assert out["silences"] == [{"start": 2.0, "end": 3.0, "duration": 1.0}]
    detect = mock_analyze.call_args[0][1]
    assert detect.threshold_db == -35.0


@patch("silencecut.cli.SilencePipeline.apply")
def test_apply_default_output(mock_apply, monkeypatch, capsys, tmp_path):
    silences = tmp_path / "s.json"
    silences.write_text('[{"start": 1, "end": 2}]')
    video = tmp_path / "clip.mp4"
    mock_apply.return_value = ApplyResult(
        output_path=tmp_path / "clip_cut.mp4",
        intervals=[Interval(1.0, 2.0)],
        output_duration=9.0,
    )

    _run(monkeypatch, "apply", str(video), "--silences", str(silences))

    _, raw, output = mock_apply.call_args[0]
    assert raw == [{"start": 1, "end": 2}]
    assert output == tmp_path / "clip_cut.mp4"
    assert "Removed: 1 silences (1.00s)" in capsys.readouterr().out


@patch("silencecut.cli.SilencePipeline.apply", side_effect=EmptySilenceList("Empty silence list"))
def test_apply_error_exits_non_zero(mock_apply, monkeypatch, capsys, tmp_path):
    silences = tmp_path / "s.json"
    silences.write_text("[]")
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, "apply", str(tmp_path / "clip.mp4"), "-s", str(silences))
    assert exc.value.code == 1
    assert "empty_silence_list" in capsys.readouterr().err


@patch("silencecut.cli.SilencePipeline.apply")
def test_apply_missing_silences_file(mock_apply, monkeypatch, capsys, tmp_path):
    with pytest.raises(SystemExit) as exc:
        _run(monkeypatch, "apply", str(tmp_path / "clip.mp4"), "-s", str(tmp_path / "nope.json"))
    assert exc.value.code == 1
    assert "Error:" in capsys.readouterr().err
    mock_apply.assert_not_called()


def test_missing_ffmpeg(monkeypatch, capsys):
    from silencecut.ffutil import FFmpegNotFoundError

    with patch("silencecut.cli.check_ffmpeg", side_effect=FFmpegNotFoundError("ffmpeg not found on PATH")):
        with pytest.raises(SystemExit) as exc:
            _run(monkeypatch, "analyze", "clip.mp4")
    assert exc.value.code == 1
    assert "ffmpeg not found" in capsys.readouterr().err
