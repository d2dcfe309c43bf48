"""HTTP routes for the silencecut worker."""

from pathlib import Path

from flask import Blueprint, current_app, jsonify, request, send_from_directory
from werkzeug.datastructures import FileStorage

from silencecut.analyzers.intervals import load_interval_list
from silencecut.config import SilenceDetectConfig
from silencecut.editors.captions import subtitle_suffix
from silencecut.errors import InputMissing, InvalidOption
from silencecut.ffutil import FFmpegNotFoundError, check_ffmpeg
from silencecut.pipeline import SilencePipeline
from silencecut.scratch import ScratchDir

bp = Blueprint("worker", __name__)


def _scratch() -> ScratchDir:
    return current_app.config["SCRATCH"]


def _pipeline() -> SilencePipeline:
    return current_app.config["PIPELINE"]


def _require_file(field: str, label: str) -> FileStorage:
    f = request.files.get(field)
    if f is None or not f.filename:
        raise InputMissing(f"{label} missing", field=field)
    return f


def _read_silences() -> object:
    """Decode the interval list from the ``silences_file`` upload or ``silences`` field."""
    upload = request.files.get("silences_file")
    if upload is not None and upload.filename:
        return load_interval_list(upload.read())
    inline = request.form.get("silences")
    if inline:
        return load_interval_list(inline)
    raise InputMissing("Silence list missing", field="silences_file")


@bp.route("/")
def health():
    config = current_app.config["WORKER"]
    try:
        check_ffmpeg((config.ffmpeg_binary, config.ffprobe_binary))
        ffmpeg_ok = True
    except FFmpegNotFoundError:
        ffmpeg_ok = False
    return jsonify({"status": "silencecut worker running", "ffmpeg": ffmpeg_ok})


@bp.route("/analyze-silence", methods=["POST"])
def analyze_silence():
    video = _require_file("video", "Video file")
    try:
        detect = SilenceDetectConfig.from_options(
            sensitivity=request.form.get("sensitivity"),
            threshold_db=request.form.get("threshold_db"),
            min_duration=request.form.get("min_duration"),
        )
    except ValueError as e:
        raise InvalidOption(str(e)) from None

    scratch = _scratch()
    with scratch.scoped(scratch.save_upload(video)) as (input_path,):
        report = _pipeline().analyze(input_path, detect)
    return jsonify(report.to_dict())


@bp.route("/apply-silence", methods=["POST"])
def apply_silence():
    video = _require_file("video", "Video file")
    raw = _read_silences()

    scratch = _scratch()
    with scratch.scoped(scratch.save_upload(video)) as (input_path,):
        output_path = scratch.new_path(input_path.suffix)
        result = _pipeline().apply(input_path, raw, output_path)

    return jsonify({
        "status": "silence_removed",
        "outputFile": result.output_path.name,
        "outputDuration": round(result.output_duration, 2),
        "removedDuration": round(result.removed_duration, 2),
        "silences": [i.to_dict() for i in result.intervals],
    })


@bp.route("/extract-audio", methods=["POST"])
def extract_audio():
    video = _require_file("video", "Video file")

    scratch = _scratch()
    with scratch.scoped(scratch.save_upload(video)) as (input_path,):
        audio_path = _pipeline().extract_audio(input_path, scratch.new_path(".wav"))

    return jsonify({"status": "audio_extracted", "audioFile": audio_path.name})


@bp.route("/apply-captions", methods=["POST"])
def apply_captions():
    video = _require_file("video", "Video file")
    srt = _require_file("srt", "Subtitle file")
    suffix = subtitle_suffix(srt.filename)

    scratch = _scratch()
    staged = (scratch.save_upload(video), scratch.save_upload(srt, default_suffix=suffix))
    with scratch.scoped(*staged) as (input_path, subtitle_path):
        output_path = scratch.new_path(input_path.suffix)
        _pipeline().burn_captions(input_path, subtitle_path, output_path)

    return jsonify({"status": "captions_applied", "outputFile": output_path.name})


@bp.route("/cleanup", methods=["POST"])
def cleanup():
    body = request.get_json(silent=True) or {}
    name = body.get("file")
    if not isinstance(name, str) or not name:
        raise InputMissing("No file given", field="file")

    scratch = _scratch()
    removed = scratch.release(scratch.resolve(name))
    return jsonify({"status": "cleaned", "removed": removed})


@bp.route("/files/<name>")
def download(name: str):
    path: Path = _scratch().resolve(name)
    return send_from_directory(path.parent, path.name)
