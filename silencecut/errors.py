"""Error taxonomy shared by the pipeline and the web layer.

Every error carries a machine-readable ``reason`` and the HTTP status the web
layer answers with. ``details`` is merged into the JSON error body.
"""


class SilenceCutError(Exception):
    reason = "internal_error"
    status_code = 500

    def __init__(self, message: str, **details):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        body = {"status": "error", "reason": self.reason, "error": self.message}
        body.update(self.details)
        return body


class InputMissing(SilenceCutError):
    """A required upload or field was not supplied."""

    reason = "input_missing"
    status_code = 400


class InvalidOption(SilenceCutError):
    """A form field such as sensitivity or min_duration is out of range."""

    reason = "invalid_option"
    status_code = 400


class EmptySilenceList(SilenceCutError):
    reason = "empty_silence_list"
    status_code = 400


class InvalidSilenceList(SilenceCutError):
    """The interval payload is not a JSON array."""

    reason = "invalid_silence_list"
    status_code = 400


class InvalidSilenceRange(SilenceCutError):
    reason = "invalid_silence_range"
    status_code = 400


class MalformedDiagnostic(SilenceCutError):
    """ffmpeg's silencedetect log could not be parsed."""

    reason = "malformed_diagnostic"
    status_code = 502


class InternalIOError(SilenceCutError):
    reason = "internal_io_error"
    status_code = 500


# Keep only the tail of ffmpeg's stderr; the banner and stream dump come first
# and the actual error is at the end.
DIAGNOSTIC_TAIL = 2000


class EngineError(SilenceCutError):
    """ffmpeg exited non-zero, timed out, or could not be started."""

    reason = "engine_error"
    status_code = 502

    def __init__(self, message: str, diagnostic: str = "", **details):
        if diagnostic:
            details["diagnostic"] = diagnostic[-DIAGNOSTIC_TAIL:]
        super().__init__(message, **details)
        self.diagnostic = diagnostic


class AnalysisError(EngineError):
    reason = "analysis_error"


class TransformError(EngineError):
    reason = "transform_error"
