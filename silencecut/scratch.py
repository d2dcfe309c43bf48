"""Scratch directory for uploads and produced files."""

import logging
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from werkzeug.datastructures import FileStorage

from silencecut.errors import InputMissing, InternalIOError

logger = logging.getLogger(__name__)


class ScratchDir:
    """A flat directory of randomly named working files.

    Uploads staged for one request are released with :meth:`scoped`.
    Outputs handed back to the caller stay until :meth:`release` is called.
    """

    def __init__(self, root: Path):
        self.root = Path(root)
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise InternalIOError(f"Cannot create scratch directory {self.root}: {e}") from e

    def new_path(self, suffix: str = "") -> Path:
        return self.root / f"{uuid.uuid4().hex}{suffix}"

    def save_upload(self, upload: FileStorage, default_suffix: str = ".mp4") -> Path:
        suffix = Path(upload.filename or "").suffix.lower() or default_suffix
        path = self.new_path(suffix)
        try:
            upload.save(path)
        except OSError as e:
            raise InternalIOError(f"Could not stage upload: {e}") from e
        logger.debug("Staged upload %r as %s", upload.filename, path.name)
        return path

    def resolve(self, name: str) -> Path:
        """Map a caller-supplied file reference to a path inside the scratch dir.

        Absolute paths are accepted as long as they point inside the directory.
        """
        if not name:
            raise InputMissing("No file given")
        root = self.root.resolve()
        candidate = Path(name)
        if not candidate.is_absolute():
            candidate = root / candidate
        candidate = candidate.resolve()
        if candidate.parent != root:
            raise InputMissing(f"{name!r} is not a scratch file", file=name)
        return candidate

    def release(self, path: Path) -> bool:
        """Delete *path*; returns False when it was already gone."""
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            raise InternalIOError(f"Could not delete {path.name}: {e}") from e
        logger.debug("Released %s", path.name)
        return True

    @contextmanager
    def scoped(self, *paths: Path) -> Iterator[tuple[Path, ...]]:
        """Yield *paths* and delete them on exit, whatever happened."""
        try:
            yield paths
        finally:
            for path in paths:
                try:
                    self.release(path)
                except InternalIOError:
                    logger.warning("Leaked scratch file %s", path, exc_info=True)
