"""Storage abstraction for the persisted scoreboard state.

State is a single text blob. The local implementation writes it
atomically with owner-only permissions (0o600) inside an owner-only
directory (0o700).
"""

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Protocol

import structlog

logger = structlog.get_logger()

_STATE_DIR_MODE = 0o700

_STATE_FILE_MODE = 0o600


class StateStorage(Protocol):
    """Protocol for reading and writing a single state blob."""

    def read(self) -> str | None: ...

    def write(self, content: str) -> None: ...

    def clear(self) -> None: ...


class MemoryStateStorage:
    """Keeps the blob in memory. Useful for tests and throwaway sessions."""

    def __init__(self, content: str | None = None) -> None:
        self.content = content

    def read(self) -> str | None:
        return self.content

    def write(self, content: str) -> None:
        self.content = content

    def clear(self) -> None:
        self.content = None


class LocalStateStorage:
    """Stores the blob in a single UTF-8 file on the local filesystem."""

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path).resolve()

    @property
    def file_path(self) -> Path:
        return self._file_path

    def read(self) -> str | None:
        """Return the stored blob, or None when nothing has been saved yet."""
        if not self._file_path.exists():
            return None
        return self._file_path.read_text(encoding="utf-8")

    def write(self, content: str) -> None:
        """Atomically replace the stored blob.

        Creates the parent directory lazily with owner-only permissions and
        writes through a temp file that is renamed into place, so readers
        never see a partial file.
        """
        directory = self._file_path.parent
        directory.mkdir(mode=_STATE_DIR_MODE, parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=str(directory), suffix=".tmp", prefix=".state_")
        fd_owned = True
        try:
            with os.fdopen(fd, "wb") as f:
                fd_owned = False  # os.fdopen took ownership; it will close fd
                f.write(content.encode("utf-8"))
                f.flush()
                os.fsync(f.fileno())
            os.chmod(tmp_path, _STATE_FILE_MODE)  # noqa: PTH101
            Path(tmp_path).replace(self._file_path)
        except BaseException:
            if fd_owned:
                with contextlib.suppress(OSError):
                    os.close(fd)
            with contextlib.suppress(OSError):
                Path(tmp_path).unlink()
            raise
        logger.debug("saved state", path=str(self._file_path), size=len(content))

    def move_aside(self, label: str) -> Path | None:
        """Rename the stored file to ``<name>.<label>`` so the next write cannot overwrite it.

        Returns the new path, or None when nothing was stored.
        """
        if not self._file_path.exists():
            return None
        target = self._file_path.with_name(f"{self._file_path.name}.{label}")
        self._file_path.replace(target)
        logger.warning("moved state file aside", path=str(self._file_path), moved_to=str(target))
        return target

    def clear(self) -> None:
        self._file_path.unlink(missing_ok=True)
        logger.info("cleared state", path=str(self._file_path))
