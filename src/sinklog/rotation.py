"""
Size based log rotation.

There is no cross-process locking: two processes checking the same file at
once may both rename it. Files are reopened per write, so a writer that loses
the race simply starts a fresh file.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable

from .exceptions import RotationError

ROTATION_SUFFIX_FORMAT = "%Y%m%d%H%M%S"


class Rotator:
    """Renames a log file aside once it grows past ``threshold_bytes``.

    Args:
        threshold_bytes: Files strictly larger than this are rotated.
        clock: Source of the backup suffix timestamp.
        on_rotate: Called with the backup path after a successful rename.
    """

    def __init__(
        self,
        threshold_bytes: int,
        *,
        clock: Callable[[], datetime] = datetime.now,
        on_rotate: Callable[[Path], None] | None = None,
    ):
        self.threshold_bytes = threshold_bytes
        self._clock = clock
        self._on_rotate = on_rotate

    def backup_path(self, path: Path) -> Path:
        return path.with_name(f"{path.name}.{self._clock().strftime(ROTATION_SUFFIX_FORMAT)}")

    def maybe_rotate(self, path: str | Path) -> Path | None:
        """Rotate ``path`` if it is over the threshold.

        Returns the backup path, or None when nothing was rotated.

        Raises:
            RotationError: if the rename fails.
        """
        path = Path(path)
        try:
            size = path.stat().st_size
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise RotationError(path, path, f"cannot stat: {exc}") from exc

        if size <= self.threshold_bytes:
            return None

        backup = self.backup_path(path)
        try:
            path.rename(backup)
        except OSError as exc:
            raise RotationError(path, backup, str(exc)) from exc

        if self._on_rotate is not None:
            self._on_rotate(backup)
        return backup
