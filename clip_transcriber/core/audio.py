"""Request-scoped temporary audio artifact.

WHY: Each pipeline invocation downloads exactly one audio clip into a
temp directory shared with every other concurrent request. The clip must
never collide with another request's file and must be removed on every
exit path, including timeouts and cancellation.

HOW: ScopedAudioFile.allocate() creates a private directory with
tempfile.mkdtemp (unique by construction) and picks a file name made of
the sanitized source id and a nanosecond timestamp. release() removes the
whole directory, which also catches partial downloads and intermediate
files the extraction tool leaves next to the target path. The object is
a context manager so callers can scope it with ``with``.

RULES:
- One ScopedAudioFile per pipeline invocation, never shared
- release() is idempotent and never raises (failures are logged)
- The file itself is not created here; the extractor writes it
"""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9_-]")
_MAX_STEM_CHARS = 64


def sanitize_source_id(source_id: str) -> str:
    """Make a source identifier safe to embed in a file name.

    Anything outside ``[A-Za-z0-9_-]`` becomes ``_`` so ids like
    ``../etc`` cannot escape the scratch directory.
    """
    safe = _UNSAFE_CHARS.sub("_", source_id)[:_MAX_STEM_CHARS]
    return safe or "source"


@dataclass
class ScopedAudioFile:
    """An audio artifact path plus the private directory that owns it."""

    path: Path
    directory: Path
    released: bool = False

    @classmethod
    def allocate(
        cls,
        source_id: str,
        suffix: str = ".mp3",
        parent: str | Path | None = None,
    ) -> ScopedAudioFile:
        """Create the scratch directory and choose a collision-free path.

        Args:
            source_id: Identifier of the source video (sanitized for the name).
            suffix: File extension for the artifact, including the dot.
            parent: Directory to create the scratch directory in. Defaults
                    to the system temp directory.
        """
        stem = sanitize_source_id(source_id)
        directory = Path(tempfile.mkdtemp(prefix=f"clip_{stem}_", dir=parent))
        path = directory / f"{stem}_{time.time_ns()}{suffix}"
        return cls(path=path, directory=directory)

    def is_materialized(self) -> bool:
        """True when the artifact exists and is non-empty."""
        try:
            return self.path.is_file() and self.path.stat().st_size > 0
        except OSError:
            return False

    def release(self) -> None:
        """Remove the scratch directory and everything in it."""
        if self.released:
            return
        self.released = True

        if self.directory.exists():
            try:
                shutil.rmtree(self.directory)
            except OSError:
                logger.warning("Failed to clean up temp dir: %s", self.directory)

    def __enter__(self) -> ScopedAudioFile:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:  # noqa: ANN001
        self.release()
