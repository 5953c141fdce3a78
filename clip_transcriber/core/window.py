"""Validated time window into a source video.

WHY: Every extraction and every rebasing step depends on a well-formed
[start, end) interval. Validating once, at construction, means the rest
of the pipeline never has to re-check it.

RULES:
- start >= 0, end > start (strictly positive duration)
- Both bounds must be finite real numbers (booleans are rejected)
- No upper bound is imposed here; the extraction tool may impose its own
- Immutable once constructed
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from clip_transcriber.errors import InvalidWindow


@dataclass(frozen=True)
class TimeWindow:
    """A [start, end) interval in absolute seconds into the source media."""

    start: float
    end: float

    def __post_init__(self) -> None:
        for name in ("start", "end"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise InvalidWindow(f"{name} must be a number of seconds")
            if not math.isfinite(value):
                raise InvalidWindow(f"{name} must be a finite number of seconds")
            # Normalize ints so downstream formatting is uniform
            object.__setattr__(self, name, float(value))

        if self.start < 0:
            raise InvalidWindow("start must not be negative")
        if self.end <= self.start:
            raise InvalidWindow("end must be greater than start")

    @property
    def duration(self) -> float:
        """Length of the window in seconds (always > 0)."""
        return self.end - self.start
