"""Shared data types used across LiveSubclip."""

from dataclasses import dataclass
from datetime import timedelta


class TimingDataError(ValueError):
    """Raised when the resolver is handed error-flagged timing data."""


@dataclass(frozen=True)
class ChunkTimingData:
    """Normalized chunk timing extracted from a live client manifest.

    ``timestamps`` holds every chunk start in stream order followed by the
    end of the final listed chunk. When ``is_error`` is set the other fields
    carry no meaning.
    """

    timestamps: tuple[int, ...]
    time_scale: int
    last_chunk_end: int
    is_error: bool = False
    is_live: bool = False
    discontinuity: bool = False
    timestamp_offset: int = 0

    @classmethod
    def error(cls) -> "ChunkTimingData":
        return cls(timestamps=(), time_scale=0, last_chunk_end=0, is_error=True)


@dataclass(frozen=True)
class SubclipWindow:
    """A [start, end) range of stream time to cut as one subclip."""

    start: timedelta
    end: timedelta

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError(
                f"Subclip window must have end > start (got {self.start} -> {self.end})"
            )

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def padded(self, padding: timedelta) -> tuple[timedelta, timedelta]:
        """Return (start, end) widened by *padding* on both sides."""
        return self.start - padding, self.end + padding
