"""Live subclip boundary resolver.

Given the current chunk timing of a live output and the end of the previous
subclip (if the caller still remembers it), compute the next window to cut.
Repeated calls on a timer produce contiguous, non-overlapping windows as long
as the caller feeds back each returned ``end``.
"""

import bisect
import logging
from datetime import timedelta

from livesubclip.config import DISCONTINUITY_FACTOR
from livesubclip.models import ChunkTimingData, SubclipWindow, TimingDataError
from livesubclip.timespan import ticks_to_timedelta

logger = logging.getLogger(__name__)


def _check_timing(timing: ChunkTimingData) -> None:
    if timing.is_error:
        raise TimingDataError("resolve() called with error-flagged timing data")
    if not timing.timestamps or timing.time_scale <= 0:
        raise TimingDataError("timing data has no boundaries or no positive time scale")


def live_edge(timing: ChunkTimingData) -> timedelta:
    """Stream time at the end of the latest complete chunk."""
    _check_timing(timing)
    return ticks_to_timedelta(timing.last_chunk_end, timing.time_scale)


def snap_to_gop(timing: ChunkTimingData, candidate: timedelta) -> timedelta:
    """Return the latest chunk boundary at or before *candidate*.

    Falls back to the earliest boundary when *candidate* precedes them all.
    """
    _check_timing(timing)
    boundaries = [ticks_to_timedelta(t, timing.time_scale) for t in timing.timestamps]
    i = bisect.bisect_right(boundaries, candidate)
    return boundaries[i - 1] if i else boundaries[0]


def resolve(
    timing: ChunkTimingData,
    interval_sec: int,
    last_end: timedelta | None = None,
    *,
    discontinuity_factor: int | float = DISCONTINUITY_FACTOR,
) -> SubclipWindow | None:
    """Compute the next subclip window, or None when there is nothing to cut.

    Args:
        timing: Non-error output of ``extract_timing``.
        interval_sec: Target subclip length in seconds.
        last_end: ``end`` of the previously submitted window, if known.
        discontinuity_factor: A previous end whose distance from one nominal
            interval is at least this many intervals is treated as stale.
    """
    _check_timing(timing)
    if isinstance(interval_sec, bool) or not isinstance(interval_sec, int) or interval_sec <= 0:
        raise ValueError(f"interval_sec must be a positive integer, got {interval_sec!r}")
    if discontinuity_factor <= 0:
        raise ValueError(f"discontinuity_factor must be positive, got {discontinuity_factor!r}")

    interval = timedelta(seconds=interval_sec)
    end = live_edge(timing)
    start = snap_to_gop(timing, end - interval)
    logger.debug("Live edge %s, GOP-aligned start %s", end, start)

    if last_end is not None:
        delta = abs(end - last_end - interval)
        if delta < interval * discontinuity_factor:
            start = last_end
            logger.debug("Continuing from previous end %s (delta %s)", last_end, delta)
        else:
            logger.info(
                "Previous end %s is %s away from one interval; starting at %s instead",
                last_end,
                delta,
                start,
            )

    if end <= start:
        logger.debug("No new chunks since %s", start)
        return None

    return SubclipWindow(start=start, end=end)
