"""Smooth Streaming client manifest parsing.

Turns the client manifest of a live output's asset into normalized chunk
timing. Any problem with the document is reported through
``ChunkTimingData.is_error`` rather than raised: an absent or half-written
manifest is an everyday condition for a live output that has just started.
"""

import logging
from xml.etree import ElementTree

from livesubclip.models import ChunkTimingData

logger = logging.getLogger(__name__)

# Smooth Streaming's implicit time scale (100 ns ticks).
DEFAULT_TIME_SCALE = 10_000_000


class _ManifestFormatError(ValueError):
    pass


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _int_attr(element: ElementTree.Element, name: str) -> int | None:
    value = element.get(name)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        raise _ManifestFormatError(f"attribute {name}={value!r} is not an integer") from None


def _select_track(root: ElementTree.Element) -> ElementTree.Element:
    streams = [el for el in root if _local_name(el.tag) == "StreamIndex"]
    if not streams:
        raise _ManifestFormatError("no StreamIndex element")
    video = next((s for s in streams if (s.get("Type") or "").lower() == "video"), None)
    return video if video is not None else streams[0]


def _parse(document: str | bytes) -> ChunkTimingData:
    try:
        root = ElementTree.fromstring(document)
    except ElementTree.ParseError as e:
        raise _ManifestFormatError(f"not well-formed XML ({e})") from None

    if _local_name(root.tag) != "SmoothStreamingMedia":
        raise _ManifestFormatError(f"unexpected root element <{_local_name(root.tag)}>")

    track = _select_track(root)

    # A TimeScale on the track wins over the presentation-level one
    time_scale = _int_attr(track, "TimeScale")
    if time_scale is None:
        time_scale = _int_attr(root, "TimeScale")
    if time_scale is None:
        time_scale = DEFAULT_TIME_SCALE
    if time_scale <= 0:
        raise _ManifestFormatError(f"non-positive TimeScale {time_scale}")

    timestamps: list[int] = []
    current = 0
    offset = 0
    duration: int | None = None
    discontinuity = False

    chunks = [el for el in track if _local_name(el.tag) == "c"]
    for i, chunk in enumerate(chunks):
        t = _int_attr(chunk, "t")
        d = _int_attr(chunk, "d")
        r = _int_attr(chunk, "r")

        if t is not None:
            if i == 0:
                offset = t
            elif t < current:
                raise _ManifestFormatError(f"chunk {i} starts at {t}, before {current}")
            elif t != current:
                discontinuity = True
            current = t

        if d is not None:
            duration = d
        if duration is None or duration < 0:
            raise _ManifestFormatError(f"chunk {i} has no usable duration")

        repeat = 1 if r is None else r
        if repeat < 1:
            raise _ManifestFormatError(f"chunk {i} has repeat count {repeat}")

        for _ in range(repeat):
            timestamps.append(current)
            current += duration

    if not timestamps:
        raise _ManifestFormatError("no chunks")

    timestamps.append(current)

    is_live = (root.get("IsLive") or "").lower() == "true"
    # The newest chunk of a live presentation may still be in progress
    last_chunk_end = timestamps[-2] if is_live else timestamps[-1]

    return ChunkTimingData(
        timestamps=tuple(timestamps),
        time_scale=time_scale,
        last_chunk_end=last_chunk_end,
        is_live=is_live,
        discontinuity=discontinuity,
        timestamp_offset=offset,
    )


def extract_timing(document: str | bytes | None) -> ChunkTimingData:
    """Extract chunk timing from a client manifest document.

    Returns an error-flagged value when the document is missing, malformed,
    has no chunks, or declares a non-positive time scale.
    """
    if document is None or not document.strip():
        logger.warning("Client manifest is absent or empty")
        return ChunkTimingData.error()

    try:
        timing = _parse(document)
    except _ManifestFormatError as e:
        logger.warning("Client manifest cannot be used: %s", e)
        return ChunkTimingData.error()

    logger.debug(
        "Manifest timing: %d boundaries, time scale %d, last complete chunk ends at %d",
        len(timing.timestamps),
        timing.time_scale,
        timing.last_chunk_end,
    )
    return timing
