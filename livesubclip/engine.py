"""Orchestrator: turns one timer tick into at most one subclip job."""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from livesubclip.config import SubclipConfig
from livesubclip.manifest import extract_timing
from livesubclip.mediaservices import JobInput, MediaServicesClient
from livesubclip.models import SubclipWindow
from livesubclip.resolver import resolve
from livesubclip.schema import SubclipRequest

logger = logging.getLogger(__name__)


class ManifestUnavailableError(RuntimeError):
    """The live output's client manifest is missing or unusable for now."""


@dataclass
class SubclipResult:
    """Outcome of one subclip attempt.

    ``window`` is None when the live edge has not moved since the last
    subclip; ``end_time`` is what the caller should send back next time.
    """

    transform_name: str
    end_time: timedelta | None
    window: SubclipWindow | None = None
    asset_name: str | None = None
    job_name: str | None = None


def trigger_stamp(now: datetime | None = None) -> str:
    return (now or datetime.now(timezone.utc)).strftime("%y%m%d%H%M%S")


def submit_subclip(
    client: MediaServicesClient,
    request: SubclipRequest,
    config: SubclipConfig,
    trigger: str | None = None,
) -> SubclipResult:
    """Cut the next subclip of a live output and submit its job.

    Raises:
        ManifestUnavailableError: the manifest cannot be read yet; try again
            on the next tick.
        MediaServicesError: the control plane rejected a call.
    """
    trigger = trigger or trigger_stamp()
    client.get_or_create_subclip_transform(config.transform_name)

    live_output = client.get_live_output(request.live_event_name, request.live_output_name)
    document = client.fetch_client_manifest(live_output.asset_name)
    timing = extract_timing(document)
    if timing.is_error:
        raise ManifestUnavailableError(
            "Data cannot be read from live output / asset manifest."
        )

    logger.debug(
        "Timestamps (offset %d): %s",
        timing.timestamp_offset,
        ",".join(str(t) for t in timing.timestamps),
    )
    if timing.discontinuity:
        logger.warning(f"Manifest of live output '{live_output.name}' has a gap in its chunk timeline")

    window = resolve(
        timing,
        request.interval_sec,
        request.last_subclip_end_time,
        discontinuity_factor=config.discontinuity_factor,
    )
    if window is None:
        logger.info(f"Live output '{live_output.name}' has not advanced; nothing to cut")
        return SubclipResult(
            transform_name=config.transform_name,
            end_time=request.last_subclip_end_time,
        )

    logger.info(f"Subclip window {window.start} -> {window.end} (duration {window.duration})")

    asset = client.create_asset(
        f"{live_output.name}-subclip-{trigger}",
        storage_account=request.output_asset_storage_account,
    )

    start, end = window.padded(timedelta(milliseconds=config.padding_ms))
    start = max(start, timedelta(0))
    job = client.submit_job(
        config.transform_name,
        f"Subclip-{live_output.name}-{trigger}",
        JobInput.from_asset(live_output.asset_name, start=start, end=end),
        asset.name,
    )

    return SubclipResult(
        transform_name=config.transform_name,
        end_time=window.end,
        window=window,
        asset_name=asset.name,
        job_name=job.name,
    )
