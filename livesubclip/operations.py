"""Asset, encoding job and publishing handlers around the control plane."""

import logging
import uuid
from dataclasses import dataclass

from livesubclip.mediaservices import Asset, JobInput, MediaServicesClient, builtin_preset
from livesubclip.schema import (
    CreateAssetRequest,
    EncodingJobRequest,
    PublishAssetRequest,
    RequestValidationError,
)

logger = logging.getLogger(__name__)


@dataclass
class EncodingJobResult:
    output_asset_name: str
    job_name: str


def _uniqueness() -> str:
    return str(uuid.uuid4())[:13]


def create_empty_asset(client: MediaServicesClient, request: CreateAssetRequest) -> Asset:
    """Create an empty asset and return it with full metadata (container included)."""
    prefix = request.asset_owner_address or "asset"
    name = f"{prefix}-{_uniqueness()}"
    client.create_asset(
        name,
        storage_account=request.asset_storage_account,
        description=request.asset_description,
    )
    return client.get_asset(name)


def delete_asset(client: MediaServicesClient, asset_name: str) -> None:
    client.delete_asset(asset_name)


def submit_encoding_job(client: MediaServicesClient, request: EncodingJobRequest) -> EncodingJobResult:
    """Encode an asset or a URL with the named transform, creating it if needed."""
    if client.get_transform(request.transform_name) is None:
        if not request.built_in_preset:
            raise RequestValidationError(
                f"Transform '{request.transform_name}' does not exist; pass builtInPreset to create it"
            )
        client.create_or_update_transform(request.transform_name, builtin_preset(request.built_in_preset))

    uniqueness = _uniqueness()
    job_name = f"job-{uniqueness}"
    output_asset = client.create_asset(
        f"output-{uniqueness}", storage_account=request.output_asset_storage_account
    )

    if request.input_url:
        job_input = JobInput.from_url(request.input_url)
        logger.info("Input is a Url.")
    else:
        job_input = JobInput.from_asset(request.input_asset_name)
        logger.info(f"Input is asset '{request.input_asset_name}'.")

    job = client.submit_job(request.transform_name, job_name, job_input, output_asset.name)
    return EncodingJobResult(output_asset_name=output_asset.name, job_name=job.name)


def publish_asset(client: MediaServicesClient, request: PublishAssetRequest):
    """Create a streaming locator for an existing asset."""
    # All raise NotFoundError when missing
    client.get_asset(request.asset_name)
    client.get_streaming_policy(request.streaming_policy_name)
    if request.content_key_policy_name:
        client.get_content_key_policy(request.content_key_policy_name)

    locator_id = request.streaming_locator_id or str(uuid.uuid4())
    return client.create_streaming_locator(
        f"streaminglocator-{locator_id}",
        request.asset_name,
        request.streaming_policy_name,
        locator_id=locator_id,
        content_key_policy_name=request.content_key_policy_name,
        start_time=request.start_date_time,
        end_time=request.end_date_time,
        content_keys=request.content_keys or None,
    )
