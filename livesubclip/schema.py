"""Validated request bodies for the HTTP handlers.

Each ``from_json`` accepts the decoded JSON body (camelCase keys, as sent by
existing callers) and raises ``RequestValidationError`` with a message fit
for a 400 response.
"""

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Mapping

from livesubclip.timespan import parse_timespan


class RequestValidationError(ValueError):
    """A request body the service cannot act on; answered with HTTP 400."""


def _require_str(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value:
        raise RequestValidationError(f"Please pass {key} in the request body")
    return value


def _optional_str(data: Mapping[str, Any], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise RequestValidationError(f"{key} must be a string")
    return value or None


def _optional_datetime(data: Mapping[str, Any], key: str) -> datetime | None:
    value = _optional_str(data, key)
    if value is None:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise RequestValidationError(f"{key} is not an ISO-8601 date/time: {value!r}") from None


def _as_mapping(data: Any) -> Mapping[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise RequestValidationError("Request body must be a JSON object")
    return data


@dataclass
class SubclipRequest:
    live_event_name: str
    live_output_name: str
    interval_sec: int
    last_subclip_end_time: timedelta | None = None
    output_asset_storage_account: str | None = None

    @classmethod
    def from_json(cls, data: Any, default_interval_sec: int = 60) -> "SubclipRequest":
        data = _as_mapping(data)
        if not data.get("liveEventName") or not data.get("liveOutputName"):
            raise RequestValidationError("Please pass liveEventName and liveOutputName in the request body")

        interval = data.get("intervalSec")
        if interval is None:
            interval = default_interval_sec
        if isinstance(interval, bool) or not isinstance(interval, int) or interval <= 0:
            raise RequestValidationError(f"intervalSec must be a positive integer, got {interval!r}")

        last_end = data.get("lastSubclipEndTime")
        if last_end is not None:
            try:
                last_end = parse_timespan(last_end)
            except ValueError as e:
                raise RequestValidationError(f"lastSubclipEndTime: {e}") from None

        return cls(
            live_event_name=_require_str(data, "liveEventName"),
            live_output_name=_require_str(data, "liveOutputName"),
            interval_sec=interval,
            last_subclip_end_time=last_end,
            output_asset_storage_account=_optional_str(data, "outputAssetStorageAccount"),
        )


@dataclass
class CreateAssetRequest:
    asset_owner_address: str | None = None
    asset_description: str | None = None
    asset_storage_account: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> "CreateAssetRequest":
        data = _as_mapping(data)
        return cls(
            asset_owner_address=_optional_str(data, "assetOwnerAddress"),
            asset_description=_optional_str(data, "assetDescription"),
            asset_storage_account=_optional_str(data, "assetStorageAccount"),
        )


@dataclass
class EncodingJobRequest:
    transform_name: str
    input_asset_name: str | None = None
    input_url: str | None = None
    built_in_preset: str | None = None
    output_asset_storage_account: str | None = None

    @classmethod
    def from_json(cls, data: Any) -> "EncodingJobRequest":
        data = _as_mapping(data)
        input_asset = _optional_str(data, "inputAssetName")
        input_url = _optional_str(data, "inputUrl")
        if input_asset is None and input_url is None:
            raise RequestValidationError("Please pass inputAssetName or inputUrl in the request body")
        return cls(
            transform_name=_require_str(data, "transformName"),
            input_asset_name=input_asset,
            input_url=input_url,
            built_in_preset=_optional_str(data, "builtInPreset"),
            output_asset_storage_account=_optional_str(data, "outputAssetStorageAccount"),
        )


@dataclass
class PublishAssetRequest:
    asset_name: str
    streaming_policy_name: str
    content_key_policy_name: str | None = None
    streaming_locator_id: str | None = None
    start_date_time: datetime | None = None
    end_date_time: datetime | None = None
    content_keys: list[dict] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any, asset_name: str | None = None) -> "PublishAssetRequest":
        data = _as_mapping(data)
        if asset_name is None:
            asset_name = _require_str(data, "assetName")

        content_keys = data.get("contentKeys") or []
        # Older callers send the keys as a JSON-encoded string
        if isinstance(content_keys, str):
            try:
                content_keys = json.loads(content_keys)
            except json.JSONDecodeError:
                raise RequestValidationError("contentKeys is not valid JSON") from None
        if not isinstance(content_keys, list) or not all(isinstance(k, dict) for k in content_keys):
            raise RequestValidationError("contentKeys must be a list of objects")

        start = _optional_datetime(data, "startDateTime")
        end = _optional_datetime(data, "endDateTime")
        if start and end and (start.tzinfo is None) != (end.tzinfo is None):
            raise RequestValidationError("startDateTime and endDateTime must both carry a time zone or neither")
        if start and end and end <= start:
            raise RequestValidationError("endDateTime must be after startDateTime")

        locator_id = _optional_str(data, "streamingLocatorId")
        if locator_id is not None:
            try:
                locator_id = str(uuid.UUID(locator_id))
            except ValueError:
                raise RequestValidationError(f"streamingLocatorId is not a GUID: {locator_id!r}") from None

        return cls(
            asset_name=asset_name,
            streaming_policy_name=_require_str(data, "streamingPolicyName"),
            content_key_policy_name=_optional_str(data, "contentKeyPolicyName"),
            streaming_locator_id=locator_id,
            start_date_time=start,
            end_date_time=end,
            content_keys=content_keys,
        )
