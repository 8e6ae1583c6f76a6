"""REST client for the remote media services control plane."""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

import requests

from livesubclip.config import ServiceConfig
from livesubclip.timespan import format_iso_duration

JsonDict = dict[str, Any]

ODATA_TYPE = "@odata.type"


class MediaServicesError(RuntimeError):
    """Raised when the control plane rejects a call or cannot be reached."""

    def __init__(self, status_code: int | None, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class NotFoundError(MediaServicesError):
    pass


@dataclass
class Asset:
    name: str
    asset_id: str | None = None
    container: str | None = None
    storage_account: str | None = None
    description: str | None = None

    @classmethod
    def from_resource(cls, data: JsonDict) -> "Asset":
        props = data.get("properties", {})
        return cls(
            name=data["name"],
            asset_id=props.get("assetId"),
            container=props.get("container"),
            storage_account=props.get("storageAccountName"),
            description=props.get("description"),
        )


@dataclass
class LiveOutput:
    name: str
    asset_name: str

    @classmethod
    def from_resource(cls, data: JsonDict) -> "LiveOutput":
        return cls(name=data["name"], asset_name=data.get("properties", {}).get("assetName", ""))


@dataclass
class Job:
    name: str
    transform_name: str
    state: str | None = None


@dataclass
class StreamingLocator:
    name: str
    locator_id: str | None = None


@dataclass
class JobInput:
    """Input of an encoding job: an existing asset (optionally clipped) or HTTP files."""

    asset_name: str | None = None
    files: list[str] = field(default_factory=list)
    start: timedelta | None = None
    end: timedelta | None = None

    @classmethod
    def from_asset(
        cls, asset_name: str, start: timedelta | None = None, end: timedelta | None = None
    ) -> "JobInput":
        return cls(asset_name=asset_name, start=start, end=end)

    @classmethod
    def from_url(cls, url: str) -> "JobInput":
        return cls(files=[url])

    def to_resource(self) -> JsonDict:
        if self.asset_name is None:
            return {ODATA_TYPE: "#Microsoft.Media.JobInputHttp", "files": list(self.files)}

        resource: JsonDict = {ODATA_TYPE: "#Microsoft.Media.JobInputAsset", "assetName": self.asset_name}
        if self.start is not None:
            resource["start"] = {
                ODATA_TYPE: "#Microsoft.Media.AbsoluteClipTime",
                "time": format_iso_duration(self.start),
            }
        if self.end is not None:
            resource["end"] = {
                ODATA_TYPE: "#Microsoft.Media.AbsoluteClipTime",
                "time": format_iso_duration(self.end),
            }
        return resource


SUBCLIP_PRESET: JsonDict = {
    ODATA_TYPE: "#Microsoft.Media.StandardEncoderPreset",
    "codecs": [
        {ODATA_TYPE: "#Microsoft.Media.CopyVideo"},
        {ODATA_TYPE: "#Microsoft.Media.CopyAudio"},
    ],
    "formats": [
        {ODATA_TYPE: "#Microsoft.Media.Mp4Format", "filenamePattern": "Archive-{Basename}{Extension}"},
    ],
}


def _check_manifest_template(template: str) -> None:
    if not template:
        raise ValueError("manifest_url_template is not configured")
    try:
        template.format(asset_name="", account_name="")
    except (KeyError, IndexError, ValueError) as e:
        raise ValueError(f"Invalid manifest_url_template {template!r}: {e!r}") from None


def builtin_preset(preset_name: str) -> JsonDict:
    return {ODATA_TYPE: "#Microsoft.Media.BuiltInStandardEncoderPreset", "presetName": preset_name}


class MediaServicesClient:
    """Thin wrapper over the media services resource API.

    Raises ValueError at construction when the client manifest URL template
    is missing or malformed.
    """

    def __init__(
        self,
        config: ServiceConfig,
        *,
        session: requests.Session | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        _check_manifest_template(config.manifest_url_template)
        self._config = config
        self._session = session or requests.Session()
        self._logger = logger or logging.getLogger(__name__)
        self._base_url = (
            f"{config.arm_endpoint.rstrip('/')}/subscriptions/{config.subscription_id}"
            f"/resourceGroups/{config.resource_group}/providers/Microsoft.Media"
            f"/mediaServices/{config.account_name}"
        )

    # ------------------------------------------------------------------
    # Live outputs
    # ------------------------------------------------------------------
    def get_live_output(self, live_event: str, live_output: str) -> LiveOutput:
        data = self._request("GET", f"liveEvents/{live_event}/liveOutputs/{live_output}")
        return LiveOutput.from_resource(data)

    def fetch_client_manifest(self, asset_name: str) -> str | None:
        """Download the client manifest of *asset_name*.

        Returns None when the manifest does not exist yet or cannot be
        reached; the timing extractor reports that as an error flag.
        """
        url = self._config.manifest_url_template.format(
            asset_name=asset_name, account_name=self._config.account_name
        )
        try:
            response = self._session.get(url, timeout=self._config.timeout)
        except requests.RequestException as exc:
            self._logger.warning("Client manifest request failed: %s (%s)", url, exc)
            return None
        if response.status_code != 200:
            self._logger.warning("Client manifest unavailable: %s (HTTP %s)", url, response.status_code)
            return None
        return response.text

    # ------------------------------------------------------------------
    # Transforms and jobs
    # ------------------------------------------------------------------
    def get_transform(self, name: str) -> JsonDict | None:
        try:
            return self._request("GET", f"transforms/{name}")
        except NotFoundError:
            return None

    def create_or_update_transform(self, name: str, preset: JsonDict) -> JsonDict:
        body = {
            "properties": {
                "outputs": [
                    {"preset": preset, "onError": "StopProcessingJob", "relativePriority": "Normal"}
                ]
            }
        }
        self._logger.info(f"Creating transform '{name}'")
        return self._request("PUT", f"transforms/{name}", body=body)

    def get_or_create_subclip_transform(self, name: str) -> JsonDict:
        return self.get_transform(name) or self.create_or_update_transform(name, SUBCLIP_PRESET)

    def submit_job(self, transform_name: str, job_name: str, job_input: JobInput, output_asset: str) -> Job:
        body = {
            "properties": {
                "input": job_input.to_resource(),
                "outputs": [{ODATA_TYPE: "#Microsoft.Media.JobOutputAsset", "assetName": output_asset}],
            }
        }
        data = self._request("PUT", f"transforms/{transform_name}/jobs/{job_name}", body=body) or {}
        self._logger.info(f"Job '{job_name}' submitted to transform '{transform_name}'")
        return Job(
            name=data.get("name", job_name),
            transform_name=transform_name,
            state=data.get("properties", {}).get("state"),
        )

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------
    def create_asset(
        self, name: str, storage_account: str | None = None, description: str | None = None
    ) -> Asset:
        props: JsonDict = {}
        if storage_account:
            props["storageAccountName"] = storage_account
        if description:
            props["description"] = description
        data = self._request("PUT", f"assets/{name}", body={"properties": props})
        self._logger.info(f"Asset '{name}' created")
        return Asset.from_resource(data)

    def get_asset(self, name: str) -> Asset:
        return Asset.from_resource(self._request("GET", f"assets/{name}"))

    def delete_asset(self, name: str) -> None:
        self._request("DELETE", f"assets/{name}")
        self._logger.info(f"Asset '{name}' deleted")

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------
    def get_streaming_policy(self, name: str) -> JsonDict:
        return self._request("GET", f"streamingPolicies/{name}")

    def get_content_key_policy(self, name: str) -> JsonDict:
        return self._request("GET", f"contentKeyPolicies/{name}")

    def create_streaming_locator(
        self,
        name: str,
        asset_name: str,
        streaming_policy_name: str,
        *,
        locator_id: str | None = None,
        content_key_policy_name: str | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
        content_keys: list[JsonDict] | None = None,
    ) -> StreamingLocator:
        props: JsonDict = {"assetName": asset_name, "streamingPolicyName": streaming_policy_name}
        if locator_id:
            props["streamingLocatorId"] = locator_id
        if content_key_policy_name:
            props["defaultContentKeyPolicyName"] = content_key_policy_name
        if start_time:
            props["startTime"] = start_time.isoformat()
        if end_time:
            props["endTime"] = end_time.isoformat()
        if content_keys:
            props["contentKeys"] = content_keys

        data = self._request("PUT", f"streamingLocators/{name}", body={"properties": props}) or {}
        self._logger.info(f"Streaming locator '{name}' created")
        return StreamingLocator(
            name=data.get("name", name),
            locator_id=data.get("properties", {}).get("streamingLocatorId", locator_id),
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._config.access_token:
            headers["Authorization"] = f"Bearer {self._config.access_token}"
        return headers

    def _request(self, method: str, endpoint: str, *, body: JsonDict | None = None) -> JsonDict | None:
        url = f"{self._base_url}/{endpoint.lstrip('/')}"
        try:
            response = self._session.request(
                method,
                url,
                params={"api-version": self._config.api_version},
                json=body,
                headers=self._headers(),
                timeout=self._config.timeout,
            )
        except requests.RequestException as exc:
            self._logger.error("Media services request failed: %s %s (%s)", method, url, exc)
            raise MediaServicesError(None, f"{method} {endpoint} failed: {exc}") from exc

        if response.status_code >= 400:
            raise self._error_from(response, method, endpoint)
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            message = f"{method} {endpoint} returned HTTP {response.status_code} with a non-JSON body"
            self._logger.error(message)
            raise MediaServicesError(response.status_code, message) from None

    def _error_from(self, response: requests.Response, method: str, endpoint: str) -> MediaServicesError:
        message = f"{method} {endpoint} returned HTTP {response.status_code}"
        try:
            body = response.json()
        except ValueError:
            body = None
        detail = body.get("error", {}).get("message") if isinstance(body, dict) else None
        if detail:
            message = f"{message}: {detail}"

        self._logger.warning(message)
        if response.status_code == 404:
            return NotFoundError(404, message)
        return MediaServicesError(response.status_code, message)
