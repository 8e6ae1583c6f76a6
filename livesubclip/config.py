"""Service configuration: the contract between deployment and engine."""

import json
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Mapping

DEFAULT_INTERVAL_SEC = 60
# Heuristic: absorbs a missed tick or two, rejects state left over from a restart.
DISCONTINUITY_FACTOR = 3
DEFAULT_PADDING_MS = 100
DEFAULT_SUBCLIP_TRANSFORM = "FunctionSubclipTransform"

ENV_PREFIX = "LIVESUBCLIP_"


@dataclass
class SubclipConfig:
    """Tunables for live subclipping."""

    interval_sec: int = DEFAULT_INTERVAL_SEC
    discontinuity_factor: float = DISCONTINUITY_FACTOR
    padding_ms: int = DEFAULT_PADDING_MS
    transform_name: str = DEFAULT_SUBCLIP_TRANSFORM

    def __post_init__(self) -> None:
        if isinstance(self.interval_sec, bool) or not isinstance(self.interval_sec, int):
            raise ValueError(f"interval_sec must be an integer, got {self.interval_sec!r}")
        if self.interval_sec <= 0:
            raise ValueError("interval_sec must be positive")
        if self.discontinuity_factor <= 0:
            raise ValueError("discontinuity_factor must be positive")
        if self.padding_ms < 0:
            raise ValueError("padding_ms must not be negative")


@dataclass
class ServiceConfig:
    """Where and how to reach the media services account."""

    subscription_id: str
    resource_group: str
    account_name: str
    access_token: str = ""
    arm_endpoint: str = "https://management.azure.com"
    api_version: str = "2022-08-01"
    manifest_url_template: str = ""
    timeout: float = 30.0


@dataclass
class AppConfig:
    service: ServiceConfig
    subclip: SubclipConfig = field(default_factory=SubclipConfig)


_REQUIRED_SERVICE_FIELDS = ("subscription_id", "resource_group", "account_name")


def _build(data: Mapping) -> AppConfig:
    service_data = dict(data.get("service", {}))
    missing = [name for name in _REQUIRED_SERVICE_FIELDS if not service_data.get(name)]
    if missing:
        raise ValueError(f"Service config must contain {', '.join(missing)}")

    known = {f.name for f in fields(ServiceConfig)}
    unknown = set(service_data) - known
    if unknown:
        raise ValueError(f"Unknown service config fields: {', '.join(sorted(unknown))}")

    try:
        subclip = SubclipConfig(**data.get("subclip", {}))
    except TypeError as e:
        raise ValueError(f"Invalid subclip config: {e}") from None
    return AppConfig(service=ServiceConfig(**service_data), subclip=subclip)


def load_config(path: str | Path) -> AppConfig:
    """Load and validate configuration from a JSON file."""
    path = Path(path)
    data = json.loads(path.read_text())
    return _build(data)


def config_from_env(environ: Mapping[str, str] | None = None) -> AppConfig:
    """Build configuration from ``LIVESUBCLIP_*`` environment variables."""
    environ = os.environ if environ is None else environ

    def get(name: str) -> str | None:
        return environ.get(ENV_PREFIX + name.upper())

    service: dict = {}
    for f in fields(ServiceConfig):
        value = get(f.name)
        if value is not None:
            service[f.name] = float(value) if f.name == "timeout" else value

    subclip: dict = {}
    for name, cast in (
        ("interval_sec", int),
        ("discontinuity_factor", float),
        ("padding_ms", int),
        ("transform_name", str),
    ):
        value = get(name)
        if value is not None:
            subclip[name] = cast(value)

    return _build({"service": service, "subclip": subclip})
