"""Shared test fixtures."""

from pathlib import Path

import pytest

from livesubclip.models import ChunkTimingData

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def live_manifest_path() -> Path:
    return FIXTURES_DIR / "live_manifest.ismc"


@pytest.fixture
def sample_config_path() -> Path:
    return FIXTURES_DIR / "sample_config.json"


@pytest.fixture
def timing() -> ChunkTimingData:
    """Boundaries at 0s..4s, one per second, live edge at 4s."""
    return ChunkTimingData(
        timestamps=(0, 10, 20, 30, 40),
        time_scale=10,
        last_chunk_end=40,
    )
