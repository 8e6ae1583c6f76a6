"""Tests for request body validation."""

from datetime import datetime, timedelta, timezone

import pytest

from livesubclip.schema import (
    CreateAssetRequest,
    EncodingJobRequest,
    PublishAssetRequest,
    RequestValidationError,
    SubclipRequest,
)


class TestSubclipRequest:
    def test_minimal_uses_default_interval(self):
        req = SubclipRequest.from_json({"liveEventName": "e", "liveOutputName": "o"}, default_interval_sec=45)
        assert req.interval_sec == 45
        assert req.last_subclip_end_time is None
        assert req.output_asset_storage_account is None

    def test_full(self):
        req = SubclipRequest.from_json({
            "liveEventName": "e",
            "liveOutputName": "o",
            "lastSubclipEndTime": "00:02:00.5000000",
            "intervalSec": 30,
            "outputAssetStorageAccount": "archive",
        })
        assert req.interval_sec == 30
        assert req.last_subclip_end_time == timedelta(minutes=2, milliseconds=500)
        assert req.output_asset_storage_account == "archive"

    def test_iso_last_end(self):
        req = SubclipRequest.from_json({"liveEventName": "e", "liveOutputName": "o", "lastSubclipEndTime": "PT2M"})
        assert req.last_subclip_end_time == timedelta(minutes=2)

    def test_bad_last_end_is_a_validation_error(self):
        with pytest.raises(RequestValidationError, match="lastSubclipEndTime: Unrecognized time span"):
            SubclipRequest.from_json({"liveEventName": "e", "liveOutputName": "o", "lastSubclipEndTime": "soon"})

    @pytest.mark.parametrize("interval", [0, -1, "60", 1.5, True])
    def test_invalid_interval(self, interval):
        with pytest.raises(ValueError, match="intervalSec"):
            SubclipRequest.from_json({"liveEventName": "e", "liveOutputName": "o", "intervalSec": interval})

    @pytest.mark.parametrize("body", [{}, {"liveEventName": "e"}, {"liveOutputName": "o"}, None])
    def test_missing_names(self, body):
        with pytest.raises(ValueError, match="liveEventName and liveOutputName"):
            SubclipRequest.from_json(body)

    def test_non_object_body(self):
        with pytest.raises(ValueError, match="JSON object"):
            SubclipRequest.from_json(["e", "o"])


class TestCreateAssetRequest:
    def test_all_optional(self):
        req = CreateAssetRequest.from_json(None)
        assert req.asset_owner_address is None

    def test_rejects_non_string(self):
        with pytest.raises(ValueError, match="assetDescription"):
            CreateAssetRequest.from_json({"assetDescription": 5})


class TestEncodingJobRequest:
    def test_asset_input(self):
        req = EncodingJobRequest.from_json({"transformName": "T", "inputAssetName": "in"})
        assert req.input_asset_name == "in"
        assert req.input_url is None

    def test_needs_an_input(self):
        with pytest.raises(ValueError, match="inputAssetName or inputUrl"):
            EncodingJobRequest.from_json({"transformName": "T"})

    def test_needs_transform(self):
        with pytest.raises(ValueError, match="transformName"):
            EncodingJobRequest.from_json({"inputUrl": "https://example.com/a.mp4"})


class TestPublishAssetRequest:
    def test_dates_and_keys(self):
        req = PublishAssetRequest.from_json({
            "assetName": "a",
            "streamingPolicyName": "P",
            "startDateTime": "2024-01-01T00:00:00Z",
            "endDateTime": "2024-02-01T00:00:00Z",
            "contentKeys": '[{"label": "k1", "id": "abc"}]',
        })
        assert req.start_date_time == datetime(2024, 1, 1, tzinfo=timezone.utc)
        assert req.content_keys == [{"label": "k1", "id": "abc"}]

    def test_asset_name_from_path(self):
        req = PublishAssetRequest.from_json({"streamingPolicyName": "P"}, asset_name="from-path")
        assert req.asset_name == "from-path"

    def test_end_before_start(self):
        with pytest.raises(ValueError, match="after"):
            PublishAssetRequest.from_json({
                "assetName": "a",
                "streamingPolicyName": "P",
                "startDateTime": "2024-02-01T00:00:00",
                "endDateTime": "2024-01-01T00:00:00",
            })

    def test_mixed_time_zones(self):
        with pytest.raises(ValueError, match="time zone"):
            PublishAssetRequest.from_json({
                "assetName": "a",
                "streamingPolicyName": "P",
                "startDateTime": "2024-01-01T00:00:00Z",
                "endDateTime": "2024-02-01T00:00:00",
            })

    def test_bad_content_keys(self):
        with pytest.raises(ValueError, match="contentKeys"):
            PublishAssetRequest.from_json({"assetName": "a", "streamingPolicyName": "P", "contentKeys": "{oops"})

    def test_locator_id_is_normalized(self):
        req = PublishAssetRequest.from_json({
            "assetName": "a",
            "streamingPolicyName": "P",
            "streamingLocatorId": "911B65DEAC9243919AAB80021126D403",
        })
        assert req.streaming_locator_id == "911b65de-ac92-4391-9aab-80021126d403"

    def test_locator_id_must_be_guid(self):
        with pytest.raises(RequestValidationError, match="streamingLocatorId is not a GUID"):
            PublishAssetRequest.from_json({"assetName": "a", "streamingPolicyName": "P", "streamingLocatorId": "loc-1"})
