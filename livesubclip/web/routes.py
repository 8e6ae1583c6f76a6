"""HTTP handlers for LiveSubclip."""

import logging

from flask import Blueprint, current_app, jsonify, request

from livesubclip import operations
from livesubclip.engine import ManifestUnavailableError, submit_subclip
from livesubclip.mediaservices import MediaServicesError, NotFoundError
from livesubclip.schema import (
    RequestValidationError,
    CreateAssetRequest,
    EncodingJobRequest,
    PublishAssetRequest,
    SubclipRequest,
)
from livesubclip.timespan import format_iso_duration, format_timespan

logger = logging.getLogger(__name__)

bp = Blueprint("api", __name__)


def _client():
    return current_app.config["MEDIA_CLIENT"]


def _body():
    return request.get_json(silent=True)


@bp.errorhandler(RequestValidationError)
def bad_request(error):
    return jsonify({"error": str(error)}), 400


@bp.errorhandler(NotFoundError)
def remote_not_found(error):
    return jsonify({"error": error.message}), 404


@bp.errorhandler(MediaServicesError)
def remote_failure(error):
    logger.error("Media services call failed: %s", error.message)
    return jsonify({"error": error.message}), 502


@bp.route("/api/health")
def health():
    return jsonify({"status": "ok"})


@bp.route("/api/subclip-jobs", methods=["POST"])
def subclip_job():
    config = current_app.config["LIVESUBCLIP"].subclip
    req = SubclipRequest.from_json(_body(), default_interval_sec=config.interval_sec)

    try:
        result = submit_subclip(_client(), req, config)
    except ManifestUnavailableError as e:
        return jsonify({"error": str(e)}), 503

    end_time = format_timespan(result.end_time) if result.end_time is not None else None
    if result.window is None:
        return jsonify({
            "status": "no_window",
            "subclipTransformName": result.transform_name,
            "subclipEndTime": end_time,
        })

    return jsonify({
        "status": "submitted",
        "subclipAssetName": result.asset_name,
        "subclipJobName": result.job_name,
        "subclipTransformName": result.transform_name,
        "subclipStartTime": format_timespan(result.window.start),
        "subclipEndTime": end_time,
        "subclipDuration": format_iso_duration(result.window.duration),
    })


@bp.route("/api/assets", methods=["POST"])
def create_asset():
    req = CreateAssetRequest.from_json(_body())
    asset = operations.create_empty_asset(_client(), req)
    return jsonify({
        "assetName": asset.name,
        "assetId": asset.asset_id,
        "container": asset.container,
    }), 201


@bp.route("/api/assets/<asset_name>", methods=["DELETE"])
def delete_asset(asset_name: str):
    operations.delete_asset(_client(), asset_name)
    return "", 204


@bp.route("/api/assets/<asset_name>/publish", methods=["POST"])
def publish_asset(asset_name: str):
    req = PublishAssetRequest.from_json(_body(), asset_name=asset_name)
    locator = operations.publish_asset(_client(), req)
    return jsonify({
        "streamingLocatorName": locator.name,
        "streamingLocatorId": locator.locator_id,
    })


@bp.route("/api/encoding-jobs", methods=["POST"])
def encoding_job():
    req = EncodingJobRequest.from_json(_body())
    result = operations.submit_encoding_job(_client(), req)
    return jsonify({
        "outputAssetName": result.output_asset_name,
        "jobName": result.job_name,
    })
