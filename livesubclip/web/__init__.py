"""Flask application factory for the LiveSubclip JSON API."""

from flask import Flask, jsonify

from livesubclip.config import AppConfig
from livesubclip.mediaservices import MediaServicesClient


def create_app(config: AppConfig, client: MediaServicesClient | None = None) -> Flask:
    app = Flask(__name__)
    app.config["LIVESUBCLIP"] = config
    app.config["MEDIA_CLIENT"] = client or MediaServicesClient(config.service)

    from livesubclip.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def internal_error(error):
        return jsonify({"error": "Internal server error"}), 500

    return app
