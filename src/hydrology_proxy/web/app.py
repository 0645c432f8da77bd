"""Flask application exposing the NASA data proxy endpoints."""

import logging
from typing import Optional, TYPE_CHECKING

from flask import Blueprint, Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from ..api import DataRodsAPI, urls
from ..core import DateUtils, constants
from ..exceptions import ValidationError
from ..services import DataReconciler
from ..services.validation import (
    parse_coordinate,
    validate_bulk_request,
    validate_coordinates,
    validate_single_request,
)

if TYPE_CHECKING:
    from ..core.config import Config


def _parse_days(value: Optional[str]) -> int:
    if value is None or value == "":
        return constants.GIOVANNI_DEFAULT_DAYS
    try:
        days = int(value)
    except ValueError:
        raise ValidationError(f"Invalid days: {value!r}")
    if days < 0:
        raise ValidationError(f"Invalid days: {value!r}")
    return days


def create_blueprint(
    config: "Config",
    reconciler: DataReconciler,
    name: str = "nasa_proxy",
    logger: Optional[logging.Logger] = None
) -> Blueprint:
    """Create the proxy Blueprint.

    Args:
        config: Application configuration.
        reconciler: Resolves variables against the upstream with fallback.
        name: Blueprint name (used for url_for namespacing).
        logger: Logger instance.

    Returns:
        A Flask Blueprint with the health, data and link endpoints.
    """
    log = logger or logging.getLogger(__name__)
    date_utils = DateUtils(log)
    bp = Blueprint(name, __name__)

    @bp.app_errorhandler(ValidationError)
    def handle_validation_error(error):
        return jsonify({"error": str(error)}), 400

    @bp.app_errorhandler(Exception)
    def handle_unexpected_error(error):
        if isinstance(error, HTTPException):
            return error
        log.error(f"Unhandled error on {request.path}: {error}", exc_info=True)
        return jsonify({"error": "Internal server error"}), 500

    @bp.route("/health", methods=["GET"])
    def health():
        return jsonify({
            "status": "ok",
            "message": "NASA Data Proxy Server is running",
            "timestamp": date_utils.utc_timestamp(),
            "port": config.server_port,
        })

    @bp.route("/api/nasa/data-rods", methods=["GET"])
    def data_rods():
        params = validate_single_request(request.args)
        result = reconciler.resolve(
            params["variable"],
            params["latitude"],
            params["longitude"],
            params["start_date"],
            params["end_date"],
            response_format=params["response_format"],
        )

        body = {
            "data": [point.to_dict() for point in result.series],
            "source": result.source,
            "status": result.status.value,
            "variable": params["variable"],
            "location": {"latitude": params["latitude"], "longitude": params["longitude"]},
            "dateRange": {
                "startDate": DateUtils.format_date(params["start_date"]),
                "endDate": DateUtils.format_date(params["end_date"]),
            },
        }
        if result.error is not None:
            body["error"] = result.error
        return jsonify(body)

    @bp.route("/api/nasa/bulk-data", methods=["POST"])
    def bulk_data():
        bulk = validate_bulk_request(request.get_json(silent=True))
        log.info(f"Bulk fetching NASA data for {len(bulk.variables)} variables")

        envelope = reconciler.resolve_all(
            bulk.variables,
            bulk.latitude,
            bulk.longitude,
            bulk.start_date,
            bulk.end_date,
        )
        return jsonify(envelope.to_dict())

    @bp.route("/api/nasa/giovanni-url", methods=["GET"])
    def giovanni_url():
        latitude, longitude = validate_coordinates(
            request.args.get("latitude"), request.args.get("longitude")
        )
        url = urls.giovanni_url(
            latitude,
            longitude,
            variable=request.args.get("variable") or constants.GIOVANNI_DEFAULT_VARIABLE,
            days=_parse_days(request.args.get("days")),
            base_url=config.giovanni_url,
        )
        return jsonify({"url": url})

    @bp.route("/api/nasa/worldview-url", methods=["GET"])
    def worldview_url():
        latitude = parse_coordinate(request.args.get("latitude"), "latitude", 90.0)
        longitude = parse_coordinate(request.args.get("longitude"), "longitude", 180.0)
        url = urls.worldview_url(
            latitude,
            longitude,
            layers=request.args.get("layers") or constants.WORLDVIEW_DEFAULT_LAYERS,
            base_url=config.worldview_url,
        )
        return jsonify({"url": url})

    return bp


def build_reconciler(config: "Config", logger: Optional[logging.Logger] = None) -> DataReconciler:
    """Create a Data Rods client and reconciler from configuration."""

    upstream = DataRodsAPI(
        base_url=config.upstream_base_url,
        username=config.auth_username,
        password=config.auth_password,
        timeout=config.upstream_timeout,
        max_retries=config.upstream_max_retries,
        verify_ssl=config.upstream_verify_ssl,
        user_agent=config.upstream_user_agent,
        logger=logger
    )
    return DataReconciler(
        upstream=upstream,
        use_real_data=config.use_real_data,
        max_workers=config.max_workers,
        logger=logger
    )


def create_app(
    config: "Config",
    reconciler: Optional[DataReconciler] = None,
    logger: Optional[logging.Logger] = None
) -> Flask:
    """Build the proxy Flask app with CORS for the configured origins."""
    if reconciler is None:
        reconciler = build_reconciler(config, logger)

    app = Flask(__name__)
    CORS(app, origins=config.cors_origins, supports_credentials=True)
    app.register_blueprint(create_blueprint(config, reconciler, logger=logger))
    return app
