"""Health check endpoints."""
import datetime

from flask import Blueprint, jsonify

bp = Blueprint("health", __name__)


@bp.route("/health")
def health_check():
    """Liveness check; does not call Firebase."""
    timestamp = datetime.datetime.now(datetime.timezone.utc).isoformat().replace("+00:00", "Z")
    return jsonify({"status": "OK", "timestamp": timestamp}), 200
