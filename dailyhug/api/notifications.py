"""Push notification endpoints."""
from __future__ import annotations

from flask import Blueprint, jsonify, request

from dailyhug.api.decorators import get_services
from dailyhug.core.schemas import NotificationRequest

bp = Blueprint("notifications", __name__, url_prefix="/api")


@bp.route("/send-notification", methods=["POST"])
def send_notification():
    """Send a push notification to explicit users, a user type, or everyone.

    A batch with no reachable device answers 200 with success=false; failed
    individual sends are only reflected in stats.failed.
    """
    body = NotificationRequest.from_json(request.get_json(silent=True))
    result = get_services().notifications.dispatch(body)
    return jsonify(result.to_dict()), 200


@bp.route("/notification-stats", methods=["GET"])
def notification_stats():
    return jsonify(get_services().notifications.stats()), 200
