"""Push notification fan-out to user devices.

Resolves an audience to FCM device tokens, then sends one message per token
on a bounded thread pool. Every send settles independently: a failed token
is counted and logged (token prefix only) and never aborts the batch.
"""
from __future__ import annotations
import json
import logging
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from dailyhug.core.errors import InvalidInput
from dailyhug.core.firebase import DEFAULT_ICON, MessagingGateway, ProfileStore, PushPayload
from dailyhug.core.schemas import TARGET_TYPES, NotificationRequest

logger = logging.getLogger(__name__)

NO_RECIPIENTS_ERROR = "No users have enabled notifications for the specified criteria"
TOKEN_LOG_PREFIX = 20


@dataclass(frozen=True)
class NotificationResult:
    success: bool
    message_id: Optional[str] = None
    total: int = 0
    successful: int = 0
    failed: int = 0
    error: Optional[str] = None

    def to_dict(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "messageId": self.message_id,
            "stats": {"total": self.total, "successful": self.successful, "failed": self.failed},
        }


def _stringify_data(data: dict[str, Any]) -> dict[str, str]:
    # FCM data payloads only carry string values
    return {
        str(key): value if isinstance(value, str) else json.dumps(value)
        for key, value in data.items()
    }


class NotificationDispatcher:
    """Audience resolution and concurrent per-token delivery."""

    def __init__(self, profiles: ProfileStore, messaging: MessagingGateway, max_workers: int = 10):
        self.profiles = profiles
        self.messaging = messaging
        self.max_workers = max(1, max_workers)

    def resolve_tokens(self, target_type: str = "all", target_users: Iterable[str] = ()) -> list[str]:
        """Collect device tokens for the audience.

        An explicit ``target_users`` list takes precedence and ``target_type``
        is ignored; otherwise "all" means every profile and "admin"/"user"
        filter on userType. Profiles without a token are dropped.
        """
        target_users = list(target_users)
        if target_users:
            profiles = [self.profiles.get(uid) for uid in target_users]
        else:
            if target_type not in TARGET_TYPES:
                raise InvalidInput(f"targetType must be one of: {', '.join(TARGET_TYPES)}")
            if target_type == "all":
                documents = self.profiles.list_all()
            else:
                documents = self.profiles.query("userType", target_type)
            profiles = [document.data for document in documents]

        tokens = [profile.get("fcmToken") for profile in profiles if profile]
        return [token for token in tokens if isinstance(token, str) and token]

    def build_payload(self, request: NotificationRequest) -> PushPayload:
        data = _stringify_data(request.data)
        data.update({
            "timestamp": str(int(time.time() * 1000)),
            "source": "backend-service",
        })
        return PushPayload(
            title=request.title,
            body=request.body,
            data=data,
            icon=request.icon or DEFAULT_ICON,
            badge=request.badge or DEFAULT_ICON,
        )

    def dispatch(self, request: NotificationRequest) -> NotificationResult:
        """Send the notification to every resolved token and aggregate outcomes."""
        tokens = self.resolve_tokens(request.target_type, request.target_users)
        if not tokens:
            logger.info("Notification '%s' has no recipients (targetType=%s)", request.title, request.target_type)
            return NotificationResult(success=False, error=NO_RECIPIENTS_ERROR)

        payload = self.build_payload(request)
        workers = min(self.max_workers, len(tokens))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="fcm-send") as executor:
            futures = [executor.submit(self.messaging.send_to_token, token, payload) for token in tokens]
            wait(futures)

        failed = 0
        for token, future in zip(tokens, futures):
            error = future.exception()
            if error is not None:
                failed += 1
                logger.error("Failed to send to token %s...: %s", token[:TOKEN_LOG_PREFIX], error)

        result = NotificationResult(
            success=True,
            message_id=f"batch-{int(time.time() * 1000)}",
            total=len(tokens),
            successful=len(tokens) - failed,
            failed=failed,
        )
        logger.info(
            "Notification %s sent: %d/%d delivered", result.message_id, result.successful, result.total
        )
        return result

    def stats(self) -> dict:
        """Counts of users, users with a device token, admins and regular users."""
        profiles = [document.data for document in self.profiles.list_all()]
        return {
            "totalUsers": len(profiles),
            "usersWithNotifications": sum(1 for p in profiles if isinstance(p.get("fcmToken"), str) and p["fcmToken"]),
            "admins": sum(1 for p in profiles if p.get("userType") == "admin"),
            "regularUsers": sum(1 for p in profiles if p.get("userType") == "user"),
        }
