"""Firebase Cloud Messaging operations."""
from __future__ import annotations
from dataclasses import dataclass, field

import firebase_admin
from firebase_admin import messaging
from firebase_admin.exceptions import FirebaseError

from .exceptions import translate_error

DEFAULT_ICON = "/MDH_favicon.png"


@dataclass(frozen=True)
class PushPayload:
    """Content shared by every message of a notification batch."""
    title: str
    body: str
    data: dict[str, str] = field(default_factory=dict)
    icon: str = DEFAULT_ICON
    badge: str = DEFAULT_ICON


class MessagingGateway:
    """Sends web push notifications to individual device tokens."""

    def __init__(self, app: firebase_admin.App, frontend_url: str):
        self.app = app
        self.frontend_url = frontend_url

    def build_message(self, token: str, payload: PushPayload) -> messaging.Message:
        # Only title/body are allowed in the top-level notification
        return messaging.Message(
            token=token,
            notification=messaging.Notification(title=payload.title, body=payload.body),
            data=dict(payload.data),
            webpush=messaging.WebpushConfig(
                notification=messaging.WebpushNotification(icon=payload.icon, badge=payload.badge),
                fcm_options=messaging.WebpushFCMOptions(link=self.frontend_url),
            ),
        )

    def send_to_token(self, token: str, payload: PushPayload) -> str:
        """Send one message and return the FCM message id."""
        try:
            return messaging.send(self.build_message(token, payload), app=self.app)
        except FirebaseError as exc:
            raise translate_error(exc, "send") from exc
