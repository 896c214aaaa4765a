"""Firebase Admin SDK bootstrap.

Creates a named firebase_admin.App from the service-account settings. The
App is passed explicitly to every SDK call by the gateways, so the process
never depends on the SDK's implicit default app.
"""
from __future__ import annotations
import logging

import firebase_admin
from firebase_admin import credentials, firestore

from dailyhug.config.settings import AppConfig

from .identity import IdentityGateway
from .messaging import MessagingGateway
from .profiles import ProfileStore

logger = logging.getLogger(__name__)

APP_NAME = "dailyhug"


class FirebaseClient:
    """Holds the initialized Firebase App and builds gateways bound to it.

    Usage:
        client = FirebaseClient.from_config(cfg)
        identity = client.identity()
        profiles = client.profiles(cfg.users_collection)
    """

    def __init__(self, app: firebase_admin.App):
        self.app = app

    @classmethod
    def from_config(cls, cfg: AppConfig, name: str = APP_NAME) -> "FirebaseClient":
        """Initialize (or reuse) the named Firebase App for this project."""
        try:
            app = firebase_admin.get_app(name)
            logger.debug("Reusing Firebase app '%s'", name)
        except ValueError:
            cred = credentials.Certificate(cfg.service_account_info)
            app = firebase_admin.initialize_app(
                cred, {"projectId": cfg.firebase_project_id}, name=name
            )
            logger.info("Firebase Admin SDK initialized (project=%s)", cfg.firebase_project_id)
        return cls(app)

    def identity(self) -> IdentityGateway:
        return IdentityGateway(self.app)

    def profiles(self, collection: str = "users") -> ProfileStore:
        return ProfileStore(firestore.client(app=self.app), collection)

    def messaging(self, frontend_url: str) -> MessagingGateway:
        return MessagingGateway(self.app, frontend_url)
