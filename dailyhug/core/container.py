"""Builds the gateways and services once at startup.

Usage::

    services = build_services(cfg)
    services.provisioning.provision(...)
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from dailyhug.config.settings import AppConfig
from dailyhug.core.firebase import FirebaseClient, IdentityGateway, MessagingGateway, ProfileStore
from dailyhug.core.lifecycle_service import LifecycleService
from dailyhug.core.notifications import NotificationDispatcher
from dailyhug.core.provisioning_service import ProvisioningService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Services:
    """Collaborators shared read-only by every request."""
    identity: IdentityGateway
    profiles: ProfileStore
    messaging: MessagingGateway
    provisioning: ProvisioningService
    lifecycle: LifecycleService
    notifications: NotificationDispatcher

    @classmethod
    def from_gateways(
        cls,
        identity: IdentityGateway,
        profiles: ProfileStore,
        messaging: MessagingGateway,
        max_workers: int = 10,
    ) -> "Services":
        return cls(
            identity=identity,
            profiles=profiles,
            messaging=messaging,
            provisioning=ProvisioningService(identity, profiles),
            lifecycle=LifecycleService(identity, profiles),
            notifications=NotificationDispatcher(profiles, messaging, max_workers=max_workers),
        )


def build_services(cfg: AppConfig, client: Optional[FirebaseClient] = None) -> Services:
    """Initialize Firebase and wire the services for this configuration."""
    client = client or FirebaseClient.from_config(cfg)
    logger.info("Wiring services (collection=%s)", cfg.users_collection)
    return Services.from_gateways(
        identity=client.identity(),
        profiles=client.profiles(cfg.users_collection),
        messaging=client.messaging(cfg.frontend_url),
        max_workers=cfg.notification_max_workers,
    )
