"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


DEFAULT_CORS_ORIGINS = [
    "https://app.mydailyhug.com",
    "http://localhost:8080",
    "http://localhost:3000",
]

DEFAULT_API_RATE_LIMIT = "100 per 15 minutes"


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                print(f"[settings] ✓ Loaded {secret_name} from /run/secrets")
                return secret_value
        except OSError as e:
            print(f"[settings] ✗ Failed to read /run/secrets/{secret_name}: {e}")

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            print(f"[settings] ✓ Loaded {env_var} from environment (fallback)")
            return secret_value

    return None


@dataclass
class AppConfig:
    """Application configuration container."""
    # Firebase service account
    firebase_project_id: str
    firebase_client_email: str
    firebase_private_key: str
    firebase_private_key_id: str = ""
    firebase_client_id: str = ""

    # GoHighLevel integration (static key guard)
    integration_api_key: str = ""
    integration_key_header: str = "X-API-Key"

    # HTTP
    port: int = 3001
    frontend_url: str = "http://localhost:8080"
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    max_content_length: int = 10 * 1024 * 1024

    # Global limit shared by every /api route, per client address
    api_rate_limit: str = DEFAULT_API_RATE_LIMIT
    rate_limit_storage_uri: str = "memory://"

    # Firestore / messaging
    users_collection: str = "users"
    notification_max_workers: int = 10

    log_level: str = "INFO"

    @property
    def service_account_info(self) -> dict:
        """Service account mapping accepted by firebase_admin.credentials.Certificate."""
        return {
            "type": "service_account",
            "project_id": self.firebase_project_id,
            "private_key_id": self.firebase_private_key_id,
            "private_key": self.firebase_private_key,
            "client_email": self.firebase_client_email,
            "client_id": self.firebase_client_id,
            "auth_uri": "https://accounts.google.com/o/oauth2/auth",
            "token_uri": "https://oauth2.googleapis.com/token",
            "auth_provider_x509_cert_url": "https://www.googleapis.com/oauth2/v1/certs",
            "client_x509_cert_url": (
                "https://www.googleapis.com/robot/v1/metadata/x509/"
                f"{self.firebase_client_email}"
            ),
        }

    @property
    def integration_key_configured(self) -> bool:
        return bool(self.integration_api_key)


def _require(var_name: str, value: Optional[str]) -> str:
    if value:
        return value
    raise RuntimeError(f"Environment variable {var_name} is required.")


def _int_env(var_name: str, default: int) -> int:
    raw = os.environ.get(var_name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {var_name} must be an integer, got {raw!r}")


def load_settings() -> AppConfig:
    """Load application settings from environment and /run/secrets."""
    project_id = _require("FIREBASE_PROJECT_ID", os.environ.get("FIREBASE_PROJECT_ID", "").strip())
    client_email = _require("FIREBASE_CLIENT_EMAIL", os.environ.get("FIREBASE_CLIENT_EMAIL", "").strip())

    # Private keys arrive from .env files with literal "\n" sequences
    private_key = _load_secret_from_file("firebase_private_key", "FIREBASE_PRIVATE_KEY")
    private_key = _require("FIREBASE_PRIVATE_KEY", private_key).replace("\\n", "\n")

    integration_api_key = _load_secret_from_file("ghl_api_key", "GHL_API_KEY") or ""
    if not integration_api_key:
        print("[settings] ⚠️ GHL_API_KEY not configured; /api/ghl/* routes will answer 500")

    cors_origins = [
        origin.strip().rstrip("/")
        for origin in os.environ.get("CORS_ORIGINS", ",".join(DEFAULT_CORS_ORIGINS)).split(",")
        if origin.strip()
    ]

    cfg = AppConfig(
        firebase_project_id=project_id,
        firebase_client_email=client_email,
        firebase_private_key=private_key,
        firebase_private_key_id=os.environ.get("FIREBASE_PRIVATE_KEY_ID", ""),
        firebase_client_id=os.environ.get("FIREBASE_CLIENT_ID", ""),
        integration_api_key=integration_api_key,
        integration_key_header=os.environ.get("GHL_API_KEY_HEADER", "X-API-Key").strip() or "X-API-Key",
        port=_int_env("PORT", 3001),
        frontend_url=os.environ.get("FRONTEND_URL", "http://localhost:8080"),
        cors_origins=cors_origins,
        max_content_length=_int_env("MAX_CONTENT_LENGTH", 10 * 1024 * 1024),
        api_rate_limit=os.environ.get("API_RATE_LIMIT", "").strip() or DEFAULT_API_RATE_LIMIT,
        rate_limit_storage_uri=os.environ.get("RATE_LIMIT_STORAGE_URI", "").strip() or "memory://",
        users_collection=os.environ.get("USERS_COLLECTION", "users"),
        notification_max_workers=max(1, _int_env("NOTIFICATION_MAX_WORKERS", 10)),
        log_level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    )

    print(f"[settings] project={cfg.firebase_project_id}; port={cfg.port}; origins={len(cfg.cors_origins)}")
    return cfg
