"""Flask application factory and bootstrap.

This module provides the create_app() factory function for initializing
the Flask application with all blueprints, middleware, and configuration.

Gunicorn loads it with ``dailyhug.flask_app:create_app()``.
"""
from __future__ import annotations
import logging
import sys
from typing import Optional

from flask import Blueprint, Flask, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.middleware.proxy_fix import ProxyFix

from dailyhug.config import AppConfig, load_settings
from dailyhug.core.container import Services, build_services

CORS_ALLOWED_METHODS = "GET, POST, PUT, DELETE, OPTIONS"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "SAMEORIGIN",
    "Referrer-Policy": "no-referrer",
    "Cross-Origin-Opener-Policy": "same-origin",
    "X-DNS-Prefetch-Control": "off",
}


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(cfg: Optional[AppConfig] = None, services: Optional[Services] = None) -> Flask:
    """Create and configure Flask application.

    Args:
        cfg: Settings; loaded from the environment when omitted
        services: Gateways and services; built from ``cfg`` (initializing
            Firebase) when omitted
    """
    cfg = cfg or load_settings()
    _configure_logging(cfg.log_level)

    app = Flask(__name__)
    app.config["APP_CONFIG"] = cfg
    app.config["MAX_CONTENT_LENGTH"] = cfg.max_content_length
    app.json.sort_keys = False

    app.extensions["dailyhug"] = services or build_services(cfg)

    # Trust X-Forwarded-* headers from one proxy hop
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)  # type: ignore

    # Register blueprints
    from dailyhug.api import health, errors
    from dailyhug.api import users, integration, notifications

    api_blueprints = (notifications.bp, users.bp, integration.bp)
    _register_rate_limit(app, cfg, api_blueprints)

    app.register_blueprint(health.bp)
    for blueprint in api_blueprints:
        app.register_blueprint(blueprint)

    # Register error handlers
    errors.register_error_handlers(app)

    # Register middleware
    _register_middleware(app, cfg)

    app.logger.info(f"Daily Hug backend ready (project={cfg.firebase_project_id}, port={cfg.port})")
    return app


def _register_rate_limit(app: Flask, cfg: AppConfig, blueprints: tuple[Blueprint, ...]) -> Limiter:
    """Apply one request budget per client address, shared by all /api blueprints.

    /health stays unlimited. Each worker counts separately with the default
    memory:// storage; point RATE_LIMIT_STORAGE_URI at Redis to share counters.
    """
    limiter = Limiter(
        get_remote_address,
        app=app,
        storage_uri=cfg.rate_limit_storage_uri,
        headers_enabled=True,
    )
    api_limit = limiter.shared_limit(
        cfg.api_rate_limit,
        scope="api",
        # Preflights are answered by the CORS middleware and do not count
        exempt_when=lambda: request.method == "OPTIONS",
    )
    for blueprint in blueprints:
        api_limit(blueprint)
    return limiter


def _configure_logging(level: str) -> None:
    """Configure root logging once; gunicorn workers inherit stdout."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if root.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))
    root.addHandler(handler)

    # Suppress noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("google").setLevel(logging.WARNING)


def _register_middleware(app: Flask, cfg: AppConfig):
    """Register CORS and security-header handlers."""
    allowed_origins = set(cfg.cors_origins)
    allowed_headers = f"Content-Type, Authorization, {cfg.integration_key_header}"

    @app.before_request
    def answer_preflight():
        """Answer CORS preflight requests without reaching the routes."""
        if request.method != "OPTIONS" or "Access-Control-Request-Method" not in request.headers:
            return None
        return app.make_response(("", 204))

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        if origin and origin.rstrip("/") in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
            response.headers["Access-Control-Allow-Methods"] = CORS_ALLOWED_METHODS
            response.headers["Access-Control-Allow-Headers"] = allowed_headers
            response.headers.add("Vary", "Origin")
        return response

    @app.after_request
    def add_security_headers(response):
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        if request.is_secure:
            response.headers.setdefault("Strict-Transport-Security", "max-age=15552000; includeSubDomains")
        return response


if __name__ == "__main__":
    application = create_app()
    application.run(host="0.0.0.0", port=application.config["APP_CONFIG"].port, debug=False)
