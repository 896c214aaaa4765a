"""Operator CLI for provisioning and account status changes.

This module serves as a CLI wrapper around dailyhug.core services, for
bootstrapping the first admin or fixing accounts without the dashboard.
"""
from __future__ import annotations
import argparse
import json
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from dailyhug.config import load_settings
from dailyhug.core.container import build_services
from dailyhug.core.errors import ApiError
from dailyhug.core.firebase import FirebaseServiceError
from dailyhug.core.provisioning_service import (
    ACCOUNT_ADMIN_CREATED,
    PROVENANCE_CREATE_USER,
    PROVENANCE_GRANT_ADMIN,
    ROLE_ADMIN,
    ROLE_USER,
    STATUS_ACTIVE,
    STATUS_INACTIVE,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Daily Hug user provisioning helper")
    parser.add_argument("--operator", default=os.environ.get("PROVISION_OPERATOR", "cli"),
                        help="Label stored as createdBy (default: cli)")

    sub = parser.add_subparsers(dest="cmd")

    for name in ("grant-admin", "create-user"):
        sp = sub.add_parser(name)
        sp.add_argument("--email", required=True)
        sp.add_argument("--first", default="")
        sp.add_argument("--last", default="")
        sp.add_argument("--temp-password", default=None)

    ss = sub.add_parser("set-status")
    target = ss.add_mutually_exclusive_group(required=True)
    target.add_argument("--uid")
    target.add_argument("--email")
    ss.add_argument("--status", choices=[STATUS_ACTIVE, STATUS_INACTIVE], required=True)

    sc = sub.add_parser("clear-password-change")
    sc.add_argument("--uid", required=True)

    return parser


def run(args, services) -> dict:
    """Execute one parsed command and return its JSON-serializable result."""
    if args.cmd in ("grant-admin", "create-user"):
        is_admin = args.cmd == "grant-admin"
        result = services.provisioning.provision(
            args.email,
            args.first,
            args.last,
            args.temp_password,
            role=ROLE_ADMIN if is_admin else ROLE_USER,
            account_type=ACCOUNT_ADMIN_CREATED,
            provenance=PROVENANCE_GRANT_ADMIN if is_admin else PROVENANCE_CREATE_USER,
            actor=args.operator,
            allow_existing=True,
        )
        return result.to_dict()
    if args.cmd == "set-status":
        return services.lifecycle.set_status(args.uid, args.email, status=args.status)
    if args.cmd == "clear-password-change":
        return services.lifecycle.remove_password_change_requirement(args.uid)
    raise ValueError(f"Unknown command {args.cmd!r}")


def main(argv=None) -> None:
    """Command-line entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return

    services = build_services(load_settings())

    try:
        result = run(args, services)
    except (ApiError, FirebaseServiceError) as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
