"""Command-line client for the Org/User service.

This module serves as a CLI wrapper around orgapi.core.orgs and
orgapi.core.users. Results are printed to stdout as JSON.
"""
from __future__ import annotations
import argparse
import dataclasses
import json
import math
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from orgapi.config import load_settings
from orgapi.core.httpclient import ApiClient, CallContext, HttpClient, HttpClientError
from orgapi.core.models import DeleteOrg, DeleteUser, Org, User
from orgapi.core.orgs import OrgClient
from orgapi.core.tokens import build_token_supplier
from orgapi.core.users import UserClient
from orgapi.logutil import configure_logging


def build_clients(cfg) -> tuple[OrgClient, UserClient]:
    """Wire the resource clients from configuration.

    Raises:
        ValueError: If no credentials are configured
    """
    get_token = build_token_supplier(cfg)
    api = ApiClient(HttpClient(timeout=cfg.request_timeout), get_token, base_url=cfg.base_url)
    return OrgClient(api), UserClient(api)


def _emit(value) -> None:
    # deletes answer with no body
    if value is None:
        return
    if isinstance(value, list):
        payload = [item.to_dict() for item in value]
    else:
        payload = value.to_dict()
    print(json.dumps(payload, indent=2, sort_keys=True))


def _build_parser(cfg) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Org/User service client")
    parser.add_argument("--base-url", default=cfg.base_url)
    parser.add_argument("--timeout", type=float, default=cfg.request_timeout,
                        help="Per-call deadline in seconds")
    parser.add_argument("--request-id", default=None,
                        help="Correlation id forwarded as X-Request-Id")
    parser.add_argument("--token", default=None,
                        help="Pre-issued bearer token (overrides configured credentials)")
    parser.add_argument("--log-level", default=cfg.log_level)

    sub = parser.add_subparsers(dest="cmd")

    og = sub.add_parser("org-get")
    og.add_argument("id")

    ol = sub.add_parser("org-list")
    ol.add_argument("--name", default=None, help="Exact name to search for")

    os_ = sub.add_parser("org-save")
    os_.add_argument("--id", default="")
    os_.add_argument("--version", type=int, default=0)
    os_.add_argument("--name", required=True)
    os_.add_argument("--desc", required=True)

    od = sub.add_parser("org-delete")
    od.add_argument("id")
    od.add_argument("version", type=int)

    ug = sub.add_parser("user-get")
    ug.add_argument("id")

    ul = sub.add_parser("user-list")
    ul.add_argument("--org-id", default=None)

    us = sub.add_parser("user-save")
    us.add_argument("--id", default="")
    us.add_argument("--version", type=int, default=0)
    us.add_argument("--org-id", required=True)
    us.add_argument("--name", required=True)
    us.add_argument("--email", required=True)
    us.add_argument("--admin", action="store_true")
    us.add_argument("--inactive", action="store_true")

    ud = sub.add_parser("user-delete")
    ud.add_argument("id")
    ud.add_argument("version", type=int)

    return parser


def _run(args, org_client: OrgClient, user_client: UserClient, call_ctx: CallContext):
    if args.cmd == "org-get":
        return org_client.get_by_id(args.id, call_ctx=call_ctx)
    if args.cmd == "org-list":
        if args.name is not None:
            return org_client.search_by_name(args.name, call_ctx=call_ctx)
        return org_client.get_all(call_ctx=call_ctx)
    if args.cmd == "org-save":
        org = Org(id=args.id, version=args.version, name=args.name, desc=args.desc)
        return org_client.save(org, call_ctx=call_ctx)
    if args.cmd == "org-delete":
        return org_client.delete(DeleteOrg(id=args.id, version=args.version), call_ctx=call_ctx)
    if args.cmd == "user-get":
        return user_client.get_by_id(args.id, call_ctx=call_ctx)
    if args.cmd == "user-list":
        if args.org_id is not None:
            return user_client.get_all_by_org_id(args.org_id, call_ctx=call_ctx)
        return user_client.get_all(call_ctx=call_ctx)
    if args.cmd == "user-save":
        user = User(
            id=args.id,
            version=args.version,
            org_id=args.org_id,
            name=args.name,
            email=args.email,
            is_admin=args.admin,
            is_active=not args.inactive,
        )
        return user_client.save(user, call_ctx=call_ctx)
    if args.cmd == "user-delete":
        return user_client.delete(DeleteUser(id=args.id, version=args.version), call_ctx=call_ctx)
    raise AssertionError(f"unhandled command {args.cmd}")


def main() -> None:
    """Command-line entry point."""
    try:
        cfg = load_settings()
    except (ValueError, RuntimeError) as e:
        print(f"[orgctl] Configuration error: {e}", file=sys.stderr)
        sys.exit(2)

    parser = _build_parser(cfg)
    args = parser.parse_args()

    if not args.cmd:
        parser.print_help()
        return

    if not math.isfinite(args.timeout) or args.timeout <= 0:
        parser.error("--timeout must be a finite number greater than 0")

    try:
        configure_logging(args.log_level, request_id=args.request_id)
    except ValueError as e:
        parser.error(str(e))

    cfg = dataclasses.replace(cfg, base_url=args.base_url.rstrip("/"), request_timeout=args.timeout)
    if args.token:
        cfg = dataclasses.replace(cfg, api_token=args.token)

    try:
        org_client, user_client = build_clients(cfg)
    except ValueError as e:
        parser.error(str(e))

    call_ctx = CallContext.with_timeout(args.timeout, request_id=args.request_id)
    try:
        result = _run(args, org_client, user_client, call_ctx)
    except ValueError as e:
        parser.error(str(e))
    except HttpClientError as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        sys.exit(1)

    _emit(result)


if __name__ == "__main__":
    main()
