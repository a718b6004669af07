"""CLI entry point for the Odoo JSON-RPC client."""

import argparse
import asyncio
import json
import logging
import sys
from typing import Any


def _json_arg(value: str) -> Any:
    try:
        return json.loads(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid JSON: {e}")


def _fields_arg(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="odoo-jsonrpc",
        description="Call an Odoo server over JSON-RPC",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to JSON configuration file",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Odoo server as [scheme://]host[:port]",
    )
    parser.add_argument(
        "--db",
        default=None,
        help="Odoo database name",
    )
    parser.add_argument(
        "--username",
        default=None,
        help="Odoo login",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Odoo password",
    )
    parser.add_argument(
        "--log-level",
        choices=["debug", "info", "warning", "error", "critical"],
        default=None,
        help="Log level (default: info)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("login", help="Log in and print the session user")

    call = sub.add_parser("call", help="Run call_kw on a model method")
    call.add_argument("model")
    call.add_argument("method")
    call.add_argument("--args", type=_json_arg, default=[], help="JSON list")
    call.add_argument("--kwargs", type=_json_arg, default={}, help="JSON object")

    search = sub.add_parser("search", help="Search records of a model")
    search.add_argument("model")
    search.add_argument("--domain", type=_json_arg, default=[], help="JSON domain")
    search.add_argument("--fields", type=_fields_arg, default=None, help="a,b,c")
    search.add_argument("--limit", type=int, default=80)
    search.add_argument("--sort", default="")

    fields = sub.add_parser("fields", help="List fields readable by the user")
    fields.add_argument("model")

    return parser


async def run(args: argparse.Namespace, cli_overrides: dict) -> Any:
    from odoo_jsonrpc.config import load_config
    from odoo_jsonrpc.connection.client import OdooClient

    settings = load_config(cli_overrides)
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    db, username, password = settings.credentials()
    async with OdooClient.from_settings(settings) as client:
        await client.login(db, username, password)

        if args.command == "login":
            return client.user
        if args.command == "call":
            return await client.call_kw(args.model, args.method, args.args, args.kwargs)
        if args.command == "search":
            return await client.search(
                args.model,
                args.domain,
                limit=args.limit,
                sort=args.sort,
                fields=args.fields,
            )
        if args.command == "fields":
            return await client.get_accessible_fields(args.model)
    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Build CLI overrides dict (only non-None values)
    cli_overrides: dict = {}
    if args.config is not None:
        cli_overrides["_config_path"] = args.config
    if args.url is not None:
        cli_overrides["odoo_url"] = args.url
    if args.db is not None:
        cli_overrides["odoo_db"] = args.db
    if args.username is not None:
        cli_overrides["odoo_username"] = args.username
    if args.password is not None:
        cli_overrides["odoo_password"] = args.password
    if args.log_level is not None:
        cli_overrides["log_level"] = args.log_level

    from odoo_jsonrpc.errors import OdooJsonRpcError

    try:
        result = asyncio.run(run(args, cli_overrides))
    except KeyboardInterrupt:
        return
    except (OdooJsonRpcError, ValueError, FileNotFoundError) as exc:
        print(f"Fatal: {exc}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(result, indent=2, default=str))


if __name__ == "__main__":
    main()
