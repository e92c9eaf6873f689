#!/usr/bin/env python3
"""Command line entry point.

Usage::

    python -m procore_sdk operations [RESOURCE]
    python -m procore_sdk events
    python -m procore_sdk run RESOURCE OPERATION \\
        [--param key=value ...] [--params-json JSON] [--file PATH] \\
        [--return-all | --limit N]
    python -m procore_sdk batch RESOURCE ITEMS.json [--continue-on-fail]
    python -m procore_sdk webhook-serve --event rfiCreated --url https://example.com/webhook

Credentials and defaults come from ``PROCORE_*`` environment variables,
optionally layered over ``--config procore.yaml``.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import mimetypes
import sys
from pathlib import Path
from typing import Any

from procore_sdk.auth import ProcoreCredentials, create_auth_provider
from procore_sdk.bootstrap import configure_logging, log_licensing_notice
from procore_sdk.dispatcher import OperationDispatcher
from procore_sdk.errors import ProcoreError
from procore_sdk.models import FilePart
from procore_sdk.resources import RESOURCES, get_resource
from procore_sdk.settings import Settings
from procore_sdk.trigger import TRIGGER_EVENTS, WebhookTrigger

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="procore_sdk", description="Procore API operations")
    p.add_argument("--config", default=None, help="YAML settings file")
    p.add_argument("--debug", action="store_true", help="Verbose logging")
    sub = p.add_subparsers(dest="command", required=True)

    ops = sub.add_parser("operations", help="List resources and their operations")
    ops.add_argument("resource", nargs="?", default=None)

    sub.add_parser("events", help="List webhook trigger events")

    run = sub.add_parser("run", help="Run one operation")
    run.add_argument("resource")
    run.add_argument("operation")
    run.add_argument(
        "--param",
        nargs="*",
        default=[],
        help="Operation parameters: key=value (values parsed as JSON when possible)",
    )
    run.add_argument("--params-json", default=None, help="JSON object of parameters")
    run.add_argument("--file", default=None, help="File to upload (upload operations)")
    run.add_argument("--return-all", action="store_true")
    run.add_argument("--limit", type=int, default=None)

    batch = sub.add_parser("batch", help="Run a JSON array of items against one resource")
    batch.add_argument("resource")
    batch.add_argument("items", help="Path to a JSON array; each item names its operation")
    batch.add_argument("--continue-on-fail", action="store_true")

    serve = sub.add_parser("webhook-serve", help="Register a Procore hook and receive deliveries")
    serve.add_argument("--event", required=True, choices=sorted(TRIGGER_EVENTS))
    serve.add_argument("--url", required=True, help="Public URL Procore delivers to")
    serve.add_argument("--company-id", type=int, default=None)
    serve.add_argument("--project-id", type=int, default=0)
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)
    return p.parse_args(argv)


# =============================================================================
# Parameter parsing
# =============================================================================


def parse_params(pairs: list[str]) -> dict[str, Any]:
    """``["project_id=7", "filters={\\"status\\": \\"open\\"}"]`` -> dict."""
    params: dict[str, Any] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Invalid parameter (expected key=value): {pair}")
        key, raw = pair.split("=", 1)
        try:
            params[key] = json.loads(raw)
        except ValueError:
            params[key] = raw
    return params


def build_params(args: argparse.Namespace, settings: Settings) -> dict[str, Any]:
    params: dict[str, Any] = {}
    if args.params_json:
        loaded = json.loads(args.params_json)
        if not isinstance(loaded, dict):
            raise ValueError("--params-json must be a JSON object")
        params.update(loaded)
    params.update(parse_params(args.param))
    if settings.company_id and "company_id" not in params:
        params["company_id"] = settings.company_id
    if args.return_all:
        params["return_all"] = True
    if args.limit is not None:
        params["limit"] = args.limit
    if args.file:
        path = Path(args.file)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        params["file"] = FilePart(path.name, path.read_bytes(), content_type)
    return params


def _log_refresh(credentials: ProcoreCredentials) -> None:
    logger.info("Procore access token refreshed; persist the new refresh token if needed")


def _auth(settings: Settings):
    return create_auth_provider(
        settings.to_credentials(), timeout=settings.timeout, on_refresh=_log_refresh
    )


# =============================================================================
# Commands
# =============================================================================


def cmd_operations(args: argparse.Namespace) -> None:
    resources = [get_resource(args.resource)] if args.resource else RESOURCES.values()
    for resource in resources:
        print(f"{resource.name} ({resource.display_name})")
        for op in sorted(resource.operations, key=lambda o: o.name):
            print(f"  {op.name:<28} {op.method:<6} {op.path}  {op.description}")


def cmd_events(args: argparse.Namespace) -> None:
    for event, name in sorted(TRIGGER_EVENTS.items()):
        print(f"{event:<22} {name}")


async def cmd_run(args: argparse.Namespace, settings: Settings) -> None:
    params = build_params(args, settings)
    async with _auth(settings) as auth:
        dispatcher = OperationDispatcher(auth, api_version=settings.api_version)
        result = await dispatcher.execute(args.resource, args.operation, params)
    print(json.dumps(result, indent=2, default=str))


async def cmd_batch(args: argparse.Namespace, settings: Settings) -> None:
    items = json.loads(Path(args.items).read_text())
    if not isinstance(items, list):
        raise ValueError(f"{args.items} must contain a JSON array")
    if settings.company_id:
        items = [{"company_id": settings.company_id, **item} for item in items]

    async with _auth(settings) as auth:
        dispatcher = OperationDispatcher(
            auth, continue_on_fail=args.continue_on_fail, api_version=settings.api_version
        )
        results = await dispatcher.execute_items(args.resource, items)
    print(json.dumps([r.to_dict() for r in results], indent=2, default=str))


async def cmd_webhook_serve(args: argparse.Namespace, settings: Settings) -> None:
    import uvicorn

    from procore_sdk.webhook_app import create_webhook_app

    company_id = args.company_id or settings.company_id
    if not company_id:
        raise ValueError("A company id is required (--company-id or PROCORE_COMPANY_ID)")

    async with _auth(settings) as auth:
        trigger = WebhookTrigger(
            auth,
            company_id,
            args.event,
            args.url,
            project_id=args.project_id,
            api_version=settings.api_version,
        )
        if not await trigger.check_exists():
            await trigger.create()
        logger.info("Listening for %s on %s:%d", args.event, args.host, args.port)

        server = uvicorn.Server(
            uvicorn.Config(create_webhook_app(trigger), host=args.host, port=args.port)
        )
        try:
            await server.serve()
        finally:
            await trigger.delete()


# =============================================================================
# Main
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.debug)
    log_licensing_notice()

    try:
        settings = Settings.load(args.config)
        if args.command == "operations":
            cmd_operations(args)
        elif args.command == "events":
            cmd_events(args)
        elif args.command == "run":
            asyncio.run(cmd_run(args, settings))
        elif args.command == "batch":
            asyncio.run(cmd_batch(args, settings))
        elif args.command == "webhook-serve":
            asyncio.run(cmd_webhook_serve(args, settings))
    except (ProcoreError, ValueError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
