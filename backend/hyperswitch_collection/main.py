"""
Hyperswitch Collection - Command Line Interface

List, inspect and resolve the requests of a Postman collection, print the
payment status table, and verify redirect signatures.

Usage:
    python -m hyperswitch_collection list
    python -m hyperswitch_collection resolve "Payments - Update" --var payment_id=pay_123
    python -m hyperswitch_collection verify-redirect "https://example.com/return?status=succeeded&..."
"""
import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import settings
from .exceptions import CollectionError
from .data.environments import BASE_URLS, build_environment
from .models.environment import VariableEnvironment
from .services.payment_status import list_statuses
from .services.signature_service import parse_redirect_response
from .services.template_store import RequestTemplateStore


logger = logging.getLogger(__name__)


def configure_logging() -> None:
    """Configure root logging from settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def _load_store(args: argparse.Namespace) -> RequestTemplateStore:
    if args.collection:
        return RequestTemplateStore.from_file(args.collection)
    return RequestTemplateStore.default()


def _build_environment(args: argparse.Namespace) -> VariableEnvironment:
    """Preset for --mode, then --env file, then --var pairs (later wins)."""
    environment = build_environment(args.mode)
    if args.env:
        environment = environment.with_overrides(VariableEnvironment.from_file(args.env).variables)
    if args.var:
        environment = environment.with_overrides(VariableEnvironment.from_pairs(args.var).variables)
    return environment


def cmd_list(args: argparse.Namespace) -> int:
    store = _load_store(args)
    for name in store.names():
        template = store.get(name)
        print(f"{template.method:7} {name}")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    store = _load_store(args)
    template = store.get(args.name)
    data = template.model_dump(mode="json", exclude_none=True)
    data["required_variables"] = store.required_variables(args.name)
    _print_json(data)
    return 0


def cmd_resolve(args: argparse.Namespace) -> int:
    store = _load_store(args)
    resolved = store.resolve(args.name, _build_environment(args))
    _print_json(resolved.to_dict())
    return 0


def cmd_statuses(args: argparse.Namespace) -> int:
    _print_json(list_statuses())
    return 0


def cmd_verify_redirect(args: argparse.Namespace) -> int:
    response = parse_redirect_response(args.url, secret_key=args.secret)
    data = response.model_dump()
    data["payment_id"] = response.payment_id
    data["verified"] = bool(args.secret or settings.payment_response_hash_key)
    _print_json(data)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="hyperswitch-collection",
        description="Resolve Hyperswitch Postman collection requests"
    )
    parser.add_argument(
        "--collection",
        help="Postman collection file (default: bundled Hyperswitch collection)"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List request names")
    list_parser.set_defaults(func=cmd_list)

    show_parser = subparsers.add_parser("show", help="Show a request template")
    show_parser.add_argument("name")
    show_parser.set_defaults(func=cmd_show)

    resolve_parser = subparsers.add_parser("resolve", help="Resolve a request template")
    resolve_parser.add_argument("name")
    resolve_parser.add_argument("--env", help="Postman environment export or flat JSON file")
    resolve_parser.add_argument("--mode", choices=sorted(BASE_URLS), default=None)
    resolve_parser.add_argument(
        "--var",
        action="append",
        metavar="KEY=VALUE",
        help="Variable binding, may be repeated"
    )
    resolve_parser.set_defaults(func=cmd_resolve)

    statuses_parser = subparsers.add_parser("statuses", help="Print the payment status table")
    statuses_parser.set_defaults(func=cmd_statuses)

    verify_parser = subparsers.add_parser("verify-redirect", help="Parse and verify a redirect URL")
    verify_parser.add_argument("url")
    verify_parser.add_argument("--secret", help="Payment response hash key")
    verify_parser.set_defaults(func=cmd_verify_redirect)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Entry point.

    Returns:
        0 on success, 1 on a collection or validation error
        (argparse exits with 2 on usage errors)
    """
    configure_logging()
    args = build_parser().parse_args(argv)

    try:
        return args.func(args)
    except CollectionError as e:
        logger.debug(f"{e.error_code}: {e.message}")
        print(json.dumps(e.to_dict(), indent=2, default=str), file=sys.stderr)
        return 1
    except (ValueError, RuntimeError) as e:
        print(
            json.dumps({"error_code": "validation_error", "message": str(e), "details": {}}, indent=2),
            file=sys.stderr
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
