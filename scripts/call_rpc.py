#!/usr/bin/env python3
"""
Call a procedure on a running RPC endpoint

Usage:
  python scripts/call_rpc.py query <path> [--input <json>] [--api-base-url <url>] [--token <token>]
  python scripts/call_rpc.py mutate <path> [--input <json>] [--api-base-url <url>] [--token <token>]

Examples:
  python scripts/call_rpc.py query system.health
  python scripts/call_rpc.py mutate system.echo --input '{"message": "hello"}'
  python scripts/call_rpc.py query system.whoami --token organizer-token
"""
from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, Optional

import requests
from dotenv import load_dotenv

load_dotenv()

DEFAULT_API_BASE_URL = "http://localhost:8000"
DEFAULT_ENDPOINT = "/api/trpc"
DEFAULT_API_TIMEOUT_SEC = 30


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Call an RPC procedure")
    subparsers = parser.add_subparsers(dest="command")

    for command, help_text in (("query", "Call a query (GET)"), ("mutate", "Call a mutation (POST)")):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument("path", type=str)
        sub.add_argument("--input", type=str, default=None, help="JSON input")
        sub.add_argument("--api-base-url", type=str, default=DEFAULT_API_BASE_URL)
        sub.add_argument("--endpoint", type=str, default=DEFAULT_ENDPOINT)
        sub.add_argument("--token", type=str, default=None, help="Bearer token")

    return parser


def _parse_input(raw: Optional[str]) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON for input: {exc}") from exc


def _build_headers(token: Optional[str]) -> Dict[str, str]:
    if not token:
        return {}
    return {"Authorization": f"Bearer {token}"}


def _procedure_url(args: argparse.Namespace) -> str:
    return f"{args.api_base_url.rstrip('/')}{args.endpoint}/{args.path}"


def _query(args: argparse.Namespace) -> requests.Response:
    params = {}
    payload = _parse_input(args.input)
    if payload is not None:
        params["input"] = json.dumps(payload)
    return requests.get(
        _procedure_url(args),
        params=params,
        headers=_build_headers(args.token),
        timeout=DEFAULT_API_TIMEOUT_SEC,
    )


def _mutate(args: argparse.Namespace) -> requests.Response:
    return requests.post(
        _procedure_url(args),
        json=_parse_input(args.input),
        headers=_build_headers(args.token),
        timeout=DEFAULT_API_TIMEOUT_SEC,
    )


def _print_response(response: requests.Response) -> int:
    print(f"Status: {response.status_code}")
    body = response.json()
    print(json.dumps(body, indent=2, ensure_ascii=False))
    if "error" in body:
        code = body["error"].get("data", {}).get("code")
        print(f"ERROR: {code}: {body['error'].get('message')}")
        return 1
    return 0


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args(sys.argv[1:])

    if not args.command:
        parser.print_help()
        sys.exit(1)

    try:
        if args.command == "query":
            response = _query(args)
        elif args.command == "mutate":
            response = _mutate(args)
        else:
            raise ValueError(f"Unknown command: {args.command}")
        exit_code = _print_response(response)
    except ValueError as exc:
        print(f"ERROR: {exc}")
        sys.exit(1)
    except requests.RequestException as exc:
        print(f"ERROR: API request failed: {exc}")
        sys.exit(1)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
