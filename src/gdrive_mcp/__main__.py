"""CLI entry point for gdrive-mcp.

Usage:
    python -m gdrive_mcp [serve]
    python -m gdrive_mcp setup-auth --client-secrets <client_secret.json>
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from loguru import logger

from gdrive_mcp.config import get_settings
from gdrive_mcp.credentials import run_setup_flow
from gdrive_mcp.exceptions import CredentialsError
from gdrive_mcp.logging import configure_logging
from gdrive_mcp.server import create_server


def cmd_serve(_args: argparse.Namespace) -> int:
    """Run the MCP server on stdio until the client disconnects."""
    settings = get_settings()
    logger.info("Starting gdrive-mcp on stdio")
    create_server(settings).run(transport="stdio")
    return 0


def cmd_setup_auth(args: argparse.Namespace) -> int:
    """Authorize against Google and store the refresh token in the keyring."""
    settings = get_settings()
    client_secrets = Path(args.client_secrets)

    print("Opening your browser for authorization...", file=sys.stderr)
    try:
        run_setup_flow(client_secrets, settings)
    except CredentialsError as e:
        print(f"Setup failed: {e}", file=sys.stderr)
        return 1

    print(
        "Setup complete. Credentials are stored in your system keychain "
        f"under the '{settings.keyring_service}' service.",
        file=sys.stderr,
    )
    print(
        'Add {"command": "gdrive-mcp", "args": ["serve"]} to your MCP '
        "client configuration.",
        file=sys.stderr,
    )
    return 0


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="gdrive-mcp",
        description="MCP server for reading and editing Google Docs and Drive",
    )
    subparsers = parser.add_subparsers(dest="command")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the MCP server over stdio (default)",
    )
    serve_parser.set_defaults(func=cmd_serve)

    setup_parser = subparsers.add_parser(
        "setup-auth",
        help="Run the OAuth consent flow and store credentials in the keyring",
    )
    setup_parser.add_argument(
        "--client-secrets",
        required=True,
        help="Path to the client_secret.json of a Desktop OAuth client",
    )
    setup_parser.set_defaults(func=cmd_setup_auth)

    args = parser.parse_args()

    settings = get_settings()
    configure_logging(json_logs=settings.log_json, log_level=settings.log_level)

    func = getattr(args, "func", cmd_serve)
    result: int = func(args)
    return result


if __name__ == "__main__":
    sys.exit(main())
