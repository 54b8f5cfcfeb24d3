"""
tokenvault CLI

Command-line interface for inspecting and removing stored OAuth tokens.
Token values are never printed.
"""

import argparse
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from tokenvault.config import VaultConfig
from tokenvault.core.exceptions import StorageError
from tokenvault.storage.persistence import TokenFile
from tokenvault.storage.token_store import TokenStore, create_token_store

logger = logging.getLogger(__name__)


def _format_expiry(expires_at: int) -> str:
    return datetime.fromtimestamp(expires_at / 1000, tz=timezone.utc).isoformat(timespec="seconds")


def cmd_list(store: TokenStore, args: argparse.Namespace) -> int:
    """List connected providers."""
    for provider in sorted(store.providers()):
        print(provider)
    return 0


def cmd_status(store: TokenStore, args: argparse.Namespace) -> int:
    """Show expiry status for every provider."""
    providers = sorted(store.providers())
    print(f"\nToken file: {store.path}")
    print("=" * 50)

    if not providers:
        print("No providers connected.")
        return 0

    for provider in providers:
        record = store.get(provider)
        state = "expired" if store.is_expired(provider) else "valid"
        print(f"  {provider}: {state} (expires {_format_expiry(record.expires_at)})")
        if record.scopes:
            print(f"      scopes: {', '.join(record.scopes)}")
    return 0


def cmd_remove(store: TokenStore, args: argparse.Namespace) -> int:
    """Remove one provider's tokens."""
    if not store.has(args.provider):
        print(f"No tokens stored for {args.provider}")
        return 0

    result = store.remove(args.provider)
    if not result:
        print(f"Failed to save token file: {result.error}", file=sys.stderr)
        return 1
    print(f"Removed tokens for {args.provider}")
    return 0


def cmd_purge(token_file: TokenFile) -> int:
    """Delete the token file."""
    try:
        removed = token_file.delete()
    except StorageError as e:
        print(str(e), file=sys.stderr)
        return 1
    print("Token file deleted." if removed else "No token file to delete.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tokenvault",
        description="Inspect and manage stored OAuth tokens",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s list                   # List connected providers
  %(prog)s status                 # Show expiry per provider
  %(prog)s remove google          # Forget Google tokens
  %(prog)s purge                  # Delete the token file
        """,
    )
    parser.add_argument(
        "--path",
        type=Path,
        default=None,
        help="Token file (default: $TOKENVAULT_TOKEN_FILE or the config directory)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("list", help="List connected providers")
    subparsers.add_parser("status", help="Show token expiry status")
    remove_parser = subparsers.add_parser("remove", help="Remove a provider's tokens")
    remove_parser.add_argument("provider", help="Provider id")
    subparsers.add_parser("purge", help="Delete the token file")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    config = VaultConfig.from_env()
    if args.path is not None:
        config.token_file = args.path

    if args.command == "purge":
        return cmd_purge(TokenFile(config.token_file))

    store = create_token_store(config)
    commands = {
        "list": cmd_list,
        "status": cmd_status,
        "remove": cmd_remove,
    }
    return commands[args.command](store, args)


if __name__ == "__main__":
    sys.exit(main())
