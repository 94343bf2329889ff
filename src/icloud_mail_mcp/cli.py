"""CLI entry point for icloud-mail-mcp diagnostics and move management."""

import argparse
import sys

from icloud_mail_mcp.exceptions import ConfigError


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="icloud-mail",
        description="iCloud Mail MCP - safe bulk mail management for agents",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser("serve", help="Run the MCP server (stdio)")
    subparsers.add_parser("status", help="Show the in-progress move and recent history")
    subparsers.add_parser("abandon", help="Release an in-progress move")
    subparsers.add_parser("check", help="Validate configuration and test the IMAP login")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "serve":
        from icloud_mail_mcp.server import main as serve

        serve()
        return 0

    try:
        if args.command == "status":
            return _handle_status()
        if args.command == "abandon":
            return _handle_abandon()
        if args.command == "check":
            return _handle_check()
    except ConfigError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 1

    return 1


def _handle_status() -> int:
    from icloud_mail_mcp.tools._service import get_move_controller

    report = get_move_controller().status()
    print(report.model_dump_json(indent=2))
    return 0


def _handle_abandon() -> int:
    from icloud_mail_mcp.tools._service import get_move_controller

    result = get_move_controller().abandon()
    print(result.message)
    return 0


def _handle_check() -> int:
    """Validate settings, then log in and summarize INBOX."""
    from icloud_mail_mcp.tools._service import create_mail_service, get_settings

    settings = get_settings()
    print(f"Server: {settings.host}:{settings.port} (ssl={settings.ssl})")
    try:
        with create_mail_service() as service:
            status = service.summary("INBOX")
    except ConfigError:
        raise
    except Exception as e:
        print(f"✗ Login failed: {e}", file=sys.stderr)
        return 1
    print(f"✓ Logged in as {settings.user}: INBOX has {status.total} emails ({status.unseen} unread)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
