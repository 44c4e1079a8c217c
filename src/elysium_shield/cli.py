"""Command-line access to the Shield API.

Reads the API key and options from ``SHIELD_*`` environment variables (or a
``.env`` file) and prints JSON results to stdout::

    shield check 123456789
    shield stats
    shield verify
    shield report --user 123 --guild 456 --action ban \\
        --reason "Spam" --moderator 789

Exit codes:
    0 - Success (for ``verify``: the key is valid).
    1 - Configuration, validation or request error (for ``verify``: the key
        is invalid).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from elysium_shield.client.client import ShieldClient
from elysium_shield.config.constants import VALID_ACTION_TYPES
from elysium_shield.config.settings import get_settings
from elysium_shield.core.exceptions import ShieldError, ShieldOperationError
from elysium_shield.core.logging_config import configure_logging


async def _run(args: argparse.Namespace) -> int:
    """Execute the selected sub-command.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Process exit code.
    """
    settings = get_settings()
    if args.debug:
        settings = settings.model_copy(update={"debug": True})

    async with ShieldClient.from_settings(settings) as shield:
        result: Any
        if args.command == "check":
            result = (await shield.check_user(args.user_id)).model_dump(mode="json", by_alias=True)
        elif args.command == "stats":
            result = (await shield.get_network_stats()).model_dump(mode="json", by_alias=True)
        elif args.command == "report":
            report = {
                "userId": args.user,
                "guildId": args.guild,
                "actionType": args.action,
                "reason": args.reason,
                "moderatorId": args.moderator,
            }
            if args.account_created:
                report["accountCreated"] = args.account_created
            result = (await shield.report_action(report)).model_dump(
                mode="json", by_alias=True, exclude_none=True
            )
        else:
            valid = await shield.verify_api_key()
            print(json.dumps({"valid": valid}))
            return 0 if valid else 1

        rate_limit = shield.get_rate_limit()
        if rate_limit is not None and isinstance(result, dict):
            result.setdefault("rateLimit", rate_limit.to_dict())

    print(json.dumps(result, indent=2))
    return 0


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Returns:
        Parsed ``argparse.Namespace`` with ``command`` and its options.
    """
    parser = argparse.ArgumentParser(
        prog="shield",
        description="Query the Elysium Shield moderation network.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=False,
        help="Log every request and response (overrides SHIELD_DEBUG).",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Check a user's risk profile.")
    check.add_argument("user_id", help="Discord user ID.")

    sub.add_parser("stats", help="Show network statistics.")
    sub.add_parser("verify", help="Verify that the API key is valid.")

    report = sub.add_parser("report", help="Report a moderation action.")
    report.add_argument("--user", required=True, help="Target user ID.")
    report.add_argument("--guild", required=True, help="Guild ID.")
    report.add_argument("--action", required=True, choices=VALID_ACTION_TYPES)
    report.add_argument("--reason", required=True)
    report.add_argument("--moderator", required=True, help="Moderator user ID.")
    report.add_argument(
        "--account-created",
        default=None,
        help="ISO-8601 creation time of the target account.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the ``shield`` console script."""
    args = _parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"[shield] ERROR: invalid SHIELD_* settings: {exc}", file=sys.stderr)
        return 1
    configure_logging("DEBUG" if args.debug else settings.log_level)
    try:
        return asyncio.run(_run(args))
    except ShieldOperationError as exc:
        print(json.dumps(exc.to_dict()), file=sys.stderr)
        return 1
    except ShieldError as exc:
        print(f"[shield] ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
