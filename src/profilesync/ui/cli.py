from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from profilesync.app import ALL_GROUPS, edit_account, show_account
from profilesync.config import configure_logging
from profilesync.domain.editing import NoticeLevel, SaveStatus
from profilesync.domain.model import FieldGroup, FieldName, Language, group_of

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from profilesync.domain.model import FieldMap

log = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2

_NOTICE_LOG_LEVELS = {
    NoticeLevel.SUCCESS: logging.INFO,
    NoticeLevel.WARNING: logging.WARNING,
    NoticeLevel.ERROR: logging.ERROR,
}


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Edit the signed-in account")
    parser.add_argument(
        "--token",
        type=str,
        help="Bearer credential (defaults to ACCOUNT_API_TOKEN or the cached session)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("show", help="Show the current account")

    edit = subparsers.add_parser("edit", help="Change profile and settings fields")
    edit.add_argument("--display-name", type=str, help="New display name")
    edit.add_argument("--email", type=str, help="New email address")
    edit.add_argument(
        "--push",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable or disable push notifications",
    )
    edit.add_argument(
        "--email-notifications",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable or disable email notifications",
    )
    edit.add_argument(
        "--language",
        type=str,
        choices=[language.value for language in Language],
        help="Interface language",
    )
    edit.add_argument(
        "--profile-only",
        action="store_true",
        help="Use the profile editor (display name and email only)",
    )

    return parser.parse_args(list(argv))


def _collect_changes(args: argparse.Namespace) -> FieldMap:
    changes: FieldMap = {}
    if args.display_name is not None:
        if not args.display_name.strip():
            raise ValueError("Display name must not be blank")
        changes[FieldName.DISPLAY_NAME] = args.display_name.strip()
    if args.email is not None:
        if "@" not in args.email:
            raise ValueError(f"Invalid email address: {args.email}")
        changes[FieldName.EMAIL] = args.email.strip()
    if args.push is not None:
        changes[FieldName.PUSH_NOTIFICATIONS] = args.push
    if args.email_notifications is not None:
        changes[FieldName.EMAIL_NOTIFICATIONS] = args.email_notifications
    if args.language is not None:
        changes[FieldName.LANGUAGE] = Language(args.language)

    if not changes:
        raise ValueError("Nothing to change; pass at least one field option")
    if args.profile_only and any(group_of(name) is not FieldGroup.PROFILE for name in changes):
        raise ValueError("--profile-only cannot change settings fields")
    return changes


def _run_edit(args: argparse.Namespace, changes: FieldMap) -> int:
    groups = (FieldGroup.PROFILE,) if args.profile_only else ALL_GROUPS
    outcome = edit_account(changes, token=args.token, groups=groups)
    notice = outcome.notice
    log.log(_NOTICE_LOG_LEVELS[notice.level], notice.message)
    if outcome.status in {SaveStatus.CONFIRMED, SaveStatus.LOCAL_FALLBACK}:
        return EXIT_OK
    return EXIT_FAILED


def _run_show(args: argparse.Namespace) -> int:
    identity = show_account(token=args.token)
    log.info("id=%s role=%s created_at=%s", identity.id, identity.role, identity.created_at)
    for name, value in identity.editable_fields().items():
        log.info("%s=%s", name, value)
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(verbose=parsed_args.verbose)
        changes = _collect_changes(parsed_args) if parsed_args.command == "edit" else {}
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(EXIT_USAGE)

    try:
        if parsed_args.command == "edit":
            code = _run_edit(parsed_args, changes)
        elif parsed_args.command == "show":
            code = _run_show(parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except Exception:
        log.exception("Fatal error")
        sys.exit(EXIT_FAILED)

    if code != EXIT_OK:
        sys.exit(code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
