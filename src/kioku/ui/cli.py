# ruff: noqa: T201

from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from kioku.app import KiokuApp
from kioku.config import ConfigurationError, configure_logging
from kioku.domain.accounts import display_name
from kioku.domain.errors import AccountNotFoundError, ProviderError
from kioku.domain.model import ImportMethod, MediaType, ProviderCode

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from kioku.domain.model import ExternalAccount, Media

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track an anime and manga library")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log requests and merge decisions"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    accounts = subparsers.add_parser("accounts", help="Manage linked provider accounts")
    accounts_sub = accounts.add_subparsers(dest="accounts_command", required=True)
    accounts_sub.add_parser("list", help="List linked accounts")
    link = accounts_sub.add_parser("link", help="Link a new provider account")
    link.add_argument(
        "--provider",
        choices=[code.value for code in ProviderCode],
        default=ProviderCode.MYANIMELIST.value,
        help="Provider to link",
    )
    connect = accounts_sub.add_parser("connect", help="Connect a linked account to a user")
    connect.add_argument("--account", required=True, help="Account id")
    connect.add_argument("--username", required=True, help="Username on the provider")
    unlink = accounts_sub.add_parser("unlink", help="Remove a linked account")
    unlink.add_argument("--account", required=True, help="Account id")

    import_ = subparsers.add_parser("import", help="Import a remote list into the library")
    import_.add_argument("--account", required=True, help="Connected account id")
    import_.add_argument(
        "--type",
        choices=[media_type.value for media_type in MediaType],
        default=MediaType.ANIME.value,
        help="Which list to import",
    )
    import_.add_argument(
        "--method",
        choices=[method.value for method in ImportMethod],
        help="How to merge with local entries (defaults to config)",
    )

    search = subparsers.add_parser("search", help="Search a provider catalog")
    search.add_argument("query", help="Search text")
    search.add_argument(
        "--provider",
        choices=[code.value for code in ProviderCode],
        default=ProviderCode.MYANIMELIST.value,
    )
    search.add_argument(
        "--type",
        choices=[media_type.value for media_type in MediaType],
        default=MediaType.ANIME.value,
    )
    search.add_argument("--sort-by", type=str, help="Provider-specific sort key")
    search.add_argument("--limit", type=int, help="Maximum number of results")

    show = subparsers.add_parser("show", help="Fetch one media record")
    show.add_argument("id", help="Provider-native media id")
    show.add_argument(
        "--provider",
        choices=[code.value for code in ProviderCode],
        default=ProviderCode.MYANIMELIST.value,
    )
    show.add_argument(
        "--type",
        choices=[media_type.value for media_type in MediaType],
        default=MediaType.ANIME.value,
    )

    library = subparsers.add_parser("library", help="List local library entries")
    library.add_argument("--type", choices=[media_type.value for media_type in MediaType])

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid account id: {value}") from exc


def _build_app() -> KiokuApp:
    return KiokuApp()


def _format_media(media: Media) -> str:
    parts = [media.mapping, media.title.preferred or "?"]
    if media.start_date is not None:
        parts.append(str(media.start_date.year))
    if media.format is not None:
        parts.append(media.format.value)
    return "  ".join(parts)


def _format_account(account: ExternalAccount) -> str:
    state = "connected" if account.is_connected else "not connected"
    return f"{account.id}  {account.provider}  {display_name(account)}  ({state})"


def _run_accounts(app: KiokuApp, args: argparse.Namespace) -> int:
    if args.accounts_command == "list":
        for account in app.list_accounts():
            print(_format_account(account))
    elif args.accounts_command == "link":
        account = app.link_account(args.provider)
        print(account.id)
    elif args.accounts_command == "connect":
        account = app.connect_account(_parse_uuid(args.account), args.username)
        log.info("Account %s connected as %s", account.id, display_name(account))
    elif args.accounts_command == "unlink":
        app.unlink_account(_parse_uuid(args.account))
    return 0


def _run_import(app: KiokuApp, args: argparse.Namespace) -> int:
    method = ImportMethod(args.method) if args.method else None
    result = app.import_library(_parse_uuid(args.account), MediaType(args.type), method=method)
    if result.failed:
        log.error(
            "Import failed after %s page(s); %s records were stored before the failure",
            result.pages,
            result.fetched,
        )
        return 1
    log.info(
        "Import finished: fetched=%s, skipped=%s, inserted=%s, replaced=%s, kept=%s",
        result.fetched,
        result.skipped,
        result.inserted,
        result.replaced,
        result.kept,
    )
    return 0


def _run_search(app: KiokuApp, args: argparse.Namespace) -> int:
    results, failed = app.search_media(
        args.provider,
        MediaType(args.type),
        args.query,
        sort_by=args.sort_by,
        limit=args.limit,
    )
    if failed:
        log.error("Search failed")
        return 1
    for media in results:
        print(_format_media(media))
    return 0


def _run_show(app: KiokuApp, args: argparse.Namespace) -> int:
    media, failed = app.get_media(args.provider, MediaType(args.type), args.id)
    if failed or media is None:
        log.error("Could not fetch %s %s", args.type, args.id)
        return 1
    print(_format_media(media))
    if media.genres:
        print("genres: " + ", ".join(sorted(genre.value for genre in media.genres)))
    return 0


def _run_library(app: KiokuApp, args: argparse.Namespace) -> int:
    media_type = MediaType(args.type) if args.type else None
    for row in app.library(media_type):
        title = row.media.title.preferred if row.media else None
        print(f"{row.entry.mapping}  {title or '?'}  {row.entry.status}  {row.entry.score}")
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    if argv is None:
        load_dotenv()
        signal(SIGINT, sigint_handler)
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    app = _build_app()
    try:
        if parsed_args.command == "accounts":
            exit_code = _run_accounts(app, parsed_args)
        elif parsed_args.command == "import":
            exit_code = _run_import(app, parsed_args)
        elif parsed_args.command == "search":
            exit_code = _run_search(app, parsed_args)
        elif parsed_args.command == "show":
            exit_code = _run_show(app, parsed_args)
        elif parsed_args.command == "library":
            exit_code = _run_library(app, parsed_args)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (ValueError, ConfigurationError, AccountNotFoundError) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(2)
    except ProviderError as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


if __name__ == "__main__":
    main()
