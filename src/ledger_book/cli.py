"""Command-line interface for inspecting books."""

import argparse
import sys

from ledger_book import __version__
from ledger_book.config import get_settings
from ledger_book.container import Container
from ledger_book.exceptions import LedgerClientError
from ledger_book.logging_config import LogContext, configure_logging


def create_container(args: argparse.Namespace) -> Container:
    settings = get_settings()
    if args.api_url:
        settings = settings.model_copy(update={"api_base_url": args.api_url.rstrip("/")})
    return Container(settings=settings)


def cmd_info(args: argparse.Namespace) -> int:
    """Show book metadata."""
    with create_container(args) as container:
        book = container.get_book(args.book_id)
        print(f"Book: {book.name} ({book.id})")
        print(f"Owner: {book.owner_name or '-'}")
        print(f"Permission: {book.permission.value}")
        print(f"Date pattern: {book.date_pattern}")
        print(f"Decimal separator: {book.decimal_separator.value}")
        print(f"Fraction digits: {book.fraction_digits}")
        print(f"Time zone: {book.time_zone} ({book.time_zone_offset:+d} min)")
        if book.collection is not None:
            print(f"Collection: {book.collection.name}")
    return 0


def cmd_accounts(args: argparse.Namespace) -> int:
    """List accounts of a book."""
    with create_container(args) as container:
        book = container.get_book(args.book_id)
        accounts = book.accounts
        if not accounts:
            print("No accounts found")
            return 0
        print(f"Accounts: {len(accounts)}")
        for account in accounts:
            status = " [archived]" if account.archived else ""
            groups = ", ".join(g.name for g in account.groups)
            suffix = f" - {groups}" if groups else ""
            print(f"  - {account.name} ({account.type.value}){status}{suffix}")
    return 0


def cmd_groups(args: argparse.Namespace) -> int:
    """List groups of a book."""
    with create_container(args) as container:
        book = container.get_book(args.book_id)
        groups = book.groups
        if not groups:
            print("No groups found")
            return 0
        print(f"Groups: {len(groups)}")
        for group in groups:
            print(f"  - {group.name}: {len(group.accounts)} accounts")
    return 0


def cmd_balances(args: argparse.Namespace) -> int:
    """Show balances matching a query."""
    with create_container(args) as container:
        book = container.get_book(args.book_id)
        report = book.get_balances_report(args.query)
        if not report.containers:
            print("No balances found")
            return 0
        for c in report.containers:
            print(f"  {c.name:<30} {book.format_value(c.cumulative_balance):>16}")
    return 0


def cmd_transactions(args: argparse.Namespace) -> int:
    """List transactions matching a query."""
    with create_container(args) as container:
        book = container.get_book(args.book_id)
        count = 0
        for transaction in book.get_transactions(args.query):
            if count >= args.limit:
                break
            when = book.format_date(transaction.date) if transaction.date else "-"
            amount = (
                book.format_value(transaction.amount)
                if transaction.amount is not None
                else "-"
            )
            print(f"  {when}  {amount:>14}  {transaction.description}")
            count += 1
        if count == 0:
            print("No transactions found")
    return 0


def cmd_version(args: argparse.Namespace) -> int:
    print(f"Ledger Book Client v{__version__}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="ledger-book",
        description="Ledger Book Client - inspect books on a bookkeeping service",
    )
    parser.add_argument(
        "--api-url",
        help="Base URL of the bookkeeping API (default: LEDGER_API_BASE_URL)",
        default=None,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    info_parser = subparsers.add_parser("info", help="Show book metadata")
    info_parser.add_argument("book_id", help="Book id")
    info_parser.set_defaults(func=cmd_info)

    accounts_parser = subparsers.add_parser("accounts", help="List accounts")
    accounts_parser.add_argument("book_id", help="Book id")
    accounts_parser.set_defaults(func=cmd_accounts)

    groups_parser = subparsers.add_parser("groups", help="List groups")
    groups_parser.add_argument("book_id", help="Book id")
    groups_parser.set_defaults(func=cmd_groups)

    balances_parser = subparsers.add_parser("balances", help="Show balances")
    balances_parser.add_argument("book_id", help="Book id")
    balances_parser.add_argument("query", help="Balances query, e.g. 'group:Assets'")
    balances_parser.set_defaults(func=cmd_balances)

    transactions_parser = subparsers.add_parser(
        "transactions", help="List transactions"
    )
    transactions_parser.add_argument("book_id", help="Book id")
    transactions_parser.add_argument("query", nargs="?", default=None, help="Query")
    transactions_parser.add_argument(
        "--limit",
        "-n",
        type=int,
        default=50,
        help="Maximum transactions to show (default: 50)",
    )
    transactions_parser.set_defaults(func=cmd_transactions)

    version_parser = subparsers.add_parser("version", help="Show version")
    version_parser.set_defaults(func=cmd_version)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    configure_logging()

    try:
        with LogContext(command=args.command):
            return args.func(args)
    except LedgerClientError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
