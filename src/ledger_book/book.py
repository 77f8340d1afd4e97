"""Client-side view of one general ledger held by the bookkeeping service.

A Book keeps three lazily loaded tiers, all filled from a single fetch of the
book resource:

- the metadata snapshot (name, fraction digits, time zone, ...)
- the account index (accounts by id and normalized name)
- the group index (groups by id and normalized name)

Mutations drop tiers instead of patching them:

- creating accounts or groups drops every tier
- creating or recording transactions drops only the account index
- the legacy single-account creation drops the metadata snapshot

Accounts and groups come from the same fetch, so a collection read re-fetches
when any tier is missing. After a transaction is created the next account
or group read fetches again, while metadata reads are still served from cache.

Caches are only dropped after the remote call succeeds, so a failed mutation
leaves the previous state readable.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime
from decimal import Decimal
from typing import Any, TypeVar

import pandas as pd

from ledger_book import tables
from ledger_book.cache import UNLOADED, CacheState, EntityIndex, Loaded
from ledger_book.domain.entities import (
    Account,
    BookSnapshot,
    Collection,
    Group,
    first_property,
)
from ledger_book.domain.transactions import Transaction
from ledger_book.domain.value_objects import AccountType, DecimalSeparator, Permission
from ledger_book.formatting import format_date, format_value, round_value
from ledger_book.iterators import TransactionIterator
from ledger_book.logging_config import LogContext, get_logger
from ledger_book.reports import BalancesReport
from ledger_book.services.interfaces import (
    AccountService,
    BookService,
    GroupService,
    TransactionService,
)

logger = get_logger(__name__)

Bound = TypeVar("Bound", Account, Group, Transaction)

Records = str | Sequence[str] | Sequence[Sequence[Any]]


class Book:
    def __init__(
        self,
        book_id: str,
        *,
        book_service: BookService,
        account_service: AccountService,
        group_service: GroupService,
        transaction_service: TransactionService,
        payload: dict[str, Any] | None = None,
        page_size: int | None = None,
    ) -> None:
        """Create a book handle; nothing is fetched until data is read.

        Args:
            book_id: Id of the book on the service.
            payload: An already fetched book resource, used as the initial
                cache instead of fetching on first read.
            page_size: Transactions per page for iterators. Defaults to the
                configured page size.
        """
        self._id = book_id
        self._book_service = book_service
        self._account_service = account_service
        self._group_service = group_service
        self._transaction_service = transaction_service
        self._page_size = page_size
        self._snapshot: CacheState[BookSnapshot] = UNLOADED
        self._accounts: CacheState[EntityIndex[Account]] = UNLOADED
        self._groups: CacheState[EntityIndex[Group]] = UNLOADED
        self._saved_queries: CacheState[list[dict[str, Any]]] = UNLOADED
        if payload is not None:
            self._apply_payload(payload)

    def __repr__(self) -> str:
        return f"Book(id={self._id!r})"

    @property
    def id(self) -> str:
        return self._id

    # ------------------------------------------------------------------
    # Cache tiers
    # ------------------------------------------------------------------

    def _log_context(self) -> LogContext:
        return LogContext(book_id=self._id)

    def _load_book(self) -> None:
        with self._log_context():
            payload = self._book_service.fetch_book(self._id)
            self._apply_payload(payload)
            logger.debug(
                "book_loaded",
                accounts=len(payload.get("accounts") or []),
                groups=len(payload.get("groups") or []),
            )

    def _apply_payload(self, payload: dict[str, Any]) -> None:
        snapshot = BookSnapshot.from_payload(payload)
        groups = EntityIndex.build(
            [self._bind(Group.from_payload(g)) for g in payload.get("groups") or []]
        )
        accounts = EntityIndex.build(
            [
                self._bind(Account.from_payload(a))
                for a in payload.get("accounts") or []
            ]
        )
        # assigned together once everything parsed
        self._snapshot = Loaded(snapshot)
        self._groups = Loaded(groups)
        self._accounts = Loaded(accounts)

    def _metadata(self) -> BookSnapshot:
        state = self._snapshot
        if not isinstance(state, Loaded):
            self._load_book()
            state = self._snapshot
        assert isinstance(state, Loaded)
        return state.value

    def _collections(self) -> tuple[EntityIndex[Account], EntityIndex[Group]]:
        snapshot, accounts, groups = self._snapshot, self._accounts, self._groups
        if not (
            isinstance(snapshot, Loaded)
            and isinstance(accounts, Loaded)
            and isinstance(groups, Loaded)
        ):
            self._load_book()
            accounts, groups = self._accounts, self._groups
        assert isinstance(accounts, Loaded) and isinstance(groups, Loaded)
        return accounts.value, groups.value

    def clear_accounts_cache(self) -> None:
        """Drop the account index.

        Metadata reads keep using the cached snapshot. Any account or group
        read re-fetches the book, since both indices are rebuilt together.
        """
        self._accounts = UNLOADED
        with self._log_context():
            logger.debug("accounts_cache_cleared")

    def clear_book_cache(self) -> None:
        """Drop every tier: metadata, accounts and groups."""
        self._snapshot = UNLOADED
        self._accounts = UNLOADED
        self._groups = UNLOADED
        with self._log_context():
            logger.debug("book_cache_cleared")

    def _bind(self, entity: Bound) -> Bound:
        entity.book = self
        return entity

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self._metadata().name

    @property
    def fraction_digits(self) -> int:
        """Number of decimal places amounts are kept with."""
        return self._metadata().fraction_digits

    @property
    def owner_name(self) -> str | None:
        return self._metadata().owner_name

    @property
    def permission(self) -> Permission:
        """Permission of the current user on this book."""
        return self._metadata().permission

    @property
    def collection(self) -> Collection | None:
        return self._metadata().collection

    @property
    def date_pattern(self) -> str:
        """Date pattern of the book, e.g. dd/MM/yyyy."""
        return self._metadata().date_pattern

    @property
    def decimal_separator(self) -> DecimalSeparator:
        return self._metadata().decimal_separator

    @property
    def time_zone(self) -> str:
        return self._metadata().time_zone

    @property
    def time_zone_offset(self) -> int:
        """Offset of the book time zone, in minutes."""
        return self._metadata().time_zone_offset

    @property
    def last_update_ms(self) -> int | None:
        return self._metadata().last_update_ms

    @property
    def properties(self) -> dict[str, str]:
        return dict(self._metadata().properties)

    def get_property(self, *keys: str) -> str | None:
        """Return the value of the first key holding a non-blank value."""
        return first_property(self._metadata().properties, keys)

    def format_date(self, value: date | datetime, time_zone: str | None = None) -> str:
        """Format a date with the book date pattern, in the book time zone by default."""
        return format_date(value, self.date_pattern, time_zone or self.time_zone)

    def format_value(self, value: Decimal | int | float | str) -> str:
        return format_value(value, self.decimal_separator, self.fraction_digits)

    def round(self, value: Decimal | int | float | str) -> Decimal:
        return round_value(value, self.fraction_digits)

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    def new_transaction(self) -> Transaction:
        """Start a transaction bound to this book.

        Example:
            book.new_transaction() \\
                .set_date("2013-01-25") \\
                .set_description("Filling tank of my truck") \\
                .from_account("Credit Card") \\
                .to_account("Gas") \\
                .set_amount("126.50") \\
                .create()
        """
        return self._bind(Transaction())

    def new_account(self) -> Account:
        return self._bind(Account(name="", archived=False))

    def new_group(self) -> Group:
        return self._bind(Group(name=""))

    # ------------------------------------------------------------------
    # Accounts and groups
    # ------------------------------------------------------------------

    @property
    def accounts(self) -> list[Account]:
        accounts, _ = self._collections()
        return list(accounts.items)

    @property
    def groups(self) -> list[Group]:
        _, groups = self._collections()
        return list(groups.items)

    def get_account(self, id_or_name: Any) -> Account | None:
        """Look an account up by id, then by normalized name.

        Returns None for a None key (without fetching) and for misses.
        """
        if id_or_name is None:
            return None
        accounts, _ = self._collections()
        return accounts.lookup(str(id_or_name))

    def get_group(self, id_or_name: Any) -> Group | None:
        """Look a group up by id, then by normalized name."""
        if id_or_name is None:
            return None
        _, groups = self._collections()
        return groups.lookup(str(id_or_name))

    def batch_create_accounts(self, accounts: Sequence[Account]) -> list[Account]:
        """Create accounts in one request and return them bound to this book."""
        return self._create_accounts([a.to_payload() for a in accounts])

    def create_accounts(self, rows: Sequence[Sequence[str]]) -> list[Account]:
        """Create accounts from rows of cells (legacy).

        The first cell is the account name. Other cells are either an
        AccountType value or the id or name of a group to add the account to;
        unknown groups are ignored. Rows naming an existing account are
        skipped.
        """
        payloads = []
        for row in rows:
            if not row:
                continue
            name = str(row[0])
            if self.get_account(name) is not None:
                continue
            account = Account(name=name, type=AccountType.ASSET)
            for cell in row[1:]:
                cell = str(cell)
                if AccountType.is_type(cell):
                    account.type = AccountType(cell)
                    continue
                group = self.get_group(cell)
                if group is not None and group.id is not None:
                    account.group_ids.append(group.id)
            payloads.append(account.to_payload())
        return self._create_accounts(payloads)

    def _create_accounts(self, payloads: list[dict[str, Any]]) -> list[Account]:
        if not payloads:
            return []
        with self._log_context():
            created = self._account_service.create_accounts(self._id, payloads)
            self.clear_book_cache()
            accounts = [self._bind(Account.from_payload(p)) for p in created]
            logger.info("accounts_created", count=len(accounts))
        return accounts

    def create_account(
        self, name: str, group: str | None = None, description: str | None = None
    ) -> Account | None:
        """Create a single account (legacy).

        The service picks the account type from the other accounts of the
        group, ASSET when there are none.
        """
        with self._log_context():
            self._account_service.create_account(self._id, name, group, description)
            self._snapshot = UNLOADED
            logger.info("account_created", name=name)
        return self.get_account(name)

    def batch_create_groups(self, groups: Sequence[Group]) -> list[Group]:
        """Create groups in one request and return them bound to this book."""
        return self._create_groups([g.to_payload() for g in groups])

    def create_groups(self, names: Sequence[str]) -> list[Group]:
        """Create groups by name (legacy)."""
        return self._create_groups([{"name": name} for name in names])

    def _create_groups(self, payloads: list[dict[str, Any]]) -> list[Group]:
        if not payloads:
            return []
        with self._log_context():
            created = self._group_service.create_groups(self._id, payloads)
            self.clear_book_cache()
            groups = [self._bind(Group.from_payload(p)) for p in created]
            logger.info("groups_created", count=len(groups))
        return groups

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    def batch_create_transactions(
        self, transactions: Sequence[Transaction]
    ) -> list[Transaction]:
        """Create transactions in one request and return them bound to this book.

        Only the account index is dropped afterwards, so metadata stays cached
        while the next account or group read re-fetches.
        """
        payloads = [t.to_payload() for t in transactions]
        if not payloads:
            return []
        with self._log_context():
            created = self._transaction_service.create_transactions(self._id, payloads)
            self.clear_accounts_cache()
            result = [self._bind(Transaction.from_payload(p)) for p in created]
            logger.info("transactions_created", count=len(result))
        return result

    def record(self, records: Records, time_zone: str | None = None) -> None:
        """Record transactions from free text (legacy).

        Each line, list item or matrix row records one transaction, e.g.
        ``book.record("#gas 63.23")``. Dates in matrix cells are formatted
        with the book date pattern in time_zone (the book time zone when
        blank), numbers with the book decimal format.
        """
        if time_zone is None or time_zone.strip() == "":
            time_zone = self.time_zone
        lines = self._record_lines(records, time_zone)
        if not lines:
            return
        with self._log_context():
            self._transaction_service.create_transactions(
                self._id, [{"description": line} for line in lines]
            )
            self.clear_accounts_cache()
            logger.info("transactions_recorded", count=len(lines))

    def _record_lines(self, records: Records, time_zone: str) -> list[str]:
        if isinstance(records, str):
            return [line.strip() for line in records.splitlines() if line.strip()]
        lines = []
        for record in records:
            if isinstance(record, str):
                line = record.strip()
            else:
                cells = (self._format_cell(cell, time_zone) for cell in record)
                line = " ".join(cell for cell in cells if cell)
            if line:
                lines.append(line)
        return lines

    def _format_cell(self, cell: Any, time_zone: str) -> str:
        if cell is None:
            return ""
        if isinstance(cell, (date, datetime)):
            return self.format_date(cell, time_zone)
        if isinstance(cell, (int, float, Decimal)) and not isinstance(cell, bool):
            return self.format_value(cell)
        return str(cell).strip()

    def get_transaction(self, transaction_id: str | None) -> Transaction | None:
        if transaction_id is None:
            return None
        with self._log_context():
            payload = self._transaction_service.get_transaction(self._id, transaction_id)
        if payload is None:
            return None
        return self._bind(Transaction.from_payload(payload))

    def get_transactions(self, query: str | None = None) -> TransactionIterator:
        """Iterate transactions matching a query, e.g. "account:'Bank' after:01/2024"."""
        return TransactionIterator(self, query, page_size=self._page_size)

    def continue_transaction_iterator(
        self, query: str | None, continuation_token: str
    ) -> TransactionIterator:
        """Resume an iteration from the token of a previous iterator."""
        iterator = TransactionIterator(self, query, page_size=self._page_size)
        iterator.set_continuation_token(continuation_token)
        return iterator

    def list_transaction_page(
        self, query: str | None, limit: int, cursor: str | None
    ) -> tuple[list[Transaction], str | None]:
        with self._log_context():
            page = self._transaction_service.list_transactions(
                self._id, query=query, limit=limit, cursor=cursor
            )
        transactions = [self._bind(Transaction.from_payload(p)) for p in page.items]
        return transactions, page.cursor

    # ------------------------------------------------------------------
    # Queries and reports
    # ------------------------------------------------------------------

    def audit(self) -> None:
        """Ask the service to run its asynchronous balances audit."""
        with self._log_context():
            self._book_service.audit(self._id)
            logger.info("book_audit_requested")

    def get_saved_queries(self) -> list[dict[str, Any]]:
        """Saved queries of the book; fetched once and kept for the book's lifetime."""
        state = self._saved_queries
        if not isinstance(state, Loaded):
            with self._log_context():
                state = Loaded(self._book_service.get_saved_queries(self._id))
            self._saved_queries = state
        return list(state.value)

    def get_balances_report(self, query: str) -> BalancesReport:
        with self._log_context():
            balances = self._book_service.get_balances(self._id, query)
        return BalancesReport(self, balances)

    def create_balances_data_table(self, query: str) -> pd.DataFrame:
        return self.get_balances_report(query).create_data_table()

    def create_accounts_data_table(self) -> pd.DataFrame:
        return tables.accounts_frame(self.accounts)

    def create_transactions_data_table(self, query: str | None = None) -> pd.DataFrame:
        return tables.transactions_frame(self.get_transactions(query))
