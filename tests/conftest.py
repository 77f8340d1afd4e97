from __future__ import annotations

import itertools
from collections import Counter
from copy import deepcopy
from typing import Any

import pytest

from ledger_book.book import Book
from ledger_book.exceptions import APIError
from ledger_book.services.interfaces import (
    AccountService,
    BookService,
    GroupService,
    TransactionPage,
    TransactionService,
)

BOOK_PAYLOAD: dict[str, Any] = {
    "id": "book-1",
    "name": "Acme Ltd",
    "fractionDigits": 2,
    "ownerName": "alice",
    "permission": "OWNER",
    "datePattern": "dd/MM/yyyy",
    "decimalSeparator": "DOT",
    "timeZone": "America/Sao_Paulo",
    "timeZoneOffset": -180,
    "lastUpdateMs": "1700000000000",
    "properties": {"code": "ACME", "blank": "  "},
    "collection": {
        "id": "col-1",
        "name": "Acme Group",
        "books": [{"id": "book-1"}, {"id": "book-2"}],
    },
    "groups": [
        {"id": "grp-1", "name": "Assets"},
        {"id": "grp-2", "name": "Despesas Gerais", "parent": {"id": "grp-1"}},
    ],
    "accounts": [
        {
            "id": "acc-1",
            "name": "Bank Account",
            "type": "ASSET",
            "groups": [{"id": "grp-1", "name": "Assets"}],
        },
        {"id": "acc-2", "name": "Gas", "type": "OUTGOING"},
        {"id": "acc-3", "name": "Credit Card", "type": "LIABILITY"},
    ],
}

BALANCES_PAYLOAD: dict[str, Any] = {
    "periodicity": "MONTHLY",
    "balancesContainers": [
        {
            "name": "Assets",
            "type": "GROUP",
            "cumulativeBalance": "1500.00",
            "periodBalance": "200.00",
            "permanent": True,
            "balancesContainers": [
                {
                    "name": "Bank Account",
                    "type": "ACCOUNT",
                    "cumulativeBalance": "1500.00",
                    "periodBalance": "200.00",
                    "permanent": True,
                }
            ],
        },
        {
            "name": "Gas",
            "type": "ACCOUNT",
            "cumulativeBalance": "63.23",
            "periodBalance": "63.23",
        },
    ],
}


class FakeBackend:
    """In-memory stand-in for the bookkeeping service.

    Counts calls per operation and raises APIError(500) for operations
    listed in ``failing``.
    """

    def __init__(self) -> None:
        self.book = deepcopy(BOOK_PAYLOAD)
        self.balances = deepcopy(BALANCES_PAYLOAD)
        self.saved_queries = [
            {"id": "q-1", "query": "account:'Gas'", "title": "Fuel"},
        ]
        self.transactions: list[dict[str, Any]] = []
        self.calls: Counter[str] = Counter()
        self.failing: set[str] = set()
        self.last_balances_query: str | None = None
        self._ids = itertools.count(1)

    def hit(self, operation: str) -> None:
        self.calls[operation] += 1
        if operation in self.failing:
            raise APIError(status_code=500, detail=f"{operation} failed")

    def new_id(self, prefix: str) -> str:
        return f"{prefix}-new-{next(self._ids)}"

    @property
    def mutation_calls(self) -> int:
        return sum(
            self.calls[op]
            for op in ("create_accounts", "create_account", "create_groups", "create_transactions")
        )


class FakeBookService(BookService):
    def __init__(self, backend: FakeBackend) -> None:
        self._backend = backend

    def fetch_book(self, book_id: str) -> dict[str, Any]:
        self._backend.hit("fetch_book")
        return deepcopy(self._backend.book)

    def audit(self, book_id: str) -> None:
        self._backend.hit("audit")

    def get_saved_queries(self, book_id: str) -> list[dict[str, Any]]:
        self._backend.hit("get_saved_queries")
        return deepcopy(self._backend.saved_queries)

    def get_balances(self, book_id: str, query: str) -> dict[str, Any]:
        self._backend.hit("get_balances")
        self._backend.last_balances_query = query
        return deepcopy(self._backend.balances)


class FakeAccountService(AccountService):
    def __init__(self, backend: FakeBackend) -> None:
        self._backend = backend

    def create_accounts(
        self, book_id: str, accounts: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        self._backend.hit("create_accounts")
        created = []
        for payload in accounts:
            item = deepcopy(payload)
            item["id"] = self._backend.new_id("acc")
            created.append(item)
        self._backend.book["accounts"].extend(deepcopy(created))
        return created

    def create_account(
        self,
        book_id: str,
        name: str,
        group: str | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        self._backend.hit("create_account")
        groups = [
            {"id": g["id"]} for g in self._backend.book["groups"] if g["name"] == group
        ]
        item = {
            "id": self._backend.new_id("acc"),
            "name": name,
            "type": "ASSET",
            "groups": groups,
        }
        self._backend.book["accounts"].append(deepcopy(item))
        return item


class FakeGroupService(GroupService):
    def __init__(self, backend: FakeBackend) -> None:
        self._backend = backend

    def create_groups(
        self, book_id: str, groups: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        self._backend.hit("create_groups")
        created = []
        for payload in groups:
            item = deepcopy(payload)
            item["id"] = self._backend.new_id("grp")
            created.append(item)
        self._backend.book["groups"].extend(deepcopy(created))
        return created


class FakeTransactionService(TransactionService):
    def __init__(self, backend: FakeBackend) -> None:
        self._backend = backend

    def create_transactions(
        self, book_id: str, transactions: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        self._backend.hit("create_transactions")
        created = []
        for payload in transactions:
            item = deepcopy(payload)
            item["id"] = self._backend.new_id("tx")
            created.append(item)
        self._backend.transactions.extend(deepcopy(created))
        return created

    def get_transaction(
        self, book_id: str, transaction_id: str
    ) -> dict[str, Any] | None:
        self._backend.hit("get_transaction")
        for item in self._backend.transactions:
            if item["id"] == transaction_id:
                return deepcopy(item)
        return None

    def list_transactions(
        self,
        book_id: str,
        query: str | None = None,
        limit: int = 1000,
        cursor: str | None = None,
    ) -> TransactionPage:
        self._backend.hit("list_transactions")
        start = int(cursor) if cursor else 0
        end = start + limit
        items = deepcopy(self._backend.transactions[start:end])
        next_cursor = str(end) if end < len(self._backend.transactions) else None
        return TransactionPage(items=items, cursor=next_cursor)


def make_book(backend: FakeBackend, **kwargs: Any) -> Book:
    return Book(
        "book-1",
        book_service=FakeBookService(backend),
        account_service=FakeAccountService(backend),
        group_service=FakeGroupService(backend),
        transaction_service=FakeTransactionService(backend),
        **kwargs,
    )


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def book(backend: FakeBackend) -> Book:
    return make_book(backend, page_size=2)


@pytest.fixture
def book_factory(backend: FakeBackend):
    def factory(**kwargs: Any) -> Book:
        return make_book(backend, **kwargs)

    return factory


@pytest.fixture
def seeded_transactions(backend: FakeBackend) -> list[dict[str, Any]]:
    """Five posted transactions from Bank Account to Gas."""
    backend.transactions = [
        {
            "id": f"tx-{i}",
            "date": f"2024-01-0{i}",
            "amount": f"{i}0.50",
            "description": f"fuel #{i}",
            "creditAccount": {"id": "acc-1", "name": "Bank Account"},
            "debitAccount": {"id": "acc-2", "name": "Gas"},
            "posted": True,
        }
        for i in range(1, 6)
    ]
    return backend.transactions
