"""Contracts of the remote collaborators a Book talks to.

Payloads are plain JSON-shaped dicts as exchanged with the API; wrapping them
into domain entities is the Book's job.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class TransactionPage:
    items: list[dict[str, Any]] = field(default_factory=list)
    cursor: str | None = None


class BookService(ABC):
    @abstractmethod
    def fetch_book(self, book_id: str) -> dict[str, Any]:
        """Fetch book metadata bundled with its "accounts" and "groups"."""

    @abstractmethod
    def audit(self, book_id: str) -> None:
        pass

    @abstractmethod
    def get_saved_queries(self, book_id: str) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    def get_balances(self, book_id: str, query: str) -> dict[str, Any]:
        pass


class AccountService(ABC):
    @abstractmethod
    def create_accounts(
        self, book_id: str, accounts: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    def create_account(
        self,
        book_id: str,
        name: str,
        group: str | None = None,
        description: str | None = None,
    ) -> dict[str, Any]:
        pass


class GroupService(ABC):
    @abstractmethod
    def create_groups(
        self, book_id: str, groups: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        pass


class TransactionService(ABC):
    @abstractmethod
    def create_transactions(
        self, book_id: str, transactions: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        pass

    @abstractmethod
    def get_transaction(
        self, book_id: str, transaction_id: str
    ) -> dict[str, Any] | None:
        pass

    @abstractmethod
    def list_transactions(
        self,
        book_id: str,
        query: str | None = None,
        limit: int = 1000,
        cursor: str | None = None,
    ) -> TransactionPage:
        pass
