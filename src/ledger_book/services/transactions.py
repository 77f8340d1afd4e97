"""TransactionService implementation over the HTTP API."""

from typing import Any

from ledger_book.api_client import LedgerAPIClient
from ledger_book.exceptions import APIError
from ledger_book.services.interfaces import TransactionPage, TransactionService


class TransactionServiceImpl(TransactionService):
    def __init__(self, client: LedgerAPIClient) -> None:
        self._client = client

    def create_transactions(
        self, book_id: str, transactions: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        data = self._client.request_json(
            "POST",
            f"/v5/books/{book_id}/transactions/batch",
            json={"items": transactions},
        )
        if not data:
            return []
        return list(data.get("items") or [])

    def get_transaction(
        self, book_id: str, transaction_id: str
    ) -> dict[str, Any] | None:
        """Fetch one transaction, or None when the book has no such id."""
        try:
            data = self._client.request_json(
                "GET", f"/v5/books/{book_id}/transactions/{transaction_id}"
            )
        except APIError as e:
            if e.status_code == 404:
                return None
            raise
        return data

    def list_transactions(
        self,
        book_id: str,
        query: str | None = None,
        limit: int = 1000,
        cursor: str | None = None,
    ) -> TransactionPage:
        data = self._client.request_json(
            "GET",
            f"/v5/books/{book_id}/transactions",
            params={"query": query, "limit": limit, "cursor": cursor},
        )
        if not data:
            return TransactionPage()
        return TransactionPage(
            items=list(data.get("items") or []),
            cursor=data.get("cursor"),
        )
