"""BookService implementation over the HTTP API."""

from typing import Any

from ledger_book.api_client import LedgerAPIClient
from ledger_book.services.interfaces import BookService


def _book_path(book_id: str) -> str:
    return f"/v5/books/{book_id}"


class BookServiceImpl(BookService):
    def __init__(self, client: LedgerAPIClient) -> None:
        self._client = client

    def fetch_book(self, book_id: str) -> dict[str, Any]:
        data = self._client.request_json("GET", _book_path(book_id))
        assert isinstance(data, dict)
        return data

    def audit(self, book_id: str) -> None:
        self._client.request_json("PATCH", f"{_book_path(book_id)}/audit")

    def get_saved_queries(self, book_id: str) -> list[dict[str, Any]]:
        data = self._client.request_json("GET", f"{_book_path(book_id)}/queries")
        if not data:
            return []
        return list(data.get("items") or [])

    def get_balances(self, book_id: str, query: str) -> dict[str, Any]:
        data = self._client.request_json(
            "GET", f"{_book_path(book_id)}/balances", params={"query": query}
        )
        return data or {}
