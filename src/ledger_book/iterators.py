"""Paged iteration over a book's transactions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ledger_book.config import get_settings
from ledger_book.domain.transactions import Transaction
from ledger_book.exceptions import InvalidContinuationTokenError

if TYPE_CHECKING:
    from ledger_book.book import Book


def encode_token(cursor: str | None, offset: int) -> str:
    return f"{cursor or ''}_{offset}"


def decode_token(token: str) -> tuple[str | None, int]:
    cursor, sep, offset = token.rpartition("_")
    if not sep or not offset.isdigit():
        raise InvalidContinuationTokenError(token)
    return cursor or None, int(offset)


class TransactionIterator:
    """Iterate the transactions matching a query, one page at a time.

    Pages are fetched lazily as iteration advances. ``continuation_token``
    marks the next transaction to be returned, so a new iterator can resume
    where this one stopped:

        it = book.get_transactions("account:'Bank' after:01/2024")
        first = next(it)
        resumed = book.continue_transaction_iterator(it.query, it.continuation_token)
    """

    def __init__(
        self, book: Book, query: str | None = None, page_size: int | None = None
    ) -> None:
        self._book = book
        self._query = query
        self._page_size = page_size or get_settings().page_size
        self._page: list[Transaction] = []
        self._index = 0
        self._page_cursor: str | None = None
        self._next_cursor: str | None = None
        self._skip = 0
        self._has_more = True
        self._loaded = False
        self._resume_token: str | None = None

    @property
    def book(self) -> Book:
        return self._book

    @property
    def query(self) -> str | None:
        return self._query

    @property
    def continuation_token(self) -> str | None:
        if not self._loaded:
            return self._resume_token
        if self._index < len(self._page):
            return encode_token(self._page_cursor, self._index)
        if self._has_more:
            return encode_token(self._next_cursor, 0)
        return None

    def set_continuation_token(self, token: str) -> None:
        cursor, offset = decode_token(token)
        self._page = []
        self._index = 0
        self._next_cursor = cursor
        self._skip = offset
        self._has_more = True
        self._loaded = False
        self._resume_token = token

    def __iter__(self) -> TransactionIterator:
        return self

    def __next__(self) -> Transaction:
        while self._index >= len(self._page):
            if not self._has_more:
                raise StopIteration
            self._load_page()
        transaction = self._page[self._index]
        self._index += 1
        return transaction

    def _load_page(self) -> None:
        cursor = self._next_cursor
        transactions, next_cursor = self._book.list_transaction_page(
            self._query, self._page_size, cursor
        )
        self._page = transactions
        self._page_cursor = cursor
        self._index = min(self._skip, len(transactions))
        self._skip = 0
        self._next_cursor = next_cursor
        # an empty page ends iteration even if the API hands back a cursor
        self._has_more = next_cursor is not None and len(transactions) > 0
        self._loaded = True
