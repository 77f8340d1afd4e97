__version__ = "0.1.0"

from ledger_book.book import Book
from ledger_book.domain.entities import Account, BookSnapshot, Collection, Group
from ledger_book.domain.transactions import Transaction
from ledger_book.domain.value_objects import (
    AccountType,
    DecimalSeparator,
    Permission,
    normalize_name,
)
from ledger_book.iterators import TransactionIterator
from ledger_book.reports import BalancesContainer, BalancesReport

__all__ = [
    "Account",
    "AccountType",
    "BalancesContainer",
    "BalancesReport",
    "Book",
    "BookSnapshot",
    "Collection",
    "DecimalSeparator",
    "Group",
    "Permission",
    "Transaction",
    "TransactionIterator",
    "normalize_name",
]
