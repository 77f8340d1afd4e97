from ledger_book.services.accounts import AccountServiceImpl, GroupServiceImpl
from ledger_book.services.books import BookServiceImpl
from ledger_book.services.interfaces import (
    AccountService,
    BookService,
    GroupService,
    TransactionPage,
    TransactionService,
)
from ledger_book.services.transactions import TransactionServiceImpl

__all__ = [
    "AccountService",
    "AccountServiceImpl",
    "BookService",
    "BookServiceImpl",
    "GroupService",
    "GroupServiceImpl",
    "TransactionPage",
    "TransactionService",
    "TransactionServiceImpl",
]
