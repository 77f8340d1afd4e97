from ledger_book.domain.entities import Account, BookSnapshot, Collection, Group
from ledger_book.domain.transactions import AccountRef, Transaction
from ledger_book.domain.value_objects import (
    AccountType,
    DecimalSeparator,
    NormalizedName,
    Permission,
    normalize_name,
)

__all__ = [
    "Account",
    "AccountRef",
    "AccountType",
    "BookSnapshot",
    "Collection",
    "DecimalSeparator",
    "Group",
    "NormalizedName",
    "Permission",
    "Transaction",
    "normalize_name",
]
