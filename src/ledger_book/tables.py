"""Tabular (pandas) views over accounts, transactions and balances."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

import pandas as pd

from ledger_book.domain.entities import Account
from ledger_book.domain.transactions import Transaction

if TYPE_CHECKING:
    from ledger_book.reports import BalancesReport

ACCOUNT_COLUMNS = ["id", "name", "type", "groups", "archived"]
TRANSACTION_COLUMNS = [
    "id",
    "date",
    "amount",
    "credit_account",
    "debit_account",
    "description",
    "posted",
]
BALANCE_COLUMNS = ["name", "type", "cumulative_balance", "period_balance"]


def accounts_frame(accounts: Iterable[Account]) -> pd.DataFrame:
    rows = []
    for account in accounts:
        group_names = [g.name for g in account.groups] if account.book else []
        rows.append(
            {
                "id": account.id,
                "name": account.name,
                "type": account.type.value,
                "groups": ", ".join(group_names),
                "archived": account.archived,
            }
        )
    return pd.DataFrame(rows, columns=ACCOUNT_COLUMNS)


def transactions_frame(transactions: Iterable[Transaction]) -> pd.DataFrame:
    # account names come from the references, so no lookups hit the book
    rows = [
        {
            "id": t.id,
            "date": t.date,
            "amount": t.amount,
            "credit_account": t.credit_ref.name if t.credit_ref else None,
            "debit_account": t.debit_ref.name if t.debit_ref else None,
            "description": t.description,
            "posted": t.posted,
        }
        for t in transactions
    ]
    return pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)


def balances_frame(report: BalancesReport) -> pd.DataFrame:
    rows = [
        {
            "name": c.name,
            "type": c.type,
            "cumulative_balance": c.cumulative_balance,
            "period_balance": c.period_balance,
        }
        for c in report.containers
    ]
    return pd.DataFrame(rows, columns=BALANCE_COLUMNS)
