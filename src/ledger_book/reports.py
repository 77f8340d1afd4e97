"""Balances reports returned by balance queries."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import pandas as pd

from ledger_book.domain.value_objects import NormalizedName, normalize_name
from ledger_book.tables import balances_frame

if TYPE_CHECKING:
    from ledger_book.book import Book


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


@dataclass
class BalancesContainer:
    """Balances of one account, group or hashtag matched by the query."""

    name: str
    type: str
    cumulative_balance: Decimal = Decimal("0")
    period_balance: Decimal = Decimal("0")
    permanent: bool = False
    credit: bool = False
    children: list[BalancesContainer] = field(default_factory=list)

    @property
    def normalized_name(self) -> NormalizedName:
        return normalize_name(self.name)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> BalancesContainer:
        return cls(
            name=payload.get("name", ""),
            type=payload.get("type", "ACCOUNT"),
            cumulative_balance=_decimal(payload.get("cumulativeBalance")),
            period_balance=_decimal(payload.get("periodBalance")),
            permanent=bool(payload.get("permanent", False)),
            credit=bool(payload.get("credit", False)),
            children=[
                cls.from_payload(child)
                for child in payload.get("balancesContainers") or []
            ],
        )

    def walk(self) -> Iterator[BalancesContainer]:
        yield self
        for child in self.children:
            yield from child.walk()


class BalancesReport:
    def __init__(self, book: Book, payload: dict[str, Any]) -> None:
        self._book = book
        self.periodicity: str | None = payload.get("periodicity")
        self.containers = [
            BalancesContainer.from_payload(c)
            for c in payload.get("balancesContainers") or []
        ]

    @property
    def book(self) -> Book:
        return self._book

    def get_balances_container(self, name: str) -> BalancesContainer | None:
        """Find a container anywhere in the report by (normalized) name."""
        key = normalize_name(name)
        for root in self.containers:
            for container in root.walk():
                if container.normalized_name == key:
                    return container
        return None

    def create_data_table(self) -> pd.DataFrame:
        return balances_frame(self)
