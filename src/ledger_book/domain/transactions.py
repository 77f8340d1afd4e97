from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from ledger_book.domain.entities import Account, first_property
from ledger_book.exceptions import InvalidAmountError, InvalidDateError, UnboundEntityError

if TYPE_CHECKING:
    from ledger_book.book import Book


def parse_amount(value: Decimal | int | float | str) -> Decimal:
    if isinstance(value, bool):
        raise InvalidAmountError(value, "booleans are not amounts")
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidAmountError(value, "not a number") from None
    if not amount.is_finite():
        raise InvalidAmountError(value, "must be finite")
    return amount


def parse_date(value: date | datetime | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidDateError(value) from None


@dataclass
class AccountRef:
    """Reference to a transaction side: an account id, a name, or both."""

    id: str | None = None
    name: str | None = None

    def to_payload(self) -> dict[str, str]:
        payload = {}
        if self.id is not None:
            payload["id"] = self.id
        if self.name is not None:
            payload["name"] = self.name
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any] | None) -> AccountRef | None:
        if not payload:
            return None
        return cls(id=payload.get("id"), name=payload.get("name"))


@dataclass
class Transaction:
    id: str | None = None
    date: date | None = None
    amount: Decimal | None = None
    description: str = ""
    credit_ref: AccountRef | None = None
    debit_ref: AccountRef | None = None
    posted: bool = False
    checked: bool = False
    trashed: bool = False
    properties: dict[str, str] = field(default_factory=dict)
    remote_ids: list[str] = field(default_factory=list)
    book: Book | None = field(default=None, repr=False, compare=False)

    @property
    def credit_account(self) -> Account | None:
        return self._resolve(self.credit_ref)

    @property
    def debit_account(self) -> Account | None:
        return self._resolve(self.debit_ref)

    def _resolve(self, ref: AccountRef | None) -> Account | None:
        if ref is None:
            return None
        book = self._require_book()
        return book.get_account(ref.id) or book.get_account(ref.name)

    def _ref_for(self, account: Account | str) -> AccountRef:
        if isinstance(account, Account):
            return AccountRef(id=account.id, name=account.name)
        found = self._require_book().get_account(account)
        if found is None:
            # unknown names are sent as-is and matched or created remotely
            return AccountRef(name=account)
        return AccountRef(id=found.id, name=found.name)

    def from_account(self, account: Account | str) -> Transaction:
        self.credit_ref = self._ref_for(account)
        return self

    def to_account(self, account: Account | str) -> Transaction:
        self.debit_ref = self._ref_for(account)
        return self

    def set_date(self, value: date | datetime | str) -> Transaction:
        self.date = parse_date(value)
        return self

    def set_amount(self, value: Decimal | int | float | str) -> Transaction:
        self.amount = parse_amount(value)
        return self

    def set_description(self, description: str) -> Transaction:
        self.description = description
        return self

    def get_property(self, *keys: str) -> str | None:
        return first_property(self.properties, keys)

    def set_property(self, key: str, value: str) -> Transaction:
        self.properties[key] = value
        return self

    def add_remote_id(self, remote_id: str) -> Transaction:
        if remote_id not in self.remote_ids:
            self.remote_ids.append(remote_id)
        return self

    def create(self) -> Transaction:
        return self._require_book().batch_create_transactions([self])[0]

    def _require_book(self) -> Book:
        if self.book is None:
            raise UnboundEntityError("Transaction")
        return self.book

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"description": self.description}
        if self.id is not None:
            payload["id"] = self.id
        if self.date is not None:
            payload["date"] = self.date.isoformat()
        if self.amount is not None:
            payload["amount"] = str(self.amount)
        if self.credit_ref is not None:
            payload["creditAccount"] = self.credit_ref.to_payload()
        if self.debit_ref is not None:
            payload["debitAccount"] = self.debit_ref.to_payload()
        if self.properties:
            payload["properties"] = dict(self.properties)
        if self.remote_ids:
            payload["remoteIds"] = list(self.remote_ids)
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Transaction:
        raw_date = payload.get("date")
        raw_amount = payload.get("amount")
        return cls(
            id=payload.get("id"),
            date=parse_date(raw_date) if raw_date else None,
            amount=parse_amount(raw_amount) if raw_amount is not None else None,
            description=payload.get("description") or "",
            credit_ref=AccountRef.from_payload(payload.get("creditAccount")),
            debit_ref=AccountRef.from_payload(payload.get("debitAccount")),
            posted=bool(payload.get("posted", False)),
            checked=bool(payload.get("checked", False)),
            trashed=bool(payload.get("trashed", False)),
            properties=dict(payload.get("properties") or {}),
            remote_ids=list(payload.get("remoteIds") or []),
        )
