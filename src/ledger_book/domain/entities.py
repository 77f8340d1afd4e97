from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ledger_book.domain.value_objects import (
    AccountType,
    DecimalSeparator,
    NormalizedName,
    Permission,
    normalize_name,
)
from ledger_book.exceptions import GroupNotFoundError, UnboundEntityError

if TYPE_CHECKING:
    from ledger_book.book import Book


def first_property(properties: dict[str, str] | None, keys: tuple[str, ...]) -> str | None:
    """Return the first non-blank value among keys."""
    if not properties:
        return None
    for key in keys:
        value = properties.get(key)
        if value is not None and str(value).strip() != "":
            return value
    return None


def _field(payload: dict[str, Any], key: str, default: Any) -> Any:
    """payload[key], or default when the key is missing or null."""
    value = payload.get(key)
    return default if value is None else value


def _ref_id(ref: Any) -> str | None:
    if isinstance(ref, dict):
        return ref.get("id")
    return ref


@dataclass
class Collection:
    id: str
    name: str = ""
    book_ids: list[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Collection:
        return cls(
            id=payload["id"],
            name=payload.get("name") or "",
            book_ids=[_ref_id(b) for b in payload.get("books") or []],
        )


@dataclass(frozen=True)
class BookSnapshot:
    """Scalar metadata of a book, as returned by one fetch."""

    id: str
    name: str
    fraction_digits: int = 2
    owner_name: str | None = None
    permission: Permission = Permission.NONE
    date_pattern: str = "dd/MM/yyyy"
    decimal_separator: DecimalSeparator = DecimalSeparator.DOT
    time_zone: str = "UTC"
    time_zone_offset: int = 0
    last_update_ms: int | None = None
    properties: dict[str, str] = field(default_factory=dict)
    collection: Collection | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> BookSnapshot:
        last_update = payload.get("lastUpdateMs")
        collection = payload.get("collection")
        return cls(
            id=payload["id"],
            name=payload.get("name") or "",
            fraction_digits=int(_field(payload, "fractionDigits", 2)),
            owner_name=payload.get("ownerName"),
            permission=Permission(_field(payload, "permission", Permission.NONE)),
            date_pattern=payload.get("datePattern") or "dd/MM/yyyy",
            decimal_separator=DecimalSeparator(
                _field(payload, "decimalSeparator", DecimalSeparator.DOT)
            ),
            time_zone=payload.get("timeZone") or "UTC",
            time_zone_offset=int(_field(payload, "timeZoneOffset", 0)),
            # the API serializes longs as strings
            last_update_ms=int(last_update) if last_update is not None else None,
            properties=dict(payload.get("properties") or {}),
            collection=Collection.from_payload(collection) if collection else None,
        )


@dataclass
class Account:
    name: str
    type: AccountType = AccountType.ASSET
    id: str | None = None
    group_ids: list[str] = field(default_factory=list)
    properties: dict[str, str] = field(default_factory=dict)
    archived: bool = False
    has_transaction_posted: bool = False
    book: Book | None = field(default=None, repr=False, compare=False)

    @property
    def normalized_name(self) -> NormalizedName:
        return normalize_name(self.name)

    @property
    def permanent(self) -> bool:
        return self.type.is_permanent

    @property
    def credit(self) -> bool:
        return self.type.is_credit

    @property
    def groups(self) -> list[Group]:
        book = self._require_book()
        resolved = (book.get_group(group_id) for group_id in self.group_ids)
        return [group for group in resolved if group is not None]

    def get_property(self, *keys: str) -> str | None:
        return first_property(self.properties, keys)

    def set_property(self, key: str, value: str) -> Account:
        self.properties[key] = value
        return self

    def add_group(self, group: Group | str) -> Account:
        """Add this account to a group, given as a Group or its id or name."""
        if isinstance(group, Group):
            resolved: Group | None = group
        else:
            resolved = self._require_book().get_group(group)
        if resolved is None or resolved.id is None:
            raise GroupNotFoundError(str(group))
        if resolved.id not in self.group_ids:
            self.group_ids.append(resolved.id)
        return self

    def create(self) -> Account:
        return self._require_book().batch_create_accounts([self])[0]

    def _require_book(self) -> Book:
        if self.book is None:
            raise UnboundEntityError("Account")
        return self.book

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "groups": [{"id": group_id} for group_id in self.group_ids],
            "properties": dict(self.properties),
            "archived": self.archived,
        }
        if self.id is not None:
            payload["id"] = self.id
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Account:
        group_ids = [_ref_id(g) for g in payload.get("groups") or []]
        return cls(
            id=payload.get("id"),
            name=payload.get("name") or "",
            type=AccountType.parse(payload.get("type") or AccountType.ASSET),
            group_ids=[g for g in group_ids if g is not None],
            properties=dict(payload.get("properties") or {}),
            archived=bool(payload.get("archived", False)),
            has_transaction_posted=bool(payload.get("hasTransactionPosted", False)),
        )


@dataclass
class Group:
    name: str
    id: str | None = None
    parent_id: str | None = None
    hidden: bool = False
    properties: dict[str, str] = field(default_factory=dict)
    book: Book | None = field(default=None, repr=False, compare=False)

    @property
    def normalized_name(self) -> NormalizedName:
        return normalize_name(self.name)

    @property
    def accounts(self) -> list[Account]:
        book = self._require_book()
        return [a for a in book.accounts if self.id in a.group_ids]

    @property
    def parent(self) -> Group | None:
        if self.parent_id is None:
            return None
        return self._require_book().get_group(self.parent_id)

    def get_property(self, *keys: str) -> str | None:
        return first_property(self.properties, keys)

    def set_property(self, key: str, value: str) -> Group:
        self.properties[key] = value
        return self

    def create(self) -> Group:
        return self._require_book().batch_create_groups([self])[0]

    def _require_book(self) -> Book:
        if self.book is None:
            raise UnboundEntityError("Group")
        return self.book

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "hidden": self.hidden,
            "properties": dict(self.properties),
        }
        if self.id is not None:
            payload["id"] = self.id
        if self.parent_id is not None:
            payload["parent"] = {"id": self.parent_id}
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Group:
        return cls(
            id=payload.get("id"),
            name=payload.get("name") or "",
            parent_id=_ref_id(payload.get("parent")) or payload.get("parentId"),
            hidden=bool(payload.get("hidden", False)),
            properties=dict(payload.get("properties") or {}),
        )
