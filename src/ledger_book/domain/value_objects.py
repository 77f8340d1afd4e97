import re
import unicodedata
from enum import Enum
from typing import NewType

from ledger_book.exceptions import InvalidAccountTypeError

NormalizedName = NewType("NormalizedName", str)

_WHITESPACE = re.compile(r"\s+")


def normalize_name(name: str) -> NormalizedName:
    """Fold a display name into its lookup key.

    Diacritics are stripped, case is folded and runs of whitespace collapse
    to a single space, so "Conta Corrente" and "  conta  córrente" map to the
    same key.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return NormalizedName(_WHITESPACE.sub(" ", stripped.casefold()).strip())


class AccountType(str, Enum):
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    INCOMING = "INCOMING"
    OUTGOING = "OUTGOING"

    @classmethod
    def parse(cls, value: "AccountType | str") -> "AccountType":
        if isinstance(value, AccountType):
            return value
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise InvalidAccountTypeError(value) from None

    @classmethod
    def is_type(cls, value: str) -> bool:
        return value in cls._value2member_map_

    @property
    def is_permanent(self) -> bool:
        return self in (AccountType.ASSET, AccountType.LIABILITY)

    @property
    def is_credit(self) -> bool:
        return self in (AccountType.LIABILITY, AccountType.INCOMING)


class Permission(str, Enum):
    NONE = "NONE"
    VIEWER = "VIEWER"
    RECORDER = "RECORDER"
    POSTER = "POSTER"
    EDITOR = "EDITOR"
    OWNER = "OWNER"


class DecimalSeparator(str, Enum):
    DOT = "DOT"
    COMMA = "COMMA"

    @property
    def symbol(self) -> str:
        return "." if self is DecimalSeparator.DOT else ","
