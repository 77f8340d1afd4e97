"""Cache state for a book's lazily loaded tiers.

A tier is either ``Unloaded`` (the next read fetches) or ``Loaded`` with the
value built from the last fetch. Tiers are replaced whole, never patched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, Protocol, TypeVar, Union

from ledger_book.domain.value_objects import NormalizedName, normalize_name


class Named(Protocol):
    id: str | None
    name: str


T = TypeVar("T")
E = TypeVar("E", bound=Named)


@dataclass(frozen=True, slots=True)
class Unloaded:
    pass


@dataclass(frozen=True, slots=True)
class Loaded(Generic[T]):
    value: T


CacheState = Union[Unloaded, Loaded[T]]

UNLOADED = Unloaded()


@dataclass
class EntityIndex(Generic[E]):
    """Accounts or groups of one fetch, indexed by id and by normalized name.

    Two entities whose names normalize to the same key collide; the one that
    comes later in the payload wins the name lookup.
    """

    items: list[E] = field(default_factory=list)
    by_id: dict[str, E] = field(default_factory=dict)
    id_by_name: dict[NormalizedName, str] = field(default_factory=dict)

    @classmethod
    def build(cls, entities: list[E]) -> EntityIndex[E]:
        index: EntityIndex[E] = cls(items=list(entities))
        for entity in entities:
            if entity.id is None:
                continue
            index.by_id[entity.id] = entity
            index.id_by_name[normalize_name(entity.name)] = entity.id
        return index

    def lookup(self, id_or_name: str) -> E | None:
        found = self.by_id.get(id_or_name)
        if found is not None:
            return found
        entity_id = self.id_by_name.get(normalize_name(id_or_name))
        if entity_id is None:
            return None
        return self.by_id.get(entity_id)

    def __len__(self) -> int:
        return len(self.items)
