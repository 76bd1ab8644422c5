"""Id-keyed store for short-lived runtime entities (birds, planes)."""

from typing import Callable, Dict, Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class EntityArena(Generic[T]):
    """
    Holds entities under stable integer ids.

    Removal never mutates the mapping while it is being walked: `retain`
    builds a new mapping from the survivors and swaps it in.
    """

    def __init__(self):
        self._entities: Dict[int, T] = {}
        self._next_id = 1

    def add(self, entity: T) -> int:
        entity_id = self._next_id
        self._next_id += 1
        self._entities[entity_id] = entity
        return entity_id

    def get(self, entity_id: int) -> Optional[T]:
        return self._entities.get(entity_id)

    def retain(self, keep: Callable[[T], bool]) -> int:
        """Keep only entities for which `keep` is true. Returns how many were removed."""
        survivors = {eid: e for eid, e in self._entities.items() if keep(e)}
        removed = len(self._entities) - len(survivors)
        self._entities = survivors
        return removed

    def clear(self) -> None:
        self._entities = {}

    def ids(self) -> List[int]:
        return list(self._entities.keys())

    def values(self) -> List[T]:
        """Entities in insertion (id) order."""
        return list(self._entities.values())

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[T]:
        return iter(self.values())

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._entities

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityArena):
            return NotImplemented
        return self._entities == other._entities

    def __repr__(self) -> str:
        return f"EntityArena({len(self._entities)} entities)"
