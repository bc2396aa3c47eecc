# nft_indexer/transform/unit_of_work.py

from typing import Dict, Optional, Tuple

from ..types import Entity, EntityKind
from ..database.interfaces import EntityStore


class UnitOfWork:
    """Stages the writes of one event.

    Reads see staged entities first, so two references to the same id share one
    object within an event. Nothing reaches the store until commit, and a
    discarded unit leaves the store untouched.
    """

    def __init__(self, store: EntityStore):
        self.store = store
        self._loaded: Dict[Tuple[EntityKind, str], Entity] = {}
        self._dirty: Dict[Tuple[EntityKind, str], Entity] = {}

    def get(self, kind: EntityKind, entity_id: str) -> Optional[Entity]:
        key = (kind, entity_id)
        if key in self._dirty:
            return self._dirty[key]
        if key not in self._loaded:
            entity = self.store.get(kind, entity_id)
            if entity is None:
                return None
            self._loaded[key] = entity
        return self._loaded[key]

    def stage(self, entity: Entity) -> None:
        self._dirty[(entity.kind, entity.id)] = entity

    def is_staged(self, kind: EntityKind, entity_id: str) -> bool:
        return (kind, entity_id) in self._dirty

    @property
    def pending(self) -> int:
        return len(self._dirty)

    def commit(self) -> int:
        count = len(self._dirty)
        if count:
            self.store.set_many(
                (kind, entity_id, entity) for (kind, entity_id), entity in self._dirty.items()
            )
        self._dirty.clear()
        self._loaded.clear()
        return count
