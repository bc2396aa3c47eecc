# nft_indexer/database/interfaces.py
"""
Storage contract for derived entities.

Entities are addressed by (kind, id). get returns a detached copy: changes
made to it are invisible to other readers until the entity is set again.
"""
from abc import ABC, abstractmethod
from typing import Iterable, Optional, Tuple

from ..types import Entity, EntityKind


class EntityStore(ABC):
    """Interface for keyed entity persistence."""

    @abstractmethod
    def get(self, kind: EntityKind, entity_id: str) -> Optional[Entity]:
        pass

    @abstractmethod
    def set(self, kind: EntityKind, entity_id: str, entity: Entity) -> None:
        pass

    def set_many(self, items: Iterable[Tuple[EntityKind, str, Entity]]) -> None:
        """Persist several entities. Implementations should apply all or none."""
        for kind, entity_id, entity in items:
            self.set(kind, entity_id, entity)

    def exists(self, kind: EntityKind, entity_id: str) -> bool:
        return self.get(kind, entity_id) is not None

    @abstractmethod
    def count(self, kind: EntityKind) -> int:
        pass
