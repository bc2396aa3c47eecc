# nft_indexer/database/memory.py

from typing import Dict, Iterable, Optional, Tuple

import msgspec

from ..types import Entity, EntityKind, ENTITY_TYPES
from ..core.logging import LoggingMixin
from .interfaces import EntityStore


class MemoryEntityStore(EntityStore, LoggingMixin):
    """In-process store holding builtin snapshots, so every get is a fresh copy.

    Snapshots are plain dicts rather than msgpack, which has no room for
    256-bit integers.
    """

    def __init__(self):
        self._data: Dict[Tuple[EntityKind, str], dict] = {}

    def get(self, kind: EntityKind, entity_id: str) -> Optional[Entity]:
        raw = self._data.get((kind, entity_id))
        if raw is None:
            return None
        return msgspec.convert(raw, type=ENTITY_TYPES[kind])

    def set(self, kind: EntityKind, entity_id: str, entity: Entity) -> None:
        if not isinstance(entity, ENTITY_TYPES[kind]):
            raise TypeError(f"Expected {ENTITY_TYPES[kind].__name__} for {kind.value}, "
                            f"got {type(entity).__name__}")
        self._data[(kind, entity_id)] = msgspec.to_builtins(entity)

    def set_many(self, items: Iterable[Tuple[EntityKind, str, Entity]]) -> None:
        # Encode everything first so a bad entity leaves the store untouched
        staged = {}
        for kind, entity_id, entity in items:
            if not isinstance(entity, ENTITY_TYPES[kind]):
                raise TypeError(f"Expected {ENTITY_TYPES[kind].__name__} for {kind.value}, "
                                f"got {type(entity).__name__}")
            staged[(kind, entity_id)] = msgspec.to_builtins(entity)
        self._data.update(staged)
        self.log_debug("Entities committed", entity_count=len(staged))

    def count(self, kind: EntityKind) -> int:
        return sum(1 for stored_kind, _ in self._data if stored_kind == kind)

    def ids(self, kind: EntityKind) -> list[str]:
        return sorted(entity_id for stored_kind, entity_id in self._data if stored_kind == kind)
