# nft_indexer/database/base.py

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Type, TypeVar

from sqlalchemy import Column, DateTime, Integer, String, text
from sqlalchemy.orm import declarative_base, declarative_mixin
import msgspec

from ..types import Entity
from .types import EvmHashType


EntityBase = declarative_base()

S = TypeVar('S', bound=Entity)

AUDIT_COLUMNS = {'created_at', 'updated_at'}


@declarative_mixin
class TimestampMixin:
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text('CURRENT_TIMESTAMP')
    )

    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text('CURRENT_TIMESTAMP'),
        onupdate=lambda: datetime.now(timezone.utc)
    )


@declarative_mixin
class ProvenanceMixin:
    log_index = Column(Integer, nullable=False, default=0)
    tx_hash = Column(EvmHashType(), nullable=False, default="", index=True)
    block_number = Column(Integer, nullable=False, default=0, index=True)
    block_timestamp = Column(Integer, nullable=False, default=0)


class DBEntityModel(EntityBase, TimestampMixin, ProvenanceMixin):
    __abstract__ = True

    id = Column(String(128), primary_key=True)

    @classmethod
    def from_msgspec(cls, msgspec_obj: msgspec.Struct, **overrides):
        data = msgspec.structs.asdict(msgspec_obj)
        data.update(overrides)
        valid_columns = {col.name for col in cls.__table__.columns}
        filtered_data = {
            k: (v.value if isinstance(v, Enum) else v)
            for k, v in data.items() if k in valid_columns
        }

        return cls(**filtered_data)

    def update_from_msgspec(self, msgspec_obj: msgspec.Struct) -> None:
        data = msgspec.structs.asdict(msgspec_obj)
        for column in self.__table__.columns:
            if column.name in data and column.name not in AUDIT_COLUMNS and column.name != 'id':
                value = data[column.name]
                setattr(self, column.name, value.value if isinstance(value, Enum) else value)

    def to_msgspec(self, struct_type: Type[S]) -> S:
        data = {}
        for column in self.__table__.columns:
            if column.name in AUDIT_COLUMNS:
                continue
            value = getattr(self, column.name)
            data[column.name] = str(value) if isinstance(value, Decimal) else value
        return msgspec.convert(data, type=struct_type)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(id={self.id})>"
