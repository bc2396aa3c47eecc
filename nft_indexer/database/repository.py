# nft_indexer/database/repository.py

from typing import Generic, Iterable, List, Optional, Tuple, Type, TypeVar

from sqlalchemy.orm import Session

from ..core.logging import IndexerLogger, log_with_context, DEBUG
from ..types import (
    Entity,
    EntityKind,
    ENTITY_TYPES,
    Account,
    Token,
    Transaction,
    AccountHistory,
)
from .base import DBEntityModel
from .connection import DatabaseManager
from .interfaces import EntityStore
from .tables import AccountRow, TokenRow, TransactionRow, AccountHistoryRow


T = TypeVar('T', bound=DBEntityModel)


class BaseRepository(Generic[T]):
    def __init__(self, db_manager: DatabaseManager, model_class: Type[T], struct_type: Type[Entity]):
        self.db_manager = db_manager
        self.model_class = model_class
        self.struct_type = struct_type
        self.logger = IndexerLogger.get_logger(f'database.repository.{model_class.__tablename__}')

    def get_by_id(self, session: Session, id: str) -> Optional[T]:
        try:
            return session.get(self.model_class, id)
        except Exception as e:
            self.logger.error(f"Error getting {self.model_class.__name__} by ID {id}: {e}")
            raise

    def get_entity(self, session: Session, id: str) -> Optional[Entity]:
        row = self.get_by_id(session, id)
        return row.to_msgspec(self.struct_type) if row is not None else None

    def upsert(self, session: Session, entity: Entity) -> T:
        try:
            row = self.get_by_id(session, entity.id)
            if row is None:
                row = self.model_class.from_msgspec(entity)
                session.add(row)
            else:
                row.update_from_msgspec(entity)
            session.flush()
            return row
        except Exception as e:
            self.logger.error(f"Error upserting {self.model_class.__name__} {entity.id}: {e}")
            raise

    def count(self, session: Session) -> int:
        try:
            return session.query(self.model_class).count()
        except Exception as e:
            self.logger.error(f"Error counting {self.model_class.__name__}: {e}")
            raise


class AccountRepository(BaseRepository[AccountRow]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, AccountRow, Account)


class TokenRepository(BaseRepository[TokenRow]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, TokenRow, Token)

    def get_by_owner(self, session: Session, owner: str) -> List[TokenRow]:
        return session.query(TokenRow).filter(TokenRow.owner == owner.lower()).all()


class TransactionRepository(BaseRepository[TransactionRow]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, TransactionRow, Transaction)

    def get_by_tx_hash(self, session: Session, tx_hash: str) -> List[TransactionRow]:
        return session.query(TransactionRow).filter(
            TransactionRow.tx_hash == tx_hash.lower()
        ).order_by(TransactionRow.log_index).all()


class AccountHistoryRepository(BaseRepository[AccountHistoryRow]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager, AccountHistoryRow, AccountHistory)

    def get_for_account(self, session: Session, account: str) -> List[AccountHistoryRow]:
        return session.query(AccountHistoryRow).filter(
            AccountHistoryRow.account == account.lower()
        ).order_by(AccountHistoryRow.block_number, AccountHistoryRow.log_index).all()


class SqlEntityStore(EntityStore):
    """EntityStore backed by SQLAlchemy. set_many commits in a single transaction."""

    def __init__(self, db_manager: DatabaseManager):
        self.db_manager = db_manager
        self.logger = IndexerLogger.get_logger('database.sql_entity_store')
        self.repositories = {
            EntityKind.ACCOUNT: AccountRepository(db_manager),
            EntityKind.TOKEN: TokenRepository(db_manager),
            EntityKind.TRANSACTION: TransactionRepository(db_manager),
            EntityKind.ACCOUNT_HISTORY: AccountHistoryRepository(db_manager),
        }

    def get(self, kind: EntityKind, entity_id: str) -> Optional[Entity]:
        with self.db_manager.get_session() as session:
            return self.repositories[kind].get_entity(session, entity_id)

    def set(self, kind: EntityKind, entity_id: str, entity: Entity) -> None:
        self.set_many([(kind, entity_id, entity)])

    def set_many(self, items: Iterable[Tuple[EntityKind, str, Entity]]) -> None:
        items = list(items)
        for kind, entity_id, entity in items:
            if not isinstance(entity, ENTITY_TYPES[kind]):
                raise TypeError(f"Expected {ENTITY_TYPES[kind].__name__} for {kind.value}, "
                                f"got {type(entity).__name__}")
            if entity.id != entity_id:
                raise ValueError(f"Entity id {entity.id} does not match key {entity_id}")

        with self.db_manager.get_transaction() as session:
            for kind, _, entity in items:
                self.repositories[kind].upsert(session, entity)

        log_with_context(self.logger, DEBUG, "Entities committed", entity_count=len(items))

    def count(self, kind: EntityKind) -> int:
        with self.db_manager.get_session() as session:
            return self.repositories[kind].count(session)
