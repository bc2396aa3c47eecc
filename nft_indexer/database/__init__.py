# nft_indexer/database/__init__.py

from .interfaces import EntityStore
from .memory import MemoryEntityStore
from .connection import DatabaseManager
from .repository import (
    SqlEntityStore,
    AccountRepository,
    TokenRepository,
    TransactionRepository,
    AccountHistoryRepository,
)
