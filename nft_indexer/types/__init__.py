# nft_indexer/types/__init__.py

from .constants import (
    ZERO_ADDRESS,
    TRANSFER_EVENT_SIGNATURE,
    ORDERS_MATCHED_EVENT_SIGNATURE,
    CRYPTOCOVEN_ADDRESS,
    OPENSEA_WYVERN_ADDRESS,
    DEFAULT_MAX_SCAN_DISTANCE,
)

from .new import (
    HexStr,
    EvmAddress,
    EvmHash,
    GlobalId,
    AccountId,
    TokenKey,
    HistoryId,
    ErrorId,
)

# EVM Types
from .evm import (
    EvmLog,
    EvmRpcLog,
    EvmTxReceipt,
)

# Event Types
from .events import (
    Provenance,
    ChainEvent,
    TransferEvent,
    OrdersMatchedEvent,
    ChainEventUnion,
)

# Entity Types
from .entities import (
    EntityKind,
    TransactionType,
    AccountCategory,
    Entity,
    Account,
    Token,
    Transaction,
    AccountHistory,
    ENTITY_TYPES,
)

# Configuration Types
from .config import (
    DatabaseConfig,
    LoggingConfig,
)

# Errors
from .errors import (
    IndexerError,
    MalformedEventError,
    MissingReceiptError,
    TradeCorrelationError,
    ProcessingError,
    create_decode_error,
    create_transform_error,
)
