# nft_indexer/types/entities.py

from decimal import Decimal
from enum import Enum
from typing import Optional, Dict, Any

import msgspec
from msgspec import Struct, field

from .constants import ZERO_ADDRESS
from .events import Provenance
from .new import EvmAddress, EvmHash, AccountId, TokenKey, GlobalId, HistoryId


class EntityKind(str, Enum):
    ACCOUNT = "account"
    TOKEN = "token"
    TRANSACTION = "transaction"
    ACCOUNT_HISTORY = "account_history"


class TransactionType(str, Enum):
    TRADE = "TRADE"
    MINT = "MINT"
    TRANSFER = "TRANSFER"


class AccountCategory(str, Enum):
    OG = "OG"
    COLLECTOR = "Collector"
    HUNTER = "Hunter"
    FARMER = "Farmer"
    TRADER = "Trader"
    UNCLASSIFIED = "Unclassified"


class Entity(Struct, kw_only=True):
    id: str
    log_index: int = 0
    tx_hash: EvmHash = EvmHash("")
    block_number: int = 0
    block_timestamp: int = 0

    @property
    def kind(self) -> EntityKind:
        raise NotImplementedError

    @property
    def has_provenance(self) -> bool:
        return bool(self.tx_hash)

    @property
    def position(self) -> tuple[int, int]:
        return (self.block_number, self.log_index)

    def stamp(self, provenance: Provenance) -> None:
        self.tx_hash = provenance.tx_hash
        self.log_index = provenance.log_index
        self.block_number = provenance.block_number
        self.block_timestamp = provenance.block_timestamp

    def to_dict(self) -> Dict[str, Any]:
        return msgspec.structs.asdict(self)


class Account(Entity, kw_only=True):
    id: AccountId
    mint_count: int = 0
    buy_count: int = 0
    sale_count: int = 0
    transaction_count: int = 0
    total_amount_bought: int = 0
    total_amount_sold: int = 0
    # Net value flow: bought minus sold. Negative once proceeds exceed spend.
    total_amount_balance: int = 0
    is_og: bool = False
    is_collector: bool = False
    is_hunter: bool = False
    is_farmer: bool = False
    is_trader: bool = False

    @property
    def kind(self) -> EntityKind:
        return EntityKind.ACCOUNT

    @property
    def category(self) -> AccountCategory:
        flags = {
            AccountCategory.OG: self.is_og,
            AccountCategory.COLLECTOR: self.is_collector,
            AccountCategory.HUNTER: self.is_hunter,
            AccountCategory.FARMER: self.is_farmer,
            AccountCategory.TRADER: self.is_trader,
        }
        for category, flag in flags.items():
            if flag:
                return category
        return AccountCategory.UNCLASSIFIED


class Token(Entity, kw_only=True):
    id: TokenKey
    token_id: int
    owner: Optional[EvmAddress] = None
    mint_count: int = 0
    transfer_count: int = 0
    sale_count: int = 0
    last_sale_price: int = 0

    @property
    def kind(self) -> EntityKind:
        return EntityKind.TOKEN


class Transaction(Entity, kw_only=True):
    id: GlobalId
    account: AccountId
    transaction_type: TransactionType
    reference_id: Optional[str] = None
    reference_ids: list[str] = field(default_factory=list)
    buyer: EvmAddress = ZERO_ADDRESS
    seller: EvmAddress = ZERO_ADDRESS
    from_address: EvmAddress = ZERO_ADDRESS
    to_address: EvmAddress = ZERO_ADDRESS
    maker: EvmAddress = ZERO_ADDRESS
    taker: EvmAddress = ZERO_ADDRESS
    nft_sale_price: int = 0
    total_nfts_sold: int = 0
    total_sales_volume: int = 0
    total_sales_count: int = 0
    highest_sale_price: int = 0
    lowest_sale_price: int = 0
    average_sale_price: Decimal = Decimal(0)

    @property
    def kind(self) -> EntityKind:
        return EntityKind.TRANSACTION

    @property
    def has_sales(self) -> bool:
        return self.total_sales_count > 0


class AccountHistory(Entity, kw_only=True):
    id: HistoryId
    account: AccountId
    mint_count: int
    buy_count: int
    sale_count: int
    transaction_count: int
    total_amount_bought: int
    total_amount_sold: int
    total_amount_balance: int
    category: AccountCategory

    @property
    def kind(self) -> EntityKind:
        return EntityKind.ACCOUNT_HISTORY


ENTITY_TYPES = {
    EntityKind.ACCOUNT: Account,
    EntityKind.TOKEN: Token,
    EntityKind.TRANSACTION: Transaction,
    EntityKind.ACCOUNT_HISTORY: AccountHistory,
}
