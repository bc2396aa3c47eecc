# nft_indexer/types/events.py

from typing import Optional, Union

from msgspec import Struct, field

from .new import EvmAddress, EvmHash
from .evm import EvmLog


class Provenance(Struct, frozen=True):
    """Position of a log in the chain. Orders events by (block, log index)."""
    tx_hash: EvmHash
    log_index: int
    block_number: int
    block_timestamp: int

    @property
    def position(self) -> tuple[int, int]:
        return (self.block_number, self.log_index)


class ChainEvent(Struct, kw_only=True):
    tx_hash: EvmHash = field(name="txHash")
    log_index: int = field(name="logIndex")
    block_number: int = field(name="blockNumber")
    block_timestamp: int = field(name="blockTimestamp")
    # Every log of the enclosing receipt, in receipt order. None when no receipt was delivered.
    sibling_logs: Optional[list[EvmLog]] = field(name="siblingLogs", default=None)

    @property
    def event_type(self) -> str:
        return self.__class__.__name__

    @property
    def provenance(self) -> Provenance:
        return Provenance(
            tx_hash=self.tx_hash.lower() if self.tx_hash else self.tx_hash,
            log_index=self.log_index,
            block_number=self.block_number,
            block_timestamp=self.block_timestamp,
        )


class TransferEvent(ChainEvent, tag=True, kw_only=True):
    from_address: EvmAddress = field(name="from")
    to_address: EvmAddress = field(name="to")
    token_id: int = field(name="tokenId")


class OrdersMatchedEvent(ChainEvent, tag=True, kw_only=True):
    maker: EvmAddress
    taker: EvmAddress
    price: int
    buy_hash: Optional[EvmHash] = field(name="buyHash", default=None)
    sell_hash: Optional[EvmHash] = field(name="sellHash", default=None)
    metadata: Optional[EvmHash] = None


ChainEventUnion = Union[TransferEvent, OrdersMatchedEvent]
