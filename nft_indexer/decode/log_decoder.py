# nft_indexer/decode/log_decoder.py

from typing import Optional

from msgspec import Struct
from web3 import Web3
from hexbytes import HexBytes
from eth_utils import is_hex

from ..types import (
    EvmLog,
    EvmAddress,
    EvmHash,
    TRANSFER_EVENT_SIGNATURE,
    ORDERS_MATCHED_EVENT_SIGNATURE,
)
from ..core.logging import LoggingMixin


class DecodedTransfer(Struct, frozen=True):
    log_index: int
    contract: EvmAddress
    from_address: EvmAddress
    to_address: EvmAddress
    token_id: int


class DecodedOrdersMatched(Struct, frozen=True):
    log_index: int
    contract: EvmAddress
    maker: EvmAddress
    taker: EvmAddress
    price: int
    buy_hash: EvmHash
    sell_hash: EvmHash
    metadata: Optional[EvmHash] = None


def topic_to_address(topic: str) -> EvmAddress:
    raw = HexBytes(topic)
    return EvmAddress(Web3.to_hex(raw[-20:]).lower())


class LogDecoder(LoggingMixin):
    """Decodes ERC-721 Transfer and Wyvern OrdersMatched logs from raw topics and data.

    ERC-721 indexes the token id as the third topic. Some early NFT contracts
    emit the ERC-20 shaped event instead, with the token id as the first data
    word; that variant is only trusted for the configured NFT contract, since
    an ERC-20 payment transfer has the same shape.
    """

    def __init__(self, nft_contract: Optional[str] = None, marketplace_contract: Optional[str] = None):
        self.nft_contract = EvmAddress(nft_contract.lower()) if nft_contract else None
        self.marketplace_contract = EvmAddress(marketplace_contract.lower()) if marketplace_contract else None
        self.w3 = Web3()

    def is_transfer(self, log: EvmLog) -> bool:
        if log.topic0 != TRANSFER_EVENT_SIGNATURE:
            return False
        if self.nft_contract:
            return log.address.lower() == self.nft_contract
        return len(log.topics) == 4

    def is_orders_matched(self, log: EvmLog) -> bool:
        if log.topic0 != ORDERS_MATCHED_EVENT_SIGNATURE:
            return False
        if self.marketplace_contract:
            return log.address.lower() == self.marketplace_contract
        return True

    def decode_transfer(self, log: EvmLog) -> Optional[DecodedTransfer]:
        if not self.is_transfer(log) or len(log.topics) < 3:
            return None

        try:
            if len(log.topics) >= 4:
                token_id = self.w3.to_int(hexstr=log.topics[3])
            else:
                if not is_hex(log.data):
                    self.log_warning("Transfer log data is not hex",
                                     log_index=log.log_index)
                    return None
                data = HexBytes(log.data)
                if len(data) < 32:
                    self.log_warning("Transfer log data too short for token id",
                                     log_index=log.log_index,
                                     data_length=len(data))
                    return None
                token_id = self.w3.to_int(data[:32])

            return DecodedTransfer(
                log_index=log.log_index,
                contract=EvmAddress(log.address.lower()),
                from_address=topic_to_address(log.topics[1]),
                to_address=topic_to_address(log.topics[2]),
                token_id=token_id,
            )
        except (ValueError, TypeError) as e:
            self.log_warning("Failed to decode Transfer log",
                             log_index=log.log_index,
                             error=str(e),
                             exception_type=type(e).__name__)
            return None

    def decode_orders_matched(self, log: EvmLog) -> Optional[DecodedOrdersMatched]:
        if not self.is_orders_matched(log) or len(log.topics) < 3:
            return None

        try:
            buy_hash, sell_hash, price = self.w3.codec.decode(
                ["bytes32", "bytes32", "uint256"], HexBytes(log.data)
            )
            return DecodedOrdersMatched(
                log_index=log.log_index,
                contract=EvmAddress(log.address.lower()),
                maker=topic_to_address(log.topics[1]),
                taker=topic_to_address(log.topics[2]),
                price=price,
                buy_hash=EvmHash(Web3.to_hex(buy_hash)),
                sell_hash=EvmHash(Web3.to_hex(sell_hash)),
                metadata=EvmHash(log.topics[3].lower()) if len(log.topics) > 3 else None,
            )
        except Exception as e:
            self.log_warning("Failed to decode OrdersMatched log",
                             log_index=log.log_index,
                             error=str(e),
                             exception_type=type(e).__name__)
            return None
