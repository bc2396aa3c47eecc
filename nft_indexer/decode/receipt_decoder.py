# nft_indexer/decode/receipt_decoder.py

from typing import List, Optional, Tuple, Dict

import msgspec
from web3 import Web3

from ..types import (
    EvmLog,
    EvmTxReceipt,
    EvmHash,
    ChainEventUnion,
    TransferEvent,
    OrdersMatchedEvent,
    ProcessingError,
    ErrorId,
    create_decode_error,
)
from ..core.logging import LoggingMixin
from .log_decoder import LogDecoder


class ReceiptDecoder(LoggingMixin):
    """Turns eth_getTransactionReceipt results into chain-ordered events.

    Every event carries the full log list of its receipt so the correlator can
    look at sibling logs. Logs dropped by a reorg are excluded.
    """

    def __init__(self, log_decoder: LogDecoder):
        self.log_decoder = log_decoder

    def parse_receipt(self, raw: dict) -> EvmTxReceipt:
        return msgspec.convert(raw, type=EvmTxReceipt)

    def build_logs(self, receipt: EvmTxReceipt) -> List[EvmLog]:
        logs = [
            EvmLog(
                address=log.address.lower(),
                topics=[topic.lower() for topic in log.topics],
                data=log.data,
                log_index=Web3.to_int(hexstr=log.logIndex),
            )
            for log in receipt.logs
            if not log.removed
        ]
        return sorted(logs, key=lambda log: log.log_index)

    def decode_receipt(self, receipt: EvmTxReceipt, block_timestamp: int) -> Tuple[
        List[ChainEventUnion], Dict[ErrorId, ProcessingError]
    ]:
        tx_hash = EvmHash(receipt.transactionHash.lower())
        errors: Dict[ErrorId, ProcessingError] = {}

        if receipt.status is not None and Web3.to_int(hexstr=receipt.status) == 0:
            self.log_debug("Skipping failed transaction", tx_hash=tx_hash)
            return [], errors

        block_number = Web3.to_int(hexstr=receipt.blockNumber)
        logs = self.build_logs(receipt)
        events: List[ChainEventUnion] = []

        for log in logs:
            event = self._decode_event(log, logs, tx_hash, block_number, block_timestamp)
            if event is not None:
                events.append(event)
            elif self.log_decoder.is_transfer(log) or self.log_decoder.is_orders_matched(log):
                error = create_decode_error(
                    "decode_failed",
                    "Matched event signature but could not decode log",
                    tx_hash=tx_hash,
                    log_index=log.log_index,
                )
                errors[error.error_id] = error

        self.log_debug("Receipt decoded",
                       tx_hash=tx_hash,
                       block_number=block_number,
                       log_count=len(logs),
                       event_count=len(events),
                       error_count=len(errors))
        return events, errors

    def _decode_event(self, log: EvmLog, logs: List[EvmLog], tx_hash: EvmHash,
                      block_number: int, block_timestamp: int) -> Optional[ChainEventUnion]:
        transfer = self.log_decoder.decode_transfer(log)
        if transfer:
            return TransferEvent(
                tx_hash=tx_hash,
                log_index=log.log_index,
                block_number=block_number,
                block_timestamp=block_timestamp,
                sibling_logs=logs,
                from_address=transfer.from_address,
                to_address=transfer.to_address,
                token_id=transfer.token_id,
            )

        match = self.log_decoder.decode_orders_matched(log)
        if match:
            return OrdersMatchedEvent(
                tx_hash=tx_hash,
                log_index=log.log_index,
                block_number=block_number,
                block_timestamp=block_timestamp,
                sibling_logs=logs,
                maker=match.maker,
                taker=match.taker,
                price=match.price,
                buy_hash=match.buy_hash,
                sell_hash=match.sell_hash,
                metadata=match.metadata,
            )

        return None
