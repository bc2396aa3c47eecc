# nft_indexer/transform/correlator.py
"""
Correlates ERC-721 Transfer logs with marketplace OrdersMatched logs emitted
in the same transaction.

Neither log carries the full picture: the Transfer has the token id but no
price, the OrdersMatched has the price but no token id. Within one receipt
the marketplace emits its OrdersMatched after the transfers it settled, so

- a Transfer belongs to the first OrdersMatched found scanning forward, and
- an OrdersMatched owns the Transfers between the previous OrdersMatched
  and itself.

In both directions a Transfer only counts when it moves the token between
the match's maker and taker. Aggregators forward purchased tokens to the
end buyer inside the same transaction; those forwards and burns stay plain
transfers.

Both scans stop after max_scan_distance logs, which keeps unrelated calls
bundled into the same transaction from being pulled in.
"""

from dataclasses import dataclass
from typing import List, Optional

from ..types import (
    ZERO_ADDRESS,
    EvmAddress,
    EvmLog,
    MissingReceiptError,
    OrdersMatchedEvent,
    TradeCorrelationError,
    TransactionType,
    TransferEvent,
)
from ..core.logging import LoggingMixin
from ..decode.log_decoder import LogDecoder, DecodedOrdersMatched


@dataclass
class TransferCorrelation:
    transaction_type: TransactionType
    match: Optional[DecodedOrdersMatched] = None
    receipt_available: bool = True


@dataclass
class TradeLeg:
    """One NFT moved by a marketplace match"""
    log_index: int
    token_id: int
    seller: EvmAddress
    buyer: EvmAddress


def locate_log(logs: List[EvmLog], log_index: int) -> Optional[int]:
    for position, log in enumerate(logs):
        if log.log_index == log_index:
            return position
    return None


def between_parties(from_address: EvmAddress, to_address: EvmAddress,
                    maker: EvmAddress, taker: EvmAddress) -> bool:
    return {from_address.lower(), to_address.lower()} == {maker.lower(), taker.lower()}


class EventCorrelator(LoggingMixin):
    def __init__(self, log_decoder: LogDecoder, max_scan_distance: int):
        if max_scan_distance < 1:
            raise ValueError("max_scan_distance must be positive")
        self.log_decoder = log_decoder
        self.max_scan_distance = max_scan_distance

    def classify_transfer(self, event: TransferEvent) -> TransferCorrelation:
        if event.from_address.lower() == ZERO_ADDRESS:
            return TransferCorrelation(TransactionType.MINT)

        logs = event.sibling_logs
        if not logs:
            self.log_warning("No receipt logs for transfer, classifying as TRANSFER",
                             tx_hash=event.tx_hash,
                             log_index=event.log_index,
                             token_id=event.token_id)
            return TransferCorrelation(TransactionType.TRANSFER, receipt_available=False)

        position = locate_log(logs, event.log_index)
        if position is None:
            self.log_warning("Transfer log missing from its own receipt, classifying as TRANSFER",
                             tx_hash=event.tx_hash,
                             log_index=event.log_index,
                             receipt_log_count=len(logs))
            return TransferCorrelation(TransactionType.TRANSFER, receipt_available=False)

        window = logs[position + 1:position + 1 + self.max_scan_distance]
        for log in window:
            if not self.log_decoder.is_orders_matched(log):
                continue

            match = self.log_decoder.decode_orders_matched(log)
            if match is None:
                self.log_warning("Undecodable OrdersMatched after transfer, classifying as TRANSFER",
                                 tx_hash=event.tx_hash,
                                 log_index=event.log_index,
                                 match_log_index=log.log_index)
                return TransferCorrelation(TransactionType.TRANSFER)

            if match.price == 0:
                self.log_info("Zero-price match treated as transfer",
                              tx_hash=event.tx_hash,
                              log_index=event.log_index,
                              match_log_index=match.log_index)
                return TransferCorrelation(TransactionType.TRANSFER, match=match)

            if not between_parties(event.from_address, event.to_address, match.maker, match.taker):
                self.log_info("Transfer is not between match parties, classifying as TRANSFER",
                              tx_hash=event.tx_hash,
                              log_index=event.log_index,
                              match_log_index=match.log_index)
                return TransferCorrelation(TransactionType.TRANSFER, match=match)

            self.log_debug("Transfer correlated with marketplace match",
                           tx_hash=event.tx_hash,
                           log_index=event.log_index,
                           match_log_index=match.log_index,
                           price=match.price)
            return TransferCorrelation(TransactionType.TRADE, match=match)

        return TransferCorrelation(TransactionType.TRANSFER)

    def trade_legs(self, event: OrdersMatchedEvent) -> List[TradeLeg]:
        """Recover the NFTs settled by this match, in log order.

        Only transfers between the match's maker and taker count. Raises
        MissingReceiptError when no sibling logs were delivered and
        TradeCorrelationError when no sale transfer precedes the match, since
        the seller is then unknown.
        """
        logs = event.sibling_logs
        if not logs:
            raise MissingReceiptError("No receipt logs to recover token id from",
                                      tx_hash=event.tx_hash, log_index=event.log_index)

        position = locate_log(logs, event.log_index)
        if position is None:
            raise TradeCorrelationError("OrdersMatched log missing from its own receipt",
                                        tx_hash=event.tx_hash, log_index=event.log_index)

        start = max(0, position - self.max_scan_distance)
        legs: List[TradeLeg] = []

        for log in reversed(logs[start:position]):
            if self.log_decoder.is_orders_matched(log):
                break

            transfer = self.log_decoder.decode_transfer(log)
            if transfer is None:
                continue
            if not between_parties(transfer.from_address, transfer.to_address, event.maker, event.taker):
                continue

            legs.append(TradeLeg(
                log_index=transfer.log_index,
                token_id=transfer.token_id,
                seller=transfer.from_address,
                buyer=transfer.to_address,
            ))

        if not legs:
            raise TradeCorrelationError("No sale transfer precedes OrdersMatched, seller unknown",
                                        tx_hash=event.tx_hash, log_index=event.log_index)

        legs.reverse()

        if len(legs) > 1:
            self.log_info("Batch sale detected",
                          tx_hash=event.tx_hash,
                          log_index=event.log_index,
                          nfts_sold=len(legs))
        return legs
