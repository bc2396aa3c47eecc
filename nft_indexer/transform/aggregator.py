# nft_indexer/transform/aggregator.py

from decimal import Decimal
from typing import List, Optional

from ..types import (
    AccountId,
    EntityKind,
    GlobalId,
    Provenance,
    Transaction,
    TransactionType,
)
from ..core.logging import LoggingMixin
from .unit_of_work import UnitOfWork


def split_price(price: int, parts: int) -> List[int]:
    """Split a match price over its legs. The remainder goes to the first leg."""
    if parts <= 0:
        return []
    unit, remainder = divmod(price, parts)
    return [unit + remainder] + [unit] * (parts - 1)


def average_price(total_volume: int, total_count: int) -> Decimal:
    if total_count == 0:
        return Decimal(0)
    return Decimal(total_volume) / Decimal(total_count)


class TransactionAggregator(LoggingMixin):
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def get_transaction(self, tx_id: GlobalId) -> Optional[Transaction]:
        return self.uow.get(EntityKind.TRANSACTION, tx_id)

    def create_transaction(self, tx_id: GlobalId, account: AccountId,
                           transaction_type: TransactionType, provenance: Provenance) -> Transaction:
        transaction = Transaction(id=tx_id, account=account, transaction_type=transaction_type)
        transaction.stamp(provenance)
        self.uow.stage(transaction)
        return transaction

    def record_sale(self, transaction: Transaction, sale_price: int) -> None:
        """Fold one sale into the running statistics of this record.

        The lowest price is taken from the first recorded sale rather than from
        a zero sentinel, so a genuine zero-price sale is kept.
        """
        first_sale = not transaction.has_sales

        transaction.total_sales_volume += sale_price
        transaction.total_sales_count += 1
        transaction.highest_sale_price = max(transaction.highest_sale_price, sale_price)
        if first_sale or sale_price < transaction.lowest_sale_price:
            transaction.lowest_sale_price = sale_price
        transaction.average_sale_price = average_price(
            transaction.total_sales_volume, transaction.total_sales_count
        )

    def save(self, transaction: Transaction) -> None:
        self.uow.stage(transaction)
