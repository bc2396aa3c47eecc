# tests/test_aggregator.py

from decimal import Decimal

from nft_indexer.database.memory import MemoryEntityStore
from nft_indexer.transform.aggregator import TransactionAggregator, average_price, split_price
from nft_indexer.transform.unit_of_work import UnitOfWork
from nft_indexer.types import EntityKind, Provenance, TransactionType

from conftest import ALICE, TX_1


def make_transaction():
    store = MemoryEntityStore()
    uow = UnitOfWork(store)
    aggregator = TransactionAggregator(uow)
    provenance = Provenance(tx_hash=TX_1, log_index=4, block_number=10, block_timestamp=1000)
    transaction = aggregator.create_transaction(f"{TX_1}-4", ALICE, TransactionType.TRADE, provenance)
    return store, uow, aggregator, transaction


def test_running_statistics():
    _, _, aggregator, transaction = make_transaction()

    for price in [10, 30, 20]:
        aggregator.record_sale(transaction, price)

    assert transaction.total_sales_volume == 60
    assert transaction.total_sales_count == 3
    assert transaction.highest_sale_price == 30
    assert transaction.lowest_sale_price == 10
    assert transaction.average_sale_price == Decimal(20)


def test_first_sale_sets_lowest_even_when_zero():
    _, _, aggregator, transaction = make_transaction()

    aggregator.record_sale(transaction, 0)
    aggregator.record_sale(transaction, 50)

    assert transaction.lowest_sale_price == 0
    assert transaction.highest_sale_price == 50
    assert transaction.average_sale_price == Decimal(25)


def test_average_keeps_fractional_part():
    assert average_price(10, 4) == Decimal("2.5")
    assert average_price(0, 0) == Decimal(0)


def test_split_price_puts_remainder_on_first_leg():
    assert split_price(150, 3) == [50, 50, 50]
    assert split_price(100, 3) == [34, 33, 33]
    assert sum(split_price(10**21 + 7, 4)) == 10**21 + 7
    assert split_price(100, 0) == []


def test_transaction_is_written_only_on_commit():
    store, uow, aggregator, transaction = make_transaction()
    aggregator.record_sale(transaction, 10)
    aggregator.save(transaction)

    assert store.get(EntityKind.TRANSACTION, transaction.id) is None
    uow.commit()

    stored = store.get(EntityKind.TRANSACTION, transaction.id)
    assert stored.total_sales_volume == 10
    assert stored.tx_hash == TX_1
    assert stored.log_index == 4
