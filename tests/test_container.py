# tests/test_container.py

import pytest

from nft_indexer import create_indexer
from nft_indexer.core.container import IndexerContainer
from nft_indexer.database.connection import DatabaseManager
from nft_indexer.database.interfaces import EntityStore
from nft_indexer.database.memory import MemoryEntityStore
from nft_indexer.database.repository import SqlEntityStore
from nft_indexer.pipeline.batch_pipeline import BatchPipeline
from nft_indexer.transform.handlers import EventProcessor
from nft_indexer.types import EntityKind

from conftest import ALICE, BOB, MARKET, NFT, TX_1, TX_2, mint_event, sale_events


ENV = {
    "INDEXER_NFT_CONTRACT": NFT,
    "INDEXER_MARKETPLACE_CONTRACT": MARKET,
    "INDEXER_LOG_CONSOLE": "false",
}


def test_in_memory_indexer_processes_events():
    container = create_indexer(env_vars=ENV, in_memory=True, configure_logging=False)
    pipeline = container.get(BatchPipeline)

    result = pipeline.process_events([mint_event(TX_1, ALICE, 1), *sale_events(TX_2, ALICE, BOB, 1, 100)])

    assert result.processed == 3
    store = container.get(EntityStore)
    assert isinstance(store, MemoryEntityStore)
    assert store.get(EntityKind.ACCOUNT, BOB).buy_count == 1


def test_services_are_singletons():
    container = create_indexer(env_vars=ENV, in_memory=True, configure_logging=False)

    assert container.get(EventProcessor) is container.get(EventProcessor)
    assert container.get(BatchPipeline).processor is container.get(EventProcessor)


def test_explicit_store_is_used():
    store = MemoryEntityStore()
    container = create_indexer(env_vars=ENV, store=store, configure_logging=False)

    assert container.get(EventProcessor).store is store


def test_sql_indexer():
    container = create_indexer(env_vars={**ENV, "INDEXER_DB_URL": "sqlite://"}, configure_logging=False)

    store = container.get(EntityStore)
    assert isinstance(store, SqlEntityStore)
    assert container.has_instance(DatabaseManager)
    assert container.get(DatabaseManager).health_check()
    container.get(DatabaseManager).shutdown()


def test_unregistered_service():
    container = IndexerContainer(config=None)
    with pytest.raises(ValueError, match="not registered"):
        container.get(EventProcessor)


def test_circular_dependency_detected():
    container = IndexerContainer(config=None)
    container.register_factory(EventProcessor, lambda c: c.get(BatchPipeline))
    container.register_factory(BatchPipeline, lambda c: c.get(EventProcessor))

    with pytest.raises(ValueError, match="Circular dependency"):
        container.get(EventProcessor)
