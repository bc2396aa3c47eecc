# nft_indexer/__init__.py

import os
from typing import Mapping, Optional

from .core.container import IndexerContainer
from .core.config import IndexerConfig
from .core.logging import IndexerLogger, log_with_context, INFO
from .database.interfaces import EntityStore
from .database.memory import MemoryEntityStore
from .database.connection import DatabaseManager
from .database.repository import SqlEntityStore
from .decode.log_decoder import LogDecoder
from .decode.receipt_decoder import ReceiptDecoder
from .transform.correlator import EventCorrelator
from .transform.handlers import EventProcessor
from .pipeline.batch_pipeline import BatchPipeline, BatchResult


def create_indexer(config: Optional[IndexerConfig] = None,
                   config_path: Optional[str] = None,
                   env_vars: Optional[Mapping[str, str]] = None,
                   store: Optional[EntityStore] = None,
                   in_memory: bool = False,
                   configure_logging: bool = True) -> IndexerContainer:
    """Wire configuration, logging, storage and the event processor.

    Configuration comes from ``config`` when given, otherwise from
    ``config_path`` (YAML) or the INDEXER_* environment. ``store`` replaces
    the configured database; ``in_memory`` uses a MemoryEntityStore. Callers
    that set up logging themselves pass ``configure_logging=False``.
    """
    if config is None:
        if config_path is None and env_vars is None:
            config_path = os.environ.get("INDEXER_CONFIG")
        if config_path:
            config = IndexerConfig.from_file(config_path, env_vars)
        else:
            config = IndexerConfig.from_env(env_vars)

    if configure_logging:
        config.configure_logging()
    logger = IndexerLogger.get_logger('core.init')

    container = IndexerContainer(config)
    _register_services(container, store, in_memory)

    log_with_context(logger, INFO, "Indexer created",
                     nft_contract=config.nft_contract,
                     marketplace_contract=config.marketplace_contract,
                     max_scan_distance=config.max_scan_distance,
                     store=type(store).__name__ if store else ("memory" if in_memory else "sql"))
    return container


def _register_services(container: IndexerContainer, store: Optional[EntityStore], in_memory: bool) -> None:
    config = container.config

    if store is not None:
        container.register_instance(EntityStore, store)
    elif in_memory:
        container.register_instance(EntityStore, MemoryEntityStore())
    else:
        container.register_factory(DatabaseManager, _create_db_manager)
        container.register_factory(EntityStore, lambda c: SqlEntityStore(c.get(DatabaseManager)))

    container.register_factory(
        LogDecoder, lambda c: LogDecoder(config.nft_contract, config.marketplace_contract)
    )
    container.register_factory(
        EventCorrelator, lambda c: EventCorrelator(c.get(LogDecoder), config.max_scan_distance)
    )
    container.register_factory(
        EventProcessor, lambda c: EventProcessor(c.get(EntityStore), c.get(EventCorrelator))
    )
    container.register_factory(ReceiptDecoder, lambda c: ReceiptDecoder(c.get(LogDecoder)))
    container.register_factory(
        BatchPipeline, lambda c: BatchPipeline(c.get(EventProcessor), c.get(ReceiptDecoder))
    )


def _create_db_manager(container: IndexerContainer) -> DatabaseManager:
    db_manager = DatabaseManager(container.config.database)
    db_manager.initialize()
    return db_manager


__all__ = [
    'create_indexer',
    'IndexerConfig',
    'IndexerContainer',
    'EntityStore',
    'MemoryEntityStore',
    'SqlEntityStore',
    'DatabaseManager',
    'EventProcessor',
    'BatchPipeline',
    'BatchResult',
]
