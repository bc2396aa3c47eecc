# nft_indexer/cli/context.py

"""
CLI Context

Builds the indexer container on first use, so commands that fail argument
parsing never touch the database.
"""

from typing import Optional

from ..core.logging import IndexerLogger, log_with_context, INFO
from ..core.config import IndexerConfig
from ..core.container import IndexerContainer
from ..database.connection import DatabaseManager
from ..database.interfaces import EntityStore
from ..pipeline.batch_pipeline import BatchPipeline


class CLIContext:
    def __init__(self, config_path: Optional[str] = None):
        self.config_path = config_path
        self.logger = IndexerLogger.get_logger('cli.context')
        self._container: Optional[IndexerContainer] = None

    @property
    def container(self) -> IndexerContainer:
        if self._container is None:
            from .. import create_indexer
            self._container = create_indexer(config_path=self.config_path, configure_logging=False)
        return self._container

    @property
    def config(self) -> IndexerConfig:
        return self.container.config

    @property
    def store(self) -> EntityStore:
        return self.container.get(EntityStore)

    @property
    def pipeline(self) -> BatchPipeline:
        return self.container.get(BatchPipeline)

    @property
    def db_manager(self) -> DatabaseManager:
        return self.container.get(DatabaseManager)

    def shutdown(self):
        """Dispose database connections opened by this invocation"""
        if self._container is not None and self._container.has_instance(DatabaseManager):
            self._container.get(DatabaseManager).shutdown()
            log_with_context(self.logger, INFO, "CLIContext shutdown completed")
