# nft_indexer/core/__init__.py

from .logging import IndexerLogger, LoggingMixin, log_with_context
from .config import IndexerConfig
