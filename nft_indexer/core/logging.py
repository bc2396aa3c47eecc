# nft_indexer/core/logging.py
"""
Logging for the indexer.

Every logger lives under the ``nft_indexer`` namespace. Event handlers attach
their position in the chain (tx_hash, log_index, token_id...) as record
attributes through log_with_context; the structured formatter appends those
after the message.
"""

import logging
import sys
from datetime import datetime
from logging import DEBUG, INFO, WARNING, ERROR
from pathlib import Path
from typing import List, Optional


ROOT_LOGGER_NAME = 'nft_indexer'

CONTEXT_ATTRS = ['tx_hash', 'log_index', 'block_number', 'token_id', 'account',
                 'event_type', 'transaction_type', 'error', 'exception_type']

PLAIN_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class IndexerFormatter(logging.Formatter):
    """Plain line followed by ``| key=value`` pairs for any known context attribute."""

    def __init__(self, include_context: bool = False):
        self.include_context = include_context
        super().__init__()

    def format(self, record: logging.LogRecord) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
        line = f"{stamp} - {record.name} - {record.levelname} - {record.getMessage()}"
        if not self.include_context:
            return line

        pairs = [f"{attr}={getattr(record, attr)}" for attr in CONTEXT_ATTRS if hasattr(record, attr)]
        return f"{line} | {' '.join(pairs)}" if pairs else line


class IndexerLogger:
    """Process-wide setup of the ``nft_indexer`` logger tree."""

    _configured = False
    _log_level = logging.INFO

    @classmethod
    def configure(cls,
                  log_dir: Optional[Path] = None,
                  log_level: str = "INFO",
                  console_enabled: bool = True,
                  file_enabled: bool = False,
                  structured_format: bool = True,
                  force: bool = False) -> None:
        """Install handlers once; ``force`` replaces an earlier setup."""
        if cls._configured and not force:
            return

        cls._log_level = getattr(logging, log_level.upper())

        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(cls._log_level)
        for handler in list(root_logger.handlers):
            root_logger.removeHandler(handler)
            handler.close()

        for handler in cls._build_handlers(log_dir, console_enabled, file_enabled, structured_format):
            root_logger.addHandler(handler)

        cls._configured = True

    @classmethod
    def _build_handlers(cls, log_dir: Optional[Path], console_enabled: bool,
                        file_enabled: bool, structured_format: bool) -> List[logging.Handler]:
        handlers: List[logging.Handler] = []

        if console_enabled:
            console = logging.StreamHandler(sys.stdout)
            console.setLevel(cls._log_level)
            console.setFormatter(IndexerFormatter(include_context=True) if structured_format
                                 else logging.Formatter(PLAIN_FORMAT))
            handlers.append(console)

        if file_enabled and log_dir:
            log_dir.mkdir(parents=True, exist_ok=True)
            formatter = IndexerFormatter(include_context=True)

            # indexer_errors.log repeats ERROR records from indexer.log
            for filename, level in (('indexer.log', cls._log_level), ('indexer_errors.log', logging.ERROR)):
                file_handler = logging.FileHandler(log_dir / filename)
                file_handler.setLevel(level)
                file_handler.setFormatter(formatter)
                handlers.append(file_handler)

        return handlers

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        if not cls._configured:
            cls.configure()

        if not name.startswith(ROOT_LOGGER_NAME):
            name = f'{ROOT_LOGGER_NAME}.{name}'
        return logging.getLogger(name)


def get_class_logger(instance) -> logging.Logger:
    module = instance.__class__.__module__
    prefix = f'{ROOT_LOGGER_NAME}.'
    if module.startswith(prefix):
        module = module[len(prefix):]
    return IndexerLogger.get_logger(f"{module}.{instance.__class__.__name__}")


def log_with_context(logger: logging.Logger, level: int, message: str, **context) -> None:
    if not logger.isEnabledFor(level):
        return
    record = logger.makeRecord(logger.name, level, "", 0, message, (), None)
    for key, value in context.items():
        setattr(record, key, value)
    logger.handle(record)


class LoggingMixin:
    """log_debug/info/warning/error on a logger named after the class."""

    @property
    def logger(self) -> logging.Logger:
        if not hasattr(self, '_logger'):
            self._logger = get_class_logger(self)
        return self._logger

    def log_debug(self, message: str, **context) -> None:
        log_with_context(self.logger, DEBUG, message, **context)

    def log_info(self, message: str, **context) -> None:
        log_with_context(self.logger, INFO, message, **context)

    def log_warning(self, message: str, **context) -> None:
        log_with_context(self.logger, WARNING, message, **context)

    def log_error(self, message: str, **context) -> None:
        log_with_context(self.logger, ERROR, message, **context)


__all__ = [
    'IndexerFormatter', 'IndexerLogger', 'LoggingMixin',
    'get_class_logger', 'log_with_context',
    'DEBUG', 'INFO', 'WARNING', 'ERROR',
]
