# nft_indexer/types/config.py

from typing import Optional
from pathlib import Path

from msgspec import Struct


class DatabaseConfig(Struct):
    url: str = "sqlite:///nft_indexer.db"
    pool_size: int = 5
    max_overflow: int = 10
    echo: bool = False

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class LoggingConfig(Struct):
    log_dir: Optional[Path] = None
    log_level: str = "INFO"
    console_enabled: bool = True
    file_enabled: bool = False
    structured_format: bool = False
