# nft_indexer/core/config.py

from typing import Optional, Mapping
from pathlib import Path
import os

import msgspec
import yaml
from msgspec import Struct
from dotenv import load_dotenv
from eth_utils import is_hex_address

from ..types import (
    EvmAddress,
    DatabaseConfig,
    LoggingConfig,
    DEFAULT_MAX_SCAN_DISTANCE,
)
from .logging import IndexerLogger, log_with_context, INFO


class IndexerConfig(Struct):
    # None means match on event signature alone
    nft_contract: Optional[EvmAddress] = None
    marketplace_contract: Optional[EvmAddress] = None
    max_scan_distance: int = DEFAULT_MAX_SCAN_DISTANCE
    database: DatabaseConfig = msgspec.field(default_factory=DatabaseConfig)
    logging: LoggingConfig = msgspec.field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        if self.nft_contract:
            self.nft_contract = EvmAddress(self._validate_address(self.nft_contract, "nft_contract"))
        if self.marketplace_contract:
            self.marketplace_contract = EvmAddress(
                self._validate_address(self.marketplace_contract, "marketplace_contract")
            )
        if self.max_scan_distance < 1:
            raise ValueError(f"max_scan_distance must be positive, got {self.max_scan_distance}")

    @staticmethod
    def _validate_address(address: str, name: str) -> str:
        address = address.strip().lower()
        if not address.startswith("0x") or not is_hex_address(address):
            raise ValueError(f"Invalid {name} address: {address}")
        return address

    @classmethod
    def from_file(cls, path: str, env_vars: Optional[Mapping[str, str]] = None) -> 'IndexerConfig':
        """Load YAML configuration. Environment variables override file values."""
        logger = IndexerLogger.get_logger('core.config')

        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with config_path.open() as f:
            raw = yaml.safe_load(f) or {}

        if not isinstance(raw, dict):
            raise ValueError(f"Config file must contain a mapping: {config_path}")

        raw = cls._apply_env_overrides(raw, env_vars)
        config = cls._convert(raw)

        log_with_context(logger, INFO, "Configuration loaded from file",
                         config_path=str(config_path),
                         nft_contract=config.nft_contract,
                         marketplace_contract=config.marketplace_contract)
        return config

    @classmethod
    def from_env(cls, env_vars: Optional[Mapping[str, str]] = None) -> 'IndexerConfig':
        logger = IndexerLogger.get_logger('core.config')

        config = cls._convert(cls._apply_env_overrides({}, env_vars))

        log_with_context(logger, INFO, "Configuration loaded from environment",
                         nft_contract=config.nft_contract,
                         marketplace_contract=config.marketplace_contract,
                         max_scan_distance=config.max_scan_distance)
        return config

    @classmethod
    def _apply_env_overrides(cls, raw: dict, env_vars: Optional[Mapping[str, str]]) -> dict:
        if env_vars is None:
            load_dotenv()
            env = os.environ
        else:
            env = env_vars

        raw = dict(raw)
        database = dict(raw.get("database") or {})
        logging_cfg = dict(raw.get("logging") or {})

        if env.get("INDEXER_NFT_CONTRACT"):
            raw["nft_contract"] = env["INDEXER_NFT_CONTRACT"]
        if env.get("INDEXER_MARKETPLACE_CONTRACT"):
            raw["marketplace_contract"] = env["INDEXER_MARKETPLACE_CONTRACT"]
        if env.get("INDEXER_MAX_SCAN_DISTANCE"):
            raw["max_scan_distance"] = cls._parse_int(env["INDEXER_MAX_SCAN_DISTANCE"],
                                                      "INDEXER_MAX_SCAN_DISTANCE")
        if env.get("INDEXER_DB_URL"):
            database["url"] = env["INDEXER_DB_URL"]

        if env.get("INDEXER_LOG_DIR"):
            logging_cfg["log_dir"] = env["INDEXER_LOG_DIR"]
        if env.get("INDEXER_LOG_LEVEL"):
            logging_cfg["log_level"] = env["INDEXER_LOG_LEVEL"]
        for key, attr in (("INDEXER_LOG_CONSOLE", "console_enabled"),
                          ("INDEXER_LOG_FILE", "file_enabled"),
                          ("INDEXER_LOG_STRUCTURED", "structured_format")):
            if env.get(key):
                logging_cfg[attr] = env[key].lower() == "true"

        if database:
            raw["database"] = database
        if logging_cfg:
            raw["logging"] = logging_cfg
        return raw

    @staticmethod
    def _parse_int(value: str, name: str) -> int:
        try:
            return int(value)
        except ValueError:
            raise ValueError(f"{name} must be an integer, got {value!r}") from None

    @classmethod
    def _convert(cls, raw: dict) -> 'IndexerConfig':
        try:
            return msgspec.convert(raw, type=cls, dec_hook=_dec_hook)
        except msgspec.ValidationError as e:
            raise ValueError(f"Invalid indexer configuration: {e}") from e

    def configure_logging(self) -> None:
        IndexerLogger.configure(
            log_dir=self.logging.log_dir,
            log_level=self.logging.log_level,
            console_enabled=self.logging.console_enabled,
            file_enabled=self.logging.file_enabled,
            structured_format=self.logging.structured_format,
            force=True,
        )


def _dec_hook(type_, obj):
    if type_ is Path:
        return Path(obj)
    raise NotImplementedError(f"Unsupported config type: {type_}")
