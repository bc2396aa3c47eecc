# tests/test_config.py

from pathlib import Path

import pytest
import yaml

from nft_indexer.core.config import IndexerConfig
from nft_indexer.types import DEFAULT_MAX_SCAN_DISTANCE

from conftest import MARKET, NFT


def test_defaults():
    config = IndexerConfig.from_env({})

    assert config.nft_contract is None
    assert config.marketplace_contract is None
    assert config.max_scan_distance == DEFAULT_MAX_SCAN_DISTANCE
    assert config.database.url == "sqlite:///nft_indexer.db"
    assert config.logging.log_level == "INFO"


def test_environment_values():
    config = IndexerConfig.from_env({
        "INDEXER_NFT_CONTRACT": NFT.upper().replace("0X", "0x"),
        "INDEXER_MARKETPLACE_CONTRACT": MARKET,
        "INDEXER_MAX_SCAN_DISTANCE": "8",
        "INDEXER_DB_URL": "sqlite://",
        "INDEXER_LOG_LEVEL": "DEBUG",
        "INDEXER_LOG_DIR": "/tmp/nft-indexer-logs",
        "INDEXER_LOG_CONSOLE": "false",
    })

    assert config.nft_contract == NFT
    assert config.marketplace_contract == MARKET
    assert config.max_scan_distance == 8
    assert config.database.url == "sqlite://"
    assert config.database.is_sqlite
    assert config.logging.log_level == "DEBUG"
    assert config.logging.log_dir == Path("/tmp/nft-indexer-logs")
    assert config.logging.console_enabled is False


@pytest.mark.parametrize("env", [
    {"INDEXER_MAX_SCAN_DISTANCE": "many"},
    {"INDEXER_MAX_SCAN_DISTANCE": "0"},
    {"INDEXER_NFT_CONTRACT": "0x1234"},
    {"INDEXER_MARKETPLACE_CONTRACT": "0x" + "zz" * 20},
])
def test_invalid_environment_values(env):
    with pytest.raises(ValueError):
        IndexerConfig.from_env(env)


def test_direct_construction_validates():
    with pytest.raises(ValueError):
        IndexerConfig(max_scan_distance=-1)


def test_from_file(tmp_path):
    path = tmp_path / "indexer.yaml"
    path.write_text(yaml.safe_dump({
        "nft_contract": NFT,
        "max_scan_distance": 16,
        "database": {"url": "sqlite:///coven.db", "pool_size": 2},
    }))

    config = IndexerConfig.from_file(str(path), env_vars={})

    assert config.nft_contract == NFT
    assert config.marketplace_contract is None
    assert config.max_scan_distance == 16
    assert config.database.url == "sqlite:///coven.db"
    assert config.database.pool_size == 2


def test_environment_overrides_file(tmp_path):
    path = tmp_path / "indexer.yaml"
    path.write_text(yaml.safe_dump({"max_scan_distance": 16, "database": {"pool_size": 2}}))

    config = IndexerConfig.from_file(str(path), env_vars={
        "INDEXER_MAX_SCAN_DISTANCE": "4",
        "INDEXER_DB_URL": "sqlite://",
    })

    assert config.max_scan_distance == 4
    assert config.database.url == "sqlite://"
    assert config.database.pool_size == 2


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        IndexerConfig.from_file(str(tmp_path / "absent.yaml"), env_vars={})


def test_file_must_be_mapping(tmp_path):
    path = tmp_path / "indexer.yaml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ValueError):
        IndexerConfig.from_file(str(path), env_vars={})


def test_unknown_field_types_rejected(tmp_path):
    path = tmp_path / "indexer.yaml"
    path.write_text(yaml.safe_dump({"max_scan_distance": "far"}))

    with pytest.raises(ValueError):
        IndexerConfig.from_file(str(path), env_vars={})
