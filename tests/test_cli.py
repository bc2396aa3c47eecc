# tests/test_cli.py

import msgspec
import pytest
from click.testing import CliRunner

from nft_indexer.cli.__main__ import cli
from nft_indexer.core.logging import IndexerLogger
from nft_indexer.types import ZERO_ADDRESS

from conftest import (
    ALICE,
    BOB,
    MARKET,
    NFT,
    TX_1,
    TX_2,
    erc20_transfer_log,
    orders_matched_log,
    rpc_receipt,
    transfer_log,
)


@pytest.fixture(autouse=True)
def restore_logging():
    yield
    IndexerLogger.configure(log_level="DEBUG", console_enabled=False, force=True)


@pytest.fixture
def env(tmp_path):
    return {
        "INDEXER_DB_URL": f"sqlite:///{tmp_path / 'cli.db'}",
        "INDEXER_NFT_CONTRACT": NFT,
        "INDEXER_MARKETPLACE_CONTRACT": MARKET,
    }


@pytest.fixture
def replay_file(tmp_path):
    mint_logs = [transfer_log(0, ZERO_ADDRESS, ALICE, 1)]
    sale_logs = [
        erc20_transfer_log(0, BOB, ALICE, 100),
        transfer_log(1, ALICE, BOB, 1),
        orders_matched_log(2, ALICE, BOB, 100),
    ]
    lines = [
        msgspec.json.encode({"timestamp": 1_000, "receipt": rpc_receipt(TX_1, mint_logs, block_number=100)}),
        b"",
        msgspec.json.encode({"timestamp": 2_000, "receipt": rpc_receipt(TX_2, sale_logs, block_number=200)}),
    ]
    path = tmp_path / "receipts.jsonl"
    path.write_bytes(b"\n".join(lines) + b"\n")
    return path


def run(env, *args):
    return CliRunner().invoke(cli, list(args), env=env)


def test_init_db(env):
    result = run(env, "init-db")

    assert result.exit_code == 0, result.output
    assert "Database initialized" in result.output


def test_replay_and_query(env, replay_file):
    result = run(env, "replay", str(replay_file))
    assert result.exit_code == 0, result.output
    assert "Processed: 3" in result.output
    assert "Failed: 0" in result.output

    result = run(env, "account", ALICE)
    assert result.exit_code == 0, result.output
    account = msgspec.json.decode(result.output)
    assert account["mint_count"] == 1
    assert account["sale_count"] == 1
    assert account["category"] == "Hunter"

    result = run(env, "token", "1")
    assert result.exit_code == 0, result.output
    assert msgspec.json.decode(result.output)["owner"] == BOB

    result = run(env, "transaction", TX_2, "2")
    assert result.exit_code == 0, result.output
    transaction = msgspec.json.decode(result.output)
    assert transaction["transaction_type"] == "TRADE"
    assert transaction["nft_sale_price"] == 100


def test_replay_reports_unreadable_lines(env, tmp_path):
    path = tmp_path / "broken.jsonl"
    path.write_text('{"timestamp": 1}\nnot json\n')

    result = run(env, "replay", str(path))

    assert result.exit_code == 0, result.output
    assert "Unreadable lines: 1, 2" in result.output
    assert "Processed: 0" in result.output


def test_unknown_account(env):
    result = run(env, "account", BOB)

    assert result.exit_code == 1
    assert "not found" in result.output


def test_invalid_log_index(env):
    result = run(env, "transaction", "--", TX_1, "-1")

    assert result.exit_code == 2
