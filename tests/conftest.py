# tests/conftest.py
"""
pytest fixtures and log builders for the NFT indexer tests
"""

from typing import List, Optional

import pytest

from nft_indexer.core.config import IndexerConfig
from nft_indexer.core.logging import IndexerLogger
from nft_indexer.database.memory import MemoryEntityStore
from nft_indexer.decode.log_decoder import LogDecoder
from nft_indexer.decode.receipt_decoder import ReceiptDecoder
from nft_indexer.pipeline.batch_pipeline import BatchPipeline
from nft_indexer.transform.correlator import EventCorrelator
from nft_indexer.transform.handlers import EventProcessor
from nft_indexer.types import (
    CRYPTOCOVEN_ADDRESS,
    OPENSEA_WYVERN_ADDRESS,
    ORDERS_MATCHED_EVENT_SIGNATURE,
    TRANSFER_EVENT_SIGNATURE,
    ZERO_ADDRESS,
    EvmLog,
    OrdersMatchedEvent,
    TransferEvent,
)


NFT = CRYPTOCOVEN_ADDRESS
MARKET = OPENSEA_WYVERN_ADDRESS
WETH = "0xc02aaa39b223fe8d0a0e5c4f27ead9083c756cc2"

ALICE = "0x00000000000000000000000000000000000a11ce"
BOB = "0x0000000000000000000000000000000000000b0b"
CAROL = "0x00000000000000000000000000000000000ca401"

TX_1 = "0x" + "11" * 32
TX_2 = "0x" + "22" * 32
TX_3 = "0x" + "33" * 32
TX_4 = "0x" + "44" * 32


def word(value: int) -> str:
    return f"{value:064x}"


def address_topic(address: str) -> str:
    return "0x" + "0" * 24 + address.lower()[2:]


def transfer_log(log_index: int, from_address: str, to_address: str, token_id: int,
                 contract: str = NFT) -> EvmLog:
    return EvmLog(
        address=contract,
        topics=[TRANSFER_EVENT_SIGNATURE, address_topic(from_address),
                address_topic(to_address), "0x" + word(token_id)],
        data="0x",
        log_index=log_index,
    )


def erc20_transfer_log(log_index: int, from_address: str, to_address: str, amount: int,
                       contract: str = WETH) -> EvmLog:
    return EvmLog(
        address=contract,
        topics=[TRANSFER_EVENT_SIGNATURE, address_topic(from_address), address_topic(to_address)],
        data="0x" + word(amount),
        log_index=log_index,
    )


def orders_matched_log(log_index: int, maker: str, taker: str, price: int,
                       contract: str = MARKET) -> EvmLog:
    return EvmLog(
        address=contract,
        topics=[ORDERS_MATCHED_EVENT_SIGNATURE, address_topic(maker),
                address_topic(taker), "0x" + "00" * 32],
        data="0x" + "aa" * 32 + "bb" * 32 + word(price),
        log_index=log_index,
    )


def unrelated_log(log_index: int) -> EvmLog:
    return EvmLog(
        address="0x00000000000000000000000000000000000fee00",
        topics=["0x" + "ee" * 32],
        data="0x",
        log_index=log_index,
    )


def transfer_event(tx_hash: str, log_index: int, from_address: str, to_address: str,
                   token_id: int, logs: Optional[List[EvmLog]] = None,
                   block_number: int = 100, block_timestamp: int = 1_630_000_000) -> TransferEvent:
    return TransferEvent(
        tx_hash=tx_hash,
        log_index=log_index,
        block_number=block_number,
        block_timestamp=block_timestamp,
        sibling_logs=logs,
        from_address=from_address,
        to_address=to_address,
        token_id=token_id,
    )


def orders_matched_event(tx_hash: str, log_index: int, maker: str, taker: str, price: int,
                         logs: Optional[List[EvmLog]] = None,
                         block_number: int = 100, block_timestamp: int = 1_630_000_000) -> OrdersMatchedEvent:
    return OrdersMatchedEvent(
        tx_hash=tx_hash,
        log_index=log_index,
        block_number=block_number,
        block_timestamp=block_timestamp,
        sibling_logs=logs,
        maker=maker,
        taker=taker,
        price=price,
    )


def mint_event(tx_hash: str, to_address: str, token_id: int, log_index: int = 0,
               block_number: int = 100) -> TransferEvent:
    log = transfer_log(log_index, ZERO_ADDRESS, to_address, token_id)
    return transfer_event(tx_hash, log_index, ZERO_ADDRESS, to_address, token_id,
                          logs=[log], block_number=block_number)


def sale_events(tx_hash: str, seller: str, buyer: str, token_id: int, price: int,
                block_number: int = 200) -> List:
    """A single-item marketplace sale: payment, NFT transfer, then OrdersMatched."""
    logs = [
        erc20_transfer_log(0, buyer, seller, price),
        transfer_log(1, seller, buyer, token_id),
        orders_matched_log(2, seller, buyer, price),
    ]
    return [
        transfer_event(tx_hash, 1, seller, buyer, token_id, logs=logs, block_number=block_number),
        orders_matched_event(tx_hash, 2, seller, buyer, price, logs=logs, block_number=block_number),
    ]


def log_to_rpc(log: EvmLog, tx_hash: str, block_number: int) -> dict:
    return {
        "address": log.address,
        "topics": list(log.topics),
        "data": log.data,
        "logIndex": hex(log.log_index),
        "blockNumber": hex(block_number),
        "transactionHash": tx_hash,
        "removed": False,
    }


def rpc_receipt(tx_hash: str, logs: List[EvmLog], block_number: int = 100, status: str = "0x1") -> dict:
    return {
        "transactionHash": tx_hash,
        "blockNumber": hex(block_number),
        "status": status,
        "from": BOB,
        "to": MARKET,
        "logs": [log_to_rpc(log, tx_hash, block_number) for log in logs],
    }


@pytest.fixture(autouse=True, scope="session")
def quiet_logging():
    IndexerLogger.configure(log_level="DEBUG", console_enabled=False, force=True)


@pytest.fixture
def config():
    return IndexerConfig(nft_contract=NFT, marketplace_contract=MARKET)


@pytest.fixture
def store():
    return MemoryEntityStore()


@pytest.fixture
def decoder():
    return LogDecoder(NFT, MARKET)


@pytest.fixture
def correlator(decoder):
    return EventCorrelator(decoder, max_scan_distance=32)


@pytest.fixture
def processor(store, correlator):
    return EventProcessor(store, correlator)


@pytest.fixture
def receipt_decoder(decoder):
    return ReceiptDecoder(decoder)


@pytest.fixture
def pipeline(processor, receipt_decoder):
    return BatchPipeline(processor, receipt_decoder)
