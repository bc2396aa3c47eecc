# nft_indexer/types/constants.py
"""
Event signatures and well-known addresses. Computed once at import time
and never mutated.
"""

from typing import Final

from web3 import Web3

from .new import EvmAddress, EvmHash


ZERO_ADDRESS: Final = EvmAddress("0x0000000000000000000000000000000000000000")

TRANSFER_EVENT_ABI: Final = "Transfer(address,address,uint256)"
ORDERS_MATCHED_EVENT_ABI: Final = "OrdersMatched(bytes32,bytes32,address,address,uint256,bytes32)"


def event_topic(signature: str) -> EvmHash:
    return EvmHash(Web3.to_hex(Web3.keccak(text=signature)).lower())


TRANSFER_EVENT_SIGNATURE: Final = event_topic(TRANSFER_EVENT_ABI)
ORDERS_MATCHED_EVENT_SIGNATURE: Final = event_topic(ORDERS_MATCHED_EVENT_ABI)

# CryptoCoven and the OpenSea Wyvern exchange on Ethereum mainnet
CRYPTOCOVEN_ADDRESS: Final = EvmAddress("0x5180db8f5c931aae63c74266b211f580155ecac8")
OPENSEA_WYVERN_ADDRESS: Final = EvmAddress("0x7be8076f4ea4a4ad08075c2508e481d6c946d12b")

DEFAULT_MAX_SCAN_DISTANCE: Final = 32
