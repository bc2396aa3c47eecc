# nft_indexer/types/evm.py

from msgspec import Struct, field
from typing import Optional, Any

from .new import HexStr, EvmAddress, EvmHash


class EvmLog(Struct):
    """One log entry of a transaction receipt, with integer log index."""
    address: EvmAddress
    topics: list[EvmHash]
    data: HexStr
    log_index: int = field(name="logIndex")

    @property
    def topic0(self) -> Optional[EvmHash]:
        return self.topics[0].lower() if self.topics else None


# Raw JSON-RPC shapes (hex quantities), as returned by eth_getTransactionReceipt

class EvmRpcLog(Struct):
    address: EvmAddress
    data: HexStr
    logIndex: HexStr
    topics: list[EvmHash]
    blockHash: Optional[EvmHash] = None
    blockNumber: Optional[HexStr] = None
    transactionHash: Optional[EvmHash] = None
    transactionIndex: Optional[HexStr] = None
    removed: bool = False  # True when dropped by a reorg


class EvmTxReceipt(Struct):
    blockNumber: HexStr
    logs: list[EvmRpcLog]
    transactionHash: EvmHash
    status: Optional[HexStr] = None  # 0x1 success, 0x0 failure
    blockHash: Optional[EvmHash] = None
    from_: Optional[EvmAddress] = field(name="from", default=None)  # from is protected word in python
    to: Optional[EvmAddress] = None
    transactionIndex: Optional[HexStr] = None
    gasUsed: Optional[HexStr] = None
    logsBloom: Any = None
