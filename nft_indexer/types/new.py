# nft_indexer/types/new.py

from typing import NewType


HexStr = NewType('HexStr', str)
EvmAddress = NewType('EvmAddress', str)
EvmHash = NewType('EvmHash', str)

# Store keys
GlobalId = NewType('GlobalId', str)
AccountId = NewType('AccountId', str)
TokenKey = NewType('TokenKey', str)
HistoryId = NewType('HistoryId', str)
ErrorId = NewType('ErrorId', str)
