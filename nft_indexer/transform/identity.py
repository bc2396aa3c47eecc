# nft_indexer/transform/identity.py
"""
Deterministic store keys. The same log always maps to the same ids, which is
what makes redelivery detectable.
"""

from ..types import (
    AccountId,
    ChainEvent,
    GlobalId,
    HistoryId,
    MalformedEventError,
    TokenKey,
)


def global_id(tx_hash: str, log_index: int) -> GlobalId:
    if not tx_hash or not tx_hash.strip():
        raise MalformedEventError("Missing transaction hash", tx_hash=tx_hash, log_index=log_index)
    if log_index is None or log_index < 0:
        raise MalformedEventError(f"Invalid log index {log_index}", tx_hash=tx_hash, log_index=log_index)
    return GlobalId(f"{tx_hash.strip().lower()}-{log_index}")


def account_id(address: str) -> AccountId:
    return AccountId(address.lower())


def token_key(token_id: int) -> TokenKey:
    return TokenKey(str(token_id))


def history_id(account: str, tx_hash: str, log_index: int) -> HistoryId:
    return HistoryId(f"{account_id(account)}-{global_id(tx_hash, log_index)}")


def validate_identity(event: ChainEvent) -> GlobalId:
    """Reject events whose core identity is unusable."""
    event_global_id = global_id(event.tx_hash, event.log_index)
    if event.block_number is None or event.block_number < 0:
        raise MalformedEventError(f"Invalid block number {event.block_number}",
                                  tx_hash=event.tx_hash, log_index=event.log_index)
    return event_global_id
