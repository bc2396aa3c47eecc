# nft_indexer/types/errors.py

from typing import Optional, Dict, Any, Literal
import hashlib
import msgspec
from msgspec import Struct

from .new import ErrorId, EvmHash


class IndexerError(Exception):
    """Base class for failures scoped to a single event."""

    error_type = "indexer_error"

    def __init__(self, message: str, tx_hash: Optional[str] = None, log_index: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.tx_hash = tx_hash
        self.log_index = log_index


class MalformedEventError(IndexerError):
    """Core identity of an event is unusable. Fatal for that event only."""

    error_type = "malformed_event"


class MissingReceiptError(IndexerError):
    """No sibling logs were delivered with the event."""

    error_type = "missing_receipt"


class TradeCorrelationError(IndexerError):
    """Token id or seller could not be recovered from the sibling logs."""

    error_type = "correlation_failed"


class ProcessingError(Struct):
    stage: str  # "decode", "transform", "storage"
    error_type: str  # "malformed_event", "missing_receipt", "correlation_failed", "exception"
    message: str
    severity: Literal["skip", "fatal"] = "skip"
    attempts: int = 0
    error_id: Optional[ErrorId] = None
    context: Optional[Dict[str, Any]] = None  # tx_hash, log_index, event_type

    def __post_init__(self) -> None:
        if not self.error_id:
            self.error_id = self.generate_error_id()

    def add_attempt(self) -> None:
        self.attempts += 1

    def generate_error_id(self) -> ErrorId:
        content_struct = {
            "stage": self.stage,
            "error_type": self.error_type,
            "message": self.message,
            "context": self.context or {},
        }
        content_bytes = msgspec.msgpack.encode(content_struct)
        hash_hex = hashlib.sha256(content_bytes).hexdigest()

        return ErrorId(hash_hex[:12])


'''
Helper functions to create specific error types
'''
def create_decode_error(
    error_type: str,
    message: str,
    tx_hash: Optional[EvmHash] = None,
    log_index: Optional[int] = None,
) -> ProcessingError:
    context = {}
    if tx_hash:
        context["tx_hash"] = tx_hash
    if log_index is not None:
        context["log_index"] = log_index

    return ProcessingError(
        stage="decode",
        error_type=error_type,
        message=message,
        context=context if context else None
    )


def create_transform_error(
    error_type: str,
    message: str,
    tx_hash: Optional[EvmHash] = None,
    log_index: Optional[int] = None,
    event_type: Optional[str] = None,
    severity: Literal["skip", "fatal"] = "skip",
) -> ProcessingError:
    context = {}
    if tx_hash:
        context["tx_hash"] = tx_hash
    if log_index is not None:
        context["log_index"] = log_index
    if event_type:
        context["event_type"] = event_type

    return ProcessingError(
        stage="transform",
        error_type=error_type,
        message=message,
        severity=severity,
        context=context if context else None
    )
