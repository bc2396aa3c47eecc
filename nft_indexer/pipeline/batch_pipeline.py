# nft_indexer/pipeline/batch_pipeline.py

from typing import Dict, Iterable, Optional, Tuple
import time

import msgspec
from msgspec import Struct, field

from ..core.logging import IndexerLogger, log_with_context, INFO, WARNING, DEBUG
from ..decode.receipt_decoder import ReceiptDecoder
from ..transform.handlers import EventProcessor
from ..types import ChainEvent, ErrorId, ProcessingError, create_decode_error


class BatchResult(Struct):
    processed: int = 0
    skipped: int = 0
    failed: int = 0
    errors: Dict[ErrorId, ProcessingError] = field(default_factory=dict)
    elapsed_seconds: float = 0.0

    @property
    def total(self) -> int:
        return self.processed + self.skipped + self.failed

    def record_error(self, error: ProcessingError) -> None:
        if error.severity == "fatal":
            self.failed += 1
        else:
            self.skipped += 1
        existing = self.errors.get(error.error_id)
        if existing is not None:
            existing.add_attempt()
        else:
            error.add_attempt()
            self.errors[error.error_id] = error


class BatchPipeline:
    """
    Sequential processing of an event stream.

    Events must arrive in chain order (block number, then log index). One
    failing event is recorded and the batch moves on.
    """

    def __init__(self, processor: EventProcessor, receipt_decoder: Optional[ReceiptDecoder] = None):
        self.processor = processor
        self.receipt_decoder = receipt_decoder
        self.logger = IndexerLogger.get_logger('pipeline.batch_pipeline')

    def process_events(self, events: Iterable[ChainEvent], result: Optional[BatchResult] = None) -> BatchResult:
        result = result or BatchResult()
        started = time.monotonic()
        last_position: Optional[Tuple[int, int]] = None

        for event in events:
            position = (event.block_number, event.log_index)
            if last_position is not None and position < last_position:
                log_with_context(self.logger, WARNING, "Event delivered out of chain order",
                                 tx_hash=event.tx_hash,
                                 log_index=event.log_index,
                                 block_number=event.block_number,
                                 previous_position=last_position)
            last_position = position

            error = self.processor.process(event)
            if error is None:
                result.processed += 1
            else:
                result.record_error(error)

        result.elapsed_seconds += time.monotonic() - started

        log_with_context(self.logger, INFO, "Batch processed",
                         processed=result.processed,
                         skipped=result.skipped,
                         failed=result.failed,
                         elapsed_seconds=round(result.elapsed_seconds, 3))
        return result

    def process_receipts(self, records: Iterable[Tuple[dict, int]]) -> BatchResult:
        """Decode raw receipts with their block timestamps, then process the events."""
        if self.receipt_decoder is None:
            raise RuntimeError("BatchPipeline was created without a ReceiptDecoder")

        result = BatchResult()
        for raw_receipt, block_timestamp in records:
            try:
                receipt = self.receipt_decoder.parse_receipt(raw_receipt)
            except msgspec.ValidationError as e:
                log_with_context(self.logger, WARNING, "Dropping malformed receipt",
                                 error=str(e))
                result.record_error(create_decode_error("malformed_receipt", str(e)))
                continue

            events, decode_errors = self.receipt_decoder.decode_receipt(receipt, block_timestamp)
            for error in decode_errors.values():
                result.record_error(error)

            log_with_context(self.logger, DEBUG, "Processing receipt",
                             tx_hash=receipt.transactionHash,
                             event_count=len(events))
            self.process_events(events, result)

        return result
