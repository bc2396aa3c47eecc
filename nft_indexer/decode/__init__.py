# nft_indexer/decode/__init__.py

from .log_decoder import LogDecoder, DecodedTransfer, DecodedOrdersMatched, topic_to_address
from .receipt_decoder import ReceiptDecoder
