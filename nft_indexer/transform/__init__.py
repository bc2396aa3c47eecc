# nft_indexer/transform/__init__.py

from .identity import global_id, account_id, token_key, history_id, validate_identity
from .unit_of_work import UnitOfWork
from .classifier import classify, apply_classification
from .ledger import AccountLedger, has_applied
from .registry import TokenRegistry
from .aggregator import TransactionAggregator, split_price, average_price
from .correlator import EventCorrelator, TransferCorrelation, TradeLeg
from .handlers import EventProcessor
