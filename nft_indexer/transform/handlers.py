# nft_indexer/transform/handlers.py

from typing import Dict, List, Optional

from ..types import (
    Account,
    ChainEvent,
    IndexerError,
    MalformedEventError,
    MissingReceiptError,
    OrdersMatchedEvent,
    ProcessingError,
    Provenance,
    TradeCorrelationError,
    TransactionType,
    TransferEvent,
    create_transform_error,
)
from ..core.logging import LoggingMixin
from ..database.interfaces import EntityStore
from ..decode.log_decoder import LogDecoder
from .aggregator import TransactionAggregator, split_price
from .correlator import EventCorrelator
from .identity import account_id, validate_identity
from .ledger import AccountLedger, has_applied
from .registry import TokenRegistry
from .unit_of_work import UnitOfWork


class EventProcessor(LoggingMixin):
    """Entry points for delivered events.

    Each event is applied inside its own UnitOfWork: either every derived
    entity it touches is written, or none is.
    """

    def __init__(self, store: EntityStore, correlator: EventCorrelator):
        self.store = store
        self.correlator = correlator

    @classmethod
    def from_config(cls, store: EntityStore, config) -> 'EventProcessor':
        decoder = LogDecoder(config.nft_contract, config.marketplace_contract)
        return cls(store, EventCorrelator(decoder, config.max_scan_distance))

    def process(self, event: ChainEvent) -> Optional[ProcessingError]:
        """Apply one event. Failures are logged and returned, never raised."""
        try:
            if isinstance(event, TransferEvent):
                self.on_transfer(event)
            elif isinstance(event, OrdersMatchedEvent):
                self.on_orders_matched(event)
            else:
                raise MalformedEventError(f"Unsupported event type {type(event).__name__}",
                                          tx_hash=getattr(event, 'tx_hash', None),
                                          log_index=getattr(event, 'log_index', None))
            return None

        except MalformedEventError as e:
            self.log_error("Malformed event dropped",
                           tx_hash=e.tx_hash,
                           log_index=e.log_index,
                           event_type=type(event).__name__,
                           error=e.message)
            return self._to_processing_error(e, event, severity="fatal")

        except (TradeCorrelationError, MissingReceiptError) as e:
            self.log_warning("Trade skipped",
                             tx_hash=e.tx_hash,
                             log_index=e.log_index,
                             event_type=type(event).__name__,
                             error=e.message)
            return self._to_processing_error(e, event, severity="skip")

        except Exception as e:
            self.log_error("Unexpected failure while processing event",
                           tx_hash=getattr(event, 'tx_hash', None),
                           log_index=getattr(event, 'log_index', None),
                           event_type=type(event).__name__,
                           error=str(e),
                           exception_type=type(e).__name__)
            return create_transform_error(
                "exception",
                f"{type(e).__name__}: {e}",
                tx_hash=getattr(event, 'tx_hash', None),
                log_index=getattr(event, 'log_index', None),
                event_type=type(event).__name__,
                severity="fatal",
            )

    def _to_processing_error(self, error: IndexerError, event: ChainEvent, severity: str) -> ProcessingError:
        return create_transform_error(
            error.error_type,
            error.message,
            tx_hash=error.tx_hash,
            log_index=error.log_index,
            event_type=type(event).__name__,
            severity=severity,
        )

    def on_transfer(self, event: TransferEvent) -> int:
        tx_id = validate_identity(event)
        provenance = event.provenance
        correlation = self.correlator.classify_transfer(event)
        transaction_type = correlation.transaction_type

        uow = UnitOfWork(self.store)
        ledger = AccountLedger(uow)
        registry = TokenRegistry(uow)
        aggregator = TransactionAggregator(uow)

        token = registry.get_or_create_token(event.token_id)
        if not has_applied(token, provenance):
            if transaction_type == TransactionType.MINT:
                registry.record_mint(token)
            else:
                registry.record_transfer(token)
            registry.set_owner(token, event.to_address, provenance)
            registry.save(token)

        from_account = ledger.get_or_create_account(event.from_address)
        to_account = ledger.get_or_create_account(event.to_address)
        fresh = self._fresh_accounts([from_account, to_account], provenance)

        # Buy and sale counters of a trade belong to the OrdersMatched handler
        if transaction_type == TransactionType.MINT and to_account is not None and to_account.id in fresh:
            ledger.apply_mint(to_account)

        self._close_accounts(ledger, fresh, provenance)

        if transaction_type != TransactionType.TRADE and aggregator.get_transaction(tx_id) is None:
            transaction = aggregator.create_transaction(
                tx_id, account_id(event.to_address), transaction_type, provenance
            )
            transaction.reference_id = str(event.token_id)
            transaction.reference_ids = [str(event.token_id)]
            transaction.from_address = event.from_address.lower()
            transaction.to_address = event.to_address.lower()
            aggregator.save(transaction)

        written = uow.commit()
        self.log_debug("Transfer applied",
                       tx_hash=event.tx_hash,
                       log_index=event.log_index,
                       token_id=event.token_id,
                       transaction_type=transaction_type.value,
                       entities_written=written)
        return written

    def on_orders_matched(self, event: OrdersMatchedEvent) -> int:
        tx_id = validate_identity(event)
        provenance = event.provenance

        if event.price == 0:
            self.log_info("Zero-price match is not a trade",
                          tx_hash=event.tx_hash,
                          log_index=event.log_index)
            return 0

        legs = self.correlator.trade_legs(event)

        uow = UnitOfWork(self.store)
        ledger = AccountLedger(uow)
        registry = TokenRegistry(uow)
        aggregator = TransactionAggregator(uow)

        if aggregator.get_transaction(tx_id) is not None:
            self.log_info("Trade already recorded",
                          tx_hash=event.tx_hash,
                          log_index=event.log_index)
            return 0

        transaction = aggregator.create_transaction(
            tx_id, account_id(legs[0].buyer), TransactionType.TRADE, provenance
        )
        transaction.buyer = legs[0].buyer
        transaction.seller = legs[0].seller
        transaction.from_address = legs[0].seller
        transaction.to_address = legs[0].buyer
        transaction.maker = event.maker.lower()
        transaction.taker = event.taker.lower()
        transaction.nft_sale_price = event.price
        transaction.total_nfts_sold = len(legs)
        transaction.reference_id = str(legs[0].token_id)
        transaction.reference_ids = [str(leg.token_id) for leg in legs]

        accounts: List[Optional[Account]] = []
        for leg in legs:
            accounts.append(ledger.get_or_create_account(leg.seller))
            accounts.append(ledger.get_or_create_account(leg.buyer))
        fresh = self._fresh_accounts(accounts, provenance)

        for leg, unit_price in zip(legs, split_price(event.price, len(legs))):
            aggregator.record_sale(transaction, unit_price)

            seller = ledger.get_or_create_account(leg.seller)
            buyer = ledger.get_or_create_account(leg.buyer)
            if seller is not None and seller.id in fresh:
                ledger.apply_sale(seller, unit_price)
            if buyer is not None and buyer.id in fresh:
                ledger.apply_buy(buyer, unit_price)

            token = registry.get_or_create_token(leg.token_id)
            if not has_applied(token, provenance):
                registry.record_sale(token, unit_price, provenance)
                registry.set_owner(token, leg.buyer, provenance)
                registry.save(token)

        aggregator.save(transaction)
        self._close_accounts(ledger, fresh, provenance)

        written = uow.commit()
        self.log_debug("Trade applied",
                       tx_hash=event.tx_hash,
                       log_index=event.log_index,
                       token_id=transaction.reference_id,
                       nfts_sold=len(legs),
                       price=event.price,
                       entities_written=written)
        return written

    def _fresh_accounts(self, accounts: List[Optional[Account]], provenance: Provenance) -> Dict[str, Account]:
        """Accounts that have not yet absorbed this event, keyed by id."""
        fresh = {}
        for account in accounts:
            if account is None or account.id in fresh:
                continue
            if has_applied(account, provenance):
                self.log_debug("Account already reflects event",
                               account=account.id,
                               tx_hash=provenance.tx_hash,
                               log_index=provenance.log_index)
                continue
            fresh[account.id] = account
        return fresh

    def _close_accounts(self, ledger: AccountLedger, fresh: Dict[str, Account], provenance: Provenance) -> None:
        for account in fresh.values():
            ledger.touch(account, provenance)
            ledger.reclassify(account)
            ledger.record_history(account, provenance)
            ledger.save(account)
