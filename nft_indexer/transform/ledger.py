# nft_indexer/transform/ledger.py

from typing import Optional

from ..types import (
    Account,
    AccountCategory,
    AccountHistory,
    EntityKind,
    Provenance,
    ZERO_ADDRESS,
)
from ..core.logging import LoggingMixin
from .classifier import apply_classification
from .identity import account_id, history_id
from .unit_of_work import UnitOfWork


def has_applied(entity, provenance: Provenance) -> bool:
    """True when the entity already reflects an event at or after this position.

    Events arrive in (block, log index) order, so a stored position at or past
    the incoming one means this event was absorbed before.
    """
    if not entity.has_provenance:
        return False
    return entity.position >= provenance.position


class AccountLedger(LoggingMixin):
    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def get_or_create_account(self, address: str) -> Optional[Account]:
        """Load or initialise an account. The zero address is never an account."""
        if not address or address.lower() == ZERO_ADDRESS:
            return None

        acc_id = account_id(address)
        account = self.uow.get(EntityKind.ACCOUNT, acc_id)
        if account is None:
            account = Account(id=acc_id)
            self.uow.stage(account)
            self.log_debug("Account created", account=acc_id)
        return account

    def apply_mint(self, account: Account) -> None:
        account.mint_count += 1

    def apply_buy(self, account: Account, price: int) -> None:
        account.buy_count += 1
        account.total_amount_bought += price
        account.total_amount_balance += price

    def apply_sale(self, account: Account, price: int) -> None:
        account.sale_count += 1
        account.total_amount_sold += price
        account.total_amount_balance -= price

    def touch(self, account: Account, provenance: Provenance) -> None:
        """Activity bookkeeping: one more event seen, provenance moved forward."""
        account.transaction_count += 1
        account.stamp(provenance)

    def reclassify(self, account: Account) -> AccountCategory:
        return apply_classification(account)

    def record_history(self, account: Account, provenance: Provenance) -> Optional[AccountHistory]:
        hist_id = history_id(account.id, provenance.tx_hash, provenance.log_index)
        if self.uow.get(EntityKind.ACCOUNT_HISTORY, hist_id) is not None:
            return None

        history = AccountHistory(
            id=hist_id,
            account=account.id,
            mint_count=account.mint_count,
            buy_count=account.buy_count,
            sale_count=account.sale_count,
            transaction_count=account.transaction_count,
            total_amount_bought=account.total_amount_bought,
            total_amount_sold=account.total_amount_sold,
            total_amount_balance=account.total_amount_balance,
            category=account.category,
        )
        history.stamp(provenance)
        self.uow.stage(history)
        return history

    def save(self, account: Account) -> None:
        self.uow.stage(account)
