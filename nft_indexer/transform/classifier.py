# nft_indexer/transform/classifier.py

from typing import Dict

from ..types import Account, AccountCategory


CATEGORY_FLAGS: Dict[AccountCategory, str] = {
    AccountCategory.OG: "is_og",
    AccountCategory.COLLECTOR: "is_collector",
    AccountCategory.HUNTER: "is_hunter",
    AccountCategory.FARMER: "is_farmer",
    AccountCategory.TRADER: "is_trader",
}


def classify(mint_count: int, buy_count: int, sale_count: int) -> AccountCategory:
    """Map lifetime counters to one behavioural category. First match wins."""
    minted = mint_count > 0
    bought = buy_count > 0
    sold = sale_count > 0

    if minted and not bought and not sold:
        return AccountCategory.OG
    if minted and bought and not sold:
        return AccountCategory.COLLECTOR
    if minted and not bought and sold:
        return AccountCategory.HUNTER
    if minted and bought and sold:
        return AccountCategory.FARMER
    if not minted and (bought or sold):
        return AccountCategory.TRADER
    return AccountCategory.UNCLASSIFIED


def apply_classification(account: Account) -> AccountCategory:
    """Recompute every flag from the counters; flags are never set individually."""
    category = classify(account.mint_count, account.buy_count, account.sale_count)
    for flag_category, attr in CATEGORY_FLAGS.items():
        setattr(account, attr, flag_category == category)
    return category
