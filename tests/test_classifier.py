# tests/test_classifier.py

import itertools

import pytest

from nft_indexer.transform.classifier import CATEGORY_FLAGS, apply_classification, classify
from nft_indexer.types import Account, AccountCategory

from conftest import ALICE


@pytest.mark.parametrize("mint,buy,sale,expected", [
    (1, 0, 0, AccountCategory.OG),
    (2, 3, 0, AccountCategory.COLLECTOR),
    (1, 0, 4, AccountCategory.HUNTER),
    (1, 1, 1, AccountCategory.FARMER),
    (0, 1, 0, AccountCategory.TRADER),
    (0, 0, 2, AccountCategory.TRADER),
    (0, 5, 5, AccountCategory.TRADER),
    (0, 0, 0, AccountCategory.UNCLASSIFIED),
])
def test_classify(mint, buy, sale, expected):
    assert classify(mint, buy, sale) == expected


def test_at_most_one_flag_is_set():
    for mint, buy, sale in itertools.product(range(3), repeat=3):
        account = Account(id=ALICE, mint_count=mint, buy_count=buy, sale_count=sale)
        apply_classification(account)
        flags = [getattr(account, attr) for attr in CATEGORY_FLAGS.values()]
        assert sum(flags) <= 1
        assert sum(flags) == (0 if (mint, buy, sale) == (0, 0, 0) else 1)


def test_reclassification_clears_previous_flag():
    account = Account(id=ALICE, mint_count=1)
    assert apply_classification(account) == AccountCategory.OG
    assert account.is_og

    account.buy_count = 1
    assert apply_classification(account) == AccountCategory.COLLECTOR
    assert not account.is_og
    assert account.is_collector
    assert account.category == AccountCategory.COLLECTOR
