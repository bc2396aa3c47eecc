# nft_indexer/database/tables.py

from sqlalchemy import Column, String, Integer, Boolean, JSON

from .base import DBEntityModel
from .types import EvmAddressType, UInt256Type, SignedBigIntType, DecimalStringType


class AccountRow(DBEntityModel):
    __tablename__ = 'accounts'

    mint_count = Column(Integer, nullable=False, default=0)
    buy_count = Column(Integer, nullable=False, default=0)
    sale_count = Column(Integer, nullable=False, default=0)
    transaction_count = Column(Integer, nullable=False, default=0)
    total_amount_bought = Column(UInt256Type(), nullable=False, default=0)
    total_amount_sold = Column(UInt256Type(), nullable=False, default=0)
    total_amount_balance = Column(SignedBigIntType(), nullable=False, default=0)
    is_og = Column(Boolean, nullable=False, default=False)
    is_collector = Column(Boolean, nullable=False, default=False)
    is_hunter = Column(Boolean, nullable=False, default=False)
    is_farmer = Column(Boolean, nullable=False, default=False)
    is_trader = Column(Boolean, nullable=False, default=False)


class TokenRow(DBEntityModel):
    __tablename__ = 'tokens'

    token_id = Column(UInt256Type(), nullable=False)
    owner = Column(EvmAddressType(), nullable=True, index=True)
    mint_count = Column(Integer, nullable=False, default=0)
    transfer_count = Column(Integer, nullable=False, default=0)
    sale_count = Column(Integer, nullable=False, default=0)
    last_sale_price = Column(UInt256Type(), nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<TokenRow(token_id={self.token_id}, owner={self.owner})>"


class TransactionRow(DBEntityModel):
    __tablename__ = 'transactions'

    account = Column(EvmAddressType(), nullable=False, index=True)
    transaction_type = Column(String(16), nullable=False, index=True)
    reference_id = Column(String(78), nullable=True, index=True)
    reference_ids = Column(JSON, nullable=False, default=list)
    buyer = Column(EvmAddressType(), nullable=False)
    seller = Column(EvmAddressType(), nullable=False)
    from_address = Column(EvmAddressType(), nullable=False)
    to_address = Column(EvmAddressType(), nullable=False)
    maker = Column(EvmAddressType(), nullable=False)
    taker = Column(EvmAddressType(), nullable=False)
    nft_sale_price = Column(UInt256Type(), nullable=False, default=0)
    total_nfts_sold = Column(Integer, nullable=False, default=0)
    total_sales_volume = Column(UInt256Type(), nullable=False, default=0)
    total_sales_count = Column(Integer, nullable=False, default=0)
    highest_sale_price = Column(UInt256Type(), nullable=False, default=0)
    lowest_sale_price = Column(UInt256Type(), nullable=False, default=0)
    average_sale_price = Column(DecimalStringType(), nullable=False, default=0)

    def __repr__(self) -> str:
        return f"<TransactionRow(id={self.id}, type={self.transaction_type})>"


class AccountHistoryRow(DBEntityModel):
    __tablename__ = 'account_histories'

    account = Column(EvmAddressType(), nullable=False, index=True)
    mint_count = Column(Integer, nullable=False)
    buy_count = Column(Integer, nullable=False)
    sale_count = Column(Integer, nullable=False)
    transaction_count = Column(Integer, nullable=False)
    total_amount_bought = Column(UInt256Type(), nullable=False)
    total_amount_sold = Column(UInt256Type(), nullable=False)
    total_amount_balance = Column(SignedBigIntType(), nullable=False)
    category = Column(String(16), nullable=False, index=True)
