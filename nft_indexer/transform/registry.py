# nft_indexer/transform/registry.py

from ..types import EntityKind, EvmAddress, Provenance, Token
from ..core.logging import LoggingMixin
from .identity import token_key
from .unit_of_work import UnitOfWork


class TokenRegistry(LoggingMixin):
    """Current-state rows per token id. One row per token, never per transfer."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def get_or_create_token(self, token_id: int) -> Token:
        key = token_key(token_id)
        token = self.uow.get(EntityKind.TOKEN, key)
        if token is None:
            token = Token(id=key, token_id=token_id)
            self.uow.stage(token)
            self.log_debug("Token created", token_id=token_id)
        return token

    def set_owner(self, token: Token, new_owner: EvmAddress, provenance: Provenance) -> None:
        token.owner = EvmAddress(new_owner.lower())
        token.stamp(provenance)

    def record_mint(self, token: Token) -> None:
        token.mint_count += 1

    def record_transfer(self, token: Token) -> None:
        token.transfer_count += 1

    def record_sale(self, token: Token, price: int, provenance: Provenance) -> None:
        token.sale_count += 1
        token.last_sale_price = price
        token.stamp(provenance)

    def save(self, token: Token) -> None:
        self.uow.stage(token)
