# nft_indexer/cli/commands/query.py

"""
Entity lookup commands. Each prints the stored entity as JSON.
"""

import click
import msgspec

from ...types import EntityKind, MalformedEventError
from ...transform.identity import account_id, global_id, token_key


def echo_entity(entity, **extra) -> None:
    payload = entity.to_dict()
    payload.update(extra)
    click.echo(msgspec.json.format(msgspec.json.encode(payload), indent=2).decode())


@click.command('account')
@click.argument('address')
@click.pass_context
def account(ctx, address):
    """Show the aggregate for ADDRESS"""
    store = ctx.obj['cli_context'].store

    entity = store.get(EntityKind.ACCOUNT, account_id(address))
    if entity is None:
        raise click.ClickException(f"Account '{address}' not found")

    echo_entity(entity, category=entity.category.value)


@click.command('token')
@click.argument('token_id', type=int)
@click.pass_context
def token(ctx, token_id):
    """Show ownership and sale counters for TOKEN_ID"""
    store = ctx.obj['cli_context'].store

    entity = store.get(EntityKind.TOKEN, token_key(token_id))
    if entity is None:
        raise click.ClickException(f"Token {token_id} not found")

    echo_entity(entity)


@click.command('transaction')
@click.argument('tx_hash')
@click.argument('log_index', type=int)
@click.pass_context
def transaction(ctx, tx_hash, log_index):
    """Show the transaction record created by log LOG_INDEX of TX_HASH"""
    store = ctx.obj['cli_context'].store

    try:
        tx_id = global_id(tx_hash, log_index)
    except MalformedEventError as e:
        raise click.BadParameter(e.message)

    entity = store.get(EntityKind.TRANSACTION, tx_id)
    if entity is None:
        raise click.ClickException(f"Transaction '{tx_id}' not found")

    echo_entity(entity)
