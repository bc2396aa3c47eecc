# nft_indexer/cli/__main__.py

"""
NFT Indexer CLI Tool

Usage: python -m nft_indexer.cli [command] [options]
"""

import click

from .context import CLIContext
from ..core.logging import IndexerLogger


@click.group()
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--config', 'config_path', envvar='INDEXER_CONFIG',
              type=click.Path(exists=True, dir_okay=False),
              help='YAML configuration file (INDEXER_* variables override it)')
@click.pass_context
def cli(ctx, verbose, config_path):
    """NFT Indexer - replay receipts and inspect derived entities

    Commands:
    - init-db: create the entity tables
    - replay: process a file of transaction receipts
    - account / token / transaction: show a stored entity as JSON
    """
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    # Query output goes to stdout, so only warnings are logged unless asked
    IndexerLogger.configure(
        log_level="DEBUG" if verbose else "WARNING",
        console_enabled=True,
        file_enabled=False,
        structured_format=verbose,
        force=True,
    )

    cli_context = CLIContext(config_path)
    ctx.obj['cli_context'] = cli_context
    ctx.call_on_close(cli_context.shutdown)


from .commands.database import init_db
from .commands.replay import replay
from .commands.query import account, token, transaction

cli.add_command(init_db)
cli.add_command(replay)
cli.add_command(account)
cli.add_command(token)
cli.add_command(transaction)


if __name__ == '__main__':
    cli()
