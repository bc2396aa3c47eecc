# nft_indexer/cli/commands/database.py

import click


@click.command('init-db')
@click.pass_context
def init_db(ctx):
    """Create the entity tables in the configured database"""
    cli_context = ctx.obj['cli_context']

    try:
        db_manager = cli_context.db_manager
        if not db_manager.health_check():
            raise click.ClickException("Database health check failed")
    except click.ClickException:
        raise
    except Exception as e:
        raise click.ClickException(f"Failed to initialize database: {e}")

    click.echo("✅ Database initialized")
    click.echo(f"   URL: {cli_context.config.database.url}")
