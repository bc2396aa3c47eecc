# nft_indexer/cli/commands/replay.py

"""
Receipt Replay CLI Command

Reads JSON lines of the form {"timestamp": <block timestamp>, "receipt": {...}}
where receipt is an eth_getTransactionReceipt result, in chain order.
"""

from collections import Counter
from typing import Any, Dict, Iterator, List, Tuple

import click
import msgspec
from msgspec import Struct

from ...core.logging import IndexerLogger, log_with_context, WARNING


class ReplayRecord(Struct):
    timestamp: int
    receipt: Dict[str, Any]


def read_records(path: str, bad_lines: List[int]) -> Iterator[Tuple[dict, int]]:
    logger = IndexerLogger.get_logger('cli.replay')
    decoder = msgspec.json.Decoder(ReplayRecord)

    with open(path, 'rb') as f:
        for line_number, line in enumerate(f, start=1):
            if not line.strip():
                continue
            try:
                record = decoder.decode(line)
            except msgspec.DecodeError as e:
                log_with_context(logger, WARNING, "Skipping unreadable replay line",
                                 line_number=line_number, error=str(e))
                bad_lines.append(line_number)
                continue
            yield record.receipt, record.timestamp


@click.command('replay')
@click.argument('file', type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def replay(ctx, file):
    """Process a JSON lines file of transaction receipts

    Examples:
        replay receipts.jsonl
        INDEXER_DB_URL=sqlite:///coven.db replay receipts.jsonl
    """
    cli_context = ctx.obj['cli_context']

    bad_lines: List[int] = []
    try:
        result = cli_context.pipeline.process_receipts(read_records(file, bad_lines))
    except Exception as e:
        raise click.ClickException(f"Replay failed: {e}")

    click.echo("✅ Replay completed")
    click.echo(f"   Processed: {result.processed}")
    click.echo(f"   Skipped: {result.skipped}")
    click.echo(f"   Failed: {result.failed}")
    click.echo(f"   Elapsed: {result.elapsed_seconds:.3f}s")
    if bad_lines:
        click.echo(f"   Unreadable lines: {', '.join(str(n) for n in bad_lines)}")

    if result.errors:
        counts = Counter(error.error_type for error in result.errors.values())
        click.echo("   Errors:")
        for error_type, count in sorted(counts.items()):
            click.echo(f"     {error_type}: {count}")
