# Command line extractor: tcpbn <url> [options]
# Writes the boards of a TC tournament to one PBN file, or one file per board set with --split.

import pathlib
import re
import sys

import click
from tqdm import tqdm

from tcPbnLib.config import ExtractorConfig, DEFAULT_GENERATOR, DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from tcPbnLib.logging_config import setup_logger
from tcPbnLib.tcPbnServiceLib import ExtractionService
from tcPbnLib.tcPbnTCLib import TCExtractor
from tcPbnLib.tcPbnTypes import ExtractionOptions

logger = setup_logger('tcpbn')


def safe_filename(name):
    return re.sub(r'[\\/:*?"<>|]', '_', name).strip() or 'boards'


def board_set_filenames(output, count):
    """'event.pbn' -> ['event.pbn'] or ['event-0.pbn', 'event-1.pbn', ...]. A '%d' in output is honoured."""
    if '%d' in output:
        return [output % i for i in range(count)]
    if count == 1:
        return [output]
    stem = output[:-len('.pbn')] if output.endswith('.pbn') else output
    return [f"{stem}-{i}.pbn" for i in range(count)]


@click.command(context_settings={'help_option_names': ['-h', '--help']})
@click.argument('url_arg', metavar='URL', required=False)
@click.option('--url', 'url_opt', default='', help='URL to extract PBN from.')
@click.option('--stdout', 'write_to_stdout', is_flag=True, help='Write PBN to stdout instead of file.')
@click.option('--out', 'output', default='', help='File to write PBN to, if empty will write to <event-name>.pbn.')
@click.option('--event', 'event_name', default='', help='Event name to use in PBN, if empty will be extracted from tournament settings.')
@click.option('--generator', default=DEFAULT_GENERATOR, show_default=True, help='Generator name to use in PBN.')
@click.option('--boards', 'boards_range', default='', help='Boards to extract, if empty will extract all boards. Notation <from>-<to>,<single>,<from>-<to>.')
@click.option('--split', 'split_on_discontinuation', is_flag=True, help='Split boards into separate files when the numbering restarts.')
@click.option('--agent', 'user_agent', default=DEFAULT_USER_AGENT, show_default=True, help='User-Agent header to use for requests.')
@click.option('--timeout', default=DEFAULT_TIMEOUT, show_default=True, type=float, help='Timeout for HTTP requests in seconds.')
@click.option('--fill-missing', is_flag=True, help='Fill missing boards with empty boards.')
def main(url_arg, url_opt, write_to_stdout, output, event_name, generator, boards_range, split_on_discontinuation, user_agent, timeout, fill_missing):
    """Extract boards from a TC tournament results site into PBN."""
    base_url = url_opt or url_arg
    if not base_url:
        raise click.UsageError('a tournament URL is required')

    env_config = ExtractorConfig.from_env()
    config = ExtractorConfig(user_agent=user_agent, timeout=timeout, pacing_delay=env_config.pacing_delay, generator=generator)
    options = ExtractionOptions(
        base_url=base_url,
        event_name=event_name,
        boards_range=boards_range,
        split_on_discontinuation=split_on_discontinuation,
        fill_missing=fill_missing,
    )

    service = ExtractionService(TCExtractor(config))
    try:
        result = service.extract(options, progress_class=tqdm)
    finally:
        service.close()

    if not result.success:
        for error in result.errors:
            logger.error(str(error))
        sys.exit(1)

    if write_to_stdout:
        click.echo(''.join(result.board_sets), nl=False)
    else:
        if output == '':
            output = f"{safe_filename(result.event_name)}.pbn"
        for filename, board_set in zip(board_set_filenames(output, len(result.board_sets)), result.board_sets):
            pathlib.Path(filename).write_text(board_set, encoding='utf-8')
            logger.info(f"Wrote {filename}")

    logger.info(f"Extracted {result.board_count} boards successfully. Failed {len(result.errors)} times.")


if __name__ == '__main__':
    main()
