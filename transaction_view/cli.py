# transaction_view/cli.py
import logging
import os
import click
from dotenv import load_dotenv
from transaction_view.config import load_config
from transaction_view.controller import TransactionViewController
from transaction_view.core.formatting import format_amount, format_timestamp, truncate_address
from transaction_view.core.models import (
    ITEMS_PER_PAGE_OPTIONS,
    SortDirection,
    SortField,
    TransactionStatus,
    ViewState,
)
from transaction_view.loaders import get_loader
from transaction_view.outputs import get_output

DATE = click.DateTime(formats=['%Y-%m-%d'])


def _render_rows(view):
    header = f"{'HASH':<14} {'FROM':<14} {'TO':<14} {'AMOUNT':>22} {'STATUS':<10} TIME"
    lines = [header]
    for tx in view.visible_rows:
        lines.append(
            f"{truncate_address(tx.hash) or '':<14} "
            f"{truncate_address(tx.from_address) or '':<14} "
            f"{truncate_address(tx.to_address) or '':<14} "
            f"{format_amount(tx.amount):>22} "
            f"{tx.status.value:<10} "
            f"{format_timestamp(tx.effective_time_raw)}"
        )
    return lines


def _render_pager(view):
    pages = ' '.join(
        f"[{n}]" if n == view.current_page else str(n) for n in view.page_window
    )
    return f"Page {view.current_page} of {view.total_pages}: {pages}"


@click.command()
@click.option(
    '--source', 'source',
    default='api',
    help='Transaction source named under "loaders" in the config: api, json or spreadsheet'
)
@click.option(
    '--input', 'input_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='File to read when the source is json or spreadsheet'
)
@click.option(
    '--config', 'config_path',
    default='config.yaml',
    type=click.Path(dir_okay=False),
    help='Path to config.yaml (defaults are used when it does not exist)'
)
@click.option(
    '--env-file', 'env_file',
    default=None,
    type=click.Path(exists=True, dir_okay=False),
    help='Optional .env file, e.g. with TXVIEW_API_URL'
)
@click.option(
    '--status', 'statuses',
    multiple=True,
    type=click.Choice([s.value for s in TransactionStatus]),
    help='Only show this status; repeat for several (default: all)'
)
@click.option('--from', 'date_from', default=None, type=DATE, help='First day to include (YYYY-MM-DD)')
@click.option('--to', 'date_to', default=None, type=DATE, help='Last day to include (YYYY-MM-DD)')
@click.option('--search', default='', help='Case-insensitive match on hash, from or to address')
@click.option(
    '--sort', 'sort_field',
    default=SortField.TIMESTAMP.value,
    type=click.Choice([f.value for f in SortField]),
    help='Sort column'
)
@click.option(
    '--direction', 'sort_direction',
    default=SortDirection.DESC.value,
    type=click.Choice([d.value for d in SortDirection]),
    help='Sort direction'
)
@click.option('--page', default=1, type=int, help='Page to show (clamped to the last page)')
@click.option(
    '--per-page', 'per_page',
    default=None,
    type=click.Choice([str(n) for n in ITEMS_PER_PAGE_OPTIONS]),
    help='Rows per page (default from config)'
)
@click.option(
    '--export', 'export',
    is_flag=True,
    default=False,
    help='Also export every filtered row (all pages)'
)
@click.option(
    '--output', 'output_format',
    default='excel',
    type=click.Choice(['excel', 'csv']),
    help='Export format: excel or csv'
)
@click.option(
    '--export-file', 'export_file',
    default=None,
    help='Export file name (default: transactions-<date>.xlsx in output_dir)'
)
def main(source, input_path, config_path, env_file, statuses, date_from, date_to,
         search, sort_field, sort_direction, page, per_page, export, output_format,
         export_file):
    """
    Fetch transactions, filter them by status, date range and search text,
    sort and print one page as a table. Optionally export the filtered rows
    to Excel or CSV.
    """
    if env_file:
        load_dotenv(env_file)
    logging.basicConfig(level=os.getenv("TXVIEW_LOG_LEVEL", "WARNING").upper())

    try:
        cfg = load_config(config_path)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint='--config') from e
    if source not in cfg['loaders']:
        raise click.BadParameter(
            f"unknown source '{source}' (known: {', '.join(cfg['loaders'])})",
            param_hint='--source',
        )
    if source != 'api' and not input_path:
        raise click.UsageError(f"--input is required for the '{source}' source")

    loader = get_loader(source, cfg)
    state = ViewState(
        selected_statuses=frozenset(TransactionStatus(s) for s in statuses),
        date_from=date_from.date() if date_from else None,
        date_to=date_to.date() if date_to else None,
        search_query=search,
        sort_field=SortField(sort_field),
        sort_direction=SortDirection(sort_direction),
        items_per_page=int(per_page or cfg.get('items_per_page', 15)),
    )
    controller = TransactionViewController(state=state, source=lambda: loader.load(input_path))

    if not controller.load():
        raise click.ClickException(f"Error loading transactions: {controller.error}")
    controller.set_page(page)

    view = controller.view()
    if view.total_count:
        for line in _render_rows(view):
            click.echo(line)
    else:
        click.echo("No transactions found.")
    click.echo(view.summary)
    click.echo(_render_pager(view))

    if export:
        outputter = get_output(output_format, cfg)
        out_path = controller.export(outputter, export_file)
        if out_path:
            click.echo(f"Exported {view.total_count} transaction(s) to {out_path}.")
        else:
            click.echo("Nothing to export.")
