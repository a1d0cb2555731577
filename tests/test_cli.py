import csv
import json

import openpyxl
import yaml
from click.testing import CliRunner

from transaction_view.api import TransactionsAPI
from transaction_view.cli import main as cli
from transaction_view.errors import UpstreamFetchFailure


def write_config(tmp_path, data_dir, **extra):
    cfg = {'output_dir': str(data_dir), **extra}
    path = tmp_path / 'config.yaml'
    with open(path, 'w') as f:
        yaml.safe_dump(cfg, f)
    return path


def write_transactions(path, count=3):
    rows = []
    for i in range(count):
        rows.append({
            '_id': str(i),
            'hash': f'0x{i:064x}',
            'fromAddress': '0x742d35Cc6634C0532925a3b844Bc454e4438f44e',
            'toAddress': '0x53d284357ec70cE289D6D64134DfAc8E511c8a3D',
            'amount': str(i + 1),
            'status': ('confirmed', 'pending', 'failed')[i % 3],
            'timestamp': f'2024-01-{(i % 28) + 1:02d}T10:00:00',
        })
    path.write_text(json.dumps({'success': True, 'data': rows}))
    return path


def _invoke(tmp_path, *args, count=3, **cfg):
    data = write_transactions(tmp_path / 'txs.json', count)
    cfg_path = write_config(tmp_path, tmp_path / 'data', **cfg)
    return CliRunner().invoke(
        cli, ['--source', 'json', '--input', str(data), '--config', str(cfg_path), *args]
    )


def test_cli_prints_first_page(tmp_path):
    res = _invoke(tmp_path, count=20)
    assert res.exit_code == 0, res.output
    lines = res.output.splitlines()
    assert lines[0].startswith('HASH')
    assert len(lines) == 1 + 15 + 2
    assert 'Showing 1-15 of 20 transactions' in res.output
    assert lines[-1] == 'Page 1 of 2: [1] 2'
    # newest first
    assert lines[1].startswith('0x0000...0013')


def test_cli_filters_sorts_and_pages(tmp_path):
    res = _invoke(
        tmp_path, '--status', 'confirmed', '--sort', 'amount', '--direction', 'asc',
        '--per-page', '10', '--page', '9', count=30,
    )
    assert res.exit_code == 0, res.output
    assert 'Showing 1-10 of 10 transactions' in res.output
    assert 'Page 1 of 1: [1]' in res.output
    assert 'pending' not in res.output
    amounts = [line.split()[3] for line in res.output.splitlines()[1:11]]
    assert amounts == ['1.00', '4.00', '7.00', '10.00', '13.00', '16.00', '19.00', '22.00', '25.00', '28.00']


def test_cli_per_page_defaults_to_config(tmp_path):
    res = _invoke(tmp_path, count=12, items_per_page=10)
    assert res.exit_code == 0, res.output
    assert 'Showing 1-10 of 12 transactions' in res.output
    assert 'Page 1 of 2: [1] 2' in res.output


def test_cli_date_range_and_search(tmp_path):
    res = _invoke(tmp_path, '--from', '2024-01-02', '--to', '2024-01-02', count=5)
    assert 'Showing 1-1 of 1 transaction' in res.output

    res = _invoke(tmp_path, '--search', 'NO-SUCH-HASH')
    assert res.exit_code == 0, res.output
    assert 'No transactions found.' in res.output
    assert 'Showing 0 of 0 transactions' in res.output


def test_cli_excel_export(tmp_path):
    res = _invoke(tmp_path, '--export', '--export-file', 'out.xlsx', '--per-page', '10', count=12)
    assert res.exit_code == 0, res.output
    out_xlsx = tmp_path / 'data' / 'out.xlsx'
    assert f'Exported 12 transaction(s) to {out_xlsx}.' in res.output
    ws = openpyxl.load_workbook(out_xlsx)['Transactions']
    assert ws['A1'].value == 'Transaction Hash'
    assert ws.max_row == 13


def test_cli_csv_export(tmp_path):
    res = _invoke(tmp_path, '--export', '--output', 'csv', '--export-file', 'out.csv', '--status', 'failed', count=6)
    assert res.exit_code == 0, res.output
    with open(tmp_path / 'data' / 'out.csv', newline='') as f:
        rows = list(csv.reader(f))
    assert len(rows) == 3
    assert {row[4] for row in rows[1:]} == {'Failed'}


def test_cli_export_of_nothing(tmp_path):
    res = _invoke(tmp_path, '--export', '--search', 'zzz')
    assert res.exit_code == 0, res.output
    assert 'Nothing to export.' in res.output
    assert not (tmp_path / 'data').exists()


def test_cli_requires_input_for_file_sources(tmp_path):
    cfg_path = write_config(tmp_path, tmp_path / 'data')
    res = CliRunner().invoke(cli, ['--source', 'json', '--config', str(cfg_path)])
    assert res.exit_code == 2
    assert '--input is required' in res.output


def test_cli_rejects_unknown_source(tmp_path):
    cfg_path = write_config(tmp_path, tmp_path / 'data')
    res = CliRunner().invoke(cli, ['--source', 'ledger', '--config', str(cfg_path)])
    assert res.exit_code == 2
    assert "unknown source 'ledger'" in res.output


def test_cli_reports_fetch_failure(tmp_path, monkeypatch):
    def boom(self):
        raise UpstreamFetchFailure('Failed to load transactions')

    monkeypatch.setattr(TransactionsAPI, 'fetch_all_transactions', boom)
    cfg_path = write_config(tmp_path, tmp_path / 'data')
    res = CliRunner().invoke(cli, ['--config', str(cfg_path)])
    assert res.exit_code == 1
    assert 'Error loading transactions: Failed to load transactions' in res.output


def test_cli_rejects_page_size_from_config(tmp_path):
    res = _invoke(tmp_path, count=30, items_per_page=25)
    assert res.exit_code == 2
    assert 'items_per_page must be one of 10, 15, 20' in res.output
    assert 'Showing' not in res.output
