# transaction_view/outputs/excel_output.py

"""Excel export backed by XlsxWriter.

The workbook holds a single ``Transactions`` worksheet with one row per
transaction and fixed character widths per column. Values are written as
text exactly as they appear on screen, so the amounts keep their fixed
number of decimals.
"""

from __future__ import annotations

import io
import logging
import os

import xlsxwriter

from transaction_view.outputs.base import BaseOutput
from transaction_view.core.export import (
    EXPORT_COLUMNS,
    EXPORT_HEADERS,
    SHEET_NAME,
    build_export_rows,
    default_export_filename,
)

logger = logging.getLogger(__name__)


class ExcelOutput(BaseOutput):
    """Write transactions to a local ``.xlsx`` workbook."""

    def __init__(self, config: dict):
        self.config = config
        self.output_dir = config.get("output_dir", "data")

    def append(self, transactions, filename=None):
        if not transactions:
            logger.info("No transactions to export.")
            return None

        os.makedirs(self.output_dir, exist_ok=True)
        out_path = os.path.join(self.output_dir, filename or default_export_filename())
        with xlsxwriter.Workbook(out_path) as workbook:
            self._write_sheet(workbook, transactions)
        logger.info("Written Excel workbook %s (%d rows)", out_path, len(transactions))
        return out_path

    def render(self, transactions):
        """Return the workbook as bytes, or ``None`` for an empty collection."""
        if not transactions:
            return None
        buffer = io.BytesIO()
        with xlsxwriter.Workbook(buffer, {"in_memory": True}) as workbook:
            self._write_sheet(workbook, transactions)
        return buffer.getvalue()

    def _write_sheet(self, workbook, transactions):
        header_fmt = workbook.add_format({"bold": True})
        ws = workbook.add_worksheet(SHEET_NAME)
        ws.freeze_panes(1, 0)
        ws.write_row(0, 0, EXPORT_HEADERS, header_fmt)

        for idx, (_, width) in enumerate(EXPORT_COLUMNS):
            ws.set_column(idx, idx, width)

        for row_idx, row in enumerate(build_export_rows(transactions), start=1):
            for col_idx, value in enumerate(row):
                ws.write_string(row_idx, col_idx, value)
