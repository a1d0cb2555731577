# transaction_view/outputs/csv_output.py

import os
import csv
import logging
from transaction_view.outputs.base import BaseOutput
from transaction_view.core.export import (
    EXPORT_HEADERS,
    build_export_rows,
    default_export_filename,
)

logger = logging.getLogger(__name__)


class CSVOutput(BaseOutput):
    """
    Writes transactions to a CSV file with the same columns, in the same
    order, as the Excel export.
    """
    def __init__(self, config):
        self.config     = config
        self.output_dir = config.get('output_dir', 'data')

    def append(self, transactions, filename=None):
        if not transactions:
            logger.info("No transactions to export.")
            return None

        os.makedirs(self.output_dir, exist_ok=True)
        filename = filename or default_export_filename(extension='csv')
        out_path = os.path.join(self.output_dir, filename)

        with open(out_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(EXPORT_HEADERS)
            writer.writerows(build_export_rows(transactions))

        logger.info("Written %d transactions to %s", len(transactions), out_path)
        return out_path
