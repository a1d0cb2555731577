# transaction_view/config.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Dict
import yaml

from transaction_view.core.models import ITEMS_PER_PAGE_OPTIONS

DEFAULT_CONFIG: Dict[str, object] = {
    "api_base_url": "http://localhost:3001/api",
    "api_timeout": 10,
    "explorer_url": "https://etherscan.io/tx/",
    "loaders": {
        "api": "transaction_view.loaders.api.APILoader",
        "json": "transaction_view.loaders.json_file.JSONFileLoader",
        "spreadsheet": "transaction_view.loaders.spreadsheet.SpreadsheetLoader",
    },
    "output_modules": {
        "excel": "transaction_view.outputs.excel_output.ExcelOutput",
        "csv": "transaction_view.outputs.csv_output.CSVOutput",
    },
    "output_dir": ".",
    "items_per_page": 15,
    "search_debounce_ms": 300,
}

ENV_API_URL = "TXVIEW_API_URL"


def _merge_defaults(current: Dict[str, object], defaults: Dict[str, object]) -> Dict[str, object]:
    """Merge missing default keys into the current config recursively."""
    merged = dict(current)
    for key, value in defaults.items():
        if key not in merged:
            merged[key] = value
        elif isinstance(value, dict) and isinstance(merged[key], dict):
            merged[key] = _merge_defaults(merged[key], value)
    return merged


def load_config(path: str | os.PathLike | None = None) -> Dict[str, object]:
    """Load a YAML config file over the defaults.

    A missing file yields the defaults. An ``items_per_page`` outside the
    allowed page sizes raises ``ValueError``. ``TXVIEW_API_URL`` overrides the
    configured API base URL.
    """
    data: Dict[str, object] = {}
    if path is not None:
        target = Path(path)
        if target.exists():
            with target.open("r", encoding="utf-8") as fp:
                data = yaml.safe_load(fp) or {}
            if not isinstance(data, dict):
                raise ValueError(f"Config file {target} must contain a mapping")
    config = _merge_defaults(data, DEFAULT_CONFIG)
    if config["items_per_page"] not in ITEMS_PER_PAGE_OPTIONS:
        raise ValueError(
            f"items_per_page must be one of {', '.join(map(str, ITEMS_PER_PAGE_OPTIONS))}, "
            f"got {config['items_per_page']!r}"
        )
    env_url = os.environ.get(ENV_API_URL)
    if env_url:
        config["api_base_url"] = env_url
    return config
