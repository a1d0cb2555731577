# transaction_view/web.py
from __future__ import annotations

import argparse
import json
import logging
import os
from datetime import date
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, List
from urllib.parse import parse_qs, unquote, urlparse

from transaction_view.config import load_config
from transaction_view.controller import TransactionView, TransactionViewController
from transaction_view.core.export import default_export_filename
from transaction_view.core.formatting import (
    calculate_fee,
    explorer_url,
    format_amount,
    format_full_date,
    format_timestamp,
    truncate_address,
)
from transaction_view.core.models import (
    ITEMS_PER_PAGE_OPTIONS,
    SortDirection,
    SortField,
    Transaction,
    TransactionStatus,
    ViewState,
)
from transaction_view.loaders import get_loader
from transaction_view.outputs.excel_output import ExcelOutput

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _parse_int(value: str | None, default: int) -> int:
    if value is None or value == "":
        return default
    return int(value)


def _get_param(query: dict[str, list[str]], key: str) -> str | None:
    values = query.get(key)
    return values[0] if values else None


def _get_list(query: dict[str, list[str]], key: str) -> list[str]:
    items: list[str] = []
    for value in query.get(key, []):
        items.extend(part for part in value.split(",") if part)
    return items


def parse_view_state(query: dict[str, list[str]], default_per_page: int = 15) -> ViewState:
    """Build a ``ViewState`` from query parameters; raises ``ValueError``."""
    per_page = _parse_int(_get_param(query, "per_page"), default_per_page)
    if per_page not in ITEMS_PER_PAGE_OPTIONS:
        raise ValueError(f"per_page must be one of {', '.join(map(str, ITEMS_PER_PAGE_OPTIONS))}")
    return ViewState(
        selected_statuses=frozenset(TransactionStatus(s) for s in _get_list(query, "status")),
        date_from=_parse_date(_get_param(query, "date_from")),
        date_to=_parse_date(_get_param(query, "date_to")),
        search_query=_get_param(query, "search") or "",
        sort_field=SortField(_get_param(query, "sort") or SortField.TIMESTAMP.value),
        sort_direction=SortDirection(_get_param(query, "direction") or SortDirection.DESC.value),
        items_per_page=per_page,
    )


def transaction_row(tx: Transaction) -> dict[str, Any]:
    payload = tx.to_dict()
    payload["display"] = {
        "hash": truncate_address(tx.hash),
        "fromAddress": truncate_address(tx.from_address),
        "toAddress": truncate_address(tx.to_address),
        "amount": format_amount(tx.amount),
        "timestamp": format_timestamp(tx.effective_time_raw),
    }
    return payload


def transaction_detail(tx: Transaction, explorer_base: str) -> dict[str, Any]:
    payload = tx.to_dict()
    payload["display"] = {
        "amount": format_amount(tx.amount),
        "fee": calculate_fee(tx.gas_limit, tx.gas_price),
        "timestamp": format_full_date(tx.effective_time_raw),
    }
    payload["explorerUrl"] = explorer_url(tx.hash, explorer_base)
    return payload


def view_payload(view: TransactionView) -> dict[str, Any]:
    return {
        "rows": [transaction_row(tx) for tx in view.visible_rows],
        "totalCount": view.total_count,
        "totalPages": view.total_pages,
        "currentPage": view.current_page,
        "pageWindow": list(view.page_window),
        "summary": view.summary,
        "hasPrevious": view.has_previous,
        "hasNext": view.has_next,
    }


def _json_response(handler: BaseHTTPRequestHandler, payload: Any, status: int = 200) -> None:
    body = json.dumps(payload).encode("utf-8")
    handler.send_response(status)
    handler.send_header("Content-Type", "application/json")
    handler.send_header("Cache-Control", "no-store")
    handler.send_header("Content-Length", str(len(body)))
    handler.end_headers()
    handler.wfile.write(body)


class TransactionWebHandler(BaseHTTPRequestHandler):
    source: Callable[[], List[Transaction]] | None = None
    explorer_base: str = "https://etherscan.io/tx/"
    default_per_page: int = 15

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("%s - %s", self.address_string(), format % args)

    def do_GET(self) -> None:
        parsed = urlparse(self.path)
        if not parsed.path.startswith("/api/"):
            _json_response(self, {"error": "not found"}, status=404)
            return
        self._handle_api(parsed)

    def _load(self) -> TransactionViewController | None:
        controller = TransactionViewController(source=self.source)
        if not controller.load():
            _json_response(
                self,
                {"error": controller.error or "Failed to load transactions", "retry": True},
                status=502,
            )
            return None
        return controller

    def _handle_api(self, parsed) -> None:
        query = parse_qs(parsed.query)
        path = parsed.path.rstrip("/")

        try:
            state = parse_view_state(query, self.default_per_page)
            page = _parse_int(_get_param(query, "page"), 1)
        except ValueError as exc:
            _json_response(self, {"error": str(exc)}, status=400)
            return

        if path == "/api/transactions":
            controller = self._load()
            if controller is None:
                return
            controller = TransactionViewController(controller.transactions, state=state)
            controller.set_page(page)
            _json_response(self, view_payload(controller.view()))
            return

        if path == "/api/export":
            controller = self._load()
            if controller is None:
                return
            controller = TransactionViewController(controller.transactions, state=state)
            body = ExcelOutput({}).render(controller.filtered())
            if body is None:
                self.send_response(204)
                self.end_headers()
                return
            self.send_response(200)
            self.send_header("Content-Type", XLSX_CONTENT_TYPE)
            self.send_header(
                "Content-Disposition", f'attachment; filename="{default_export_filename()}"'
            )
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
            return

        if path.startswith("/api/transactions/"):
            tx_hash = unquote(path.rsplit("/", 1)[1]).lower()
            controller = self._load()
            if controller is None:
                return
            match = next((tx for tx in controller.transactions if tx.hash.lower() == tx_hash), None)
            if match is None:
                _json_response(self, {"error": "transaction not found"}, status=404)
                return
            _json_response(self, transaction_detail(match, self.explorer_base))
            return

        _json_response(self, {"error": "not found"}, status=404)


def make_handler(source, config: dict) -> type:
    return type(
        "TransactionWebHandler",
        (TransactionWebHandler,),
        {
            "source": staticmethod(source),
            "explorer_base": str(config.get("explorer_url", TransactionWebHandler.explorer_base)),
            "default_per_page": int(config.get("items_per_page", 15)),
        },
    )


def main() -> None:
    parser = argparse.ArgumentParser(description="Transaction view JSON API")
    parser.add_argument("--config", default="config.yaml", help="Path to config.yaml")
    parser.add_argument("--source", default="api", help="Loader name: api, json or spreadsheet")
    parser.add_argument("--input", dest="input_path", default=None, help="File for json/spreadsheet sources")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind (default: 8000)")
    args = parser.parse_args()

    logging.basicConfig(level=os.getenv("TXVIEW_LOG_LEVEL", "INFO").upper())
    config = load_config(args.config)
    loader = get_loader(args.source, config)
    handler = make_handler(lambda: loader.load(args.input_path), config)
    server = ThreadingHTTPServer((args.host, args.port), handler)
    logger.info("Transaction view API running at http://%s:%s (source: %s)", args.host, args.port, args.source)
    server.serve_forever()


if __name__ == "__main__":
    main()
