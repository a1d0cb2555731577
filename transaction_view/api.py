# transaction_view/api.py
from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import List, Mapping, Optional

from transaction_view.core.models import Transaction, transactions_from_dicts
from transaction_view.core.validation import validate_create_request
from transaction_view.errors import UpstreamFetchFailure, ValidationError

logger = logging.getLogger(__name__)


def _error_message(body: str, fallback: str) -> str:
    try:
        payload = json.loads(body)
    except ValueError:
        return fallback
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return fallback


@dataclass
class TransactionsAPI:
    """Thin client for the remote transactions REST API.

    Responses use the envelope ``{"success": bool, "data": ...}``.
    """

    base_url: str
    timeout: float = 10

    @property
    def transactions_url(self) -> str:
        return f"{self.base_url.rstrip('/')}/transactions"

    def _request(self, method: str, url: str, payload: Optional[dict] = None):
        data = json.dumps(payload).encode() if payload is not None else None
        req = urllib.request.Request(url, data=data, method=method)
        req.add_header("Accept", "application/json")
        if data is not None:
            req.add_header("Content-Type", "application/json")
        logger.debug("%s %s", method, url)
        try:
            with urllib.request.urlopen(req, timeout=self.timeout) as resp:
                raw = resp.read().decode("utf-8")
        except urllib.error.HTTPError as exc:
            body = exc.read().decode("utf-8", errors="replace") if exc.fp else ""
            message = _error_message(body, f"Request failed with status {exc.code}")
            raise UpstreamFetchFailure(message, status=exc.code) from exc
        except (urllib.error.URLError, OSError) as exc:
            raise UpstreamFetchFailure(f"Could not reach {url}: {exc}") from exc

        try:
            body = json.loads(raw)
        except ValueError as exc:
            raise UpstreamFetchFailure(f"Invalid JSON from {url}") from exc
        if isinstance(body, dict) and body.get("success") is False:
            raise UpstreamFetchFailure(_error_message(raw, "Request was not successful"))
        return body.get("data") if isinstance(body, dict) else body

    def fetch_all_transactions(self) -> List[Transaction]:
        data = self._request("GET", self.transactions_url)
        if not isinstance(data, list):
            logger.warning("Expected a list of transactions, got %s", type(data).__name__)
            return []
        return transactions_from_dicts(data, source=self.transactions_url)

    def create_transaction(self, request: Mapping) -> Transaction:
        errors = validate_create_request(request)
        if errors:
            raise ValidationError(errors)
        payload = {key: value for key, value in request.items() if value not in (None, "")}
        payload["toAddress"] = str(payload["toAddress"]).strip()
        data = self._request("POST", self.transactions_url, payload)
        if not isinstance(data, dict):
            raise UpstreamFetchFailure("Malformed create transaction response")
        try:
            return Transaction.from_dict(data)
        except (KeyError, ValueError) as exc:
            raise UpstreamFetchFailure(f"Malformed create transaction response: {exc}") from exc


def api_from_config(config: Mapping) -> TransactionsAPI:
    return TransactionsAPI(
        base_url=str(config["api_base_url"]),
        timeout=float(config.get("api_timeout", 10)),
    )
