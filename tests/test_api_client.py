import io
import json
import urllib.error

import pytest

from transaction_view.api import TransactionsAPI, api_from_config
from transaction_view.core.models import TransactionStatus
from transaction_view.errors import UpstreamFetchFailure, ValidationError

VALID_TO = "0x53d284357ec70cE289D6D64134DfAc8E511c8a3D"


class FakeResponse(io.BytesIO):
    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


def _respond(monkeypatch, payload, calls=None):
    def fake_urlopen(req, timeout=None):
        if calls is not None:
            calls.append(req)
        body = payload if isinstance(payload, bytes) else json.dumps(payload).encode()
        return FakeResponse(body)

    monkeypatch.setattr("transaction_view.api.urllib.request.urlopen", fake_urlopen)


def test_fetch_all_transactions_unwraps_envelope(monkeypatch):
    calls = []
    _respond(monkeypatch, {"success": True, "data": [
        {"_id": "1", "hash": "0x1", "fromAddress": "0xa", "toAddress": "0xb",
         "amount": "2", "status": "failed"},
    ]}, calls)
    api = TransactionsAPI("http://example.test/api/")
    txs = api.fetch_all_transactions()
    assert calls[0].full_url == "http://example.test/api/transactions"
    assert calls[0].get_method() == "GET"
    assert len(txs) == 1
    assert txs[0].status is TransactionStatus.FAILED


def test_non_list_data_yields_empty_collection(monkeypatch):
    _respond(monkeypatch, {"success": True, "data": None})
    assert TransactionsAPI("http://example.test").fetch_all_transactions() == []


def test_invalid_json_is_a_fetch_failure(monkeypatch):
    _respond(monkeypatch, b"<html>oops</html>")
    with pytest.raises(UpstreamFetchFailure):
        TransactionsAPI("http://example.test").fetch_all_transactions()


def test_unsuccessful_envelope_is_a_fetch_failure(monkeypatch):
    _respond(monkeypatch, {"success": False, "message": "database offline"})
    with pytest.raises(UpstreamFetchFailure, match="database offline"):
        TransactionsAPI("http://example.test").fetch_all_transactions()


def test_http_error_uses_server_message(monkeypatch):
    def fake_urlopen(req, timeout=None):
        raise urllib.error.HTTPError(
            req.full_url, 503, "Service Unavailable", {},
            io.BytesIO(b'{"message": "try later"}'),
        )

    monkeypatch.setattr("transaction_view.api.urllib.request.urlopen", fake_urlopen)
    with pytest.raises(UpstreamFetchFailure) as excinfo:
        TransactionsAPI("http://example.test").fetch_all_transactions()
    assert str(excinfo.value) == "try later"
    assert excinfo.value.status == 503


def test_network_error_is_a_fetch_failure(monkeypatch):
    def fake_urlopen(req, timeout=None):
        raise urllib.error.URLError("connection refused")

    monkeypatch.setattr("transaction_view.api.urllib.request.urlopen", fake_urlopen)
    with pytest.raises(UpstreamFetchFailure, match="Could not reach"):
        TransactionsAPI("http://example.test").fetch_all_transactions()


def test_create_transaction_validates_before_sending(monkeypatch):
    calls = []
    _respond(monkeypatch, {"success": True, "data": {}}, calls)
    with pytest.raises(ValidationError) as excinfo:
        TransactionsAPI("http://example.test").create_transaction(
            {"toAddress": "0x123", "amount": "-1", "gasLimit": "abc"}
        )
    assert set(excinfo.value.errors) == {"toAddress", "amount", "gasLimit"}
    assert calls == []


def test_create_transaction_posts_payload(monkeypatch):
    calls = []
    _respond(monkeypatch, {"success": True, "data": {
        "_id": "9", "hash": "0x9", "fromAddress": "0xa", "toAddress": VALID_TO,
        "amount": "0.5", "status": "pending",
    }}, calls)
    tx = TransactionsAPI("http://example.test").create_transaction(
        {"toAddress": f"  {VALID_TO} ", "amount": "0.5", "gasLimit": "", "gasPrice": None}
    )
    req = calls[0]
    assert req.get_method() == "POST"
    assert json.loads(req.data) == {"toAddress": VALID_TO, "amount": "0.5"}
    assert tx.id == "9"
    assert tx.status is TransactionStatus.PENDING


def test_api_from_config():
    api = api_from_config({"api_base_url": "http://x/api", "api_timeout": 3})
    assert api.transactions_url == "http://x/api/transactions"
    assert api.timeout == 3.0


def test_one_bad_record_does_not_drop_the_rest(monkeypatch):
    _respond(monkeypatch, {"success": True, "data": [
        {"hash": "0x1", "fromAddress": "0xa", "toAddress": "0xb", "amount": "1", "status": None},
        {"hash": "0x2", "fromAddress": "0xa", "toAddress": "0xb", "amount": "2", "status": "confirmed"},
    ]})
    txs = TransactionsAPI("http://example.test").fetch_all_transactions()
    assert [tx.hash for tx in txs] == ["0x2"]


def test_malformed_create_response_is_a_fetch_failure(monkeypatch):
    _respond(monkeypatch, {"success": True, "data": {"hash": "0x9"}})
    with pytest.raises(UpstreamFetchFailure, match="Malformed"):
        TransactionsAPI("http://example.test").create_transaction(
            {"toAddress": VALID_TO, "amount": "1"}
        )
