import pytest
import requests

from wire_ledger import data_handler, settings
from wire_ledger.errors import LoadFailure


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


@pytest.fixture
def api(monkeypatch, txn, vendors):
    """Routes GET requests to canned payloads keyed by endpoint."""
    monkeypatch.setattr(settings, "API_BASE_URL", "http://store.test/api")
    routes = {
        "/items/transactions/IN": FakeResponse([txn("IN", 2)]),
        "/items/transactions/OUT": FakeResponse([txn("OUT", 5)]),
        "/vendors": FakeResponse(vendors),
        "/print-status": FakeResponse([{"vendorName": "Ravi", "pageNumber": 2}]),
    }
    calls = []

    def fake_get(url, timeout):
        endpoint = url.removeprefix("http://store.test/api")
        calls.append(endpoint)
        response = routes[endpoint]
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(requests, "get", fake_get)
    return routes, calls


def test_load_snapshot_merges_in_then_out(api):
    routes, calls = api
    snapshot = data_handler.load_snapshot()

    assert sorted(calls) == sorted(routes)
    assert [t["type"] for t in snapshot.transactions] == ["IN", "OUT"]
    assert snapshot.vendors[0].name == "Ravi"
    assert snapshot.vendors[0].assigned_wires[0].price_per_kg == 150
    assert snapshot.print_statuses[0].page_number == 2


@pytest.mark.parametrize("endpoint", ["/items/transactions/OUT", "/vendors", "/print-status"])
def test_any_failed_fetch_fails_the_whole_load(api, endpoint):
    routes, _ = api
    routes[endpoint] = requests.exceptions.ConnectionError("connection refused")

    with pytest.raises(LoadFailure, match="connection refused"):
        data_handler.load_snapshot()


def test_http_error_status_fails_the_load(api):
    routes, _ = api
    routes["/vendors"] = FakeResponse({"error": "boom"}, status_code=500)

    with pytest.raises(LoadFailure, match="vendors"):
        data_handler.load_snapshot()


def test_malformed_directory_fails_the_load(api):
    routes, _ = api
    routes["/vendors"] = FakeResponse([{"assignedWires": []}])

    with pytest.raises(LoadFailure, match="malformed"):
        data_handler.load_snapshot()


def test_load_snapshot_file(snapshot_file):
    snapshot = data_handler.load_snapshot_file(snapshot_file)
    assert len(snapshot.transactions) == 4
    assert {v.name for v in snapshot.vendors} == {"Ravi", "Meena"}


def test_load_snapshot_file_errors(tmp_path):
    with pytest.raises(LoadFailure, match="not found"):
        data_handler.load_snapshot_file(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(LoadFailure):
        data_handler.load_snapshot_file(broken)

    wrong_shape = tmp_path / "list.json"
    wrong_shape.write_text("[]", encoding="utf-8")
    with pytest.raises(LoadFailure, match="JSON object"):
        data_handler.load_snapshot_file(wrong_shape)


def test_mark_page_as_printed_posts_vendor_and_page(monkeypatch):
    sent = {}

    def fake_post(url, json, timeout):
        sent.update(url=url, json=json)
        return FakeResponse({})

    monkeypatch.setattr(settings, "API_BASE_URL", "http://store.test/api/")
    monkeypatch.setattr(requests, "post", fake_post)

    assert data_handler.mark_page_as_printed("Ravi", 3) is True
    assert sent == {
        "url": "http://store.test/api/print-status/mark-printed",
        "json": {"vendorName": "Ravi", "pageNumber": 3},
    }


def test_print_store_failures_are_reported_not_raised(monkeypatch, caplog):
    def fail(*args, **kwargs):
        raise requests.exceptions.Timeout("timed out")

    monkeypatch.setattr(requests, "post", fail)
    monkeypatch.setattr(requests, "delete", fail)

    assert data_handler.mark_page_as_printed("Ravi", 1) is False
    assert data_handler.clear_page_print_status("Ravi Kumar", 1) is False
    assert data_handler.clear_all_print_statuses() is False
    assert "timed out" in caplog.text


def test_clear_page_quotes_vendor_name(monkeypatch):
    urls = []

    def fake_delete(url, timeout):
        urls.append(url)
        return FakeResponse({})

    monkeypatch.setattr(settings, "API_BASE_URL", "http://store.test/api")
    monkeypatch.setattr(requests, "delete", fake_delete)

    assert data_handler.clear_page_print_status("Ravi Kumar", 2) is True
    assert urls == ["http://store.test/api/print-status/Ravi%20Kumar/2"]
