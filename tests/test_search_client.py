import json

import pytest
import requests

from storefront.services import search_client as search_module
from storefront.services.search_client import SearchClient


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload or {}
        self.status_code = status_code

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class CallLog(list):
    response = None


@pytest.fixture()
def calls(monkeypatch):
    recorded = CallLog()

    def fake_post(url, **kwargs):
        recorded.append((url, kwargs))
        return recorded.response

    recorded.response = FakeResponse()
    monkeypatch.setattr(search_module.requests, "post", fake_post)
    return recorded


@pytest.fixture()
def client():
    return SearchClient(base_url="https://index.example/", api_key="key-1", namespace="products", timeout=3)


class TestSearchClient:
    def test_disabled_without_url(self):
        assert not SearchClient(base_url="").enabled

    def test_search(self, client, calls):
        calls.response = FakeResponse({"result": {"hits": [{"_id": "7"}, {"_id": "abc"}, {"_score": 1}, {"_id": "3"}]}})

        assert client.search("keyboard", 5) == [7, 3]

        url, kwargs = calls[0]
        assert url == "https://index.example/records/namespaces/products/search"
        assert kwargs["json"] == {"query": {"inputs": {"text": "keyboard"}, "top_k": 5}}
        assert kwargs["headers"]["Api-Key"] == "key-1"
        assert kwargs["timeout"] == 3

    def test_search_http_error(self, client, calls):
        calls.response = FakeResponse(status_code=500)

        with pytest.raises(requests.HTTPError):
            client.search("keyboard", 5)

    def test_upsert_sends_ndjson(self, client, calls):
        client.upsert_product(12, "Mechanical keyboard")

        url, kwargs = calls[0]
        assert url == "https://index.example/records/namespaces/products/upsert"
        assert kwargs["headers"]["Content-Type"] == "application/x-ndjson"
        assert json.loads(kwargs["data"].decode()) == {"_id": "12", "text": "Mechanical keyboard"}

    def test_delete(self, client, calls):
        client.delete_product(12)

        url, kwargs = calls[0]
        assert url == "https://index.example/vectors/delete"
        assert kwargs["json"] == {"ids": ["12"], "namespace": "products"}
