"""Shared fixtures: Siren documents and a recording fake transport."""

import pytest

from siren_nav.core.cache import Cache
from siren_nav.core.models import ResponseData
from siren_nav.core.state import NavState

API = "https://api.example.com/"


class FakeClient:
    """
    Stand-in for HttpClient.

    Routes map absolute URLs to a body (served as 200), a ResponseData,
    or an exception to raise.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    async def request(self, method, url, config=None, **kwargs):
        self.calls.append({"method": method, "url": url, "config": config, **kwargs})
        if url not in self.routes:
            raise AssertionError(f"Unexpected request: {method} {url}")
        route = self.routes[url]
        if isinstance(route, Exception):
            raise route
        if isinstance(route, ResponseData):
            return route
        return ResponseData(
            status=200,
            headers={"content-type": "application/vnd.siren+json"},
            body=route,
        )

    def urls(self):
        return [c["url"] for c in self.calls]


@pytest.fixture
def cache():
    return Cache()


@pytest.fixture
def root_state():
    return NavState(API)


@pytest.fixture
def root_doc():
    """Entry point with every kind of match for 'item'."""
    return {
        "class": ["root"],
        "properties": {"name": "api"},
        "entities": [
            {"rel": ["item"], "href": "/items/1"},
            {
                "rel": ["item"],
                "properties": {"id": 2},
                "links": [{"rel": ["self"], "href": "/items/2"}],
            },
            {"rel": ["item"], "properties": {"id": 3}},
            {"rel": ["other"], "href": "/other"},
        ],
        "links": [
            {"rel": ["self"], "href": "/"},
            {"rel": ["item", "featured"], "href": "https://cdn.example.com/items/4"},
            {"rel": ["orders"], "href": "orders"},
            {"rel": ["search"], "href": "/search{?q}"},
        ],
        "actions": [
            {
                "name": "create-order",
                "href": "/orders",
                "method": "POST",
                "fields": [{"name": "sku", "type": "text"}],
            },
            {
                "name": "create-order-json",
                "href": "/orders",
                "method": "POST",
                "type": "application/json",
            },
            {"name": "find", "href": "/search"},
        ],
    }


@pytest.fixture
def orders_doc():
    return {
        "class": ["orders"],
        "links": [
            {"rel": ["self"], "href": "/orders"},
            {"rel": ["latest"], "href": "/orders/42"},
        ],
    }


@pytest.fixture
def order_doc():
    return {
        "class": ["order"],
        "properties": {"id": 42, "total": 9.5},
        "links": [{"rel": ["self"], "href": "/orders/42"}],
    }


@pytest.fixture
def fake_client(root_doc, orders_doc, order_doc):
    return FakeClient({
        API: root_doc,
        API + "orders": orders_doc,
        API + "orders/42": order_doc,
    })


@pytest.fixture
def make_client():
    """Factory for FakeClient with custom routes."""
    return FakeClient
