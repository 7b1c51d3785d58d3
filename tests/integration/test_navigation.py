"""Integration tests: SirenNav over HttpClient with an in-memory httpx transport."""

import json
from urllib.parse import parse_qs

import httpx
import pytest

from siren_nav.core.cache import Cache
from siren_nav.core.errors import AmbiguousMatchError, NoMatchError
from siren_nav.core.http_client import HttpClient
from siren_nav.navigator import NavResponse, SirenNav

API = "https://api.example.com/"
SIREN = "application/vnd.siren+json"


class FakeApi:
    """In-memory Siren API recording every request it receives."""

    def __init__(self, documents):
        self.documents = documents
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "POST" and path == "/orders":
            return httpx.Response(201, headers={"Location": "/orders/42"})
        if path == "/redirect":
            return httpx.Response(303, headers={"Location": "/orders"})
        if path not in self.documents:
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(
            200,
            headers={"Content-Type": SIREN},
            content=json.dumps(self.documents[path]).encode(),
        )

    def paths(self):
        return [(r.method, r.url.path) for r in self.requests]


@pytest.fixture
def api(root_doc, orders_doc, order_doc):
    orders_doc = dict(orders_doc, entities=[
        {"rel": ["item"], "href": "/orders/42"},
        {"rel": ["item"], "href": "/orders/43"},
    ])
    return FakeApi({
        "/": root_doc,
        "/orders": orders_doc,
        "/orders/42": order_doc,
        "/orders/43": {
            "class": ["order"],
            "properties": {"id": 43, "total": 1.0},
            "links": [{"rel": ["self"], "href": "/orders/43"}],
        },
        "/search": {"properties": {"results": []}},
    })


def api_client(api):
    return HttpClient(transport=httpx.MockTransport(api.handler), max_retries=1)


class TestSirenNav:
    """End-to-end navigation tests."""

    @pytest.mark.asyncio
    async def test_follow_chain(self, api):
        async with api_client(api) as client:
            nav = SirenNav.create(API, client=client)
            order = await nav.follow("orders").follow("latest").as_siren()

        assert order.properties == {"id": 42, "total": 9.5}
        assert api.paths() == [("GET", "/"), ("GET", "/orders"), ("GET", "/orders/42")]

    @pytest.mark.asyncio
    async def test_headers_sent(self, api):
        """Test that header steps reach the wire for later fetches."""
        async with api_client(api) as client:
            nav = (
                SirenNav.create(API, client=client)
                .auth("Bearer", "t0k")
                .accept("application/json")
                .accept(SIREN)
                .follow("orders")
            )
            await nav.as_siren()

        last = api.requests[-1]
        assert last.headers["Authorization"] == "Bearer t0k"
        assert last.headers["Accept"] == f"{SIREN}, application/json"

    @pytest.mark.asyncio
    async def test_chaining_is_immutable(self, api):
        async with api_client(api) as client:
            base = SirenNav.create(API, client=client)
            orders = base.follow("orders")

            assert base.steps == ()
            assert len(orders.steps) == 1
            assert (await base.evaluate()).cur == API

    @pytest.mark.asyncio
    async def test_repeat_navigation_uses_cache(self, api):
        """Test that re-evaluating a navigation fetches nothing new."""
        async with api_client(api) as client:
            nav = SirenNav.create(API, client=client).follow("orders").follow("latest")
            await nav.as_siren()
            await nav.as_siren()

        assert len(api.requests) == 3

    @pytest.mark.asyncio
    async def test_shared_cache_across_navigations(self, api):
        cache = Cache()
        async with api_client(api) as client:
            await SirenNav.create(API, client=client, cache=cache).follow("orders").as_siren()
            await SirenNav.create(API, client=client, cache=cache).follow("orders").as_siren()

        assert api.paths() == [("GET", "/"), ("GET", "/orders")]

    @pytest.mark.asyncio
    async def test_ambiguous_and_disambiguated(self, api):
        async with api_client(api) as client:
            nav = SirenNav.create(API, client=client).follow("orders")

            with pytest.raises(AmbiguousMatchError) as exc_info:
                await nav.follow("item").evaluate()
            picked = await nav.follow("item", which=lambda states: states[1]).as_siren()

        assert len(exc_info.value.candidates) == 2
        assert picked.properties["id"] == 43

    @pytest.mark.asyncio
    async def test_no_match(self, api):
        async with api_client(api) as client:
            with pytest.raises(NoMatchError):
                await SirenNav.create(API, client=client).follow("nope").evaluate()

    @pytest.mark.asyncio
    async def test_http_error_propagates(self, api):
        """Test that 4xx responses surface as httpx errors."""
        api.documents["/"]["links"].append({"rel": ["broken"], "href": "/missing"})
        async with api_client(api) as client:
            with pytest.raises(httpx.HTTPStatusError) as exc_info:
                await SirenNav.create(API, client=client).follow("broken").as_siren()

        assert exc_info.value.response.status_code == 404

    @pytest.mark.asyncio
    async def test_follow_each(self, api):
        async with api_client(api) as client:
            each = SirenNav.create(API, client=client).follow("orders").follow_each("item")
            entities = await each.as_siren()

        assert [e.properties["id"] for e in entities] == [42, 43]

    @pytest.mark.asyncio
    async def test_follow_each_then_follow(self, api):
        """Test lifting a single step into a wave."""
        async with api_client(api) as client:
            each = (
                SirenNav.create(API, client=client)
                .follow("orders")
                .follow_each("item")
                .follow("self")
            )
            states = await each.states()

        assert [s.cur for s in states] == [API + "orders/42", API + "orders/43"]

    @pytest.mark.asyncio
    async def test_follow_location_redirect(self, api):
        """Test that follow_location reads a redirect without following it."""
        api.documents["/"]["links"].append({"rel": ["jump"], "href": "/redirect"})
        async with api_client(api) as client:
            state = await SirenNav.create(API, client=client).follow("jump").follow_location().evaluate()

        assert state.cur == API + "orders"


class TestActions:
    """Tests for perform and NavResponse."""

    @pytest.mark.asyncio
    async def test_form_action(self, api):
        """Test that untyped actions are sent form-encoded."""
        async with api_client(api) as client:
            response = await SirenNav.create(API, client=client).perform("create-order", {"sku": "A 1"})

        request = api.requests[-1]
        assert response.status == 201
        assert request.method == "POST"
        assert request.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert parse_qs(request.content.decode()) == {"sku": ["A 1"]}

    @pytest.mark.asyncio
    async def test_json_action(self, api):
        async with api_client(api) as client:
            await SirenNav.create(API, client=client).perform("create-order-json", {"sku": "A1"})

        request = api.requests[-1]
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {"sku": "A1"}

    @pytest.mark.asyncio
    async def test_get_action_uses_query(self, api):
        async with api_client(api) as client:
            response = await SirenNav.create(API, client=client).perform("find", {"q": "red"})

        assert api.requests[-1].url.params["q"] == "red"
        assert response.as_siren().properties == {"results": []}

    @pytest.mark.asyncio
    async def test_missing_action(self, api):
        async with api_client(api) as client:
            with pytest.raises(NoMatchError) as exc_info:
                await SirenNav.create(API, client=client).perform("delete-everything")

        assert exc_info.value.kind == "actions"

    @pytest.mark.asyncio
    async def test_response_follow_location(self, api):
        """Test continuing from the Location of a created resource."""
        async with api_client(api) as client:
            nav = SirenNav.create(API, client=client)
            response = await nav.perform("create-order", {"sku": "A1"})
            order = await response.follow_location().as_siren()

        assert order.properties["id"] == 42

    @pytest.mark.asyncio
    async def test_get_returns_response(self, api):
        async with api_client(api) as client:
            response = await SirenNav.create(API, client=client).follow("orders").get()

        assert isinstance(response, NavResponse)
        assert response.status == 200
        assert response.as_siren().get_self() == "/orders"

    def test_from_value(self):
        nav = SirenNav.create(API)

        response = NavResponse.from_value({"properties": {"a": 1}}, nav)

        assert response.status == 200
        assert response.as_siren().properties == {"a": 1}
