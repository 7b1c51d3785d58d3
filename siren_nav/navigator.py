"""
Fluent navigation API.

A SirenNav is an immutable description of a navigation: a start state
and the steps to apply to it. Chaining methods return a new SirenNav;
nothing touches the network until a terminal method (evaluate,
as_siren, get, perform) is awaited.

    nav = SirenNav.create("https://api.example.com/", client=client)
    order = await nav.accept(SIREN_MEDIA_TYPE).follow("orders").follow("latest").as_siren()
"""

import asyncio
from typing import Any, Mapping, Optional

import structlog

from siren_nav.core.cache import Cache
from siren_nav.core.errors import NoMatchError
from siren_nav.core.http_client import HttpClient
from siren_nav.core.models import Entity, ResponseData, parse_siren
from siren_nav.core.state import NavState, RequestConfig
from siren_nav.core.urls import FORM_URLENCODED, formulate_data
from siren_nav.navigation import steps as nav_steps
from siren_nav.navigation.fetcher import get_request, get_siren
from siren_nav.navigation.reducer import reduce, reduce_each
from siren_nav.navigation.steps import Disambiguator, MultiStep, Parameters, Step

logger = structlog.get_logger(__name__)


class SirenNav:
    """
    Chainable navigation over a Siren API.

    The cache and HTTP client are shared by every SirenNav derived
    from the same create() call.
    """

    def __init__(
        self,
        start: NavState,
        steps: tuple = (),
        *,
        client: Optional[HttpClient] = None,
        cache: Optional[Cache] = None,
    ):
        self._start = start
        self._steps: tuple = tuple(steps)
        self._client = client
        self._cache = cache if cache is not None else Cache()

    @classmethod
    def create(
        cls,
        url: str,
        config: Optional[RequestConfig] = None,
        *,
        client: Optional[HttpClient] = None,
        cache: Optional[Cache] = None,
    ) -> "SirenNav":
        """
        Start a navigation at an absolute URL.

        Args:
            url: Absolute entry point URL
            config: Initial request configuration
            client: HTTP client (a short-lived one per request if None)
            cache: Response cache to reuse across navigations

        Raises:
            RelativeURLError: If url is relative
        """
        start = NavState(url, config=config or RequestConfig())
        return cls(start, client=client, cache=cache)

    @property
    def cache(self) -> Cache:
        return self._cache

    @property
    def client(self) -> Optional[HttpClient]:
        return self._client

    @property
    def steps(self) -> tuple:
        return self._steps

    def do(self, step: Step) -> "SirenNav":
        """Append an arbitrary step."""
        return SirenNav(self._start, self._steps + (step,), client=self._client, cache=self._cache)

    def header(self, key: str, value: str) -> "SirenNav":
        return self.do(nav_steps.header(key, value))

    def accept(self, ctype: str) -> "SirenNav":
        return self.do(nav_steps.accept(ctype))

    def content_type(self, ctype: str) -> "SirenNav":
        return self.do(nav_steps.content_type(ctype))

    def auth(self, scheme: str, token: str) -> "SirenNav":
        return self.do(nav_steps.auth(scheme, token))

    def follow(
        self,
        rel: str,
        parameters: Parameters = None,
        which: Optional[Disambiguator] = None,
    ) -> "SirenNav":
        return self.do(nav_steps.follow(rel, parameters, which, client=self._client))

    def follow_location(self) -> "SirenNav":
        return self.do(nav_steps.follow_location(client=self._client))

    def follow_each(self, rel: str, parameters: Parameters = None) -> "SirenNavEach":
        """Fan out to every resource the relation resolves to."""
        return SirenNavEach(self, (nav_steps.follow_each(rel, parameters, client=self._client),))

    async def evaluate(self) -> NavState:
        """Run all steps and return the final state."""
        return await reduce(self._start, self._steps, self._cache)

    async def as_siren(self) -> Entity:
        """Final resource parsed as Siren (fetched at most once per cache)."""
        state = await self.evaluate()
        return await get_siren(state, self._cache, self._client)

    async def get(self) -> "NavResponse":
        """GET the final resource, bypassing the cache for the read."""
        state = await self.evaluate()
        response = await get_request(state, self._client)
        self._cache.set(state.cur, response.body)
        return NavResponse(response, self)

    async def perform(self, name: str, body: Any = None) -> "NavResponse":
        """
        Submit an action of the final resource.

        Args:
            name: Action name
            body: Field values; encoded per the action's declared type

        Raises:
            NoMatchError: The document has no action with that name
        """
        state = await self.evaluate()
        siren = await get_siren(state, self._cache, self._client)

        action = siren.get_action(name)
        if action is None:
            logger.error("action_not_found", action=name, url=state.cur)
            raise NoMatchError(name, kind="actions")

        url = state.rebase(action.href)
        config = state.config
        kwargs: dict[str, Any] = {}

        data = formulate_data(action, body)
        if body is None:
            pass
        elif action.method == "GET" and isinstance(body, Mapping):
            kwargs["params"] = dict(body)
        elif isinstance(data, str):
            kwargs["content"] = data
            config = config.with_header("Content-Type", action.type or FORM_URLENCODED)
        else:
            kwargs["json"] = data
            if action.type:
                config = config.with_header("Content-Type", action.type)

        logger.info("performing_action", action=name, method=action.method, url=url)

        target = state.moved_to(url).with_config(config)
        response = await get_request(target, self._client, method=action.method, **kwargs)
        return NavResponse(response, self)


class SirenNavEach:
    """
    Navigation fanned out over several resources.

    Every method adds a wave; single-result steps are lifted so each
    state in the working set yields exactly one successor.
    """

    def __init__(self, base: SirenNav, waves: tuple = ()):
        self._base = base
        self._waves: tuple = tuple(waves)

    @property
    def waves(self) -> tuple:
        return self._waves

    def do(self, step: MultiStep) -> "SirenNavEach":
        return SirenNavEach(self._base, self._waves + (step,))

    def _lift(self, step: Step) -> "SirenNavEach":
        return self.do(nav_steps.to_multi(step))

    def header(self, key: str, value: str) -> "SirenNavEach":
        return self._lift(nav_steps.header(key, value))

    def accept(self, ctype: str) -> "SirenNavEach":
        return self._lift(nav_steps.accept(ctype))

    def content_type(self, ctype: str) -> "SirenNavEach":
        return self._lift(nav_steps.content_type(ctype))

    def auth(self, scheme: str, token: str) -> "SirenNavEach":
        return self._lift(nav_steps.auth(scheme, token))

    def follow(
        self,
        rel: str,
        parameters: Parameters = None,
        which: Optional[Disambiguator] = None,
    ) -> "SirenNavEach":
        return self._lift(nav_steps.follow(rel, parameters, which, client=self._base.client))

    def follow_location(self) -> "SirenNavEach":
        return self._lift(nav_steps.follow_location(client=self._base.client))

    def follow_each(self, rel: str, parameters: Parameters = None) -> "SirenNavEach":
        return self.do(nav_steps.follow_each(rel, parameters, client=self._base.client))

    async def states(self) -> list[NavState]:
        """Evaluate the base navigation, then every wave."""
        start = await self._base.evaluate()
        return await reduce_each([start], self._waves, self._base.cache)

    async def as_siren(self) -> list[Entity]:
        """Every final resource parsed as Siren, in wave order."""
        states = await self.states()
        return list(
            await asyncio.gather(
                *(get_siren(s, self._base.cache, self._base.client) for s in states)
            )
        )


class NavResponse:
    """
    Response of a terminal request, still attached to its navigation.
    """

    def __init__(self, response: ResponseData, nav: SirenNav):
        self.response = response
        self.nav = nav

    @classmethod
    def from_value(cls, value: Any, nav: SirenNav) -> "NavResponse":
        """Wrap an already known payload as a 200 response."""
        return cls(ResponseData(status=200, headers={}, body=value), nav)

    @property
    def status(self) -> int:
        return self.response.status

    @property
    def headers(self) -> dict:
        return self.response.headers

    @property
    def body(self) -> Any:
        return self.response.body

    def as_siren(self) -> Entity:
        return parse_siren(self.response.body)

    def follow_location(self) -> SirenNav:
        """Continue the navigation at this response's Location header."""
        return self.nav.do(nav_steps.location_of(self.response))
