"""
Navigation steps.

A step is an async callable taking the current NavState and the shared
Cache and returning the next NavState. A multi-step returns a list of
states instead and is what fan-out waves are made of. Steps only see
the state and cache they are given plus the HTTP client they were
built with.
"""

from typing import Any, Awaitable, Callable, Mapping, Optional

import structlog

from siren_nav.core.cache import Cache
from siren_nav.core.errors import AmbiguousMatchError, MissingHeaderError, NoMatchError
from siren_nav.core.http_client import HttpClient
from siren_nav.core.models import ResponseData
from siren_nav.core.state import NavState
from siren_nav.core.urls import normalize_url

from .fetcher import get_request, get_siren
from .resolver import find_possible

logger = structlog.get_logger(__name__)

Step = Callable[[NavState, Cache], Awaitable[NavState]]
MultiStep = Callable[[NavState, Cache], Awaitable[list[NavState]]]
Disambiguator = Callable[[list[NavState]], NavState]

Parameters = Optional[Mapping[str, Any]]


def header(key: str, value: str) -> Step:
    """Set one request header."""

    async def step(state: NavState, cache: Cache) -> NavState:
        config = state.config.with_header(key, value)
        logger.debug("header_set", key=key, value=value)
        return state.with_config(config, cache.get_or(state.cur))

    return step


def accept(content_type: str) -> Step:
    """
    Set the Accept header.

    An existing value is kept after the new one, so repeated calls
    build a preference list: accept(a) then accept(b) gives "b, a".
    """

    async def step(state: NavState, cache: Cache) -> NavState:
        current = state.config.headers.get("Accept")
        value = f"{content_type}, {current}" if current else content_type
        logger.debug("accept_set", previous=current, value=value)
        return state.with_config(
            state.config.with_header("Accept", value),
            cache.get_or(state.cur),
        )

    return step


def content_type(ctype: str) -> Step:
    return header("Content-Type", ctype)


def auth(scheme: str, token: str) -> Step:
    return header("Authorization", f"{scheme} {token}")


def follow(
    rel: str,
    parameters: Parameters = None,
    which: Optional[Disambiguator] = None,
    *,
    client: Optional[HttpClient] = None,
) -> Step:
    """
    Follow a relation that must resolve to a single resource.

    Args:
        rel: Relation name
        parameters: URI template variables for the matched href
        which: Chooses one state when several match
        client: HTTP client used to fetch the current document

    Raises:
        NoMatchError: Nothing matched
        AmbiguousMatchError: Several matched and which is None
    """

    async def step(state: NavState, cache: Cache) -> NavState:
        siren = await get_siren(state, cache, client)
        possible = find_possible(rel, siren, state, cache, parameters)

        if not possible:
            logger.error("relation_not_found", rel=rel, url=state.cur)
            raise NoMatchError(rel)

        if len(possible) > 1:
            if which is None:
                logger.error(
                    "relation_ambiguous",
                    rel=rel,
                    url=state.cur,
                    candidates=[p.cur for p in possible],
                )
                raise AmbiguousMatchError(rel, possible)
            chosen = which(possible)
            logger.debug("relation_disambiguated", rel=rel, chosen=chosen.cur)
            return chosen

        logger.debug("relation_followed", rel=rel, url=possible[0].cur)
        return possible[0]

    return step


def follow_each(
    rel: str,
    parameters: Parameters = None,
    *,
    client: Optional[HttpClient] = None,
) -> MultiStep:
    """Follow every resource a relation resolves to."""

    async def step(state: NavState, cache: Cache) -> list[NavState]:
        siren = await get_siren(state, cache, client)
        possible = find_possible(rel, siren, state, cache, parameters)
        logger.debug("relation_fan_out", rel=rel, url=state.cur, count=len(possible))
        return possible

    return step


def _location_state(state: NavState, response: ResponseData, cache: Cache) -> NavState:
    location = response.header("Location")
    if not location:
        logger.error(
            "location_header_missing",
            url=state.cur,
            headers=list(response.headers),
        )
        raise MissingHeaderError("Location", response.headers.keys())

    logger.debug("location_header", location=location)
    url = normalize_url(location, response.url or state.root)
    return state.moved_to(url, cache.get_or(url))


def follow_location(*, client: Optional[HttpClient] = None) -> Step:
    """Request the current URL and move to its Location header."""

    async def step(state: NavState, cache: Cache) -> NavState:
        logger.debug("following_location", url=state.cur)
        response = await get_request(state, client, follow_redirects=False)
        return _location_state(state, response, cache)

    return step


def location_of(response: ResponseData) -> Step:
    """Move to the Location header of an already received response."""

    async def step(state: NavState, cache: Cache) -> NavState:
        return _location_state(state, response, cache)

    return step


def to_multi(step: Step) -> MultiStep:
    """Lift a step into a multi-step yielding exactly one state."""

    async def multi(state: NavState, cache: Cache) -> list[NavState]:
        return [await step(state, cache)]

    return multi
