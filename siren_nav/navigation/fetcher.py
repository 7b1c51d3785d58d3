"""
Document retrieval for a navigation state.
"""

from typing import Any, Optional

import structlog

from siren_nav.core.cache import Cache
from siren_nav.core.http_client import HttpClient
from siren_nav.core.models import Entity, ResponseData, parse_siren
from siren_nav.core.state import NavState

logger = structlog.get_logger(__name__)


async def get_request(
    state: NavState,
    client: Optional[HttpClient] = None,
    method: str = "GET",
    **kwargs: Any,
) -> ResponseData:
    """
    Issue a request for the state's URL with the state's config.

    Opens a short-lived HttpClient when none is given.
    """
    if client is None:
        async with HttpClient() as own_client:
            return await own_client.request(method, state.cur, state.config, **kwargs)
    return await client.request(method, state.cur, state.config, **kwargs)


async def get_payload(
    state: NavState,
    cache: Cache,
    client: Optional[HttpClient] = None,
) -> Any:
    """
    Return the payload for state.cur, fetching at most once per cache.

    Lookup order: the state's own last_response, the cache, the network.
    """
    if state.last_response is not None:
        return state.last_response

    if state.cur in cache:
        logger.debug("cache_hit", url=state.cur)
        return cache.get_or(state.cur)

    logger.debug("fetching_document", url=state.cur)
    response = await get_request(state, client)
    cache.set(state.cur, response.body)
    return response.body


async def get_siren(
    state: NavState,
    cache: Cache,
    client: Optional[HttpClient] = None,
) -> Entity:
    """Fetch (or reuse) the document at state.cur and parse it as Siren."""
    payload = await get_payload(state, cache, client)
    return parse_siren(payload)
