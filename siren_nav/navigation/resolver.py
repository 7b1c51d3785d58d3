"""
Link resolution: every state a relation can lead to from a document.
"""

from typing import Any, Mapping, Optional

import structlog

from siren_nav.core.cache import Cache
from siren_nav.core.models import EmbeddedLink, EmbeddedRepresentation, Entity
from siren_nav.core.state import NavState

logger = structlog.get_logger(__name__)


def _candidate(
    href: str,
    state: NavState,
    cache: Cache,
    parameters: Optional[Mapping[str, Any]],
) -> NavState:
    url = state.rebase(href, parameters)
    return state.moved_to(url, cache.get_or(url))


def find_possible(
    rel: str,
    siren: Entity,
    state: NavState,
    cache: Cache,
    parameters: Optional[Mapping[str, Any]] = None,
) -> list[NavState]:
    """
    Enumerate candidate states for a relation.

    Candidates come in three groups, each in document order:
    1. embedded links (sub-entities with an href)
    2. embedded representations, through their self link; a
       representation without one yields no candidate
    3. top-level links

    Args:
        rel: Relation name
        siren: Parsed document at state.cur
        state: Current state (base URL and config)
        cache: Cache consulted for already fetched payloads
        parameters: URI template variables for the hrefs

    Returns:
        Unfetched candidate states, possibly empty
    """
    logger.debug("resolving_relation", rel=rel, url=state.cur)

    embedded_links: list[NavState] = []
    representations: list[NavState] = []

    for entity in siren.entities:
        if rel not in entity.rel:
            continue

        if isinstance(entity, EmbeddedLink):
            logger.debug("match_embedded_link", rel=rel, href=entity.href)
            embedded_links.append(_candidate(entity.href, state, cache, parameters))
        elif isinstance(entity, EmbeddedRepresentation):
            self_href = entity.get_self()
            if self_href is None:
                logger.debug("skip_representation_without_self", rel=rel)
                continue
            logger.debug("match_embedded_representation", rel=rel, href=self_href)
            representations.append(_candidate(self_href, state, cache, parameters))

    links: list[NavState] = []
    for link in siren.links:
        if rel not in link.rel:
            continue
        logger.debug("match_link", rel=rel, href=link.href)
        links.append(_candidate(link.href, state, cache, parameters))

    return embedded_links + representations + links
