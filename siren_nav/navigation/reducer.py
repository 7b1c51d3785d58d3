"""
Step reduction.

A chained navigation is only a description; these functions evaluate
it. `reduce` threads one state through a list of steps. `reduce_each`
starts from a set of states and applies multi-steps in waves: every
state of the working set goes through the wave's step, the successors
are concatenated in input order, and only then does the next wave start.
"""

import asyncio
from typing import Iterable, Sequence

import structlog

from siren_nav.core.cache import Cache
from siren_nav.core.state import NavState

from .steps import MultiStep, Step

logger = structlog.get_logger(__name__)


async def reduce(state: NavState, steps: Iterable[Step], cache: Cache) -> NavState:
    """
    Apply steps left to right and return the final state.

    Each step starts only after the previous one produced its state.
    The first failure propagates and the remaining steps never run.
    """
    for index, step in enumerate(steps):
        logger.debug("applying_step", index=index, url=state.cur)
        state = await step(state, cache)
    return state


async def _apply_wave(step: MultiStep, states: Sequence[NavState], cache: Cache) -> list[NavState]:
    tasks = [asyncio.ensure_future(step(state, cache)) for state in states]
    try:
        results = await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    successors: list[NavState] = []
    for result in results:
        successors.extend(result)
    return successors


async def reduce_each(
    states: Iterable[NavState],
    waves: Iterable[MultiStep],
    cache: Cache,
) -> list[NavState]:
    """
    Apply multi-steps in waves over a working set of states.

    Args:
        states: Initial working set
        waves: One multi-step per wave
        cache: Shared response cache

    Returns:
        Working set after the last wave
    """
    current = list(states)
    for index, step in enumerate(waves):
        logger.debug("applying_wave", index=index, states=len(current))
        current = await _apply_wave(step, current, cache)
    return current
