"""
Navigation layer - steps and their evaluation.

Components:
- steps: step constructors (header, accept, follow, follow_each, ...)
- resolver: candidate states for a relation
- fetcher: cache-aware document retrieval
- reducer: sequential and wave-based evaluation
"""

from .steps import (
    Step,
    MultiStep,
    header,
    accept,
    content_type,
    auth,
    follow,
    follow_each,
    follow_location,
    location_of,
    to_multi,
)
from .resolver import find_possible
from .fetcher import get_request, get_payload, get_siren
from .reducer import reduce, reduce_each

__all__ = [
    "Step",
    "MultiStep",
    "header",
    "accept",
    "content_type",
    "auth",
    "follow",
    "follow_each",
    "follow_location",
    "location_of",
    "to_multi",
    "find_possible",
    "get_request",
    "get_payload",
    "get_siren",
    "reduce",
    "reduce_each",
]
