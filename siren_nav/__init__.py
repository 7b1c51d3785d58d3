"""
siren-nav - relation-driven navigation of Siren hypermedia APIs.

Architecture:
- core/: State, cache, Siren model, HTTP transport
- navigation/: Steps, link resolution, reducers
- navigator: Fluent SirenNav API
- config/: YAML navigation profiles
"""

__version__ = "0.1.0"

from .core import (
    AmbiguousMatchError,
    Cache,
    Entity,
    HttpClient,
    MissingHeaderError,
    NavState,
    NoMatchError,
    RelativeURLError,
    RequestConfig,
    SirenNavError,
    TransportError,
)
from .navigator import NavResponse, SirenNav, SirenNavEach

__all__ = [
    "__version__",
    "AmbiguousMatchError",
    "Cache",
    "Entity",
    "HttpClient",
    "MissingHeaderError",
    "NavState",
    "NoMatchError",
    "RelativeURLError",
    "RequestConfig",
    "SirenNavError",
    "TransportError",
    "NavResponse",
    "SirenNav",
    "SirenNavEach",
]
