"""
Core layer - state, cache, Siren model and transport.

Components:
- state: NavState and RequestConfig value objects
- cache: URL-keyed response cache
- models: Siren entity dataclasses, ResponseData
- http_client: httpx-based transport
- urls: URL resolution, template expansion, body encoding
- errors: navigation error taxonomy
"""

from .errors import (
    SirenNavError,
    RelativeURLError,
    NoMatchError,
    AmbiguousMatchError,
    MissingHeaderError,
    ConfigError,
    TransportError,
)
from .models import (
    Action,
    EmbeddedLink,
    EmbeddedRepresentation,
    Entity,
    Field,
    Link,
    ResponseData,
    parse_siren,
)
from .state import NavState, RequestConfig
from .cache import Cache
from .http_client import HttpClient
from .urls import normalize_url, formulate_data

__all__ = [
    "SirenNavError",
    "RelativeURLError",
    "NoMatchError",
    "AmbiguousMatchError",
    "MissingHeaderError",
    "ConfigError",
    "TransportError",
    "Action",
    "EmbeddedLink",
    "EmbeddedRepresentation",
    "Entity",
    "Field",
    "Link",
    "ResponseData",
    "parse_siren",
    "NavState",
    "RequestConfig",
    "Cache",
    "HttpClient",
    "normalize_url",
    "formulate_data",
]
