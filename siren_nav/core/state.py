"""
Immutable navigation state.

A NavState says where a navigation currently is: the absolute URL of
the resource, the request configuration to use for it, and the payload
already fetched for it (if any). Steps never modify a state; they build
a new one.
"""

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .errors import RelativeURLError
from .urls import is_absolute, normalize_url


@dataclass(frozen=True)
class RequestConfig:
    """Per-request transport options."""
    headers: Mapping[str, str] = field(default_factory=dict)
    params: Mapping[str, Any] = field(default_factory=dict)
    timeout: Optional[float] = None

    def __post_init__(self):
        # Read-only views over private copies, so a config never shares
        # a mutable header dict with its creator or another state.
        object.__setattr__(self, "headers", MappingProxyType(dict(self.headers)))
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    def with_header(self, key: str, value: str) -> "RequestConfig":
        """Return a copy with one header set."""
        headers = dict(self.headers)
        headers[key] = value
        return replace(self, headers=headers)

    def to_httpx(self) -> dict:
        """Keyword arguments for httpx.AsyncClient.request."""
        kwargs: dict[str, Any] = {"headers": dict(self.headers)}
        if self.params:
            kwargs["params"] = dict(self.params)
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        return kwargs


@dataclass(frozen=True)
class NavState:
    """
    Snapshot of a navigation position.

    Attributes:
        cur: Absolute URL of the current resource
        root: Base URL for relative references found at cur (defaults to cur)
        config: Request configuration
        last_response: Payload already fetched for cur, or None
    """
    cur: str
    root: Optional[str] = None
    config: RequestConfig = field(default_factory=RequestConfig)
    last_response: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if not is_absolute(self.cur):
            raise RelativeURLError(self.cur)
        if self.root is None:
            object.__setattr__(self, "root", self.cur)
        elif not is_absolute(self.root):
            raise RelativeURLError(self.root)

    def rebase(self, href: str, parameters: Optional[Mapping[str, Any]] = None) -> str:
        """Resolve href (optionally a URI template) against root."""
        return normalize_url(href, self.root, parameters)

    def with_config(self, config: RequestConfig, last_response: Any = None) -> "NavState":
        """Same position, new configuration."""
        return NavState(self.cur, self.root, config, last_response)

    def moved_to(self, url: str, last_response: Any = None) -> "NavState":
        """New position; its own URL becomes the base for what it references."""
        return NavState(url, url, self.config, last_response)
