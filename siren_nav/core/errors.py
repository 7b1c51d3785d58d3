"""
Error taxonomy for Siren navigation.

Every navigation failure aborts the whole reduction, so these are
plain exceptions raised at the point of detection and never wrapped.
Transport failures are httpx errors and pass through untouched;
TransportError is exported only as a convenient name to catch them.
"""

from typing import Iterable

import httpx

TransportError = httpx.HTTPError


class SirenNavError(Exception):
    """Base class for navigation errors."""


class RelativeURLError(SirenNavError, ValueError):
    """A URL that must be absolute resolved to a relative one."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Normalized URL is relative: {url}")


class NoMatchError(SirenNavError, LookupError):
    """No link, sub-entity or action matched the requested name."""

    def __init__(self, rel: str, kind: str = "links"):
        self.rel = rel
        self.kind = kind
        super().__init__(
            f"Cannot follow relation '{rel}', no {kind} with that relation"
        )


class AmbiguousMatchError(SirenNavError, LookupError):
    """Several candidates matched and no disambiguator was given."""

    def __init__(self, rel: str, candidates: list):
        self.rel = rel
        self.candidates = list(candidates)
        urls = ", ".join(c.cur for c in self.candidates)
        super().__init__(
            f"Multiple links with relation '{rel}' found when only one "
            f"was expected: {urls}"
        )


class MissingHeaderError(SirenNavError, KeyError):
    """An expected response header was absent."""

    def __init__(self, header: str, present: Iterable[str]):
        self.header = header
        self.present = sorted(present)
        super().__init__(
            f"No '{header}' header found in '{', '.join(self.present)}'"
        )

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]


class ConfigError(SirenNavError, ValueError):
    """Invalid navigation profile."""
