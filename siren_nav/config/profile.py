"""
Navigation profiles: a declarative navigation (entry URL, headers,
steps) that can be loaded from YAML or built from the command line.
"""

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from siren_nav.core.cache import Cache
from siren_nav.core.errors import ConfigError
from siren_nav.core.http_client import HttpClient
from siren_nav.core.state import RequestConfig
from siren_nav.navigator import SirenNav, SirenNavEach

STEP_KINDS = {
    "follow",
    "follow_each",
    "follow_location",
    "header",
    "accept",
    "content_type",
    "auth",
}


@dataclass
class StepSpec:
    """One declarative navigation step."""
    kind: str
    value: Any = None
    parameters: Optional[dict] = None
    pick: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Union[dict, str]) -> list["StepSpec"]:
        """
        Parse a YAML step entry.

        A header mapping with several keys expands into several steps,
        hence the list.
        """
        if isinstance(data, str):
            data = {data: True}
        if not isinstance(data, dict):
            raise ConfigError(f"Step must be a mapping, got: {data!r}")

        kinds = [k for k in data if k in STEP_KINDS]
        extra = set(data) - STEP_KINDS - {"parameters", "pick"}
        if len(kinds) != 1 or extra:
            raise ConfigError(f"Step must have exactly one of {sorted(STEP_KINDS)}: {data!r}")

        kind = kinds[0]
        value = data[kind]

        if kind == "header":
            if not isinstance(value, dict) or not value:
                raise ConfigError(f"'header' step needs a mapping of names to values: {data!r}")
            return [cls("header", (str(k), str(v))) for k, v in value.items()]

        if kind == "auth":
            scheme, _, token = str(value).partition(" ")
            if not token:
                raise ConfigError(f"'auth' step needs 'SCHEME TOKEN': {data!r}")
            return [cls("auth", (scheme, token))]

        if kind != "follow_location" and not value:
            raise ConfigError(f"'{kind}' step needs a value: {data!r}")

        pick = data.get("pick")
        if pick is not None and kind != "follow":
            raise ConfigError(f"'pick' is only valid for 'follow': {data!r}")

        return [cls(kind, value, data.get("parameters"), pick)]


@dataclass
class NavigationProfile:
    """A named navigation."""
    name: str
    url: str
    headers: dict = field(default_factory=dict)
    timeout: Optional[float] = None
    steps: list[StepSpec] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "NavigationProfile":
        """Create from dictionary (e.g., from YAML)."""
        for required in ("name", "url"):
            if required not in data:
                raise ConfigError(f"Missing required field: {required}")

        steps: list[StepSpec] = []
        for entry in data.get("steps") or []:
            steps.extend(StepSpec.from_dict(entry))

        return cls(
            name=data["name"],
            url=data["url"],
            headers={str(k): str(v) for k, v in (data.get("headers") or {}).items()},
            timeout=data.get("timeout"),
            steps=steps,
        )

    def request_config(self) -> RequestConfig:
        return RequestConfig(headers=self.headers, timeout=self.timeout)


def pick_index(index: int):
    """Disambiguator choosing the candidate at index."""

    def which(states):
        return states[index]

    return which


def apply_step(nav: Union[SirenNav, SirenNavEach], spec: StepSpec) -> Union[SirenNav, SirenNavEach]:
    """Append one declarative step to a navigation."""
    if spec.kind == "follow":
        which = pick_index(spec.pick) if spec.pick is not None else None
        return nav.follow(spec.value, spec.parameters, which)
    if spec.kind == "follow_each":
        return nav.follow_each(spec.value, spec.parameters)
    if spec.kind == "follow_location":
        return nav.follow_location()
    if spec.kind == "header":
        return nav.header(*spec.value)
    if spec.kind == "accept":
        return nav.accept(spec.value)
    if spec.kind == "content_type":
        return nav.content_type(spec.value)
    if spec.kind == "auth":
        return nav.auth(*spec.value)
    raise ConfigError(f"Unknown step kind: {spec.kind}")


def build_navigation(
    profile: NavigationProfile,
    client: Optional[HttpClient] = None,
    cache: Optional[Cache] = None,
) -> Union[SirenNav, SirenNavEach]:
    """Turn a profile into a ready-to-evaluate navigation."""
    nav: Union[SirenNav, SirenNavEach] = SirenNav.create(
        profile.url,
        profile.request_config(),
        client=client,
        cache=cache,
    )
    for spec in profile.steps:
        nav = apply_step(nav, spec)
    return nav
