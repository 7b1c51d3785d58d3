"""
Data models for Siren documents and transport responses.

Siren entities are parsed from decoded JSON into dataclasses; the
navigation layer only reads rel/href pairs, actions and self links.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Optional, Union


@dataclass
class Link:
    """Top-level navigational link."""
    rel: list[str]
    href: str
    title: Optional[str] = None
    type: Optional[str] = None
    cls: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Link":
        return cls(
            rel=list(data.get("rel", [])),
            href=data["href"],
            title=data.get("title"),
            type=data.get("type"),
            cls=list(data.get("class", [])),
        )


@dataclass
class Field:
    """Input field of an action."""
    name: str
    type: str = "text"
    value: Any = None
    title: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Field":
        return cls(
            name=data["name"],
            type=data.get("type", "text"),
            value=data.get("value"),
            title=data.get("title"),
        )


@dataclass
class Action:
    """Named operation exposed by an entity."""
    name: str
    href: str
    method: str = "GET"
    type: Optional[str] = None
    title: Optional[str] = None
    fields: list[Field] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Action":
        return cls(
            name=data["name"],
            href=data["href"],
            method=(data.get("method") or "GET").upper(),
            type=data.get("type"),
            title=data.get("title"),
            fields=[Field.from_dict(f) for f in data.get("fields", [])],
        )


@dataclass
class EmbeddedLink:
    """Sub-entity given only by relation and href."""
    rel: list[str]
    href: str
    title: Optional[str] = None
    type: Optional[str] = None
    cls: list[str] = field(default_factory=list)


@dataclass
class _EntityBody:
    properties: dict = field(default_factory=dict)
    links: list[Link] = field(default_factory=list)
    entities: list["SubEntity"] = field(default_factory=list)
    actions: list[Action] = field(default_factory=list)
    cls: list[str] = field(default_factory=list)
    title: Optional[str] = None

    def get_self(self) -> Optional[str]:
        """Return href of the first 'self' link, if any."""
        for link in self.links:
            if "self" in link.rel:
                return link.href
        return None

    def get_action(self, name: str) -> Optional[Action]:
        for action in self.actions:
            if action.name == name:
                return action
        return None

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class EmbeddedRepresentation(_EntityBody):
    """Sub-entity carrying a full representation of its resource."""
    rel: list[str] = field(default_factory=list)


@dataclass
class Entity(_EntityBody):
    """
    Top-level Siren document.

    Usage:
        entity = parse_siren(response.body)
        entity.get_self()
    """


SubEntity = Union[EmbeddedLink, EmbeddedRepresentation]


def _parse_body(data: dict) -> dict:
    return {
        "properties": dict(data.get("properties") or {}),
        "links": [Link.from_dict(l) for l in data.get("links", [])],
        "entities": [_parse_sub_entity(e) for e in data.get("entities", [])],
        "actions": [Action.from_dict(a) for a in data.get("actions", [])],
        "cls": list(data.get("class", [])),
        "title": data.get("title"),
    }


def _parse_sub_entity(data: dict) -> SubEntity:
    if "href" in data:
        return EmbeddedLink(
            rel=list(data.get("rel", [])),
            href=data["href"],
            title=data.get("title"),
            type=data.get("type"),
            cls=list(data.get("class", [])),
        )
    return EmbeddedRepresentation(rel=list(data.get("rel", [])), **_parse_body(data))


def parse_siren(data: Any) -> Entity:
    """
    Build an Entity from a decoded Siren JSON document.

    Args:
        data: Decoded JSON (mapping); an Entity is returned unchanged

    Returns:
        Entity

    Raises:
        TypeError: If data is not a JSON object
    """
    if isinstance(data, Entity):
        return data
    if not isinstance(data, dict):
        raise TypeError(f"Siren document must be a JSON object, got {type(data).__name__}")
    return Entity(**_parse_body(data))


@dataclass
class ResponseData:
    """Transport response: status, headers, decoded body and the URL that produced it."""
    status: int
    headers: dict = field(default_factory=dict)
    body: Any = None
    url: Optional[str] = None

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        if name in self.headers:
            return self.headers[name]
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None
