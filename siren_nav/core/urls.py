"""
URL helpers: absolute resolution, template expansion, form encoding.
"""

from typing import Any, Mapping, Optional
from urllib.parse import urlencode, urljoin, urlparse

import structlog
from uritemplate import expand

from .errors import RelativeURLError

logger = structlog.get_logger(__name__)

FORM_URLENCODED = "application/x-www-form-urlencoded"


def is_absolute(url: str) -> bool:
    """True if the URL carries both a scheme and a host."""
    parsed = urlparse(url)
    return bool(parsed.scheme and parsed.netloc)


def normalize_url(
    href: str,
    base: Optional[str] = None,
    parameters: Optional[Mapping[str, Any]] = None,
) -> str:
    """
    Resolve href against base and expand URI template parameters.

    Args:
        href: Absolute or relative reference (may be an RFC 6570 template)
        base: Absolute base URL, or None to require href to be absolute
        parameters: Template variables

    Returns:
        Absolute URL

    Raises:
        RelativeURLError: If the result is still relative
    """
    url = urljoin(base, href) if base else href
    if not is_absolute(url):
        raise RelativeURLError(url)

    if parameters:
        url = expand(url, dict(parameters))
        logger.debug("url_expanded", parameters=dict(parameters), url=url)

    return url


def formulate_data(action, body: Any) -> Any:
    """
    Encode a request body the way the action declares.

    Non-form actions and non-mapping bodies are returned unchanged;
    mappings for form actions (the default type) become a query string.
    """
    action_type = getattr(action, "type", None)
    if action_type and action_type != FORM_URLENCODED:
        return body

    if not body or not isinstance(body, Mapping):
        return body

    return urlencode(body, doseq=True)
