"""Resource path resolution against the intranet origin.

The intranet serves HTML unless ``format=json`` is present in the query
string, so every request goes through resolve_url().
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote, urlencode

from .config import DEFAULT_ENDPOINT

__all__ = ["RequestDescriptor", "resolve_url"]

JSON_FLAG = "format=json"


def resolve_url(path: str, endpoint: str = DEFAULT_ENDPOINT) -> str:
    """Build the absolute JSON-mode URL for a resource path.

    The flag check is a plain substring test on ``&format=json`` and
    ``?format=json``. A path that spells the flag any other way (``FORMAT=JSON``)
    gets a second one; an already resolved URL passes through unchanged:

        >>> resolve_url("/user")
        'https://intra.epitech.eu/user?format=json'
        >>> resolve_url("/user/filter/user?offset=0")
        'https://intra.epitech.eu/user/filter/user?offset=0&format=json'

    Args:
        path: Relative resource path or absolute URL on ``endpoint``
        endpoint: Service origin, without trailing slash

    Returns:
        Absolute URL requesting the JSON representation.
    """
    url = path
    if "&" + JSON_FLAG not in url and "?" + JSON_FLAG not in url:
        url += ("&" if "?" in url else "?") + JSON_FLAG
    if not url.startswith(endpoint):
        url = endpoint + url
    return url


def _render_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


@dataclass(frozen=True)
class RequestDescriptor:
    """One request: a resource path plus its query parameters.

    ``None`` parameters are dropped; booleans render as ``true``/``false``.
    Slashes stay unescaped so ``location=FR/STG`` reads as the intranet
    itself writes it.
    """

    path: str
    params: Mapping[str, Any] = field(default_factory=dict)

    def to_path(self) -> str:
        query = [(k, _render_value(v)) for k, v in self.params.items() if v is not None]
        if not query:
            return self.path
        sep = "&" if "?" in self.path else "?"
        return self.path + sep + urlencode(query, safe="/", quote_via=quote)

    def resolve(self, endpoint: str = DEFAULT_ENDPOINT) -> str:
        return resolve_url(self.to_path(), endpoint)
