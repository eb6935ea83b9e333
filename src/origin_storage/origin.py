"""Origin resolution from page URLs.

Pages served from a cache host embed the real site in their path, e.g.
``https://mipcache.bdstatic.com/c/s/www.example.com/page.html``.  Such
pages share one backend across many sites and therefore use aggregated
storage keyed by the embedded origin.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from urllib.parse import urlsplit

DEFAULT_CACHE_HOSTS: tuple[str, ...] = ("mipcache.bdstatic.com",)

_DOMAIN = re.compile(r"[a-zA-Z0-9][-a-zA-Z0-9]{0,62}(?:\.[a-zA-Z0-9][-a-zA-Z0-9]{0,62})+\.?")


def is_cache_url(url: str, cache_hosts: Iterable[str] = DEFAULT_CACHE_HOSTS) -> bool:
    """Return ``True`` if *url* is served from one of *cache_hosts*."""
    host = urlsplit(url).hostname or ""
    return host in set(cache_hosts)


def resolve_origin(url: str, cache_hosts: Iterable[str] = DEFAULT_CACHE_HOSTS) -> str:
    """Return the origin a URL stores its data under.

    For cache URLs this is the first domain embedded in the path; for
    everything else the URL's own host.
    """
    parts = urlsplit(url)
    if is_cache_url(url, cache_hosts):
        match = _DOMAIN.search(parts.path)
        if match:
            return match.group().rstrip(".")
    return parts.hostname or url
