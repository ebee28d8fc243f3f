"""Discovers the client-app bootstrap script referenced by the SPA's index.html."""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Dict, Optional, Tuple
from urllib.parse import urlparse

from bs4 import BeautifulSoup

from publicweb_seo.config import Settings
from publicweb_seo.services.fetcher import fetch_text

logger = logging.getLogger(__name__)

FALLBACK_APP_ENTRY = "/assets/main.js"
APP_ENTRY_TTL_SECONDS = 60 * 60
MAX_MEMOIZED_ORIGINS = 32


def extract_module_script(html: str) -> Optional[str]:
    """Return the ``src`` of the first ``<script type="module">`` in *html*."""
    soup = BeautifulSoup(html, "lxml")
    tag = soup.find("script", attrs={"type": "module", "src": True})
    if tag is None:
        return None
    return str(tag["src"]) or None


def is_same_origin(src: str, base_url: str) -> bool:
    """True when *src* is a relative path or points at *base_url*'s own origin."""
    parsed = urlparse(src)
    if not parsed.scheme and not parsed.netloc:
        return True
    base = urlparse(base_url)
    return (parsed.scheme, parsed.netloc) == (base.scheme, base.netloc)


class AppEntryResolver:
    """Resolves (and memoizes for an hour, per origin) the SPA entry script path.

    An explicit ``PUBLIC_APP_ENTRY`` always wins.  Otherwise
    ``{base_url}/index.html`` is fetched and scanned.  Only a relative or
    same-origin ``src`` is accepted, and each base URL keeps its own memo.
    Any failure along the way (network, timeout, missing or foreign tag) falls
    back to :data:`FALLBACK_APP_ENTRY`.  :meth:`resolve` never raises.
    """

    def __init__(
        self,
        override: Optional[str] = None,
        timeout: float = 3.0,
        fetch: Callable[..., Awaitable[str]] = fetch_text,
        clock: Callable[[], float] = time.monotonic,
        ttl_seconds: float = APP_ENTRY_TTL_SECONDS,
        max_origins: int = MAX_MEMOIZED_ORIGINS,
    ) -> None:
        self._override = override
        self._timeout = timeout
        self._fetch = fetch
        self._clock = clock
        self._ttl = ttl_seconds
        self._max_origins = max_origins
        # base_url -> (entry, expires_at), oldest first
        self._memo: Dict[str, Tuple[str, float]] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppEntryResolver":
        return cls(override=settings.PUBLIC_APP_ENTRY, timeout=settings.APP_ENTRY_FETCH_TIMEOUT)

    def _remember(self, base_url: str, entry: str) -> None:
        self._memo.pop(base_url, None)
        while len(self._memo) >= self._max_origins:
            self._memo.pop(next(iter(self._memo)))
        self._memo[base_url] = (entry, self._clock() + self._ttl)

    async def resolve(self, base_url: str) -> str:
        if self._override:
            return self._override

        memoized = self._memo.get(base_url)
        if memoized and self._clock() < memoized[1]:
            return memoized[0]

        index_url = f"{base_url}/index.html"
        try:
            html = await asyncio.wait_for(
                self._fetch(index_url, timeout=self._timeout), timeout=self._timeout
            )
            entry = extract_module_script(html)
        except Exception as exc:
            logger.warning("App entry discovery failed for %s – using fallback: %s", index_url, exc)
            return FALLBACK_APP_ENTRY

        if not entry:
            logger.warning("No module script found in %s – using fallback", index_url)
            return FALLBACK_APP_ENTRY

        if not is_same_origin(entry, base_url):
            logger.warning("Ignoring cross-origin module script %s in %s", entry, index_url)
            return FALLBACK_APP_ENTRY

        self._remember(base_url, entry)
        return entry
