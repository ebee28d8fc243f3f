"""Resolves entities for a public page and serves its SEO document, cached."""

import hashlib
import logging
from typing import Dict, List, Optional

from publicweb_seo.models.route import RouteDescriptor
from publicweb_seo.models.seo import SeoDocument, SeoStrategyInput
from publicweb_seo.services.cache import SeoCache
from publicweb_seo.services.directory import (
    Directory,
    resolve_latest_update,
    resolve_service_by_slug,
)
from publicweb_seo.services.normalizer import iso_timestamp
from publicweb_seo.services.strategy import SeoStrategy, registered_strategies
from publicweb_seo.services.tracing import with_span

logger = logging.getLogger(__name__)

# Stands in for the latest timestamp when no entity carries one
NO_TIMESTAMP = "0"


def content_fingerprint(company_id: str, latest_update: Optional[str], route_path: str) -> str:
    """SHA-1 over everything that invalidates a cached document."""
    raw = f"{company_id}:{latest_update or NO_TIMESTAMP}:{route_path}"
    return hashlib.sha1(raw.encode("utf-8")).hexdigest()


def build_cache_key(
    company_id: str, category: str, locale: str, fingerprint: str, route_path: str
) -> str:
    return f"seo:{company_id}:{category}:{locale}:{fingerprint}:{route_path}"


class SeoOrchestrator:
    """Glue between the directory, the cache and the category strategies.

    Strategies are looked up in *strategies* (category -> strategy); by default
    that is every strategy registered in :mod:`publicweb_seo.services.strategy`.
    """

    def __init__(
        self,
        directory: Directory,
        cache: SeoCache,
        strategies: Optional[Dict[str, SeoStrategy]] = None,
    ) -> None:
        self.directory = directory
        self.cache = cache
        if strategies is None:
            strategies = {strategy.category: strategy for strategy in registered_strategies()}
        self._strategies = strategies

    def strategies(self) -> List[SeoStrategy]:
        return list(self._strategies.values())

    async def build_seo_data(
        self,
        slug: str,
        category: str,
        route: RouteDescriptor,
        service_slug: Optional[str] = None,
    ) -> Optional[SeoDocument]:
        """Return the SEO document for *route*, or ``None`` when the page must 404.

        Unknown companies, disabled public pages, category mismatches and
        unknown service slugs all yield ``None``; none of them touch the cache.
        """
        strategy = self._strategies.get(category)
        if strategy is None:
            return None

        company = await self.directory.resolve_by_slug(slug)
        if company is None or not company.public_enabled:
            return None
        if company.category_id and company.category_id != category:
            return None

        services = await self.directory.list_by_company(company.id)
        service = None
        if service_slug:
            service = resolve_service_by_slug(services, service_slug)
            if service is None:
                return None

        latest_update = resolve_latest_update(company, services)
        fingerprint = content_fingerprint(
            company.id,
            iso_timestamp(latest_update) if latest_update else None,
            route.path,
        )
        cache_key = build_cache_key(company.id, category, route.locale, fingerprint, route.path)

        async with with_span("publicweb-seo.cache") as span:
            cached = await self.cache.get(cache_key)
            span.set_attribute("cache.hit", cached is not None)
        if cached is not None:
            logger.debug("SEO cache hit: %s", cache_key)
            return cached

        logger.debug("SEO cache miss: %s", cache_key)
        seo = strategy.build_seo(
            SeoStrategyInput(company=company, services=services, route=route, service=service)
        )
        await self.cache.set(cache_key, seo)
        return seo
