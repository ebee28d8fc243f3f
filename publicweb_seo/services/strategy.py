"""Per-category SEO strategies and the registry that maps categories to them."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from publicweb_seo.models.seo import (
    Breadcrumb,
    OpenGraph,
    SeoDocument,
    SeoStrategyInput,
    TwitterCard,
)
from publicweb_seo.services.schema import (
    build_barberia_schema,
    build_breadcrumb_schema,
    build_service_schema,
)
from publicweb_seo.services.templates import (
    build_barberia_body_text,
    build_barberia_description,
    build_barberia_h1,
    build_barberia_keywords,
    build_barberia_title,
    build_service_body_text,
    build_service_description,
    build_service_h1,
    build_service_title,
    resolve_location_label,
)

logger = logging.getLogger(__name__)

DEFAULT_OG_IMAGE = "/og-default.jpg"
SITE_NAME = "pymerp"
OG_LOCALE = "es_CL"
ROBOTS_INDEX = "index, follow"


class SeoStrategy(ABC):
    """Maps resolved domain entities to a :class:`SeoDocument` for one category.

    Implementations must be pure: no I/O, no clock, no randomness.  The
    orchestrator caches their output keyed on the inputs' modification
    timestamps, so two calls with equal inputs have to produce equal documents.
    """

    #: URL segment naming the category, e.g. ``/{slug}/barberias``
    category: str
    #: URL segment preceding a service slug, e.g. ``/{slug}/barberias/servicios/{service}``
    service_segment: str = "servicios"

    @abstractmethod
    def build_seo(self, data: SeoStrategyInput) -> SeoDocument:
        ...


class BarberiaSeoStrategy(SeoStrategy):
    category = "barberias"
    service_segment = "servicios"

    def build_seo(self, data: SeoStrategyInput) -> SeoDocument:
        company, services, route, service = data.company, data.services, data.route, data.service
        location_label = resolve_location_label(company)
        top_services = services[:3]
        category_path = f"/{company.slug}/{self.category}"

        if service is not None:
            title = build_service_title(company, service, location_label)
            description = build_service_description(company, service, location_label)
            h1 = build_service_h1(company, service)
            h2 = "Detalle del servicio"
            body_text = build_service_body_text(company, service, location_label)
            breadcrumbs = [
                Breadcrumb(name="Inicio", url=f"/{company.slug}"),
                Breadcrumb(name="Barberías", url=category_path),
                Breadcrumb(name=service.name, url=route.path),
            ]
        else:
            title = build_barberia_title(company, location_label)
            description = build_barberia_description(company, location_label, top_services)
            h1 = build_barberia_h1(company, location_label)
            h2 = "Agenda online y servicios destacados"
            body_text = build_barberia_body_text(company, location_label, top_services)
            breadcrumbs = [
                Breadcrumb(name="Inicio", url=f"/{company.slug}"),
                Breadcrumb(name="Barberías", url=route.path),
            ]

        json_ld = [build_barberia_schema(company, route, services)]
        if service is not None:
            json_ld.append(build_service_schema(company, route, service))
        # BreadcrumbList always goes last
        json_ld.append(build_breadcrumb_schema(route, breadcrumbs))

        canonical = route.base_url + route.path
        return SeoDocument(
            title=title,
            description=description,
            keywords=build_barberia_keywords(company, location_label),
            canonical=canonical,
            robots=ROBOTS_INDEX,
            h1=h1,
            h2=h2,
            body_text=body_text,
            og=OpenGraph(
                title=title,
                description=description,
                type="website",
                image=DEFAULT_OG_IMAGE,
                url=canonical,
                site_name=SITE_NAME,
                locale=OG_LOCALE,
            ),
            twitter=TwitterCard(
                card="summary_large_image",
                title=title,
                description=description,
                image=DEFAULT_OG_IMAGE,
            ),
            json_ld=json_ld,
            breadcrumbs=breadcrumbs,
        )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_STRATEGIES: Dict[str, SeoStrategy] = {}


def register_strategy(strategy: SeoStrategy) -> SeoStrategy:
    """Make *strategy* available to the orchestrator and the route resolver."""
    if strategy.category in _STRATEGIES:
        logger.warning("Replacing SEO strategy for category %s", strategy.category)
    _STRATEGIES[strategy.category] = strategy
    return strategy


def get_strategy(category: str) -> Optional[SeoStrategy]:
    return _STRATEGIES.get(category)


def registered_strategies() -> List[SeoStrategy]:
    return list(_STRATEGIES.values())


register_strategy(BarberiaSeoStrategy())
