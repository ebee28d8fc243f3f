"""schema.org JSON-LD builders.

Every builder returns plain dicts.  Keys whose value is missing are dropped
instead of being emitted as ``null``, so a company with no coordinates simply
has no ``geo`` block.
"""

from typing import Any, Dict, List, Optional

from publicweb_seo.models.company import CompanyRecord, ServiceRecord
from publicweb_seo.models.route import RouteDescriptor
from publicweb_seo.models.seo import Breadcrumb

SCHEMA_CONTEXT = "https://schema.org"
CURRENCY = "CLP"
COUNTRY = "CL"
MAX_CATALOG_OFFERS = 10


def _compact(obj: Dict[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in obj.items() if value is not None}


def build_address(company: CompanyRecord) -> Optional[Dict[str, Any]]:
    street = company.address or None
    locality = company.comuna or None
    region = company.region or None
    if not (street or locality or region):
        return None
    return _compact(
        {
            "@type": "PostalAddress",
            "streetAddress": street,
            "addressLocality": locality,
            "addressRegion": region,
            "addressCountry": COUNTRY,
        }
    )


def build_geo(company: CompanyRecord) -> Optional[Dict[str, Any]]:
    location = company.location
    latitude = location.latitude if location and location.latitude is not None else company.latitude
    longitude = location.longitude if location and location.longitude is not None else company.longitude
    if latitude is None or longitude is None:
        return None
    return {"@type": "GeoCoordinates", "latitude": latitude, "longitude": longitude}


def build_opening_hours(company: CompanyRecord) -> Optional[List[Dict[str, Any]]]:
    """One specification per day-group that has days and both time bounds."""
    groups = [
        (company.weekday_days, company.weekday_open_time, company.weekday_close_time),
        (company.weekend_days, company.weekend_open_time, company.weekend_close_time),
    ]
    specs = [
        {
            "@type": "OpeningHoursSpecification",
            "dayOfWeek": list(days),
            "opens": opens,
            "closes": closes,
        }
        for days, opens, closes in groups
        if days and opens and closes
    ]
    return specs or None


def build_offer_catalog(services: List[ServiceRecord]) -> Optional[Dict[str, Any]]:
    if not services:
        return None
    return {
        "@type": "OfferCatalog",
        "name": "Servicios de barbería",
        "itemListElement": [
            _compact(
                {
                    "@type": "Offer",
                    "priceCurrency": CURRENCY,
                    "price": service.price,
                    "itemOffered": _compact(
                        {
                            "@type": "Service",
                            "name": service.name,
                            "description": service.description or None,
                        }
                    ),
                }
            )
            for service in services[:MAX_CATALOG_OFFERS]
        ],
    }


def build_barberia_schema(
    company: CompanyRecord, route: RouteDescriptor, services: List[ServiceRecord]
) -> Dict[str, Any]:
    same_as = [link for link in (company.social_links or []) if link]
    return _compact(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": ["HealthAndBeautyBusiness", "BeautySalon"],
            "name": company.name,
            "url": route.base_url + route.path,
            "telephone": company.phone or company.whatsapp or None,
            "address": build_address(company),
            "geo": build_geo(company),
            "openingHoursSpecification": build_opening_hours(company),
            "sameAs": same_as or None,
            "hasOfferCatalog": build_offer_catalog(services),
        }
    )


def build_service_schema(
    company: CompanyRecord, route: RouteDescriptor, service: ServiceRecord
) -> Dict[str, Any]:
    offer = None
    if service.price is not None:
        offer = {
            "@type": "Offer",
            "price": service.price,
            "priceCurrency": CURRENCY,
            "availability": "https://schema.org/InStock",
        }
    return _compact(
        {
            "@context": SCHEMA_CONTEXT,
            "@type": "Service",
            "name": service.name,
            "description": service.description or None,
            "provider": {
                "@type": "LocalBusiness",
                "name": company.name,
                "url": route.base_url + route.path,
            },
            "offers": offer,
        }
    )


def build_breadcrumb_schema(route: RouteDescriptor, crumbs: List[Breadcrumb]) -> Dict[str, Any]:
    return {
        "@context": SCHEMA_CONTEXT,
        "@type": "BreadcrumbList",
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": index,
                "name": crumb.name,
                "item": route.base_url + crumb.url,
            }
            for index, crumb in enumerate(crumbs, start=1)
        ],
    }
