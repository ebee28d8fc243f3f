from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel

from publicweb_seo.models.company import CompanyRecord, ServiceRecord
from publicweb_seo.models.route import RouteDescriptor


class OpenGraph(BaseModel):
    title: str
    description: str
    type: Literal["website", "article"] = "website"
    image: str
    url: str
    site_name: str
    locale: str


class TwitterCard(BaseModel):
    card: Literal["summary", "summary_large_image"] = "summary_large_image"
    title: str
    description: str
    image: str


class Breadcrumb(BaseModel):
    name: str
    url: str  # site-relative; made absolute in the BreadcrumbList schema


class SeoDocument(BaseModel):
    """Everything needed to render one public page's crawlable HTML.

    This is both the cache value (stored as JSON) and the renderer's only input.
    """

    title: str
    description: str
    keywords: List[str]
    canonical: str
    robots: str
    h1: str
    h2: Optional[str] = None
    body_text: str
    og: OpenGraph
    twitter: TwitterCard
    json_ld: List[Dict[str, Any]]
    breadcrumbs: List[Breadcrumb] = []


class SeoStrategyInput(BaseModel):
    company: CompanyRecord
    services: List[ServiceRecord]
    route: RouteDescriptor
    service: Optional[ServiceRecord] = None
