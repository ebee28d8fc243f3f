"""Shared fixtures: raw directory documents, records, and an in-memory span exporter."""

from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

_span_exporter = InMemorySpanExporter()
_provider = TracerProvider()
_provider.add_span_processor(SimpleSpanProcessor(_span_exporter))
trace.set_tracer_provider(_provider)

from publicweb_seo.config import Settings  # noqa: E402
from publicweb_seo.main import create_app  # noqa: E402
from publicweb_seo.models.company import CompanyRecord, ServiceRecord  # noqa: E402
from publicweb_seo.models.route import RouteDescriptor  # noqa: E402
from publicweb_seo.services.app_entry import AppEntryResolver  # noqa: E402
from publicweb_seo.services.cache import MemoryCacheBackend, SeoCache  # noqa: E402
from publicweb_seo.services.directory import (  # noqa: E402
    InMemoryDirectory,
    normalize_company,
    normalize_service,
)
from publicweb_seo.services.strategy import BarberiaSeoStrategy  # noqa: E402

BASE_URL = "https://pymerp.cl"


# ---------------------------------------------------------------------------
# Raw documents, as stored in the public company collection
# ---------------------------------------------------------------------------

def company_doc(**overrides: Any) -> Dict[str, Any]:
    doc = {
        "id": "company-1",
        "name": "Barbería Central",
        "slug": "barberia-central",
        "publicEnabled": True,
        "comuna": "providencia",
        "region": "metropolitana",
        "address": "Av. Principal 123",
        "whatsapp": "+56912345678",
        "location": {"latitude": -33.4263, "longitude": -70.6170},
        "weekday_days": ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
        "weekday_open_time": "10:00",
        "weekday_close_time": "20:00",
        "weekend_days": ["Saturday"],
        "weekend_open_time": "10:00",
        "weekend_close_time": "14:00",
        "social_links": ["https://instagram.com/barberiacentral"],
        "categoryId": "barberias",
        "updated_at": "2024-05-01T10:00:00Z",
    }
    doc.update(overrides)
    return doc


def service_docs() -> List[Dict[str, Any]]:
    return [
        {
            "id": "s1",
            "company_id": "company-1",
            "name": "Corte clásico",
            "description": "Corte a tijera y máquina con lavado.",
            "price": 12000,
            "estimated_duration_minutes": 30,
            "updated_at": "2024-05-02T10:00:00Z",
        },
        {
            "id": "s2",
            "company_id": "company-1",
            "name": "Barba premium",
            "price": 8000,
            "updated_at": "2024-04-20T10:00:00Z",
        },
        {
            "id": "s3",
            "company_id": "company-1",
            "name": "Afeitado",
            "price": 6000,
        },
    ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def directory() -> InMemoryDirectory:
    return InMemoryDirectory([company_doc()], service_docs())


@pytest.fixture
def company() -> CompanyRecord:
    doc = company_doc()
    return normalize_company(doc["id"], doc)


@pytest.fixture
def services() -> List[ServiceRecord]:
    return [normalize_service(doc["id"], doc) for doc in service_docs()]


@pytest.fixture
def overview_route() -> RouteDescriptor:
    return RouteDescriptor(
        slug="barberia-central",
        locale="es",
        base_url=BASE_URL,
        path="/barberia-central/barberias",
    )


@pytest.fixture
def detail_route() -> RouteDescriptor:
    return RouteDescriptor(
        slug="barberia-central",
        service_slug="corte-clasico",
        locale="es",
        base_url=BASE_URL,
        path="/barberia-central/barberias/servicios/corte-clasico",
    )


@pytest.fixture
def spans():
    _span_exporter.clear()
    yield _span_exporter
    _span_exporter.clear()


# ---------------------------------------------------------------------------
# Helpers shared by the endpoint tests
# ---------------------------------------------------------------------------

APP_ENTRY = "/assets/index-test.js"


class CountingStrategy(BarberiaSeoStrategy):
    """Barbershop strategy that counts how often it actually computes."""

    def __init__(self) -> None:
        self.calls = 0

    def build_seo(self, data):
        self.calls += 1
        return super().build_seo(data)


def make_settings(**overrides: Any) -> Settings:
    values = {"PUBLIC_BASE_URL": None, "PUBLIC_APP_ENTRY": APP_ENTRY, "PUBLIC_APP_ROOT_ID": "root"}
    values.update(overrides)
    return Settings(**values)


def make_client(
    settings: Optional[Settings] = None,
    companies: Optional[List[Dict[str, Any]]] = None,
    entry_resolver: Optional[AppEntryResolver] = None,
    **kwargs: Any,
) -> TestClient:
    directory = InMemoryDirectory(
        [company_doc()] if companies is None else companies, service_docs()
    )
    app = create_app(
        settings=settings or make_settings(),
        directory=directory,
        cache=SeoCache(backend=MemoryCacheBackend()),
        entry_resolver=entry_resolver,
    )
    return TestClient(app, **kwargs)
