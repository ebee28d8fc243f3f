"""Company/service directory seam.

The document database that owns companies and services lives outside this
service.  The orchestrator only sees the two small protocols below; the
implementation is chosen once at startup (see :func:`create_directory`).

Raw documents use the field names of the public company collection, including
several legacy aliases (``commune``/``city``, ``socialLinks``, ``updatedAt``,
...).  :func:`normalize_company` and :func:`normalize_service` turn them into
the records the strategies consume.
"""

import json
import logging
import math
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from publicweb_seo.config import Settings
from publicweb_seo.models.company import CompanyRecord, GeoPoint, ServiceRecord
from publicweb_seo.services.normalizer import as_utc, normalize_slug

logger = logging.getLogger(__name__)

INACTIVE_STATUS = "INACTIVE"


class CompanyDirectory(Protocol):
    async def resolve_by_slug(self, slug: str) -> Optional[CompanyRecord]:
        """Look the company up by its primary slug, then by its alternate public slug."""
        ...


class ServiceDirectory(Protocol):
    async def list_by_company(self, company_id: str) -> List[ServiceRecord]:
        """Return the company's services, excluding inactive and soft-deleted ones."""
        ...


class Directory(CompanyDirectory, ServiceDirectory, Protocol):
    pass


# ---------------------------------------------------------------------------
# Document normalisation
# ---------------------------------------------------------------------------

def _first(data: Dict[str, Any], *keys: str) -> Any:
    """Return the first truthy value among *keys*."""
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return None


def _first_not_none(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


def _to_datetime(value: Any) -> Optional[datetime]:
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.warning("Ignoring unparseable timestamp %r", value)
            return None
    # Datastore timestamp objects expose to_datetime()
    to_datetime = getattr(value, "to_datetime", None)
    if callable(to_datetime):
        return to_datetime()
    return None


def _to_finite(value: Any) -> Optional[float]:
    """Coerce *value* to a finite float; NaN, infinities and junk become None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _to_location(value: Any) -> Optional[GeoPoint]:
    if not isinstance(value, dict):
        return None
    return GeoPoint(
        latitude=_to_finite(_first_not_none(value, "latitude", "_latitude")),
        longitude=_to_finite(_first_not_none(value, "longitude", "_longitude")),
    )


def _as_list(value: Any) -> Optional[List[Any]]:
    return list(value) if isinstance(value, (list, tuple)) else None


def normalize_company(doc_id: str, data: Dict[str, Any]) -> CompanyRecord:
    name = data.get("name") or "Empresa"
    social_links = _as_list(data.get("social_links"))
    if social_links is None:
        social_links = _as_list(data.get("socialLinks"))

    return CompanyRecord(
        id=doc_id,
        name=name,
        slug=_first(data, "slug", "publicSlug") or normalize_slug(data.get("name") or ""),
        public_enabled=data.get("publicEnabled") is True,
        address=data.get("address") or None,
        comuna=_first(data, "comuna", "commune", "city"),
        region=data.get("region") or None,
        whatsapp=data.get("whatsapp") or None,
        phone=_first(data, "phone", "whatsapp"),
        email=data.get("email") or None,
        location=_to_location(data.get("location")),
        latitude=_to_finite(data.get("latitude")),
        longitude=_to_finite(data.get("longitude")),
        weekday_days=data.get("weekday_days") or None,
        weekday_open_time=data.get("weekday_open_time") or None,
        weekday_close_time=data.get("weekday_close_time") or None,
        weekend_days=data.get("weekend_days") or None,
        weekend_open_time=data.get("weekend_open_time") or None,
        weekend_close_time=data.get("weekend_close_time") or None,
        social_links=social_links,
        category_id=_first(data, "categoryId", "category_id"),
        updated_at=_to_datetime(_first(data, "updated_at", "updatedAt")),
    )


def normalize_service(doc_id: str, data: Dict[str, Any]) -> ServiceRecord:
    price = data.get("price")
    if isinstance(price, bool) or not isinstance(price, (int, float)) or not math.isfinite(price):
        price = None

    return ServiceRecord(
        id=doc_id,
        name=data.get("name") or "Servicio",
        description=data.get("description") or None,
        price=price,
        estimated_duration_minutes=data.get("estimated_duration_minutes"),
        status=data.get("status") or None,
        tags=_as_list(data.get("tags")),
        slug=_first(data, "slug", "service_slug") or normalize_slug(data.get("name") or ""),
        updated_at=_to_datetime(_first(data, "updated_at", "updatedAt")),
        popularity=_first_not_none(data, "popularity", "bookings_count", "appointments_count"),
        bookings_count=data.get("bookings_count"),
    )


def _is_listed(data: Dict[str, Any]) -> bool:
    if data.get("status") == INACTIVE_STATUS:
        return False
    return not (data.get("deleted") is True or data.get("deleted_at"))


# ---------------------------------------------------------------------------
# Lookups over normalised records
# ---------------------------------------------------------------------------

def resolve_service_by_slug(services: List[ServiceRecord], slug: str) -> Optional[ServiceRecord]:
    """Match *slug* against each service's stored slug, or its name when it has none."""
    target = normalize_slug(slug)
    for service in services:
        if normalize_slug(service.slug or service.name) == target:
            return service
    return None


def resolve_latest_update(
    company: CompanyRecord, services: List[ServiceRecord]
) -> Optional[datetime]:
    """Most recent ``updated_at`` across the company and its services."""
    stamps = [company.updated_at] + [service.updated_at for service in services]
    stamps = [stamp for stamp in stamps if stamp is not None]
    if not stamps:
        return None
    return max(as_utc(stamp) for stamp in stamps)


# ---------------------------------------------------------------------------
# Implementations
# ---------------------------------------------------------------------------

class InMemoryDirectory:
    """Directory over raw company/service documents held in memory.

    Documents keep the collection's field names; each one must carry an
    ``id``, and services reference their company through ``company_id``.
    """

    def __init__(
        self,
        companies: Optional[List[Dict[str, Any]]] = None,
        services: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        self._companies: List[Dict[str, Any]] = list(companies or [])
        self._services: List[Dict[str, Any]] = list(services or [])

    @classmethod
    def from_json_file(cls, path: str) -> "InMemoryDirectory":
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
        directory = cls(payload.get("companies", []), payload.get("services", []))
        logger.info(
            "Directory loaded from %s: %d companies, %d services",
            path,
            len(directory._companies),
            len(directory._services),
        )
        return directory

    def upsert_company(self, doc: Dict[str, Any]) -> None:
        self._companies = [c for c in self._companies if c["id"] != doc["id"]] + [doc]

    def upsert_service(self, doc: Dict[str, Any]) -> None:
        self._services = [s for s in self._services if s["id"] != doc["id"]] + [doc]

    async def resolve_by_slug(self, slug: str) -> Optional[CompanyRecord]:
        wanted = slug.strip().lower()
        for field in ("slug", "publicSlug"):
            for doc in self._companies:
                if doc.get(field) == wanted:
                    return normalize_company(doc["id"], doc)
        return None

    async def list_by_company(self, company_id: str) -> List[ServiceRecord]:
        return [
            normalize_service(doc["id"], doc)
            for doc in self._services
            if doc.get("company_id") == company_id and _is_listed(doc)
        ]


class StubDirectory:
    """Finds nothing.  Used for cold-start probes and static checks."""

    async def resolve_by_slug(self, slug: str) -> Optional[CompanyRecord]:
        return None

    async def list_by_company(self, company_id: str) -> List[ServiceRecord]:
        return []


def create_directory(settings: Settings) -> Directory:
    """Instantiate the configured directory backend."""
    if settings.DIRECTORY_BACKEND == "stub":
        logger.info("Directory running in stub mode – every page resolves to not found")
        return StubDirectory()

    if settings.DIRECTORY_FIXTURE_PATH:
        return InMemoryDirectory.from_json_file(settings.DIRECTORY_FIXTURE_PATH)
    return InMemoryDirectory()
