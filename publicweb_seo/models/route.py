from typing import Optional

from pydantic import BaseModel, ConfigDict


class RouteDescriptor(BaseModel):
    """Request-scoped routing facts, derived once by the handler."""

    model_config = ConfigDict(frozen=True)

    slug: str
    service_slug: Optional[str] = None
    locale: str = "es"
    base_url: str
    path: str  # canonical route path, no trailing slash
