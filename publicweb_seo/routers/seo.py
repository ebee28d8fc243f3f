"""Public storefront pages: crawlable HTML for ``/{slug}/{category}`` routes."""

import logging
import re
from typing import List, NamedTuple, Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from slowapi import Limiter
from slowapi.util import get_remote_address

from publicweb_seo.config import Settings, get_settings
from publicweb_seo.models.route import RouteDescriptor
from publicweb_seo.services.renderer import render_seo_html
from publicweb_seo.services.strategy import SeoStrategy
from publicweb_seo.services.tracing import with_span

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter()

DEFAULT_LOCALE = "es"
HEALTH_PATH = "/health"
HTML_CACHE_CONTROL = "public, max-age=3600, stale-while-revalidate=86400"
# Every method is routed here so that non-GET requests get our own 405 body
ROUTED_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class RouteMatch(NamedTuple):
    category: str
    slug: str
    service_slug: Optional[str]
    path: str  # canonical form, no trailing slash


def _rate_limit() -> str:
    return get_settings().RATE_LIMIT


def _rate_limit_exempt(request: Request) -> bool:
    return request.method != "GET" or request.scope["path"] == HEALTH_PATH


# ---------------------------------------------------------------------------
# Request parsing
# ---------------------------------------------------------------------------

def resolve_base_url(request: Request, settings: Settings) -> str:
    if settings.PUBLIC_BASE_URL:
        return settings.PUBLIC_BASE_URL.rstrip("/")
    proto = request.headers.get("x-forwarded-proto") or "https"
    host = request.headers.get("x-forwarded-host") or request.headers.get("host") or ""
    return f"{proto}://{host}".rstrip("/")


def resolve_locale(request: Request) -> str:
    query_locale = request.query_params.get("lang")
    if query_locale:
        return query_locale
    header = request.headers.get("accept-language", "")
    # "es-CL,es;q=0.9,en;q=0.8" -> "es-CL"
    first = header.split(",")[0].split(";")[0].strip()
    return first or DEFAULT_LOCALE


def match_route(path: str, strategies: List[SeoStrategy]) -> Optional[RouteMatch]:
    """Match a decoded request path against each category's page shapes."""
    for strategy in strategies:
        category = re.escape(strategy.category)
        segment = re.escape(strategy.service_segment)

        overview = re.fullmatch(rf"/([^/]+)/{category}/?", path)
        if overview:
            slug = overview.group(1)
            return RouteMatch(strategy.category, slug, None, f"/{slug}/{strategy.category}")

        detail = re.fullmatch(rf"/([^/]+)/{category}/{segment}/([^/]+)/?", path)
        if detail:
            slug, service_slug = detail.group(1), detail.group(2)
            return RouteMatch(
                strategy.category,
                slug,
                service_slug,
                f"/{slug}/{strategy.category}/{strategy.service_segment}/{service_slug}",
            )
    return None


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.api_route("/{full_path:path}", methods=ROUTED_METHODS, include_in_schema=False)
@limiter.limit(_rate_limit, exempt_when=_rate_limit_exempt)
async def public_page(request: Request, full_path: str) -> Response:
    """Serve the crawlable snapshot of a public company or service page.

    Only ``GET`` is allowed.  Unknown paths, unknown companies, disabled pages
    and category mismatches all answer the same ``404 Not found``.
    """
    if request.method != "GET":
        return PlainTextResponse("Method not allowed", status_code=405)

    async with with_span("publicweb-seo.request") as span:
        # ASGI hands over the path already percent-decoded
        path = request.scope["path"]
        span.set_attribute("http.target", path)

        if path == HEALTH_PATH:
            return PlainTextResponse("ok")

        state = request.app.state
        orchestrator = state.orchestrator
        match = match_route(path, orchestrator.strategies())
        if match is None:
            return PlainTextResponse("Not found", status_code=404)

        settings: Settings = state.settings
        route = RouteDescriptor(
            slug=match.slug,
            service_slug=match.service_slug,
            locale=resolve_locale(request),
            base_url=resolve_base_url(request, settings),
            path=match.path,
        )
        span.set_attribute("seo.category", match.category)
        logger.info("Public page request", extra={"path": route.path, "locale": route.locale})

        seo = await orchestrator.build_seo_data(
            match.slug, match.category, route, match.service_slug
        )
        if seo is None:
            return PlainTextResponse("Not found", status_code=404)

        app_entry = await state.entry_resolver.resolve(route.base_url)
        html = render_seo_html(seo, app_entry, settings.PUBLIC_APP_ROOT_ID, route.locale)
        return HTMLResponse(
            html,
            headers={"Cache-Control": HTML_CACHE_CONTROL},
            media_type="text/html; charset=utf-8",
        )
