import logging
import logging.config
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from publicweb_seo.config import Settings, get_settings
from publicweb_seo.routers.seo import limiter, router as seo_router
from publicweb_seo.services.app_entry import AppEntryResolver
from publicweb_seo.services.cache import SeoCache
from publicweb_seo.services.directory import Directory, create_directory
from publicweb_seo.services.orchestrator import SeoOrchestrator


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
                },
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                },
            },
            "root": {"level": level, "handlers": ["console"]},
        }
    )


logger = logging.getLogger(__name__)


async def generic_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return PlainTextResponse("Internal server error", status_code=500)


def create_app(
    settings: Optional[Settings] = None,
    directory: Optional[Directory] = None,
    cache: Optional[SeoCache] = None,
    entry_resolver: Optional[AppEntryResolver] = None,
) -> FastAPI:
    """Build the application with its collaborators wired in.

    Anything not passed explicitly is built from *settings* (environment by
    default).  Collaborators live on ``app.state`` and the cache is closed on
    shutdown.
    """
    settings = settings or get_settings()
    cache = cache or SeoCache.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.orchestrator.cache.close()

    app = FastAPI(
        title="Public Web SEO Renderer",
        description="Serves crawlable, cacheable HTML snapshots of public company pages.",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    app.state.settings = settings
    app.state.orchestrator = SeoOrchestrator(
        directory=directory or create_directory(settings),
        cache=cache,
    )
    app.state.entry_resolver = entry_resolver or AppEntryResolver.from_settings(settings)

    # Rate-limiting state
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    app.include_router(seo_router)
    return app


configure_logging(get_settings().LOG_LEVEL)

app = create_app()
