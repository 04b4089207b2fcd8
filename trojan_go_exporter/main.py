from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette_exporter import PrometheusMiddleware, handle_metrics

from trojan_go_exporter.core.collector import TrojanGoCollector
from trojan_go_exporter.core.config import SELF_METRICS_PATH, Settings
from trojan_go_exporter.core.upstream import TrojanGoClient
from trojan_go_exporter.routers.scrape import build_router

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    collector: TrojanGoCollector | None = None,
) -> FastAPI:
    """Build the exporter application around a single collector instance."""

    settings = settings or Settings()
    if collector is None:
        collector = TrojanGoCollector(
            TrojanGoClient(
                settings.TROJAN_GO_ENDPOINT, settings.scrape_timeout_seconds
            )
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Serving %s for Trojan-Go API at %s (timeout %gs)",
            settings.metrics_url_path,
            settings.TROJAN_GO_ENDPOINT,
            settings.scrape_timeout_seconds,
        )
        yield
        logger.info("Exporter stopped")

    app = FastAPI(
        title=settings.APP_NAME,
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.collector = collector

    app.add_middleware(
        PrometheusMiddleware,
        app_name=settings.APP_NAME,
        prefix=settings.APP_NAME,
    )
    app.add_route(SELF_METRICS_PATH, handle_metrics)
    app.include_router(build_router(settings.metrics_url_path))

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse({"detail": str(exc.detail)}, status_code=exc.status_code)

    return app
