# This file builds the FastAPI application and registers all API routers.
# It exists so startup behavior, middleware, and error handling are configured in one place.
# The app adds request IDs, timing headers, and Prometheus request metrics, and owns the monitor job lifecycle.

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import RequestResponseEndpoint
from starlette.routing import Match

from squid_manager.api.api_config import get_api_config
from squid_manager.api.dependencies import get_squid_monitor_job
from squid_manager.api.error_handlers import register_error_handlers
from squid_manager.api.routers.health import router as health_router
from squid_manager.api.routers.squids import router as squids_router
from squid_manager.common.logging import configure_logging
from squid_manager.common.settings import get_settings

LOGGER = logging.getLogger("api")

API_HTTP_REQUESTS_TOTAL = Counter(
    "api_http_requests_total",
    "Total number of HTTP requests processed by the API.",
    ["method", "path", "status_code"],
)
API_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "api_http_request_duration_seconds",
    "API request duration in seconds.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10, 30),
)
API_HTTP_INFLIGHT_REQUESTS = Gauge(
    "api_http_inflight_requests",
    "Number of API requests currently being processed.",
    ["method", "path"],
)


UNMATCHED_PATH_LABEL = "__unmatched__"


def route_label(request: Request) -> str:
    """Return the matching route template, resolved before the request is dispatched."""

    # Templates keep per-service paths and unknown URLs from growing label cardinality.
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", UNMATCHED_PATH_LABEL)
    return UNMATCHED_PATH_LABEL


def create_app() -> FastAPI:
    """Create configured FastAPI application instance."""

    configure_logging()
    config = get_api_config()

    app = FastAPI(
        title=config.api_name,
        description="Lists squid indexer services, promotes their schemas, and stops retired ones.",
        version=config.app_version,
        openapi_tags=[
            {"name": "health", "description": "Service liveness and readiness."},
            {"name": "squids", "description": "Squid fleet listing, promotion, and downgrade."},
        ],
    )

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        method_label = request.method
        path_label = route_label(request)
        started = time.perf_counter()
        status_code = 500
        API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label, path=path_label).inc()
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            duration_ms = (time.perf_counter() - started) * 1000.0

            response.headers["x-request-id"] = request_id
            response.headers["x-response-time-ms"] = f"{duration_ms:.2f}"
            return response
        finally:
            duration_s = time.perf_counter() - started
            API_HTTP_REQUESTS_TOTAL.labels(
                method=method_label,
                path=path_label,
                status_code=str(status_code),
            ).inc()
            API_HTTP_REQUEST_DURATION_SECONDS.labels(
                method=method_label,
                path=path_label,
            ).observe(duration_s)
            API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label, path=path_label).dec()

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.on_event("startup")
    def start_monitor() -> None:
        settings = get_settings()
        if not settings.MONITOR_ENABLED:
            LOGGER.info("squid monitor disabled")
            return
        get_squid_monitor_job().start()

    @app.on_event("shutdown")
    def stop_monitor() -> None:
        if get_settings().MONITOR_ENABLED:
            get_squid_monitor_job().stop(timeout=5.0)

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(squids_router)

    return app


app = create_app()
