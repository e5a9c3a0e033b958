"""FastAPI application factory."""

from fastapi import FastAPI

from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware
from .middleware.metrics import METRICS_PATH, MetricsMiddleware, metrics_endpoint
from .middleware.request_id import RequestIDMiddleware


def create_app(
    store_instance,
    service_instance,
    config,
    lifespan=None,
) -> FastAPI:
    """Create and configure FastAPI application.
    
    Args:
        store_instance: Mapping store instance (None if built in lifespan)
        service_instance: Service instance (None if built in lifespan)
        config: Configuration instance
        lifespan: Optional lifespan context manager
        
    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener API",
        description="Shorten URLs and redirect short codes",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )
    
    # Store instances in app state for access in routes
    app.state.store = store_instance
    app.state.service = service_instance
    app.state.config = config
    
    # Last added runs first: request id must exist before logging reads it
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    
    # Registered ahead of the redirect catch-all, which would claim "metrics"
    app.add_api_route(METRICS_PATH, metrics_endpoint, methods=["GET"], include_in_schema=False)
    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Redirect"])
    
    return app
