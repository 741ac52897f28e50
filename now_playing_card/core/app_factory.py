"""Application factory for creating and configuring the FastAPI app."""

from fastapi import FastAPI

from now_playing_card import __version__
from now_playing_card.core.lifespan import lifespan
from now_playing_card.core.middleware import setup_middleware
from now_playing_card.middleware.error_handlers import register_error_handlers
from now_playing_card.routers import health_router, now_playing_router, widget_router


def custom_openapi(app: FastAPI):
    """Generate custom OpenAPI schema with the Bearer security scheme."""
    if app.openapi_schema:
        return app.openapi_schema

    from fastapi.openapi.utils import get_openapi

    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=app.description,
        routes=app.routes,
    )

    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "BearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "API Key",
            "description": "Shared key also configured on the poller",
        }
    }

    # Only publishing requires authentication
    publish = openapi_schema.get("paths", {}).get("/api/now-playing", {}).get("post")
    if publish is not None:
        publish["security"] = [{"BearerAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Now Playing Card",
        description="""
        Animated SVG "now playing" widget fed by a local player poller.

        ## Endpoints
        - `/widget.svg` - The card (query parameters select theme and layout)
        - `/preview` - HTML page embedding the card
        - `POST /api/now-playing` - Publish a snapshot (Bearer token, 60/minute)
        - `GET /api/now-playing` - The stored snapshot or `null`
        - `/health` - Basic health check
        """,
        version=__version__,
        lifespan=lifespan,
    )

    # Configure middleware
    setup_middleware(app)

    # Register exception handlers
    register_error_handlers(app)

    # Include routers
    app.include_router(widget_router.router, tags=["widget"])
    app.include_router(health_router.router, tags=["health"])
    app.include_router(now_playing_router.router, prefix="/api", tags=["now-playing"])

    # Custom OpenAPI schema
    app.openapi = lambda: custom_openapi(app)

    return app
