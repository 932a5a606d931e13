"""
FastAPI application setup with dependency injection.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Callable, Optional
import logging

from tripnav.config.settings import Settings, get_settings
from tripnav.core.dependencies import ServiceContainer
from tripnav.core.error_handlers import setup_error_handlers
from tripnav.core.logging import configure_logging
from tripnav.middleware import RequestContextMiddleware
from tripnav.services.place_search_client import PlaceSearchClient
from tripnav.services.route_client import RouteClient
from tripnav.services.trip_session import TripSession

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan management with service container.
    Sessions and their refresh timers are torn down on shutdown.
    """
    container: ServiceContainer = app.state.service_container
    settings = container.settings
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    try:
        await container.initialize_services()
        logger.info("Application startup complete")
        yield
    except Exception as e:
        logger.error(f"Application startup failed: {e}", exc_info=True)
        raise
    finally:
        logger.info("Shutting down application")
        try:
            await container.cleanup_services()
            logger.info("Application shutdown complete")
        except Exception as e:
            logger.error(f"Application shutdown failed: {e}", exc_info=True)


def create_app(
    settings: Optional[Settings] = None,
    search_client: Optional[PlaceSearchClient] = None,
    route_client: Optional[RouteClient] = None,
    session_factory: Optional[Callable[[str, PlaceSearchClient, RouteClient], TripSession]] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Provider clients and the session factory can be injected; by default the
    app talks to Nominatim and OSRM.
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level.value, settings.log_format)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.service_container = ServiceContainer(
        settings,
        search_client=search_client,
        route_client=route_client,
        session_factory=session_factory,
    )

    app.add_middleware(CORSMiddleware, **settings.get_cors_config())
    app.add_middleware(RequestContextMiddleware)

    setup_error_handlers(app)

    from tripnav.api.trip_endpoints import router as trip_router
    from tripnav.api.health_endpoints import router as health_router
    app.include_router(trip_router)
    app.include_router(health_router)

    @app.get("/")
    async def root():
        """Root endpoint for basic health check."""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.app_version,
            "status": "running",
        }

    return app


# Create application instance
app = create_app()
