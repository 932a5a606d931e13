"""
Dependency injection setup for FastAPI.
Provides the service container holding the shared provider clients and the
trip session registry.
"""

from fastapi import Request
from typing import Callable, Optional
import asyncio
import logging

from tripnav.config.settings import Settings, get_settings
from tripnav.services.place_search_client import NominatimPlaceSearchClient, PlaceSearchClient
from tripnav.services.route_client import OSRMRouteClient, RouteClient
from tripnav.services.trip_session import SessionRegistry, TripSession, SessionFactory

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Container for application services with lifecycle management.

    Provider clients are shared by all sessions; each session owns its own
    trip context and timers.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        search_client: Optional[PlaceSearchClient] = None,
        route_client: Optional[RouteClient] = None,
        session_factory: Optional[Callable[[str, PlaceSearchClient, RouteClient], TripSession]] = None,
    ):
        self.settings = settings or get_settings()
        self._search_client = search_client
        self._route_client = route_client
        self._custom_factory = session_factory
        self._registry: Optional[SessionRegistry] = None
        self._initialized = False
        self._initialization_lock = asyncio.Lock()

    async def initialize_services(self) -> None:
        async with self._initialization_lock:
            if self._initialized:
                return

            logger.info("Initializing service container")
            if self._search_client is None:
                self._search_client = NominatimPlaceSearchClient(self.settings.providers)
            if self._route_client is None:
                self._route_client = OSRMRouteClient(self.settings.providers)

            self._registry = SessionRegistry(
                self._build_session_factory(),
                max_sessions=self.settings.max_sessions,
            )
            self._initialized = True
            logger.info("Service container initialized")

    async def cleanup_services(self) -> None:
        async with self._initialization_lock:
            if not self._initialized:
                return
            logger.info("Cleaning up service container")
            try:
                await self._registry.close_all()
            finally:
                await self._search_client.aclose()
                await self._route_client.aclose()
                self._initialized = False

    def _build_session_factory(self) -> SessionFactory:
        search_client, route_client = self._search_client, self._route_client
        if self._custom_factory is not None:
            custom = self._custom_factory
            return lambda session_id: custom(session_id, search_client, route_client)
        return lambda session_id: TripSession(session_id, search_client, route_client, self.settings)

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    def get_registry(self) -> SessionRegistry:
        if not self._initialized:
            raise RuntimeError("Service container not initialized")
        return self._registry


def get_service_container(request: Request) -> ServiceContainer:
    return request.app.state.service_container


def get_session_registry(request: Request) -> SessionRegistry:
    return get_service_container(request).get_registry()
