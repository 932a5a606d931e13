"""Trip session endpoints: the intents and views the map client uses."""
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from tripnav.core.dependencies import get_session_registry
from tripnav.schemas.base import ok
from tripnav.schemas.trip import (
    ConditionsModel,
    GeoPointModel,
    ItineraryItemModel,
    LocationRequest,
    PlaceModel,
    RecommendationModel,
    RouteModel,
    SearchRequest,
    SessionCreated,
    TrafficIncidentModel,
    TransportModeRequest,
    TripContextModel,
    ViewportRequest,
)
from tripnav.services.trip_session import SessionRegistry, TripSession

router = APIRouter(prefix="/trip", tags=["trip"])


def _session(session_id: str, registry: SessionRegistry = Depends(get_session_registry)) -> TripSession:
    return registry.get(session_id)


def _context_payload(session: TripSession) -> dict:
    failure = session.state.last_failure
    return TripContextModel.from_domain(
        session.id,
        session.context,
        view_center=session.view_center,
        last_failure=failure.value if failure else None,
    ).model_dump(mode="json")


def _recommendations_payload(session: TripSession) -> list:
    return [RecommendationModel.from_domain(r).model_dump(mode="json") for r in session.recommendations]


# ============================================================================
# Session lifecycle
# ============================================================================

@router.post("/sessions", status_code=201)
async def create_session(registry: SessionRegistry = Depends(get_session_registry)):
    session = await registry.create()
    return ok(SessionCreated(session_id=session.id).model_dump())


@router.delete("/sessions/{session_id}")
async def close_session(session_id: str, registry: SessionRegistry = Depends(get_session_registry)):
    await registry.close(session_id)
    return ok({"session_id": session_id, "closed": True})


@router.get("/sessions/{session_id}")
async def get_context(session: TripSession = Depends(_session)):
    return ok(_context_payload(session))


# ============================================================================
# Intents
# ============================================================================

@router.post("/sessions/{session_id}/location")
async def report_location(request: LocationRequest, session: TripSession = Depends(_session)):
    """Device location push from the geolocation collaborator."""
    await session.report_device_location(request.to_domain())
    return ok(_context_payload(session))


@router.post("/sessions/{session_id}/select")
async def select_place(request: PlaceModel, session: TripSession = Depends(_session)):
    await session.select_place(request.to_domain())
    return ok({
        "context": _context_payload(session),
        "recommendations": _recommendations_payload(session),
    })


@router.post("/sessions/{session_id}/select-point")
async def select_point(request: GeoPointModel, session: TripSession = Depends(_session)):
    """Map click: select whatever is at the clicked point."""
    await session.select_point(request.to_domain())
    return ok({
        "context": _context_payload(session),
        "recommendations": _recommendations_payload(session),
    })


@router.delete("/sessions/{session_id}/selection")
async def clear_selection(session: TripSession = Depends(_session)):
    session.clear_selection()
    return ok(_context_payload(session))


@router.post("/sessions/{session_id}/search")
async def search(request: SearchRequest, session: TripSession = Depends(_session)):
    results = await session.search(request.query)
    failure = session.state.last_failure
    return ok({
        "results": [PlaceModel.from_domain(p).model_dump(mode="json") for p in results],
        "failure": failure.value if failure else None,
    })


@router.put("/sessions/{session_id}/mode")
async def set_transport_mode(request: TransportModeRequest, session: TripSession = Depends(_session)):
    session.set_transport_mode(request.mode)
    return ok({
        "context": _context_payload(session),
        "recommendations": _recommendations_payload(session),
    })


@router.post("/sessions/{session_id}/directions")
async def request_directions(session: TripSession = Depends(_session)):
    route = await session.request_directions()
    return ok(RouteModel.from_domain(route).model_dump(mode="json"))


@router.post("/sessions/{session_id}/viewport")
async def viewport_changed(request: ViewportRequest, session: TripSession = Depends(_session)):
    incidents = await session.viewport_changed(request.to_domain())
    return ok([TrafficIncidentModel.from_domain(i).model_dump(mode="json") for i in incidents])


# ============================================================================
# Views
# ============================================================================

@router.get("/sessions/{session_id}/recommendations")
async def get_recommendations(session: TripSession = Depends(_session)):
    return ok(_recommendations_payload(session))


@router.get("/sessions/{session_id}/itinerary")
async def get_itinerary(
    at: Optional[datetime] = Query(None, description="Plan for this local time instead of now"),
    session: TripSession = Depends(_session),
):
    now = at or session.now()
    items = session.itinerary(now)
    return ok([ItineraryItemModel.from_domain(item, now).model_dump(mode="json") for item in items])


@router.get("/sessions/{session_id}/incidents")
async def get_incidents(session: TripSession = Depends(_session)):
    return ok([TrafficIncidentModel.from_domain(i).model_dump(mode="json") for i in session.incidents])


@router.get("/sessions/{session_id}/conditions")
async def get_conditions(session: TripSession = Depends(_session)):
    conditions = session.current_conditions
    return ok(ConditionsModel.from_domain(conditions).model_dump(mode="json") if conditions else None)
