from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from homebase.core.routing import GatedRoute
from homebase.database import get_db
from homebase.schemas.calendar import EventCreate, EventResponse, EventUpdate
from homebase.schemas.result import Result
from homebase.security.guard import SecurityContext, SecurityGate
from homebase.services.calendar_service import EventService

router = APIRouter(route_class=GatedRoute)

household_access = SecurityGate(require_household=True)


@router.get("", response_model=Result[List[EventResponse]])
async def list_events(
    start: Optional[datetime] = Query(None, description="Only events ending after this instant"),
    end: Optional[datetime] = Query(None, description="Only events starting before this instant"),
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    events = EventService(db).list_events(ctx.household, start=start, end=end)
    return Result.successful(data=[EventResponse.model_validate(e) for e in events])


@router.post("", response_model=Result[EventResponse], status_code=status.HTTP_201_CREATED)
async def create_event(
    data: EventCreate,
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    """
    Create an event. On plans with conflict detection, overlaps with existing
    events are recorded as open conflicts.
    """
    event = EventService(db).create_event(ctx.household, ctx.user_id, data)
    return Result.successful(data=EventResponse.model_validate(event))


@router.get("/{event_id}", response_model=Result[EventResponse])
async def get_event(
    event_id: int,
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    event = EventService(db).get_event(ctx.household, event_id)
    return Result.successful(data=EventResponse.model_validate(event))


@router.patch("/{event_id}", response_model=Result[EventResponse])
async def update_event(
    event_id: int,
    data: EventUpdate,
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    """Update an event. Only its creator or the household owner may do this."""
    event = EventService(db).update_event(ctx.household, ctx.user_id, event_id, data)
    return Result.successful(data=EventResponse.model_validate(event))


@router.delete("/{event_id}", response_model=Result[dict])
async def delete_event(
    event_id: int,
    ctx: SecurityContext = Depends(household_access),
    db: Session = Depends(get_db),
):
    EventService(db).delete_event(ctx.household, ctx.user_id, event_id)
    return Result.successful(data={"message": "Event deleted successfully"})
