import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session

from homebase.core.exception import ValidationException
from homebase.core.plans import Feature, can_access
from homebase.models.calendar import CalendarConflict, ConflictType, Event
from homebase.repositories.calendar_repository import ConflictRepository, EventRepository
from homebase.schemas.calendar import ConflictResolve, EventCreate, EventUpdate
from homebase.security.membership import HouseholdContext
from homebase.security.ownership import get_owned_or_404, require_creator_or_role

logger = logging.getLogger(__name__)


def as_utc_naive(value: Optional[datetime]) -> Optional[datetime]:
    """Events are stored as naive UTC."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


class EventService:
    """
    Household calendar. Only the event's creator or the household owner may
    change or delete an event.
    """

    def __init__(self, db: Session):
        self.db = db
        self.event_repo = EventRepository(db)
        self.conflict_repo = ConflictRepository(db)

    def list_events(
        self,
        household: HouseholdContext,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Event]:
        return self.event_repo.list_between(household.household_id, as_utc_naive(start), as_utc_naive(end))

    def get_event(self, household: HouseholdContext, event_id: int) -> Event:
        return get_owned_or_404(self.event_repo, event_id, household, "Event")

    def create_event(self, household: HouseholdContext, user_id: str, data: EventCreate) -> Event:
        event = Event(
            title=data.title,
            description=data.description,
            location=data.location,
            start_at=as_utc_naive(data.start_at),
            end_at=as_utc_naive(data.end_at),
            all_day=data.all_day,
            household_id=household.household_id,
            created_by_id=user_id,
        )
        self.db.add(event)
        self.db.flush()
        self._detect_conflicts(household, event)
        self.db.commit()
        self.db.refresh(event)
        return event

    def update_event(self, household: HouseholdContext, user_id: str, event_id: int, data: EventUpdate) -> Event:
        event = self.get_event(household, event_id)
        require_creator_or_role(household, event.created_by_id, user_id, "owner", action="event.update")

        changes = data.model_dump(exclude_unset=True)
        for key in ("start_at", "end_at"):
            if key in changes:
                changes[key] = as_utc_naive(changes[key])
        start = changes.get("start_at", event.start_at)
        end = changes.get("end_at", event.end_at)
        if start is None or end is None or end < start:
            raise ValidationException("end_at must not be before start_at")

        for key, value in changes.items():
            setattr(event, key, value)
        self.db.flush()
        if "start_at" in changes or "end_at" in changes:
            self.conflict_repo.delete_for_event(event.id)
            self._detect_conflicts(household, event)
        self.db.commit()
        self.db.refresh(event)
        return event

    def delete_event(self, household: HouseholdContext, user_id: str, event_id: int) -> None:
        event = self.get_event(household, event_id)
        require_creator_or_role(household, event.created_by_id, user_id, "owner", action="event.delete")
        self.conflict_repo.delete_for_event(event.id)
        self.event_repo.delete_obj(event)

    def _detect_conflicts(self, household: HouseholdContext, event: Event) -> List[CalendarConflict]:
        if not can_access(household.plan, Feature.CONFLICT_DETECTION):
            return []
        conflicts = []
        for other in self.event_repo.find_overlapping(event):
            kind = ConflictType.SAME_TIME if other.start_at == event.start_at else ConflictType.OVERLAP
            conflict = CalendarConflict(
                conflict_type=kind.value,
                event_id=event.id,
                conflicting_event_id=other.id,
                household_id=household.household_id,
            )
            self.db.add(conflict)
            conflicts.append(conflict)
        if conflicts:
            logger.info(
                "Calendar conflicts detected",
                extra={"household_id": household.household_id, "event_id": event.id, "count": len(conflicts)},
            )
        return conflicts


class ConflictService:
    def __init__(self, db: Session):
        self.db = db
        self.conflict_repo = ConflictRepository(db)

    def list_open(self, household: HouseholdContext) -> List[CalendarConflict]:
        return self.conflict_repo.list_open(household.household_id)

    def resolve(self, household: HouseholdContext, user_id: str, conflict_id: int, data: ConflictResolve) -> CalendarConflict:
        conflict = get_owned_or_404(self.conflict_repo, conflict_id, household, "Conflict")
        return self.conflict_repo.update_obj(
            conflict,
            {
                "resolved": True,
                "resolution_notes": data.resolution_notes,
                "resolved_at": datetime.now(timezone.utc).replace(tzinfo=None),
                "resolved_by_id": user_id,
            },
        )
