from sqlalchemy.orm import Session
from sqlalchemy import or_
from typing import List, Optional
from datetime import datetime
from homebase.models.calendar import Event, CalendarConflict
from homebase.repositories.repository import HouseholdScopedRepository


class EventRepository(HouseholdScopedRepository[Event]):
    def __init__(self, db: Session):
        super().__init__(Event, db)

    def list_between(
        self,
        household_id: int,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[Event]:
        query = self.db.query(Event).filter(Event.household_id == household_id)
        if start is not None:
            query = query.filter(Event.end_at > start)
        if end is not None:
            query = query.filter(Event.start_at < end)
        return query.order_by(Event.start_at).all()

    def find_overlapping(self, event: Event) -> List[Event]:
        """Other events of the same household whose interval intersects `event`."""
        return (
            self.db.query(Event)
            .filter(
                Event.household_id == event.household_id,
                Event.id != event.id,
                Event.start_at < event.end_at,
                Event.end_at > event.start_at,
            )
            .all()
        )


class ConflictRepository(HouseholdScopedRepository[CalendarConflict]):
    def __init__(self, db: Session):
        super().__init__(CalendarConflict, db)

    def list_open(self, household_id: int) -> List[CalendarConflict]:
        return (
            self.db.query(CalendarConflict)
            .filter(
                CalendarConflict.household_id == household_id,
                CalendarConflict.resolved.is_(False),
            )
            .order_by(CalendarConflict.id)
            .all()
        )

    def delete_for_event(self, event_id: int) -> None:
        (
            self.db.query(CalendarConflict)
            .filter(
                or_(
                    CalendarConflict.event_id == event_id,
                    CalendarConflict.conflicting_event_id == event_id,
                )
            )
            .delete(synchronize_session=False)
        )
