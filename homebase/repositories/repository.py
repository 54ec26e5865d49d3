from sqlalchemy.orm import Session
from typing import Generic, Type, TypeVar, List, Optional, Dict, Any
from homebase.models.base import Base

T = TypeVar("T", bound=Base)


class BaseRepository(Generic[T]):
    """Base repository with common CRUD operations."""

    def __init__(self, model: Type[T], db: Session):
        """
        Initialize repository with model and database session.

        Args:
            model: The SQLAlchemy model class
            db: Database session
        """
        self.model = model
        self.db = db

    def get(self, id: Any) -> Optional[T]:
        """Get a single record by ID."""
        return self.db.query(self.model).filter(self.model.id == id).first()

    def create(self, obj: T) -> T:
        """Create a new record."""
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def update_obj(self, obj: T, data: Dict[str, Any]) -> T:
        """Apply `data` to an already loaded record."""
        for key, value in data.items():
            if hasattr(obj, key):
                setattr(obj, key, value)

        self.db.commit()
        self.db.refresh(obj)
        return obj

    def delete_obj(self, obj: T) -> None:
        self.db.delete(obj)
        self.db.commit()


class HouseholdScopedRepository(BaseRepository[T]):
    """
    Repository for records carrying a household_id. Lookups by id always
    take the household id as well, so a record from another household is
    indistinguishable from a missing one.
    """

    def get_for_household(self, id: Any, household_id: int) -> Optional[T]:
        return (
            self.db.query(self.model)
            .filter(self.model.id == id, self.model.household_id == household_id)
            .first()
        )

    def list_for_household(self, household_id: int, skip: int = 0, limit: int = 100) -> List[T]:
        return (
            self.db.query(self.model)
            .filter(self.model.household_id == household_id)
            .order_by(self.model.id)
            .offset(skip)
            .limit(limit)
            .all()
        )
