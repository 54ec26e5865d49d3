from sqlalchemy.orm import Session
from homebase.models.audit import AuditLog
from homebase.repositories.repository import HouseholdScopedRepository


class AuditLogRepository(HouseholdScopedRepository[AuditLog]):
    def __init__(self, db: Session):
        super().__init__(AuditLog, db)
