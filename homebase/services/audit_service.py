import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from homebase.models.audit import AuditLog
from homebase.repositories.audit_repository import AuditLogRepository

logger = logging.getLogger(__name__)


class AuditService:
    """
    Writes audit rows for privileged changes. The change being audited has
    already been committed, so a failed audit write is logged and does not
    fail the request.
    """

    def __init__(self, db: Session):
        self.db = db
        self.audit_repo = AuditLogRepository(db)

    def record(
        self,
        action: str,
        *,
        user_id: Optional[str] = None,
        household_id: Optional[int] = None,
        target_table: Optional[str] = None,
        target_id: Optional[Any] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuditLog]:
        entry = AuditLog(
            action=action,
            user_id=user_id,
            household_id=household_id,
            target_table=target_table,
            target_id=str(target_id) if target_id is not None else None,
            meta=meta or {},
        )
        try:
            return self.audit_repo.create(entry)
        except SQLAlchemyError:
            self.db.rollback()
            logger.warning(
                "Failed to write audit log",
                exc_info=True,
                extra={"audit_action": action, "household_id": household_id},
            )
            return None
