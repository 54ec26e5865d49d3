from typing import Any, Optional, TypeVar

from homebase.core.exception import AuthorizationException, ResourceNotFoundException
from homebase.repositories.repository import HouseholdScopedRepository
from homebase.security import events
from homebase.security.membership import HouseholdContext

T = TypeVar("T")

PRIVILEGED_ROLES = ("owner", "admin")


def get_owned_or_404(
    repo: HouseholdScopedRepository[T],
    resource_id: Any,
    household: HouseholdContext,
    resource_name: str = "Resource",
) -> T:
    """
    Load a record only if it belongs to the caller's household. A record in
    another household gets the same 404 as a missing one.
    """
    obj = repo.get_for_household(resource_id, household.household_id)
    if obj is None:
        raise ResourceNotFoundException(resource_name)
    return obj


def require_household_match(household: HouseholdContext, household_id: int, resource_name: str = "Household") -> None:
    """A household id in the path must be the caller's own."""
    if household.household_id != household_id:
        raise ResourceNotFoundException(
            resource_name, message="Household not found or access denied"
        )


def require_role(
    household: HouseholdContext,
    *roles: str,
    user_id: Optional[str] = None,
    action: Optional[str] = None,
) -> None:
    """Raise 403 unless the caller's role is one of `roles`."""
    if household.role in roles:
        return
    events.emit_security_event(
        events.AUTHZ_DENY,
        actor={"user_id": user_id, "household_id": household.household_id, "role": household.role},
        meta={"action": action, "required_roles": ",".join(roles)},
    )
    raise AuthorizationException("Insufficient permissions")


def require_creator_or_role(
    household: HouseholdContext,
    creator_id: Optional[str],
    user_id: str,
    *roles: str,
    action: Optional[str] = None,
) -> None:
    """Allow the record's creator, or a member holding one of `roles`."""
    if creator_id is not None and creator_id == user_id:
        return
    require_role(household, *roles, user_id=user_id, action=action)
