from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from homebase.core.exception import ValidationException
from homebase.core.routing import MALFORMED_JSON_MESSAGE, GatedRoute, MalformedJSON
from homebase.database import get_db
from homebase.schemas.household import HouseholdResponse, OnboardingHouseholdCreate
from homebase.schemas.result import Result
from homebase.security.guard import with_security
from homebase.services.household_service import HouseholdService

router = APIRouter(route_class=GatedRoute)


async def read_body(request: Request) -> dict:
    body = await request.json()
    if isinstance(body, MalformedJSON):
        raise ValidationException(MALFORMED_JSON_MESSAGE)
    if not isinstance(body, dict):
        raise ValidationException("Request body must be a JSON object")
    return body


@router.post(
    "/household",
    response_model=Result[HouseholdResponse],
    status_code=status.HTTP_201_CREATED,
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": OnboardingHouseholdCreate.model_json_schema()}},
        }
    },
)
async def create_household(request: Request, db: Session = Depends(get_db)):
    """
    Create the caller's household with them as owner.

    The body is only read once the caller has passed the security gate, so
    unauthenticated requests never reach validation or the database.
    """

    async def handler(request, identity, context):
        data = OnboardingHouseholdCreate.model_validate(await read_body(request))
        household = HouseholdService(db).create_for_onboarding(identity, data)
        result = Result.successful(data=HouseholdResponse.model_validate(household))
        return JSONResponse(status_code=status.HTTP_201_CREATED, content=result.model_dump(mode="json"))

    return await with_security(request, handler, db)
