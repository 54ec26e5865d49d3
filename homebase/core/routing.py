"""
Route class for routers whose endpoints sit behind `SecurityGate`.

FastAPI decodes a JSON body before it resolves any dependency, so a
malformed body would be reported as a 400 before the rate limit and the
session check had run. `GatedRoute` defers the decode error: the body is
handed to validation as a `MalformedJSON` marker, dependencies (the gate)
run first, and only then is the request rejected as invalid JSON.
"""
import json
from typing import Callable

from fastapi import Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute

from homebase.core.exception import ValidationException

MALFORMED_JSON_MESSAGE = "Request body must be valid JSON"


class MalformedJSON:
    """Stands in for a request body that could not be decoded."""

    def __init__(self, error: Exception):
        self.error = error

    def __repr__(self) -> str:
        return "<malformed JSON body>"


class GatedRequest(Request):
    async def json(self):
        try:
            return await super().json()
        except (json.JSONDecodeError, UnicodeDecodeError) as ex:
            self._json = MalformedJSON(ex)
            return self._json


def is_malformed_json(ex: RequestValidationError) -> bool:
    return any(isinstance(error.get("input"), MalformedJSON) for error in ex.errors())


class GatedRoute(APIRoute):
    def get_route_handler(self) -> Callable:
        original_route_handler = super().get_route_handler()

        async def gated_route_handler(request: Request) -> Response:
            request = GatedRequest(request.scope, request.receive)
            try:
                return await original_route_handler(request)
            except RequestValidationError as ex:
                if is_malformed_json(ex):
                    raise ValidationException(MALFORMED_JSON_MESSAGE) from ex
                raise

        return gated_route_handler
