from datetime import timedelta

import pytest
from starlette.requests import Request

from homebase.config import settings
from homebase.core.exception import AuthenticationException, ResourceNotFoundException
from homebase.core.plans import PlanTier
from homebase.security.membership import MembershipResolver
from homebase.security.session import (
    Identity,
    SessionResolver,
    create_session_token,
    decode_session_token,
    extract_token,
)


def make_request(headers=None, cookies=None) -> Request:
    raw_headers = [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()]
    if cookies:
        cookie = "; ".join(f"{k}={v}" for k, v in cookies.items())
        raw_headers.append((b"cookie", cookie.encode()))
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/api/households/current",
        "headers": raw_headers,
        "query_string": b"",
        "client": ("127.0.0.1", 50000),
    }
    return Request(scope)


@pytest.mark.unit
class TestSessionResolver:
    """Unit tests for turning requests into identities."""

    def test_bearer_token(self, alice):
        token = create_session_token(alice)
        identity = SessionResolver().resolve(make_request({"Authorization": f"Bearer {token}"}))
        assert identity == alice

    def test_session_cookie(self, alice):
        token = create_session_token(alice)
        request = make_request(cookies={settings.AUTH_SESSION_COOKIE: token})
        assert extract_token(request) == token
        assert SessionResolver().resolve(request).id == alice.id

    def test_missing_token_is_401(self):
        with pytest.raises(AuthenticationException) as exc_info:
            SessionResolver().resolve(make_request())
        assert exc_info.value.status_code == 401

    def test_expired_token_rejected(self, alice):
        token = create_session_token(alice, expires_delta=timedelta(seconds=-30))
        assert decode_session_token(token) is None
        assert SessionResolver().resolve_optional(make_request({"Authorization": f"Bearer {token}"})) is None

    def test_foreign_signature_rejected(self, alice):
        import jwt

        forged = jwt.encode({"sub": alice.id}, "another-secret-that-is-long-enough-32b", algorithm="HS256")
        assert decode_session_token(forged) is None

    def test_token_without_subject_rejected(self):
        import jwt

        token = jwt.encode({"email": "x@example.com"}, settings.AUTH_JWT_SECRET, algorithm="HS256")
        assert decode_session_token(token) is None

    def test_non_bearer_scheme_ignored(self, alice):
        token = create_session_token(alice)
        assert extract_token(make_request({"Authorization": f"Basic {token}"})) is None


@pytest.mark.unit
class TestMembershipResolver:
    """Unit tests for user to household resolution."""

    def test_resolves_household_role_and_plan(self, db_session, alice_household, alice):
        context = MembershipResolver(db_session).resolve(alice.id)

        assert context.household_id == alice_household.household_id
        assert context.role == "owner"
        assert context.plan == PlanTier.FREE
        assert context.is_owner

    def test_no_household_is_404_not_401(self, db_session):
        with pytest.raises(ResourceNotFoundException) as exc_info:
            MembershipResolver(db_session).resolve("user_without_household")

        assert exc_info.value.status_code == 404
        assert exc_info.value.detail == "No household"

    def test_plan_follows_household(self, db_session, alice_household, alice, set_plan):
        set_plan(alice_household.household_id, PlanTier.PRO_PLUS)
        assert MembershipResolver(db_session).resolve(alice.id).plan == PlanTier.PRO_PLUS

    def test_identity_model(self):
        identity = Identity(id="user_1")
        assert identity.email is None and identity.name is None
