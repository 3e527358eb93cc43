"""
Unit Tests for session state and route resolution
"""
import pytest

from student_hub.core.session import (
    Identity,
    RouteAction,
    SessionContext,
    SessionState,
    resolve_route,
)
from student_hub.models.user import Role


@pytest.fixture
def session(users):
    return SessionContext(users)


class TestSessionLifecycle:

    def test_starts_loading(self, session):
        assert session.state == SessionState.LOADING

    def test_loading_never_redirects(self, session):
        for path in ("/student-dashboard/profile", "/faculty-dashboard/approval", "/"):
            assert resolve_route(session, path).action == RouteAction.LOADING

    async def test_identity_resolves_role(self, session, student):
        await session.on_identity_changed(Identity(uid=student.uid))

        assert session.state == SessionState.AUTHENTICATED
        assert session.role == Role.STUDENT

    async def test_sign_out(self, session, student):
        await session.on_identity_changed(Identity(uid=student.uid))
        session.sign_out()

        assert session.state == SessionState.ANONYMOUS
        assert session.role is None


class TestResolveRoute:

    async def test_anonymous_redirected_to_login(self, session):
        await session.on_identity_changed(None)

        decision = resolve_route(session, "/student-dashboard/achievements")

        assert decision.action == RouteAction.REDIRECT
        assert decision.target == "/login"
        assert decision.reason == "unauthenticated"

    async def test_role_mismatch_goes_to_login(self, session, student):
        await session.on_identity_changed(Identity(uid=student.uid))

        decision = resolve_route(session, "/faculty-dashboard/approval")

        assert decision.action == RouteAction.REDIRECT
        assert decision.target == "/login"
        assert decision.reason == "role_mismatch"

    async def test_missing_profile_is_a_mismatch(self, session):
        await session.on_identity_changed(Identity(uid="ghost"))

        assert resolve_route(session, "/student-dashboard/profile").reason == "role_mismatch"

    async def test_root_goes_to_own_dashboard(self, session, faculty):
        await session.on_identity_changed(Identity(uid=faculty.uid))

        assert resolve_route(session, "/").target == "/faculty-dashboard"

    async def test_area_root_opens_profile(self, session, student):
        await session.on_identity_changed(Identity(uid=student.uid))

        assert resolve_route(session, "/student-dashboard").target == "/student-dashboard/profile"

    async def test_known_and_unknown_pages(self, session, faculty):
        await session.on_identity_changed(Identity(uid=faculty.uid))

        assert resolve_route(session, "/faculty-dashboard/analytics").action == RouteAction.RENDER
        assert resolve_route(session, "/faculty-dashboard/pathway").action == RouteAction.NOT_FOUND
        assert resolve_route(session, "/nowhere").action == RouteAction.NOT_FOUND

    async def test_signed_in_user_leaves_login(self, session, student):
        await session.on_identity_changed(Identity(uid=student.uid))

        decision = resolve_route(session, "/login")

        assert decision.action == RouteAction.REDIRECT
        assert decision.target == "/"

    async def test_portfolio_is_public(self, session):
        await session.on_identity_changed(None)

        assert resolve_route(session, "/portfolio/student-1").action == RouteAction.RENDER
