"""Tests for PermissionGuard"""
import pytest

from irequest.domain.enums import StatusKind
from irequest.domain.models import AuthContext, Request
from irequest.engine.permission_guard import PermissionGuard
from irequest.utils.time import utc_now


def _request(status: StatusKind = StatusKind.NEW, creator: str = "u-alice", assignee: str = "u-bob") -> Request:
    now = utc_now()
    return Request(
        request_id=7,
        title="Cấp quyền VPN",
        users_id=creator,
        assigned_user_id=assignee,
        status_id=2,
        status_name=status.value,
        created_at=now,
        updated_at=now,
    )


def _ctx(user_id: str, is_admin: bool = False) -> AuthContext:
    return AuthContext(user_id=user_id, user_name=user_id, is_admin=is_admin)


class TestCanProcess:

    def test_creator_and_assignee_may_process(self):
        guard = PermissionGuard()
        request = _request()
        assert guard.can_process("u-alice", request)
        assert guard.can_process("u-bob", request)

    def test_other_user_may_not(self):
        assert not PermissionGuard().can_process("u-carol", _request())

    def test_admin_is_not_special_by_default(self):
        guard = PermissionGuard(admin_can_process=False)
        assert not guard.can_process("u-admin", _request(), is_admin=True)

    def test_admin_extension(self):
        guard = PermissionGuard(admin_can_process=True)
        assert guard.can_process("u-admin", _request(), is_admin=True)
        assert not guard.can_process("u-carol", _request(), is_admin=False)

    def test_missing_request(self):
        assert not PermissionGuard().can_process("u-alice", None)

    @pytest.mark.parametrize("user_id", ["", None])
    def test_blank_ids_never_match_unassigned(self, user_id):
        request = _request(assignee=None)
        assert not PermissionGuard().can_process(user_id, request)


class TestVisibility:

    def test_draft_visible_only_to_creator(self):
        guard = PermissionGuard()
        draft = _request(status=StatusKind.DRAFT)
        assert guard.can_view(_ctx("u-alice"), draft)
        assert not guard.can_view(_ctx("u-bob"), draft)
        assert not guard.can_view(_ctx("u-admin", is_admin=True), draft)

    def test_published_request(self):
        guard = PermissionGuard()
        request = _request()
        assert guard.can_view(_ctx("u-bob"), request)
        assert guard.can_view(_ctx("u-admin", is_admin=True), request)
        assert not guard.can_view(_ctx("u-carol"), request)

    def test_internal_comments(self):
        guard = PermissionGuard()
        request = _request()
        assert guard.can_see_internal_comments(_ctx("u-bob"), request)
        assert guard.can_see_internal_comments(_ctx("u-admin", is_admin=True), request)
        assert not guard.can_see_internal_comments(_ctx("u-alice"), request)

    def test_assign_and_delete_are_admin_only(self):
        guard = PermissionGuard()
        assert guard.can_assign(_ctx("u-admin", is_admin=True))
        assert guard.can_delete(_ctx("u-admin", is_admin=True))
        assert not guard.can_assign(_ctx("u-alice"))
        assert not guard.can_delete(_ctx("u-alice"))
