"""Tests for request listings, counts and visibility"""
from sqlalchemy import select

from irequest.domain.enums import PriorityName, StatusKind
from irequest.domain.models import RequestFilters
from irequest.engine.engine import RequestLifecycleEngine
from irequest.repositories.database import query
from irequest.repositories.request_repo import RequestRepository
from irequest.repositories.tables import RequestStepHistoryRow


def _ids(requests):
    return [r.request_id for r in requests]


class TestDraftsNeverLeak:

    def test_excluded_from_general_listings(self, users, make_request):
        repo = RequestRepository()
        draft = make_request(is_draft=True)
        published = make_request()
        alice, bob, admin = users["alice"], users["bob"], users["admin"]

        assert _ids(repo.list_requests(alice)) == [published.request_id]
        assert repo.count_requests(alice) == 1
        assert _ids(repo.list_requests(admin)) == [published.request_id]
        assert _ids(repo.list_by_creator(alice.user_id)) == [published.request_id]
        assert _ids(repo.list_assigned(bob.user_id)) == [published.request_id]
        assert repo.count_assigned(bob.user_id) == 1

        summary = repo.dashboard(alice.user_id)
        assert summary.my_requests == 1
        assert _ids(summary.recent_activity) == [published.request_id]
        assert draft.request_id not in _ids(summary.recent_activity)

    def test_only_in_creators_drafts(self, users, make_request):
        repo = RequestRepository()
        draft = make_request(is_draft=True)

        assert _ids(repo.list_drafts(users["alice"].user_id)) == [draft.request_id]
        assert repo.count_drafts(users["alice"].user_id) == 1
        assert repo.list_drafts(users["bob"].user_id) == []
        assert repo.count_drafts(users["bob"].user_id) == 0


class TestVisibility:

    def test_non_admin_sees_created_or_assigned(self, users, make_request):
        repo = RequestRepository()
        mine = make_request(creator="alice", assignee="bob")
        others = make_request(creator="carol", assignee="admin")

        assert _ids(repo.list_requests(users["bob"])) == [mine.request_id]
        assert _ids(repo.list_requests(users["carol"])) == [others.request_id]
        assert sorted(_ids(repo.list_requests(users["admin"]))) == sorted([mine.request_id, others.request_id])

    def test_filters_and_paging(self, db, users, make_request):
        repo = RequestRepository()
        urgent_id = db["priorities"][PriorityName.URGENT]
        first = make_request(title="Cài đặt phần mềm kế toán", priority_id=urgent_id)
        make_request(title="Đổi mật khẩu email")
        make_request(title="Mượn máy chiếu")

        alice = users["alice"]
        assert _ids(repo.list_requests(alice, RequestFilters(priority_id=urgent_id))) == [first.request_id]
        assert repo.count_requests(alice, RequestFilters(search="email")) == 1
        assert len(repo.list_requests(alice, page=1, limit=2)) == 2
        assert len(repo.list_requests(alice, page=2, limit=2)) == 1


class TestAssigned:

    def test_ordered_by_priority_then_newest(self, db, users, make_request):
        repo = RequestRepository()
        priorities = db["priorities"]
        low = make_request(priority_id=priorities[PriorityName.LOW])
        urgent = make_request(priority_id=priorities[PriorityName.URGENT])
        medium = make_request(priority_id=priorities[PriorityName.MEDIUM])

        listed = repo.list_assigned(users["bob"].user_id)
        assert _ids(listed) == [urgent.request_id, medium.request_id, low.request_id]
        assert all(r.is_new for r in listed)
        assert all(r.relative_time == "Vừa xong" for r in listed)

    def test_stats(self, db, users, make_request):
        repo = RequestRepository()
        engine = RequestLifecycleEngine()
        make_request(priority_id=db["priorities"][PriorityName.URGENT])
        done = make_request()
        make_request(is_draft=True)
        engine.update_status(done.request_id, db["statuses"][StatusKind.COMPLETED], None)

        stats = repo.assigned_stats(users["bob"].user_id)
        assert (stats.total, stats.urgent, stats.pending, stats.completed) == (2, 1, 1, 1)


class TestDetailHelpers:

    def test_joined_display_fields(self, users, make_request):
        request = make_request(form_data={"may_in": "HP 402"})
        loaded = RequestRepository().get_request(request.request_id)

        assert loaded.status_name == StatusKind.NEW.value
        assert loaded.is_final is False
        assert loaded.priority_name == PriorityName.MEDIUM.value
        assert loaded.creator_name == "alice"
        assert loaded.assignee_name == "bob"
        assert loaded.workflow_name is not None
        assert loaded.form_data == {"may_in": "HP 402"}

    def test_workflow_steps_in_order(self, make_request):
        request = make_request()
        steps = RequestRepository().get_workflow_steps(request.workflow_id)
        assert [s.step_order for s in steps] == [1, 2, 3]
        assert steps[0].status_name == StatusKind.NEW.value

    def test_views_recorded_once_per_user(self, users, make_request):
        repo = RequestRepository()
        request = make_request()
        repo.add_view(request.request_id, users["bob"].user_id)
        repo.add_view(request.request_id, users["bob"].user_id)
        repo.add_view(request.request_id, users["alice"].user_id)
        assert repo.count_views(request.request_id) == 2

    def test_delete_removes_dependent_rows(self, db, users, make_request):
        repo = RequestRepository()
        request = make_request()
        RequestLifecycleEngine().start_processing(request.request_id)
        repo.add_view(request.request_id, users["bob"].user_id)

        assert repo.delete_request(request.request_id) is True
        assert repo.get_request(request.request_id) is None
        remaining = query(
            select(RequestStepHistoryRow).where(RequestStepHistoryRow.request_id == request.request_id)
        ).rows
        assert remaining == []
        assert repo.delete_request(request.request_id) is False


class TestDashboard:

    def test_pending_counts_only_own_requests(self, users, make_request):
        repo = RequestRepository()
        make_request(creator="alice", assignee="bob")

        bob = repo.dashboard(users["bob"].user_id)
        assert (bob.my_requests, bob.assigned_to_me, bob.pending_requests) == (0, 1, 0)
        assert len(bob.recent_activity) == 1

        alice = repo.dashboard(users["alice"].user_id)
        assert (alice.my_requests, alice.assigned_to_me, alice.pending_requests) == (1, 0, 1)

    def test_finished_requests_are_not_pending(self, users, make_request):
        request = make_request()
        RequestLifecycleEngine().reject_request(request.request_id, users["alice"], "Hủy")
        assert RequestRepository().dashboard(users["alice"].user_id).pending_requests == 0
