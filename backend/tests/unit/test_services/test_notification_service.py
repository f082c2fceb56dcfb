"""Tests for NotificationService"""
import pytest
from sqlalchemy.exc import OperationalError

from irequest.domain.enums import NotificationType
from irequest.domain.errors import NotificationNotFoundError
from irequest.services.notification_service import NotificationService


@pytest.fixture
def service(db):
    return NotificationService()


def _seed(service, user_id, count):
    return [
        service.repo.create_notification(user_id, NotificationType.COMMENT, f"Thông báo {i}", "...")
        for i in range(count)
    ]


def test_bell_lifecycle(service, users):
    alice = users["alice"].user_id
    ids = _seed(service, alice, 3)

    assert service.unread_count(alice) == 3
    assert [n.notification_id for n in service.list_notifications(alice)] == list(reversed(ids))

    service.mark_read(ids[0], alice)
    assert service.unread_count(alice) == 2
    assert len(service.list_notifications(alice, unread_only=True)) == 2

    assert service.mark_all_read(alice) == 2
    assert service.clear_read(alice) == 3
    assert service.count_all(alice) == 0


def test_cannot_touch_someone_elses_notification(service, users):
    [notification_id] = _seed(service, users["alice"].user_id, 1)
    with pytest.raises(NotificationNotFoundError):
        service.mark_read(notification_id, users["bob"].user_id)
    with pytest.raises(NotificationNotFoundError):
        service.delete(notification_id, users["bob"].user_id)
    service.delete(notification_id, users["alice"].user_id)


def test_failure_to_notify_is_swallowed(service, users, make_request, monkeypatch):
    request = make_request()

    def broken(*args, **kwargs):
        raise OperationalError("INSERT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(service.repo, "create_notification", broken)
    assert service.notify_approved(request, users["bob"]) is None
