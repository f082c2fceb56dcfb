"""Tests for query retry and transaction atomicity"""
import pytest
from sqlalchemy import insert, select, text, update
from sqlalchemy.exc import IntegrityError, OperationalError

from irequest.config.settings import settings
from irequest.repositories import database
from irequest.repositories.tables import PriorityRow


def _flaky_session(monkeypatch, failures, error):
    """Replace get_session so the first `failures` calls raise `error`"""
    real = database.get_session
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) <= failures:
            raise error
        return real()

    monkeypatch.setattr(database, "get_session", flaky)
    return calls


def _reset_error():
    return OperationalError("SELECT 1", {}, Exception("connection reset by peer"))


class TestQueryRetry:

    def test_transient_errors_are_retried_with_linear_backoff(self, db, monkeypatch):
        monkeypatch.setattr(settings, "db_retry_backoff_seconds", 0.5)
        calls = _flaky_session(monkeypatch, 2, _reset_error())
        pauses = []

        result = database.query(text("SELECT 1"), retries=3, sleep=pauses.append)

        assert result.scalar() == 1
        assert len(calls) == 3
        assert pauses == [0.5, 1.0]

    def test_gives_up_after_last_attempt(self, db, monkeypatch):
        monkeypatch.setattr(settings, "db_retry_backoff_seconds", 1.0)
        calls = _flaky_session(monkeypatch, 10, _reset_error())
        pauses = []

        with pytest.raises(OperationalError):
            database.query(text("SELECT 1"), retries=3, sleep=pauses.append)

        assert len(calls) == 3
        assert pauses == [1.0, 2.0]

    def test_non_transient_errors_are_not_retried(self, db, monkeypatch):
        error = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: Priority.PriorityName"))
        calls = _flaky_session(monkeypatch, 1, error)
        pauses = []

        with pytest.raises(IntegrityError):
            database.query(text("SELECT 1"), retries=3, sleep=pauses.append)

        assert len(calls) == 1
        assert pauses == []

    @pytest.mark.parametrize("message,expected", [
        ("connection reset by peer", True),
        ("could not translate host name \"db\"", True),
        ("canceling statement due to statement timeout", True),
        ("syntax error at or near SELECT", False),
    ])
    def test_is_transient_error(self, message, expected):
        error = OperationalError("SELECT 1", {}, Exception(message))
        assert database.is_transient_error(error) is expected


class TestTransaction:

    def test_all_or_nothing(self, db):
        before = database.query(select(PriorityRow.priority_name).order_by(PriorityRow.sort_order)).scalars()

        with pytest.raises(IntegrityError):
            database.transaction([
                update(PriorityRow).where(PriorityRow.sort_order == 1).values({PriorityRow.color_code: "#000000"}),
                # Duplicate name violates the unique constraint
                insert(PriorityRow).values({
                    PriorityRow.priority_name: before[0],
                    PriorityRow.sort_order: 9,
                    PriorityRow.is_active: True,
                }),
            ])

        colors = database.query(select(PriorityRow.color_code).where(PriorityRow.sort_order == 1)).scalars()
        assert colors == ["#dc3545"]

    def test_returns_one_result_per_statement(self, db):
        results = database.transaction([
            update(PriorityRow).where(PriorityRow.is_active.is_(True)).values({PriorityRow.is_active: True}),
            select(PriorityRow.priority_id),
        ])
        assert results[0].rowcount == 4
        assert len(results[1].rows) == 4


def test_health_check(db):
    health = database.health_check()
    assert health["status"] == "healthy"
    assert health["dialect"] == "sqlite"


class TestResultCollection:

    def test_entity_select(self, db):
        result = database.query(select(PriorityRow).order_by(PriorityRow.sort_order))
        priorities = result.scalars()
        assert [p.sort_order for p in priorities] == [1, 2, 3, 4]
        assert isinstance(priorities[0], PriorityRow)
        assert result.rowcount == 4

    def test_entity_select_without_match(self, db):
        result = database.query(select(PriorityRow).where(PriorityRow.sort_order == 99))
        assert result.rows == []
        assert result.scalar() is None

    def test_update_reports_rowcount(self, db):
        result = database.query(
            update(PriorityRow).where(PriorityRow.sort_order <= 2).values({PriorityRow.is_active: True})
        )
        assert result.rows == []
        assert result.rowcount == 2
