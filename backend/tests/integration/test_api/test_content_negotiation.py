"""Tests for JSON vs browser responses on success and failure"""
from sqlalchemy import delete

from irequest.domain.enums import StatusKind
from irequest.repositories.database import query
from irequest.repositories.status_registry import reset_status_registry
from irequest.repositories.tables import StatusRow

JSON = {"Accept": "application/json"}
XHR = {"X-Requested-With": "XMLHttpRequest"}


class TestForbidden:

    def test_api_prefix_gets_json(self, client, auth_headers, make_request):
        request = make_request()
        response = client.post(f"/api/requests/{request.request_id}/approve", headers=auth_headers("carol"))

        assert response.status_code == 403
        body = response.json()
        assert body["success"] is False
        assert body["message"] == "Bạn không có quyền xử lý yêu cầu này"
        assert body["error"]["code"] == "PERMISSION_DENIED"

    def test_accept_header_gets_json(self, client, auth_headers, make_request):
        request = make_request()
        response = client.post(
            f"/requests/{request.request_id}/approve",
            headers={**auth_headers("carol"), **JSON}
        )
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "PERMISSION_DENIED"

    def test_xhr_gets_json(self, client, auth_headers, make_request):
        request = make_request()
        response = client.post(
            f"/requests/{request.request_id}/approve",
            headers={**auth_headers("carol"), **XHR}
        )
        assert response.status_code == 403
        assert response.headers["content-type"].startswith("application/json")

    def test_browser_gets_error_page(self, client, auth_headers, make_request):
        request = make_request()
        response = client.post(f"/requests/{request.request_id}/approve", headers=auth_headers("carol"))

        assert response.status_code == 403
        assert response.headers["content-type"].startswith("text/html")
        assert "Không có quyền truy cập" in response.text
        assert "Bạn không có quyền xử lý yêu cầu này" in response.text


class TestSuccess:

    def test_api_approve(self, client, auth_headers, make_request):
        request = make_request()
        response = client.post(
            f"/api/requests/{request.request_id}/approve",
            json={"note": "Đồng ý"},
            headers=auth_headers("bob")
        )
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Đã phê duyệt yêu cầu"}

    def test_browser_approve_redirects_to_detail(self, client, auth_headers, make_request):
        request = make_request()
        response = client.post(
            f"/requests/{request.request_id}/approve",
            data={"note": "OK"},
            headers=auth_headers("bob")
        )
        assert response.status_code == 303
        assert response.headers["location"] == f"/requests/{request.request_id}"

    def test_browser_reject_redirects_to_assigned_list(self, client, auth_headers, make_request):
        request = make_request()
        response = client.post(
            f"/requests/{request.request_id}/reject",
            data={"note": "Không đủ ngân sách"},
            headers=auth_headers("bob")
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/requests/assigned"


class TestErrors:

    def test_blank_reject_note(self, client, auth_headers, make_request):
        request = make_request()
        response = client.post(
            f"/api/requests/{request.request_id}/reject",
            json={"note": "   "},
            headers=auth_headers("bob")
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Vui lòng nhập lý do từ chối"

    def test_not_found_html(self, client, auth_headers, db):
        response = client.get("/requests/987654", headers={**auth_headers("alice"), "Accept": "text/html"})
        assert response.status_code == 404
        assert "Không tìm thấy" in response.text

    def test_query_validation_is_400(self, client, auth_headers):
        response = client.get("/api/requests?page=0", headers=auth_headers("alice"))
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_unauthenticated(self, client, db):
        api = client.get("/api/requests")
        assert api.status_code == 401
        assert api.json()["error"]["code"] == "AUTHENTICATION_ERROR"

        browser = client.get("/requests")
        assert browser.status_code == 303
        assert browser.headers["location"] == "/auth/login"

    def test_missing_seed_status_is_500(self, client, auth_headers, make_request):
        request = make_request()
        query(delete(StatusRow).where(StatusRow.status_name == StatusKind.COMPLETED.value))
        reset_status_registry()

        response = client.post(f"/api/requests/{request.request_id}/approve", headers=auth_headers("bob"))
        assert response.status_code == 500
        assert response.json()["error"]["code"] == "CONFIGURATION_ERROR"

    def test_correlation_id_is_echoed(self, client, db):
        response = client.get("/api/requests", headers={"X-Correlation-Id": "COR-test-1"})
        assert response.headers["X-Correlation-Id"] == "COR-test-1"


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["database"]["status"] == "healthy"
