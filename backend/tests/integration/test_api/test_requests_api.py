"""Tests for request, draft and comment endpoints"""
from irequest.domain.enums import DRAFT_DEFAULT_TITLE, StatusKind


class TestCreate:

    def test_json_create(self, client, auth_headers, users):
        response = client.post(
            "/api/requests",
            json={
                "title": "Cấp laptop cho nhân viên mới",
                "description": "Nhân viên bắt đầu thứ Hai",
                "assignedUserId": users["bob"].user_id,
                "formData": {"so_luong": 1},
            },
            headers=auth_headers("alice")
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Tạo yêu cầu thành công"
        assert body["request"]["status_name"] == StatusKind.NEW.value
        assert body["request"]["assignee_name"] == "bob"
        assert body["request"]["form_data"] == {"so_luong": 1}

    def test_form_create_redirects_to_detail(self, client, auth_headers):
        response = client.post(
            "/requests",
            data={"title": "Đăng ký phòng họp", "priorityId": ""},
            headers=auth_headers("alice")
        )
        assert response.status_code == 303
        assert response.headers["location"].startswith("/requests/")

    def test_form_draft_redirects_to_drafts(self, client, auth_headers):
        response = client.post("/requests", data={"isDraft": "true"}, headers=auth_headers("alice"))
        assert response.status_code == 303
        assert response.headers["location"] == "/requests/drafts"

    def test_missing_title(self, client, auth_headers):
        response = client.post("/api/requests", json={"description": "..."}, headers=auth_headers("alice"))
        assert response.status_code == 400
        assert response.json()["message"] == "Tiêu đề không được để trống"

    def test_bad_body_type(self, client, auth_headers):
        response = client.post("/api/requests", json={"priorityId": "cao"}, headers=auth_headers("alice"))
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestListAndDetail:

    def test_list_is_paginated(self, client, auth_headers, make_request):
        for i in range(3):
            make_request(title=f"Yêu cầu {i}")
        response = client.get("/api/requests?limit=2", headers=auth_headers("alice"))
        body = response.json()
        assert (body["total"], body["total_pages"], len(body["items"])) == (3, 2, 2)

    def test_my_and_assigned(self, client, auth_headers, make_request):
        request = make_request()
        mine = client.get("/api/requests/my", headers=auth_headers("alice")).json()
        assigned = client.get("/api/requests/assigned", headers=auth_headers("bob")).json()
        stats = client.get("/api/requests/assigned-stats", headers=auth_headers("bob")).json()

        assert [r["request_id"] for r in mine["items"]] == [request.request_id]
        assert [r["request_id"] for r in assigned["items"]] == [request.request_id]
        assert assigned["items"][0]["is_new"] is True
        assert stats["stats"]["total"] == 1

    def test_detail_after_start_processing(self, client, auth_headers, make_request):
        request = make_request()
        started = client.post(
            f"/api/requests/{request.request_id}/start-processing", headers=auth_headers("bob")
        )
        assert started.json()["message"] == "Đã bắt đầu xử lý yêu cầu"

        detail = client.get(f"/api/requests/{request.request_id}", headers=auth_headers("alice")).json()
        assert detail["request"]["status_name"] == StatusKind.IN_PROGRESS.value
        assert [h["note"] for h in detail["history"]] == ["Request processing started"]
        assert detail["is_owner"] is True

    def test_status_endpoint(self, client, auth_headers, db, make_request):
        request = make_request()
        response = client.post(
            f"/api/requests/{request.request_id}/status",
            json={"statusId": db["statuses"][StatusKind.COMPLETED], "note": "Xong"},
            headers=auth_headers("alice")
        )
        assert response.status_code == 200
        assert response.json()["message"] == "Cập nhật trạng thái thành công"

    def test_outsider_detail_is_forbidden(self, client, auth_headers, make_request):
        request = make_request()
        response = client.get(f"/api/requests/{request.request_id}", headers=auth_headers("carol"))
        assert response.status_code == 403

    def test_dashboard(self, client, auth_headers, make_request):
        make_request()
        make_request(is_draft=True)
        summary = client.get("/api/dashboard", headers=auth_headers("alice")).json()["summary"]
        assert summary["my_requests"] == 1
        assert summary["pending_requests"] == 1
        assert len(summary["recent_activity"]) == 1


class TestAdminEndpoints:

    def test_assign_and_delete(self, client, auth_headers, users, make_request):
        request = make_request(assignee=None)
        denied = client.post(
            f"/api/requests/{request.request_id}/assign",
            json={"assignedUserId": users["carol"].user_id},
            headers=auth_headers("alice")
        )
        assert denied.status_code == 403

        assigned = client.post(
            f"/api/requests/{request.request_id}/assign",
            json={"assignedUserId": users["carol"].user_id},
            headers=auth_headers("admin")
        )
        assert assigned.status_code == 200

        deleted = client.delete(f"/api/requests/{request.request_id}", headers=auth_headers("admin"))
        assert deleted.json()["message"] == "Đã xóa yêu cầu"
        missing = client.get(f"/api/requests/{request.request_id}", headers=auth_headers("admin"))
        assert missing.status_code == 404


class TestDrafts:

    def test_draft_scenario(self, client, auth_headers):
        alice = auth_headers("alice")
        created = client.post("/api/requests", json={"isDraft": True}, headers=alice).json()
        draft_id = created["request"]["request_id"]
        assert created["message"] == "Đã lưu bản nháp"
        assert created["request"]["title"] == DRAFT_DEFAULT_TITLE

        drafts = client.get("/api/requests/drafts", headers=alice).json()
        assert [d["request_id"] for d in drafts["items"]] == [draft_id]
        assert client.get("/api/requests/drafts/count", headers=alice).json()["count"] == 1
        assert client.get("/api/requests", headers=alice).json()["total"] == 0

        hidden = client.get(f"/api/requests/{draft_id}", headers=auth_headers("bob"))
        assert hidden.status_code == 404
        stolen = client.post(f"/api/requests/{draft_id}/publish", headers=auth_headers("bob"))
        assert stolen.status_code == 404

        published = client.post(f"/api/requests/{draft_id}/publish", headers=alice)
        assert published.json() == {"success": True, "message": "Đã gửi yêu cầu"}

        listing = client.get("/api/requests", headers=alice).json()
        assert [r["request_id"] for r in listing["items"]] == [draft_id]
        assert listing["items"][0]["status_name"] == StatusKind.NEW.value
        assert client.get("/api/requests/drafts/count", headers=alice).json()["count"] == 0

    def test_browser_publish_redirects(self, client, auth_headers, make_request):
        draft = make_request(is_draft=True)
        response = client.post(f"/requests/{draft.request_id}/publish", headers=auth_headers("alice"))
        assert response.status_code == 303
        assert response.headers["location"] == f"/requests/{draft.request_id}"


class TestComments:

    def test_add_and_list(self, client, auth_headers, make_request):
        request = make_request()
        created = client.post(
            f"/api/requests/{request.request_id}/comments",
            json={"content": "Đã chuyển bộ phận IT", "isInternal": True},
            headers=auth_headers("bob")
        )
        assert created.status_code == 201
        assert created.json()["message"] == "Đã thêm bình luận"

        as_creator = client.get(f"/api/requests/{request.request_id}/comments", headers=auth_headers("alice"))
        as_assignee = client.get(f"/api/requests/{request.request_id}/comments", headers=auth_headers("bob"))
        assert as_creator.json()["comments"] == []
        assert len(as_assignee.json()["comments"]) == 1

    def test_browser_comment_redirects_to_anchor(self, client, auth_headers, make_request):
        request = make_request()
        response = client.post(
            f"/requests/{request.request_id}/comments",
            data={"content": "Cảm ơn"},
            headers=auth_headers("alice")
        )
        assert response.status_code == 303
        assert response.headers["location"] == f"/requests/{request.request_id}#comments"

    def test_outsider(self, client, auth_headers, make_request):
        request = make_request()
        response = client.post(
            f"/api/requests/{request.request_id}/comments",
            json={"content": "?"},
            headers=auth_headers("carol")
        )
        assert response.status_code == 403


class TestRouting:

    def test_collection_routes_mounted_for_api_and_browser(self, client):
        from irequest.main import app

        paths = {(route.path, method) for route in app.routes for method in (getattr(route, "methods", None) or ())}
        for prefix in ("/api", ""):
            assert (f"{prefix}/requests", "GET") in paths
            assert (f"{prefix}/requests", "POST") in paths
            assert (f"{prefix}/requests/{{request_id}}/approve", "POST") in paths


class TestForeignDrafts:

    def test_outsider_sees_not_found_everywhere(self, client, auth_headers, make_request):
        draft = make_request(is_draft=True)
        carol = auth_headers("carol")
        assert client.get(f"/api/requests/{draft.request_id}", headers=carol).status_code == 404
        approve = client.post(f"/api/requests/{draft.request_id}/approve", json={}, headers=carol)
        assert approve.status_code == 404
        assert approve.json()["error"]["code"] == "REQUEST_NOT_FOUND"

    def test_assignee_cannot_move_draft(self, client, auth_headers, make_request):
        draft = make_request(is_draft=True)
        bob = auth_headers("bob")
        started = client.post(f"/api/requests/{draft.request_id}/start-processing", headers=bob)
        assert started.status_code == 404
        rejected = client.post(f"/api/requests/{draft.request_id}/reject", json={"note": "x"}, headers=bob)
        assert rejected.status_code == 404
        assert client.get("/api/requests/drafts/count", headers=auth_headers("alice")).json()["count"] == 1


class TestCommentForms:

    def test_form_post_with_repeated_mentions(self, client, auth_headers, users, make_request):
        request = make_request()
        response = client.post(
            f"/requests/{request.request_id}/comments",
            data={"content": "Nhờ hai bạn xem", "mentionedUserIds": [users["carol"].user_id, users["admin"].user_id]},
            headers=auth_headers("bob")
        )
        assert response.status_code == 303

        comments = client.get(f"/api/requests/{request.request_id}/comments", headers=auth_headers("bob")).json()
        assert comments["comments"][0]["mentioned_user_ids"] == [users["carol"].user_id, users["admin"].user_id]
        unread = client.get("/api/notifications/unread-count", headers=auth_headers("carol")).json()
        assert unread["unread_count"] == 1

    def test_form_post_with_single_mention(self, client, auth_headers, users, make_request):
        request = make_request()
        response = client.post(
            f"/requests/{request.request_id}/comments",
            data={"content": "hi", "mentionedUserIds": users["carol"].user_id},
            headers=auth_headers("bob")
        )
        assert response.status_code == 303


class TestCommentEditing:

    def _comment(self, client, headers, request_id, content):
        response = client.post(f"/api/requests/{request_id}/comments", json={"content": content}, headers=headers)
        return response.json()["comment_id"]

    def test_edit_and_delete(self, client, auth_headers, make_request):
        request = make_request()
        alice = auth_headers("alice")
        comment_id = self._comment(client, alice, request.request_id, "Ban đầu")

        edited = client.put(f"/api/requests/comments/{comment_id}", json={"content": "Đã sửa"}, headers=alice)
        assert edited.json() == {"success": True, "message": "Đã cập nhật bình luận"}
        listed = client.get(f"/api/requests/{request.request_id}/comments", headers=alice).json()["comments"]
        assert (listed[0]["content"], listed[0]["is_edited"]) == ("Đã sửa", True)

        forbidden = client.delete(f"/api/requests/comments/{comment_id}", headers=auth_headers("bob"))
        assert forbidden.status_code == 403

        deleted = client.delete(f"/requests/comments/{comment_id}", headers=alice)
        assert deleted.status_code == 303
        assert deleted.headers["location"] == f"/requests/{request.request_id}#comments"
        assert client.get(f"/api/requests/{request.request_id}/comments", headers=alice).json()["comments"] == []

    def test_unknown_comment(self, client, auth_headers):
        response = client.put("/api/requests/comments/999", json={"content": "x"}, headers=auth_headers("alice"))
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "COMMENT_NOT_FOUND"
