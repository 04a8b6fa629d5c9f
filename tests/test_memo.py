"""Tests for writing, editing, deleting and starring memos."""

import sqlite3

import pytest

from conftest import login_as, write_memo
from memo_api.app.services.memo_service import MemoService


@pytest.fixture
def alice(make_client):
    return login_as(make_client(), "alice")


@pytest.fixture
def bob(make_client):
    return login_as(make_client(), "bob")


@pytest.fixture
def anonymous(make_client):
    return make_client()


class TestWriteMemo:
    def test_write_memo(self, alice):
        response = alice.post("/api/v1/memo/", json={"contents": "hello"})
        assert response.status_code == 200
        assert response.json() == {"success": True}

        memo = alice.get("/api/v1/memo/").json()[0]
        assert memo["writer"] == "alice"
        assert memo["contents"] == "hello"
        assert memo["starred"] == []
        assert memo["is_edited"] is False
        assert memo["edited_at"] is None
        assert memo["created_at"]

    def test_not_logged_in_comes_first(self, anonymous):
        response = anonymous.post("/api/v1/memo/", json={"contents": 5})
        assert response.status_code == 403
        assert response.json() == {"error": "NOT LOGGED IN", "code": 1}

    def test_contents_not_string(self, alice):
        response = alice.post("/api/v1/memo/", json={"contents": 5})
        assert response.status_code == 400
        assert response.json() == {"error": "CONTENTS IS NOT STRING", "code": 2}

    def test_missing_contents_is_not_string(self, alice):
        assert alice.post("/api/v1/memo/", json={}).json()["code"] == 2

    def test_missing_body_is_not_logged_in(self, anonymous):
        response = anonymous.post("/api/v1/memo/")
        assert response.status_code == 403
        assert response.json() == {"error": "NOT LOGGED IN", "code": 1}

    @pytest.mark.parametrize("body", ["hello", ["hello"], 5, None])
    def test_non_object_body_is_not_string(self, alice, body):
        response = alice.post("/api/v1/memo/", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "CONTENTS IS NOT STRING", "code": 2}

    def test_empty_contents(self, alice):
        response = alice.post("/api/v1/memo/", json={"contents": ""})
        assert response.status_code == 400
        assert response.json() == {"error": "EMPTY CONTENTS", "code": 3}


class TestEditMemo:
    def test_edit_own_memo(self, alice):
        memo_id = write_memo(alice, "hello")
        response = alice.put(f"/api/v1/memo/{memo_id}", json={"contents": "hello again"})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["memo"]["id"] == memo_id
        assert body["memo"]["contents"] == "hello again"
        assert body["memo"]["is_edited"] is True
        assert body["memo"]["edited_at"] is not None
        assert body["memo"]["writer"] == "alice"

    def test_edit_by_other_user(self, alice, bob):
        memo_id = write_memo(alice, "hello")
        response = bob.put(f"/api/v1/memo/{memo_id}", json={"contents": "mine now"})
        assert response.status_code == 403
        assert response.json() == {"error": "PERMISSION FAILURE", "code": 6}
        assert alice.get("/api/v1/memo/").json()[0]["contents"] == "hello"

    def test_invalid_id_comes_first(self, anonymous):
        response = anonymous.put("/api/v1/memo/not-an-id", json={"contents": 5})
        assert response.status_code == 400
        assert response.json() == {"error": "INVALID ID", "code": 1}

    def test_invalid_id_without_body(self, anonymous):
        response = anonymous.put("/api/v1/memo/not-an-id")
        assert response.status_code == 400
        assert response.json() == {"error": "INVALID ID", "code": 1}

    def test_missing_body_is_not_string(self, alice):
        memo_id = write_memo(alice, "hello")
        response = alice.put(f"/api/v1/memo/{memo_id}")
        assert response.json() == {"error": "CONTENTS IS NOT STRING", "code": 2}

    def test_contents_checked_before_session(self, anonymous):
        assert anonymous.put("/api/v1/memo/1", json={"contents": 5}).json()["code"] == 2
        assert anonymous.put("/api/v1/memo/1", json={"contents": ""}).json()["code"] == 3

    def test_not_logged_in(self, anonymous):
        response = anonymous.put("/api/v1/memo/1", json={"contents": "x"})
        assert response.status_code == 403
        assert response.json() == {"error": "NOT LOGGED IN", "code": 4}

    def test_no_resource(self, alice):
        response = alice.put("/api/v1/memo/999", json={"contents": "x"})
        assert response.status_code == 404
        assert response.json() == {"error": "NO RESOURCE", "code": 5}

    def test_edit_with_empty_contents_keeps_memo(self, alice):
        memo_id = write_memo(alice, "hello")
        response = alice.put(f"/api/v1/memo/{memo_id}", json={"contents": ""})
        assert response.json() == {"error": "EMPTY CONTENTS", "code": 3}
        memo = alice.get("/api/v1/memo/").json()[0]
        assert memo["contents"] == "hello"
        assert memo["is_edited"] is False


class TestDeleteMemo:
    def test_delete_own_memo(self, alice):
        memo_id = write_memo(alice, "hello")
        response = alice.delete(f"/api/v1/memo/{memo_id}")
        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert alice.get("/api/v1/memo/").json() == []

    def test_delete_removes_stars(self, alice, bob, database):
        memo_id = write_memo(alice, "hello")
        bob.post(f"/api/v1/memo/star/{memo_id}")
        alice.delete(f"/api/v1/memo/{memo_id}")
        conn = sqlite3.connect(database)
        try:
            count = conn.execute("SELECT COUNT(*) FROM memo_stars").fetchone()[0]
        finally:
            conn.close()
        assert count == 0

    def test_invalid_id(self, anonymous):
        response = anonymous.delete("/api/v1/memo/12ab")
        assert response.status_code == 400
        assert response.json() == {"error": "INVALID ID", "code": 1}

    def test_not_logged_in(self, anonymous):
        response = anonymous.delete("/api/v1/memo/1")
        assert response.status_code == 403
        assert response.json() == {"error": "NOT LOGGED IN", "code": 2}

    def test_no_resource(self, alice):
        response = alice.delete("/api/v1/memo/42")
        assert response.status_code == 404
        assert response.json() == {"error": "NO RESOURCE", "code": 3}

    def test_delete_by_other_user(self, alice, bob):
        memo_id = write_memo(alice, "hello")
        response = bob.delete(f"/api/v1/memo/{memo_id}")
        assert response.status_code == 403
        assert response.json() == {"error": "PERMISSION FAILURE", "code": 4}
        assert len(alice.get("/api/v1/memo/").json()) == 1


class TestStarMemo:
    def test_toggle_twice_restores_membership(self, alice, bob):
        memo_id = write_memo(alice, "hello")

        first = bob.post(f"/api/v1/memo/star/{memo_id}")
        assert first.status_code == 200
        assert first.json()["success"] is True
        assert first.json()["has_starred"] is True
        assert first.json()["memo"]["starred"] == ["bob"]

        second = bob.post(f"/api/v1/memo/star/{memo_id}").json()
        assert second["has_starred"] is False
        assert second["memo"]["starred"] == []

    def test_writer_may_star_own_memo(self, alice, bob):
        memo_id = write_memo(alice, "hello")
        bob.post(f"/api/v1/memo/star/{memo_id}")
        body = alice.post(f"/api/v1/memo/star/{memo_id}").json()
        assert body["has_starred"] is True
        assert body["memo"]["starred"] == ["bob", "alice"]

    def test_star_does_not_mark_memo_edited(self, alice, bob):
        memo_id = write_memo(alice, "hello")
        memo = bob.post(f"/api/v1/memo/star/{memo_id}").json()["memo"]
        assert memo["is_edited"] is False
        assert memo["contents"] == "hello"

    def test_stars_show_in_feed(self, alice, bob):
        memo_id = write_memo(alice, "hello")
        bob.post(f"/api/v1/memo/star/{memo_id}")
        assert alice.get("/api/v1/memo/").json()[0]["starred"] == ["bob"]

    def test_invalid_id(self, anonymous):
        response = anonymous.post("/api/v1/memo/star/-1")
        assert response.status_code == 400
        assert response.json() == {"error": "INVALID ID", "code": 1}

    def test_not_logged_in(self, anonymous):
        response = anonymous.post("/api/v1/memo/star/1")
        assert response.status_code == 403
        assert response.json() == {"error": "NOT LOGGED IN", "code": 2}

    def test_no_resource(self, bob):
        response = bob.post("/api/v1/memo/star/7")
        assert response.status_code == 404
        assert response.json() == {"error": "NO RESOURCE", "code": 3}

    def test_memo_cannot_be_deleted_during_toggle(self, alice, bob, database, monkeypatch):
        memo_id = write_memo(alice, "hello")
        fetch_row = MemoService._fetch_row
        attempts = []

        def fetch_then_delete(cursor, wanted):
            row = fetch_row(cursor, wanted)
            if not attempts:
                other = sqlite3.connect(database, timeout=0)
                try:
                    other.execute("DELETE FROM memos WHERE id = ?", (wanted,))
                    other.commit()
                    attempts.append("deleted")
                except sqlite3.OperationalError:
                    attempts.append("locked")
                finally:
                    other.close()
            return row

        monkeypatch.setattr(MemoService, "_fetch_row", staticmethod(fetch_then_delete))
        response = bob.post(f"/api/v1/memo/star/{memo_id}")
        assert attempts == ["locked"]
        assert response.status_code == 200
        assert response.json()["memo"]["starred"] == ["bob"]


class TestScenario:
    def test_register_signin_write_edit_star(self, client):
        assert client.post(
            "/api/v1/account/signup", json={"username": "alice", "password": "pass1"}
        ).json() == {"success": True}
        assert client.post(
            "/api/v1/account/signup", json={"username": "alice", "password": "pass2"}
        ).json()["error"] == "USERNAME EXISTS"
        assert client.post(
            "/api/v1/account/signin", json={"username": "alice", "password": "pass1"}
        ).json() == {"success": True}

        assert client.post("/api/v1/memo/", json={"contents": "hello"}).json() == {"success": True}
        memo_id = client.get("/api/v1/memo/").json()[0]["id"]

        assert client.put(f"/api/v1/memo/{memo_id}", json={"contents": ""}).json()["error"] == "EMPTY CONTENTS"
        assert client.post(f"/api/v1/memo/star/{memo_id}").json()["has_starred"] is True
        assert client.post(f"/api/v1/memo/star/{memo_id}").json()["has_starred"] is False
