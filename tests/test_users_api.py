"""Integration tests for /api/users: admin-only listing and the self-or-admin read policy."""

from fastapi.testclient import TestClient


def _my_id(client: TestClient, headers: dict[str, str]) -> int:
    return client.get("/api/auth/profile", headers=headers).json()["user"]["id"]


class TestUserDirectory:

    def test_admin_lists_users(
        self, client: TestClient, admin_headers: dict[str, str], user_headers: dict[str, str]
    ) -> None:
        resp = client.get("/api/users", headers=admin_headers)
        assert resp.status_code == 200
        usernames = [u["username"] for u in resp.json()["users"]]
        assert usernames == ["admin", "bob"]

    def test_user_cannot_list(self, client: TestClient, user_headers: dict[str, str]) -> None:
        resp = client.get("/api/users", headers=user_headers)
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Admin access required"

    def test_user_reads_own_record(self, client: TestClient, user_headers: dict[str, str]) -> None:
        my_id = _my_id(client, user_headers)
        resp = client.get(f"/api/users/{my_id}", headers=user_headers)
        assert resp.status_code == 200
        assert resp.json()["user"]["username"] == "bob"

    def test_user_cannot_read_someone_else(
        self, client: TestClient, admin_headers: dict[str, str], user_headers: dict[str, str]
    ) -> None:
        admin_id = _my_id(client, admin_headers)
        resp = client.get(f"/api/users/{admin_id}", headers=user_headers)
        assert resp.status_code == 403
        assert resp.json()["detail"] == "Access denied"

    def test_admin_reads_any_record(
        self, client: TestClient, admin_headers: dict[str, str], user_headers: dict[str, str]
    ) -> None:
        bob_id = _my_id(client, user_headers)
        resp = client.get(f"/api/users/{bob_id}", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.json()["user"]["email"] == "bob@example.com"

    def test_admin_reads_unknown_record(self, client: TestClient, admin_headers: dict[str, str]) -> None:
        resp = client.get("/api/users/9999", headers=admin_headers)
        assert resp.status_code == 404
        assert resp.json()["detail"] == "User not found"
