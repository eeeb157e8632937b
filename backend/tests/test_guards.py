"""Handler guards work on their own, with the Route Gate switched off."""
import pytest

from utils.tokenJWT import create_access_token


class TestApiGuards:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/projects"),
            ("POST", "/api/projects"),
            ("GET", "/api/materials"),
            ("GET", "/api/inflows"),
            ("GET", "/api/outflows"),
            ("GET", "/api/inventory/dashboard"),
            ("GET", "/api/users"),
        ],
    )
    def test_requires_auth(self, api_client, method, path):
        resp = api_client.request(method, path, json={})
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"
        assert resp.json() == {"error": "Unauthorized"}

    def test_viewer_cannot_create(self, api_client, viewer_headers):
        resp = api_client.post("/api/projects", json={"name": "Tower B"}, headers=viewer_headers)
        assert resp.status_code == 403
        assert resp.json() == {"error": "Forbidden"}

    def test_editor_cannot_manage_users(self, api_client, editor_headers):
        assert api_client.get("/api/users", headers=editor_headers).status_code == 403

    def test_unknown_role_has_no_permissions(self, api_client, super_user):
        token = create_access_token({"sub": str(super_user.id), "username": "admin", "role": "ROOT"})
        headers = {"Authorization": f"Bearer {token}"}

        assert api_client.get("/api/projects", headers=headers).status_code == 200
        assert api_client.post("/api/projects", json={"name": "X"}, headers=headers).status_code == 403

    def test_unknown_role_cannot_read_inventory_views(self, api_client, super_user):
        token = create_access_token({"sub": str(super_user.id), "username": "admin", "role": "ROOT"})
        headers = {"Authorization": f"Bearer {token}"}

        assert api_client.get("/api/inventory/dashboard", headers=headers).status_code == 403
        assert api_client.get("/api/inventory/movements", headers=headers).status_code == 403

    @pytest.mark.parametrize("path", ["/api/inventory/dashboard", "/api/inventory/movements"])
    def test_viewer_can_read_inventory_views(self, api_client, viewer_headers, path):
        assert api_client.get(path, headers=viewer_headers).status_code == 200


class TestPageGuards:

    def test_page_without_session_redirects(self, api_client):
        resp = api_client.get("/dashboard", follow_redirects=False)
        assert resp.status_code == 302
        assert resp.headers["location"] == "/auth/signin"

    def test_users_page_redirects_non_super_user(self, api_client, editor_headers):
        resp = api_client.get("/dashboard/users", headers=editor_headers, follow_redirects=False)
        assert resp.status_code == 302
        assert resp.headers["location"] == "/dashboard"

    def test_users_page_for_super_user(self, api_client, admin_headers):
        resp = api_client.get("/dashboard/users", headers=admin_headers)
        assert resp.status_code == 200
        assert "admin" in resp.text

    def test_dashboard_page_refuses_unknown_role(self, api_client, super_user):
        token = create_access_token({"sub": str(super_user.id), "username": "admin", "role": "ROOT"})

        resp = api_client.get("/dashboard", headers={"Authorization": f"Bearer {token}"}, follow_redirects=False)

        assert resp.status_code == 302
        assert resp.headers["location"] == "/auth/error?error=AccessDenied"
