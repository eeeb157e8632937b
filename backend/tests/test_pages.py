"""Server-rendered pages: sign-in flow and dashboard views."""
import pytest

from conftest import PASSWORD, auth_headers, add_inflow, make_material


class TestSignIn:

    def test_form_renders(self, client):
        resp = client.get("/auth/signin?callbackUrl=/dashboard/units")
        assert resp.status_code == 200
        assert 'name="username"' in resp.text
        assert 'value="/dashboard/units"' in resp.text

    def test_submit_sets_cookie_and_follows_callback(self, client, editor):
        resp = client.post(
            "/auth/signin",
            data={"username": "editor", "password": PASSWORD,
                  "callbackUrl": "http://testserver/dashboard/materials"},
            follow_redirects=False,
        )

        assert resp.status_code == 303
        assert resp.headers["location"] == "/dashboard/materials"
        assert "session_token" in resp.cookies

    def test_default_callback_is_dashboard(self, client, editor):
        resp = client.post("/auth/signin", data={"username": "editor", "password": PASSWORD}, follow_redirects=False)
        assert resp.headers["location"] == "/dashboard"

    @pytest.mark.parametrize(
        "callback",
        ["https://evil.example/steal", "//evil.example/x", "javascript:alert(1)", "/auth/signin"],
    )
    def test_foreign_callback_falls_back_to_dashboard(self, client, editor, callback):
        resp = client.post(
            "/auth/signin",
            data={"username": "editor", "password": PASSWORD, "callbackUrl": callback},
            follow_redirects=False,
        )
        assert resp.headers["location"] == "/dashboard"

    def test_bad_credentials_rerender_form(self, client, editor):
        resp = client.post("/auth/signin", data={"username": "editor", "password": "nope"}, follow_redirects=False)

        assert resp.status_code == 401
        assert "Invalid username or password" in resp.text
        assert "session_token" not in resp.cookies

    def test_signed_in_user_skips_form(self, client, editor):
        resp = client.get("/auth/signin", headers=auth_headers(editor), follow_redirects=False)
        assert resp.status_code == 302
        assert resp.headers["location"] == "/dashboard"

    def test_full_round_trip(self, client, editor):
        first = client.get("/dashboard/projects", follow_redirects=False)
        assert first.status_code == 302

        login = client.post(
            "/auth/signin",
            data={"username": "editor", "password": PASSWORD,
                  "callbackUrl": "http://testserver/dashboard/projects"},
        )
        assert login.status_code == 200
        assert "<h1>Projects</h1>" in login.text


class TestDashboardPages:

    @pytest.mark.parametrize(
        "path",
        [
            "/dashboard",
            "/dashboard/materials",
            "/dashboard/categories",
            "/dashboard/units",
            "/dashboard/projects",
            "/dashboard/inflows",
            "/dashboard/outflows",
            "/dashboard/reports",
        ],
    )
    def test_pages_render_for_viewer(self, client, viewer_headers, path):
        resp = client.get(path, headers=viewer_headers)
        assert resp.status_code == 200
        assert "Omnia Inventory" in resp.text

    def test_dashboard_shows_stock(self, client, db_session, catalog, editor, viewer_headers):
        cement = make_material(db_session, "Portland Cement", catalog["category"], catalog["unit"])
        add_inflow(db_session, cement, catalog["unit"], catalog["project"], editor, 25)

        resp = client.get("/dashboard", headers=viewer_headers)

        assert "Portland Cement" in resp.text
        assert "Store keeper" in resp.text

    def test_users_link_only_for_super_user(self, client, viewer_headers, admin_headers):
        assert "/dashboard/users" not in client.get("/dashboard", headers=viewer_headers).text
        assert "/dashboard/users" in client.get("/dashboard", headers=admin_headers).text

    def test_users_page_redirects_viewer(self, client, viewer_headers):
        resp = client.get("/dashboard/users", headers=viewer_headers, follow_redirects=False)
        assert resp.status_code == 302
        assert resp.headers["location"] == "/dashboard"

    def test_landing_links_to_dashboard_when_signed_in(self, client, viewer_headers):
        assert "Go to dashboard" in client.get("/", headers=viewer_headers).text
        assert "Go to dashboard" not in client.get("/").text

    def test_error_page_shows_message(self, client):
        resp = client.get("/auth/error", params={"error": "AccessDenied"})
        assert resp.status_code == 200
        assert "AccessDenied" in resp.text
