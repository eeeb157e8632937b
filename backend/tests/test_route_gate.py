"""Route Gate: path classification and redirects for anonymous requests."""
import pytest
from starlette.requests import Request

from utils.route_gate import PathKind, classify_path, gate_request

from conftest import auth_headers


class TestClassifyPath:

    @pytest.mark.parametrize("path", ["/", "/auth/signin", "/auth/error"])
    def test_public_pages(self, path):
        assert classify_path(path) is PathKind.PUBLIC

    @pytest.mark.parametrize("path", ["/api/auth", "/api/auth/login", "/api/auth/session"])
    def test_public_api(self, path):
        assert classify_path(path) is PathKind.PUBLIC

    def test_prefix_match_respects_segments(self):
        assert classify_path("/api/authors") is PathKind.PROTECTED

    @pytest.mark.parametrize("path", ["/static/css/app.css", "/favicon.ico", "/logo.svg", "/img/photo.JPG"])
    def test_excluded_assets(self, path):
        assert classify_path(path) is PathKind.EXCLUDED

    @pytest.mark.parametrize("path", ["/dashboard", "/dashboard/users", "/api/projects", "/auth/signin/extra", "/anything"])
    def test_everything_else_is_protected(self, path):
        assert classify_path(path) is PathKind.PROTECTED


class TestGateRequests:

    @pytest.mark.parametrize("path", ["/dashboard", "/dashboard/materials", "/api/projects", "/api/inventory/dashboard"])
    def test_anonymous_protected_request_redirects(self, client, path):
        resp = client.get(path, follow_redirects=False)

        assert resp.status_code == 302
        assert resp.headers["location"].startswith("/auth/signin?callbackUrl=")

    def test_callback_carries_original_url(self, client):
        resp = client.get("/dashboard/reports", follow_redirects=False)
        assert "callbackUrl=http%3A%2F%2Ftestserver%2Fdashboard%2Freports" in resp.headers["location"]

    @pytest.mark.parametrize("path", ["/", "/auth/signin", "/auth/error"])
    def test_public_pages_render_without_session(self, client, path):
        assert client.get(path, follow_redirects=False).status_code == 200

    def test_public_api_without_session(self, client):
        resp = client.get("/api/auth/session")
        assert resp.status_code == 200
        assert resp.json() is None

    def test_static_assets_skip_gate(self, client):
        assert client.get("/static/css/app.css").status_code == 200

    def test_invalid_token_is_treated_as_anonymous(self, client):
        resp = client.get("/dashboard", headers={"Authorization": "Bearer nope"}, follow_redirects=False)
        assert resp.status_code == 302

    def test_session_passes_gate(self, client, viewer):
        resp = client.get("/api/projects", headers=auth_headers(viewer))
        assert resp.status_code == 200

    def test_session_cookie_passes_gate(self, client, viewer):
        from utils.tokenJWT import create_session_token
        client.cookies.set("session_token", create_session_token(viewer))
        assert client.get("/dashboard", follow_redirects=False).status_code == 200


def _request(path, headers=None):
    return Request({
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "server": ("testserver", 80),
        "root_path": "",
        "path": path,
        "query_string": b"",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
    })


class TestRequestSession:

    def test_session_is_attached_to_the_request(self, viewer, viewer_headers):
        request = _request("/dashboard", viewer_headers)

        assert gate_request(request) is None
        assert request.state.session.username == viewer.username

    def test_anonymous_request_carries_no_session(self):
        request = _request("/dashboard")

        assert gate_request(request).status_code == 302
        assert request.state.session is None
