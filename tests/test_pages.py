"""
tests/test_pages.py -- Integration tests for the HTML page routes.

We assert on redirect Location headers directly, using the client fixture
(follow_redirects=False).

Coverage:
  - GET / renders the login page when anonymous, 302 /main when signed in
  - GET /signup renders the signup page
  - GET /main redirects anonymous visitors to / and renders when signed in
  - Static assets referenced by the pages are served
"""

from __future__ import annotations

from fastapi.testclient import TestClient

from tests.conftest import signup


class TestLoginPage:
    def test_anonymous_gets_login_page(self, client: TestClient) -> None:
        resp = client.get("/")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/html")
        assert "<title>Login</title>" in resp.text

    def test_signed_in_user_redirected_to_main(self, client: TestClient) -> None:
        signup(client)
        resp = client.get("/")
        assert resp.status_code == 302
        assert resp.headers["location"] == "/main"


class TestSignupPage:
    def test_renders_signup_page(self, client: TestClient) -> None:
        resp = client.get("/signup")
        assert resp.status_code == 200
        assert "<title>Sign Up</title>" in resp.text

    def test_form_lists_every_profile_field(self, client: TestClient) -> None:
        html = client.get("/signup").text
        for field in ("email", "name", "password", "nickname", "age", "phone", "sex"):
            assert f'name="{field}"' in html


class TestMainPage:
    def test_anonymous_redirected_to_root(self, client: TestClient) -> None:
        resp = client.get("/main")
        assert resp.status_code in (302, 303)
        assert resp.headers["location"] == "/"

    def test_signed_in_user_sees_welcome(self, client: TestClient) -> None:
        signup(client)
        resp = client.get("/main")
        assert resp.status_code == 200
        assert "<title>Welcome</title>" in resp.text

    def test_after_logout_redirects_again(self, client: TestClient) -> None:
        signup(client)
        client.post("/logout")
        assert client.get("/main").status_code == 302


class TestStatic:
    def test_stylesheet_served(self, client: TestClient) -> None:
        resp = client.get("/static/style.css")
        assert resp.status_code == 200

    def test_script_served(self, client: TestClient) -> None:
        resp = client.get("/static/app.js")
        assert resp.status_code == 200
        assert "/api/user" in resp.text

    def test_unknown_path_is_json_404(self, client: TestClient) -> None:
        resp = client.get("/nope")
        assert resp.status_code == 404
        assert "error" in resp.json()
