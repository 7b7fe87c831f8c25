"""HTTP behaviour of /login, /logout and cookie-restored sessions."""

from datetime import datetime

from werkzeug.http import http_date

from app.server import create_app


def _auth_cookie_headers(response):
    return [h for h in response.headers.getlist("Set-Cookie") if h.startswith("auth_token=")]


def _login(client, password, remember_me=None, **kwargs):
    data = {"login": "alice", "password": password}
    if remember_me is not None:
        data["remember_me"] = remember_me
    return client.post("/login", data=data, **kwargs)


def test_get_login_renders_form_without_state_change(client):
    response = client.get("/login")

    assert response.status_code == 200
    assert b'name="password"' in response.data
    assert _auth_cookie_headers(response) == []
    assert response.headers.getlist("Set-Cookie") == []
    with client.session_transaction() as sess:
        assert dict(sess) == {}


def test_valid_login_with_remember_me(client, app_store, password):
    """Scenario A."""
    response = _login(client, password, remember_me="1")

    assert response.status_code == 302
    assert response.headers["Location"] == "/"

    user = app_store.get_user("alice")
    [cookie] = _auth_cookie_headers(response)
    assert cookie.startswith(f"auth_token={user['remember_token']};")
    assert "HttpOnly" in cookie
    with client.session_transaction() as sess:
        assert sess["user_login"] == "alice"
        assert ("notice", "Logged in successfully.") in sess["_flashes"]


def test_remember_cookie_expiry_matches_token(client, app_store, password):
    response = _login(client, password, remember_me="1")

    [cookie] = _auth_cookie_headers(response)
    user = app_store.get_user("alice")
    expires_at = datetime.fromisoformat(user["remember_token_expires_at"])
    assert f"Expires={http_date(expires_at)}" in cookie


def test_valid_login_without_remember_me_sets_no_cookie(client, password):
    response = _login(client, password)

    assert response.status_code == 302
    assert _auth_cookie_headers(response) == []


def test_invalid_password(client, password):
    """Scenario B."""
    response = _login(client, "not-" + password, remember_me="1")

    assert response.status_code == 200
    assert b"Authentication failed." in response.data
    assert b'name="password"' in response.data
    assert _auth_cookie_headers(response) == []
    with client.session_transaction() as sess:
        assert "user_login" not in sess
        assert "_flashes" not in sess


def test_unknown_login_gives_same_message(client, password):
    response = client.post("/login", data={"login": "nobody", "password": password})

    assert response.status_code == 200
    assert b"Authentication failed." in response.data


def test_error_flash_does_not_outlive_the_render(client):
    client.post("/login", data={"login": "alice", "password": "wrong"})

    response = client.get("/")

    assert b"Authentication failed." not in response.data


def test_login_redirects_back_to_protected_page(client, password):
    response = client.get("/account")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/login")

    response = _login(client, password)

    assert response.headers["Location"] == "/account"
    page = client.get("/account")
    assert page.status_code == 200
    assert b"alice@example.com" in page.data


def test_api_session_anonymous(client):
    response = client.get("/api/session")

    assert response.status_code == 200
    assert response.get_json() == {"authenticated": False, "login": None}


def test_protected_api_returns_401_json(client):
    response = client.get("/api/account")

    assert response.status_code == 401
    assert response.get_json() == {"error": "Authentication required"}
    with client.session_transaction() as sess:
        assert "return_to" not in sess


def test_protected_api_after_login(client, password):
    _login(client, password)

    response = client.get("/api/account")

    assert response.get_json() == {"login": "alice", "email": "alice@example.com"}


def test_logout_authenticated(client, app_store, password):
    """Scenario D."""
    _login(client, password, remember_me="1")

    response = client.get("/logout")

    assert response.status_code == 302
    assert response.headers["Location"] == "/"
    [cookie] = _auth_cookie_headers(response)
    assert cookie.startswith("auth_token=;")
    assert "Max-Age=0" in cookie
    assert app_store.get_user("alice")["remember_token"] is None
    assert app_store.get_user("alice")["last_logout_at"] is not None
    with client.session_transaction() as sess:
        assert "user_login" not in sess
        assert sess["_flashes"] == [("notice", "You have been logged out.")]

    home = client.get("/")
    assert b"You have been logged out." in home.data
    assert b"You are not signed in." in home.data


def test_logout_anonymous(client, app_store):
    """Scenario E."""
    response = client.post("/logout")

    assert response.status_code == 302
    assert response.headers["Location"] == "/"
    [cookie] = _auth_cookie_headers(response)
    assert cookie.startswith("auth_token=;")
    assert app_store.get_user("alice")["last_logout_at"] is None
    with client.session_transaction() as sess:
        assert "user_login" not in sess


def test_logout_twice_same_end_state(client, password):
    _login(client, password)

    first = client.get("/logout")
    second = client.get("/logout")

    assert first.headers["Location"] == second.headers["Location"] == "/"
    assert _auth_cookie_headers(second)[0].startswith("auth_token=;")
    assert client.get("/api/session").get_json()["authenticated"] is False


def test_remember_cookie_restores_session(client, app_store):
    token, _ = app_store.remember_me("alice")
    client.set_cookie("auth_token", token)

    response = client.get("/api/session")

    assert response.get_json() == {"authenticated": True, "login": "alice"}


def test_invalid_remember_cookie_is_ignored(client):
    client.set_cookie("auth_token", "0" * 40)

    response = client.get("/account")

    assert response.status_code == 302


def test_logout_flash_falls_back_to_english(client):
    client.get("/logout", headers={"Accept-Language": "fr-FR,fr;q=0.9"})

    with client.session_transaction() as sess:
        # no French bundle is configured for the app fixture
        assert sess["_flashes"] == [("notice", "You have been logged out.")]


def test_logout_flash_uses_accept_language(tmp_path):
    bundle = tmp_path / "messages.yaml"
    bundle.write_text(
        "fr:\n  session.flash_notice.logged_out: Vous avez été déconnecté.\n",
        encoding="utf-8",
    )
    app = create_app({
        "SECRET_KEY": "test-secret",
        "TESTING": True,
        "USERS_FILE": tmp_path / "users.json",
        "MESSAGES_FILE": bundle,
    })
    client = app.test_client()

    client.get("/logout", headers={"Accept-Language": "fr-FR,fr;q=0.9"})

    with client.session_transaction() as sess:
        assert sess["_flashes"] == [("notice", "Vous avez été déconnecté.")]


def test_non_ascii_remember_cookie_is_ignored(client, app_store):
    app_store.remember_me("alice")
    client.set_cookie("auth_token", "café")

    assert client.get("/").status_code == 200
    response = client.get("/logout")

    assert response.status_code == 302
    assert response.headers["Location"] == "/"
    assert _auth_cookie_headers(response)[0].startswith("auth_token=;")


def test_session_for_missing_user_is_anonymous(client):
    with client.session_transaction() as sess:
        sess["user_login"] = "ghost"

    assert client.get("/api/session").get_json() == {"authenticated": False, "login": None}
    response = client.get("/api/account")

    assert response.status_code == 401
    assert response.get_json() == {"error": "Authentication required"}
    with client.session_transaction() as sess:
        assert "user_login" not in sess


def test_protected_page_for_missing_user_redirects_to_login(client):
    with client.session_transaction() as sess:
        sess["user_login"] = "ghost"

    response = client.get("/account")

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/login")
    with client.session_transaction() as sess:
        assert "user_login" not in sess
        assert sess["return_to"] == "/account"
