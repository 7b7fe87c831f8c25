"""Session authentication wiring for the Flask app."""

from functools import wraps
from pathlib import Path

from flask import current_app, g, jsonify, redirect, request, url_for

from app.session_state import FlaskSessionState
from core.gateway import SessionGateway
from core.messages import MessageCatalog
from core.user_store import UserStore

EXTENSION_KEY = "session_gateway"


def init_auth(app, config):
    """Build the user store, message catalog and gateway for ``app``."""
    store = UserStore(
        Path(config["USERS_FILE"]),
        remember_token_days=config["REMEMBER_TOKEN_DAYS"],
        admin_password=config["ADMIN_PASSWORD"],
    )
    catalog = MessageCatalog.from_file(Path(config["MESSAGES_FILE"]), default_locale=config["LOCALE"])
    gateway = SessionGateway(store, catalog, cookie_name=config["AUTH_COOKIE_NAME"])
    app.extensions[EXTENSION_KEY] = gateway

    @app.before_request
    def restore_session_from_cookie():
        gateway.restore_from_cookie(request.cookies.get(gateway.cookie_name), current_session())

    @app.context_processor
    def inject_session():
        state = current_session()
        return {
            "current_login": state.current_principal(),
            "flash_now": state.pending_now(),
        }

    return gateway


def get_gateway() -> SessionGateway:
    return current_app.extensions[EXTENSION_KEY]


def current_session() -> FlaskSessionState:
    """Session state for the active request."""
    if "session_state" not in g:
        g.session_state = FlaskSessionState()
    return g.session_state


def request_locale() -> str:
    catalog = get_gateway().messages
    return catalog.best_locale(lang for lang, _ in request.accept_languages)


def login_required(f):
    """Decorator to require login."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        state = current_session()
        if get_gateway().current_user(state) is None:
            # principal may name a user the store no longer has
            state.bind_principal(None)
            # Check if it's an API call
            if request.path.startswith('/api/'):
                return jsonify({"error": "Authentication required"}), 401
            state.store_return_to(request.full_path.rstrip('?'))
            return redirect(url_for('auth.login'))
        return f(*args, **kwargs)
    return decorated_function
