"""Authentication routes."""

from flask import Blueprint, current_app, jsonify, make_response, redirect, render_template, request

from app.auth import current_session, get_gateway, request_locale

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Login page."""
    gateway = get_gateway()
    outcome = gateway.login(request.method, request.form, current_session(), locale=request_locale())

    if outcome["action"] == "redirect":
        response = redirect(outcome["location"])
        cookie = outcome.get("cookie")
        if cookie:
            response.set_cookie(
                cookie["name"],
                cookie["value"],
                expires=cookie["expires"],
                httponly=True,
                secure=current_app.config["AUTH_COOKIE_SECURE"],
                samesite="Lax",
            )
        return response

    return render_template('login.html', login=request.form.get('login', ''))


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    """Logout and reset the session."""
    outcome = get_gateway().logout(current_session(), locale=request_locale())
    response = make_response(redirect(outcome["location"]))
    response.delete_cookie(outcome["delete_cookie"])
    return response


@auth_bp.route('/api/session')
def session_info():
    """Current principal as JSON."""
    user = get_gateway().current_user(current_session())
    return jsonify({
        "authenticated": user is not None,
        "login": user["login"] if user else None,
    })
