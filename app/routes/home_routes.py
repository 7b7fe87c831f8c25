"""Home and account pages."""

from flask import Blueprint, jsonify, render_template

from app.auth import current_session, get_gateway, login_required

home_bp = Blueprint('home', __name__)


@home_bp.route('/')
def index():
    """Home destination after login and logout."""
    return render_template('home.html')


@home_bp.route('/account')
@login_required
def account():
    """Account details for the signed-in user."""
    user = get_gateway().current_user(current_session())
    return render_template('account.html', user=user)


@home_bp.route('/api/account')
@login_required
def account_api():
    user = get_gateway().current_user(current_session())
    return jsonify({"login": user["login"], "email": user["email"]})
