"""
Authentication blueprint.
Single-operator login gate checked against the configured credential.
"""
import hmac
import logging

from flask import Blueprint, current_app, jsonify, session, Response

from comerciante.exceptions import UnauthorizedError, ValidationError
from comerciante.middleware import get_payload

logger = logging.getLogger(__name__)


auth_bp = Blueprint('auth', __name__)


def check_credentials(username: str, password: str) -> bool:
    """Compare against APP_USERNAME / APP_PASSWORD in constant time."""
    expected_user = current_app.config['APP_USERNAME']
    expected_password = current_app.config['APP_PASSWORD']
    user_ok = hmac.compare_digest(username.encode(), expected_user.encode())
    password_ok = hmac.compare_digest(password.encode(), expected_password.encode())
    return user_ok and password_ok


@auth_bp.route('/login', methods=['POST'])
def login() -> Response:
    data = get_payload()
    username = str(data.get('username') or '').strip()
    password = str(data.get('password') or '')

    if not username or not password:
        raise ValidationError('Informe usuário e senha')

    if not check_credentials(username, password):
        logger.warning(f"Failed login attempt for user '{username}'")
        raise UnauthorizedError('Usuário ou senha incorretos!')

    session.clear()
    session[current_app.config['SESSION_AUTH_KEY']] = True
    session['username'] = username
    logger.info(f"User '{username}' logged in")
    return jsonify({'status': 'ok', 'username': username})


@auth_bp.route('/logout', methods=['POST'])
def logout() -> Response:
    session.clear()
    return jsonify({'status': 'ok'})
