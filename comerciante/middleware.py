"""Middleware for the login gate and request payloads."""
from functools import wraps
from typing import Any, Dict

from flask import current_app, g, request, session

from comerciante.exceptions import UnauthorizedError


def load_operator():
    """
    Load the login state into g.

    Called before each request. Sets g.authenticated and g.username.
    """
    auth_key = current_app.config['SESSION_AUTH_KEY']
    g.authenticated = bool(session.get(auth_key))
    g.username = session.get('username') if g.authenticated else None


def require_login(f):
    """
    Decorator: Require the operator to be logged in.

    Raises UnauthorizedError, rendered as a 401 JSON response.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not g.get('authenticated'):
            raise UnauthorizedError('Faça login para continuar')
        return f(*args, **kwargs)
    return decorated_function


def get_payload() -> Dict[str, Any]:
    """Request body as a dict: JSON if present, otherwise form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()
