"""
Settings blueprint: minimum-stock threshold and store reset.
"""
import hmac
import logging

from flask import Blueprint, current_app, jsonify, Response

from comerciante.database import get_session, reset_store
from comerciante.exceptions import UnauthorizedError
from comerciante.middleware import get_payload, require_login
from comerciante.utils.number_format import parse_quantity

logger = logging.getLogger(__name__)

settings_bp = Blueprint('settings', __name__, url_prefix='/settings')


@settings_bp.route('/min-stock', methods=['GET'])
@require_login
def get_min_stock() -> Response:
    return jsonify({'minStockQty': current_app.config['MIN_STOCK_QTY']})


@settings_bp.route('/min-stock', methods=['POST', 'PUT'])
@require_login
def set_min_stock() -> Response:
    """Change the threshold used to highlight low-stock products."""
    value = parse_quantity(get_payload().get('minStockQty'), 'Estoque mínimo')
    current_app.config['MIN_STOCK_QTY'] = value
    logger.info(f"Minimum stock threshold set to {value}")
    return jsonify({'minStockQty': value})


@settings_bp.route('/reset', methods=['POST'])
@require_login
def reset() -> Response:
    """Delete all products and sales. Requires the admin password."""
    password = str(get_payload().get('password') or '')
    expected = current_app.config['ADMIN_PASSWORD']
    if not hmac.compare_digest(password.encode(), expected.encode()):
        raise UnauthorizedError('Senha incorreta!')

    info = reset_store(get_session())
    items, sales, products = info.results
    return jsonify({'status': 'ok', 'items': items, 'sales': sales, 'products': products})
