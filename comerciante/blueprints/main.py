"""Main blueprint: home dashboard."""
from flask import Blueprint, current_app, g, jsonify, Response

from comerciante.database import get_session
from comerciante.middleware import require_login
from comerciante.models import Product, Sale
from comerciante.services.product_service import list_low_stock

main_bp = Blueprint('main', __name__)


@main_bp.route('/')
@require_login
def index() -> Response:
    """Home: counts and low-stock alerts for the operator."""
    session = get_session()
    threshold = current_app.config['MIN_STOCK_QTY']
    return jsonify({
        'username': g.username,
        'products': session.query(Product).count(),
        'sales': session.query(Sale).count(),
        'minStockQty': threshold,
        'lowStock': len(list_low_stock(session, threshold)),
    })
