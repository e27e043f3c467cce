"""Catalog blueprint for product management."""
from flask import Blueprint, current_app, jsonify, request, Response

from comerciante.database import get_session
from comerciante.exceptions import NotFoundError
from comerciante.middleware import get_payload, require_login
from comerciante.services import product_service
from comerciante.utils.number_format import parse_quantity

catalog_bp = Blueprint('catalog', __name__, url_prefix='/products')


@catalog_bp.route('/', methods=['GET'])
@require_login
def list_products() -> Response:
    """List products (``q`` filters by name), flagging those below the minimum-stock threshold."""
    session = get_session()
    threshold = current_app.config['MIN_STOCK_QTY']
    products = [
        dict(p.to_dict(), lowStock=p.quantity < threshold)
        for p in product_service.list_products(session, search=request.args.get('q'))
    ]
    return jsonify({'products': products, 'minStockQty': threshold})


@catalog_bp.route('/', methods=['POST'])
@require_login
def create_product() -> Response:
    session = get_session()
    product_id = product_service.add_product(session, get_payload())
    product = product_service.get_product_or_404(session, product_id)
    return jsonify(product.to_dict()), 201


@catalog_bp.route('/low-stock', methods=['GET'])
@require_login
def low_stock() -> Response:
    """Products below the threshold (query param ``threshold`` overrides the setting)."""
    threshold = request.args.get('threshold')
    if threshold in (None, ''):
        threshold = current_app.config['MIN_STOCK_QTY']
    else:
        threshold = parse_quantity(threshold, 'Estoque mínimo')

    products = product_service.list_low_stock(get_session(), threshold)
    return jsonify({'products': products, 'minStockQty': threshold})


@catalog_bp.route('/<int:product_id>', methods=['GET'])
@require_login
def get_product(product_id: int) -> Response:
    product = product_service.get_product_or_404(get_session(), product_id)
    return jsonify(product.to_dict())


@catalog_bp.route('/<int:product_id>', methods=['PUT', 'POST'])
@require_login
def update_product(product_id: int) -> Response:
    session = get_session()
    if not product_service.update_product(session, product_id, get_payload()):
        raise NotFoundError(f'Produto #{product_id} não encontrado')
    return jsonify(product_service.get_product_or_404(session, product_id).to_dict())


@catalog_bp.route('/<int:product_id>', methods=['DELETE'])
@require_login
def delete_product(product_id: int) -> Response:
    if not product_service.delete_product(get_session(), product_id):
        raise NotFoundError(f'Produto #{product_id} não encontrado')
    return jsonify({'status': 'ok', 'id': product_id})
