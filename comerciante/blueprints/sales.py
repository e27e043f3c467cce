"""Sales blueprint: sale entry and cash book."""
from datetime import date

from flask import Blueprint, current_app, jsonify, request, Response

from comerciante.database import get_session
from comerciante.exceptions import NotFoundError, ValidationError
from comerciante.middleware import get_payload, require_login
from comerciante.services import report_service
from comerciante.services.sale_number_service import next_sale_number
from comerciante.services.sales_service import create_sale
from comerciante.utils.number_format import money_br

sales_bp = Blueprint('sales', __name__, url_prefix='/sales')


@sales_bp.route('/next-number', methods=['GET'])
@require_login
def next_number() -> Response:
    """Number to show on a new draft sale."""
    return jsonify({'number': next_sale_number(get_session())})


@sales_bp.route('/', methods=['POST'])
@require_login
def finish_sale() -> Response:
    """
    Finish a sale.

    Body: ``{number?, client?, phone?, paymentMethod, items: [{productId, quantity, unitPrice, lineTotal?}]}``
    """
    data = get_payload()
    items = data.get('items')
    if not isinstance(items, list):
        raise ValidationError('items deve ser uma lista')

    summary = create_sale(
        get_session(),
        header=data,
        lines=items,
        allow_negative_stock=current_app.config.get('ALLOW_NEGATIVE_STOCK', False),
        default_client=current_app.config['DEFAULT_CLIENT_NAME'],
    )
    current_app.logger.info(f"Sale #{summary.number} finished via {summary.payment_method}")
    return jsonify(summary.to_dict()), 201


@sales_bp.route('/', methods=['GET'])
@require_login
def cash_book() -> Response:
    """Cash book: every sale, newest first, with the grand total."""
    sales = report_service.list_sales(get_session())
    total = report_service.cash_book_total(sales)
    return jsonify({
        'sales': [sale.to_dict() for sale in sales],
        'total': total,
        'totalFormatted': money_br(total),
    })


@sales_bp.route('/summary', methods=['GET'])
@require_login
def cash_summary() -> Response:
    """Totals per day and payment method. Defaults to today."""
    today = date.today().isoformat()
    start = request.args.get('start') or today
    end = request.args.get('end') or start
    rows = report_service.get_cash_summary(get_session(), start, end)
    return jsonify({'start': start, 'end': end, 'summary': rows})


@sales_bp.route('/<int:sale_id>', methods=['GET'])
@require_login
def sale_detail(sale_id: int) -> Response:
    details = report_service.get_sale_details(get_session(), sale_id)
    if details is None:
        raise NotFoundError(f'Venda #{sale_id} não encontrada')
    return jsonify(details)
