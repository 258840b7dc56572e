"""Supplier-facing text for purchase orders (es-CO formatting)"""
from datetime import date, datetime
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.conf import settings


def format_number(value, decimals=2):
    """Format a number with '.' thousands and ',' decimals, e.g. 1234.5 -> '1.234,50'"""
    quantum = Decimal(1).scaleb(-decimals)
    amount = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    text = f"{abs(amount):,.{decimals}f}"
    text = text.replace(',', '_').replace('.', ',').replace('_', '.')
    return f"-{text}" if amount < 0 else text


def format_currency(amount, currency=None):
    """
    Format an amount as es-CO currency.

    COP (the default) uses the '$' symbol; any other currency is prefixed
    with its ISO code.
    """
    currency = (currency or settings.PURCHASE_ORDER_DEFAULT_CURRENCY).upper()
    symbol = '$' if currency == 'COP' else currency
    return f"{symbol} {format_number(amount)}"


def format_date(value):
    """d/m/yyyy, without zero padding"""
    if isinstance(value, str):
        value = date.fromisoformat(value[:10])
    if isinstance(value, datetime):
        value = value.date()
    return f"{value.day}/{value.month}/{value.year}"


def build_purchase_order_message(order_id, supplier_name, site_name, pdf_url,
                                 expected_at=None, total_amount=None, currency=None):
    """Build the message sent to the supplier together with the order PDF link"""
    expected_date = format_date(expected_at) if expected_at else 'sin fecha definida'

    total = 'pendiente'
    if total_amount is not None:
        try:
            total = format_currency(total_amount, currency)
        except (InvalidOperation, ValueError):
            total = 'pendiente'

    return '\n'.join([
        f"Hola {supplier_name},",
        f"Adjuntamos la orden de compra {order_id} de {site_name}.",
        f"Fecha esperada: {expected_date}.",
        f"Total estimado: {total}.",
        '',
        f"PDF: {pdf_url}",
        '',
        'Gracias.',
    ])


def format_quantity(value):
    """Up to three decimals, trailing zeros dropped: 10.500 -> '10,5'"""
    text = format_number(value, decimals=3)
    if ',' in text:
        text = text.rstrip('0').rstrip(',')
    return text
