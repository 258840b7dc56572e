"""
Purchase order line handling shared by the API and the PDF/message builders.

A submitted line counts only when it names a product and has a positive
quantity; anything else is an unused row of the order form and is dropped.
"""
from decimal import Decimal, InvalidOperation

LINE_FIELDS = ('product_id', 'quantity', 'unit_cost', 'unit')


def parse_decimal(value):
    """Decimal for finite numeric input, None for blanks and garbage"""
    if value is None or isinstance(value, bool):
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        number = Decimal(text)
    except (InvalidOperation, ValueError):
        return None
    return number if number.is_finite() else None


def line_product_id(line):
    value = line.get('product_id', line.get('product'))
    if value is None:
        return None
    return str(value).strip() or None


def is_valid_line(line):
    quantity = parse_decimal(line.get('quantity'))
    return bool(line_product_id(line)) and quantity is not None and quantity > 0


def clean_lines(raw_lines, max_lines):
    """
    Keep the first ``max_lines`` rows and return the valid ones as
    {'product_id', 'quantity', 'unit_cost', 'unit'} with parsed numbers.
    A missing or unparseable unit cost counts as zero.
    """
    cleaned = []
    for line in list(raw_lines or [])[:max_lines]:
        if not isinstance(line, dict) or not is_valid_line(line):
            continue
        unit_cost = parse_decimal(line.get('unit_cost'))
        cleaned.append({
            'product_id': line_product_id(line),
            'quantity': parse_decimal(line.get('quantity')),
            'unit_cost': unit_cost if unit_cost is not None else Decimal('0'),
            'unit': str(line.get('unit') or '').strip(),
        })
    return cleaned


def summarize_lines(raw_lines, max_lines=None):
    """
    Valid line count and estimated total (quantity x unit cost).
    Lines with a negative unit cost are left out, since saving rejects them.
    """
    lines = list(raw_lines or [])
    if max_lines is not None:
        lines = lines[:max_lines]
    valid_count = 0
    total = Decimal('0')
    for line in lines:
        if not isinstance(line, dict) or not is_valid_line(line):
            continue
        unit_cost = parse_decimal(line.get('unit_cost')) or Decimal('0')
        if unit_cost < 0:
            continue
        valid_count += 1
        total += parse_decimal(line.get('quantity')) * unit_cost
    return {'valid_lines': valid_count, 'total': total}


def lines_from_form(data, max_lines):
    """
    Rebuild line dicts from flattened form fields (item_0_product_id,
    item_0_quantity, ...). Returns None when the payload has no such fields.
    """
    if not any(f"item_{index}_product_id" in data for index in range(max_lines)):
        return None
    lines = []
    for index in range(max_lines):
        lines.append({field: data.get(f"item_{index}_{field}", '') for field in LINE_FIELDS})
    return lines
