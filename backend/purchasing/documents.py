"""Text content of the purchase order PDF"""
from .messages import format_currency, format_date, format_quantity


def purchase_order_title(order):
    return f"Orden de compra {order}"


def purchase_order_lines(order):
    """Body lines of the purchase order document, in print order"""
    supplier = order.supplier
    lines = [f"Proveedor: {supplier.name}"]
    if supplier.tax_id:
        lines.append(f"NIT: {supplier.tax_id}")
    if supplier.contact_name:
        lines.append(f"Contacto: {supplier.contact_name}")
    lines.append(f"Sede: {order.site.name}")
    expected = format_date(order.expected_at) if order.expected_at else 'sin fecha definida'
    lines.append(f"Fecha esperada: {expected}")
    lines.append(f"Estado: {order.get_status_display()}")
    lines.append('')

    items = list(order.items.select_related('product'))
    lines.append(f"Lineas: {len(items)}")
    for item in items:
        product = item.product
        label = f"{product.sku} - {product.name}" if product.sku else product.name
        lines.append(
            f"{label} | {format_quantity(item.quantity)} {item.unit or product.unit} x "
            f"{format_currency(item.unit_cost, order.currency)} = "
            f"{format_currency(item.get_line_total(), order.currency)}"
        )

    lines.append('')
    lines.append(f"Total estimado: {format_currency(order.get_total(), order.currency)}")
    if order.notes:
        lines.append(f"Notas: {' '.join(order.notes.split())}")
    return lines


def build_purchase_order_document(order):
    """(title, lines) ready for pdf.render"""
    return purchase_order_title(order), purchase_order_lines(order)
