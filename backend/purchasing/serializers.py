import logging
import uuid
from decimal import Decimal
from django.conf import settings
from django.db import transaction
from django.utils import timezone
from rest_framework import serializers
from backend.catalog.models import Product
from .lines import clean_lines, summarize_lines
from .models import PurchaseOrder, PurchaseOrderItem

logger = logging.getLogger(__name__)

HEADER_REQUIRED_MESSAGE = 'Completa proveedor y sede para poder guardar.'
EDITABLE_STATUSES = ('draft',)


def generate_order_number():
    """OC-YYYYMMDD-XXXXXXXX, unique among existing orders"""
    order_number = f"OC-{timezone.now().strftime('%Y%m%d')}-{str(uuid.uuid4())[:8].upper()}"
    while PurchaseOrder.objects.filter(order_number=order_number).exists():
        order_number = f"OC-{timezone.now().strftime('%Y%m%d')}-{str(uuid.uuid4())[:8].upper()}"
    return order_number


class PurchaseOrderLineInputSerializer(serializers.Serializer):
    """Numeric bounds of a submitted line, matching PurchaseOrderItem's columns"""
    quantity = serializers.DecimalField(
        max_digits=12, decimal_places=3, min_value=Decimal('0.001'),
        error_messages={'min_value': 'La cantidad debe ser mayor a cero.'}
    )
    unit_cost = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=Decimal('0'),
        error_messages={'min_value': 'El costo unitario no puede ser negativo.'}
    )


class PurchaseOrderItemSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.name', read_only=True)
    product_sku = serializers.CharField(source='product.sku', read_only=True)
    line_total = serializers.SerializerMethodField()

    class Meta:
        model = PurchaseOrderItem
        fields = ['id', 'product', 'product_name', 'product_sku', 'quantity', 'unit_cost', 'unit', 'line_total']

    def get_line_total(self, obj):
        return float(obj.get_line_total())


class PurchaseOrderSerializer(serializers.ModelSerializer):
    items = PurchaseOrderItemSerializer(many=True, read_only=True)
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    site_name = serializers.CharField(source='site.name', read_only=True)
    status_label = serializers.CharField(source='get_status_display', read_only=True)
    total = serializers.SerializerMethodField()

    class Meta:
        model = PurchaseOrder
        fields = [
            'id', 'order_number', 'supplier', 'supplier_name', 'site', 'site_name',
            'expected_at', 'notes', 'status', 'status_label', 'currency',
            'created_by', 'sent_at', 'created_at', 'updated_at', 'items', 'total'
        ]
        read_only_fields = ['order_number', 'created_by', 'sent_at', 'created_at', 'updated_at']
        extra_kwargs = {
            'supplier': {'error_messages': {'required': HEADER_REQUIRED_MESSAGE, 'null': HEADER_REQUIRED_MESSAGE}},
            'site': {'error_messages': {'required': HEADER_REQUIRED_MESSAGE, 'null': HEADER_REQUIRED_MESSAGE}},
        }

    def get_total(self, obj):
        return float(obj.get_total())

    def validate_currency(self, value):
        value = (value or '').strip().upper()
        return value or settings.PURCHASE_ORDER_DEFAULT_CURRENCY

    def validate_notes(self, value):
        return (value or '').strip()

    def validate(self, attrs):
        if self.instance is not None and self.context.get('items_data') is not None:
            if self.instance.status not in EDITABLE_STATUSES:
                raise serializers.ValidationError({
                    'items': f'Solo se pueden modificar lineas de ordenes en borrador (estado actual: {self.instance.status}).'
                })
        return attrs

    def _build_items(self, order, items_data):
        """Create items from the submitted rows; unused rows are dropped"""
        max_lines = settings.PURCHASE_ORDER_MAX_LINES
        lines = clean_lines(items_data, max_lines)

        product_ids = {line['product_id'] for line in lines}
        products = {str(p.id): p for p in Product.objects.filter(id__in=[pid for pid in product_ids if pid.isdigit()])}

        items = []
        for number, line in enumerate(lines, start=1):
            product = products.get(line['product_id'])
            if product is None:
                raise serializers.ValidationError({'items': f"Producto {line['product_id']} no existe."})
            line_input = PurchaseOrderLineInputSerializer(data={
                'quantity': str(line['quantity']),
                'unit_cost': str(line['unit_cost']),
            })
            if not line_input.is_valid():
                messages = [
                    f"Linea {number} ({field}): {error}"
                    for field, errors in line_input.errors.items()
                    for error in errors
                ]
                raise serializers.ValidationError({'items': messages})
            items.append(PurchaseOrderItem(
                order=order,
                product=product,
                quantity=line_input.validated_data['quantity'],
                unit_cost=line_input.validated_data['unit_cost'],
                unit=line['unit'] or product.unit,
            ))
        PurchaseOrderItem.objects.bulk_create(items)
        return items

    @transaction.atomic
    def create(self, validated_data):
        validated_data['order_number'] = generate_order_number()
        validated_data.setdefault('status', 'draft')
        order = super().create(validated_data)

        items = self._build_items(order, self.context.get('items_data') or [])
        logger.info(f"Purchase order {order.order_number} created with {len(items)} line(s)")
        return order

    @transaction.atomic
    def update(self, instance, validated_data):
        order = super().update(instance, validated_data)

        items_data = self.context.get('items_data')
        if items_data is not None:
            order.items.all().delete()
            items = self._build_items(order, items_data)
            logger.info(f"Purchase order {order.order_number} lines replaced ({len(items)} line(s))")
        return order


class PurchaseOrderSummarySerializer(serializers.Serializer):
    """Preview of the lines an order would keep, without saving"""
    items = serializers.ListField(child=serializers.DictField(), required=False, default=list)

    def to_representation(self, instance):
        summary = summarize_lines(instance.get('items'), settings.PURCHASE_ORDER_MAX_LINES)
        return {
            'valid_lines': summary['valid_lines'],
            'total': float(summary['total']),
            'max_lines': settings.PURCHASE_ORDER_MAX_LINES,
        }
