from django.db import models
from decimal import Decimal
from backend.catalog.models import Product
from backend.core.models import Site, User
from backend.parties.models import Supplier


class PurchaseOrder(models.Model):
    """Purchase order sent to a supplier for one site"""
    STATUS_CHOICES = [
        ('draft', 'Borrador'),
        ('sent', 'Enviada'),
        ('received', 'Recibida'),
        ('cancelled', 'Cancelada'),
    ]

    order_number = models.CharField(max_length=100, unique=True, blank=True, null=True)
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='purchase_orders')
    site = models.ForeignKey(Site, on_delete=models.PROTECT, related_name='purchase_orders')
    expected_at = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    currency = models.CharField(max_length=3, default='COP')
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='purchase_orders')
    sent_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.order_number or f"OC-{self.id}"

    def get_total(self):
        """Estimated order amount from all items"""
        return sum((item.get_line_total() for item in self.items.all()), Decimal('0'))

    class Meta:
        db_table = 'purchase_orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='idx_po_status'),
            models.Index(fields=['supplier', 'status'], name='idx_po_supplier_status'),
            models.Index(fields=['site', '-created_at'], name='idx_po_site_created'),
        ]


class PurchaseOrderItem(models.Model):
    """Purchase order line items"""
    order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name='items')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='purchase_order_items')
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    unit_cost = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    unit = models.CharField(max_length=20, blank=True)

    def get_line_total(self):
        """Calculate line total"""
        return self.quantity * self.unit_cost

    class Meta:
        db_table = 'purchase_order_items'
        ordering = ['id']
        indexes = [
            models.Index(fields=['order', 'product'], name='idx_poitem_order_product'),
        ]
