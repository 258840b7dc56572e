from django.db import models


class Product(models.Model):
    """Product master (raw materials, preparations and items for sale)"""
    PRODUCT_TYPE_CHOICES = [
        ('insumo', 'Insumo'),
        ('preparacion', 'Preparación'),
        ('venta', 'Venta'),
    ]

    name = models.CharField(max_length=200, db_index=True)
    sku = models.CharField(max_length=100, unique=True, blank=True, null=True, db_index=True)
    unit = models.CharField(max_length=20, default='un')
    product_type = models.CharField(max_length=20, choices=PRODUCT_TYPE_CHOICES, default='insumo')
    description = models.TextField(blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.name} ({self.sku or 'NO-SKU'})"

    class Meta:
        db_table = 'products'
        ordering = ['name']
        indexes = [
            models.Index(fields=['product_type', 'is_active'], name='idx_product_type_active'),
        ]
