from rest_framework import serializers
from .models import Product


class ProductSerializer(serializers.ModelSerializer):
    product_type_label = serializers.CharField(source='get_product_type_display', read_only=True)

    class Meta:
        model = Product
        fields = ['id', 'name', 'sku', 'unit', 'product_type', 'product_type_label', 'description', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']

    def validate_sku(self, value):
        # Empty SKUs are stored as NULL so the unique constraint ignores them
        value = (value or '').strip()
        return value or None

    def validate_unit(self, value):
        return (value or '').strip() or 'un'
