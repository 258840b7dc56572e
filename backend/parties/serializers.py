from rest_framework import serializers
from .models import Supplier

NOT_DEFINED = 'Sin definir'


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = ['id', 'name', 'tax_id', 'contact_name', 'phone', 'email', 'address', 'notes', 'is_active', 'created_at', 'updated_at']
        read_only_fields = ['created_at', 'updated_at']
        extra_kwargs = {
            'name': {'allow_blank': True},
        }

    def validate_name(self, value):
        value = (value or '').strip()
        if not value:
            raise serializers.ValidationError('Completa al menos el nombre del proveedor para guardar.')
        return value

    def validate(self, attrs):
        for field in ('tax_id', 'contact_name', 'phone', 'email', 'address', 'notes'):
            if field in attrs:
                attrs[field] = (attrs[field] or '').strip()
        return attrs


class SupplierDetailSerializer(SupplierSerializer):
    summary = serializers.SerializerMethodField()

    class Meta(SupplierSerializer.Meta):
        fields = SupplierSerializer.Meta.fields + ['summary']

    def get_summary(self, obj):
        return supplier_summary(obj)


def supplier_summary(supplier):
    """Display values for the supplier review panel"""
    def shown(value):
        return (value or '').strip() or NOT_DEFINED

    return {
        'name': shown(supplier.name),
        'tax_id': shown(supplier.tax_id),
        'contact_name': shown(supplier.contact_name),
        'phone': shown(supplier.phone),
        'email': shown(supplier.email),
        'address': shown(supplier.address),
        'notes': shown(supplier.notes),
        'status': 'Activo' if supplier.is_active else 'Inactivo',
    }
