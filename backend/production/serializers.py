from decimal import Decimal
from rest_framework import serializers
from backend.catalog.models import Product
from backend.core.models import Site
from backend.purchasing.lines import parse_decimal
from .models import RecipeCard, ProductionBatch

RECIPE_PRODUCT_TYPES = ('preparacion', 'venta')


class RecipeCardSerializer(serializers.ModelSerializer):
    """Recipe card row with BOM and step counts (maps passed in context)"""
    product_name = serializers.SerializerMethodField()
    product_sku = serializers.SerializerMethodField()
    product_unit = serializers.CharField(source='product.unit', read_only=True)
    status_label = serializers.CharField(source='get_status_display', read_only=True)
    ingredient_lines = serializers.SerializerMethodField()
    ingredient_qty = serializers.SerializerMethodField()
    steps = serializers.SerializerMethodField()

    class Meta:
        model = RecipeCard
        fields = [
            'id', 'product', 'product_name', 'product_sku', 'product_unit', 'site',
            'yield_qty', 'yield_unit', 'status', 'status_label', 'is_active',
            'recipe_description', 'ingredient_lines', 'ingredient_qty', 'steps',
            'created_at', 'updated_at'
        ]

    def get_product_name(self, obj):
        return obj.product.name or 'Producto'

    def get_product_sku(self, obj):
        return obj.product.sku or '-'

    def _ingredients(self, obj):
        return self.context.get('ingredients', {}).get(obj.product_id, {'lines': 0, 'qty': Decimal('0')})

    def get_ingredient_lines(self, obj):
        return self._ingredients(obj)['lines']

    def get_ingredient_qty(self, obj):
        return float(self._ingredients(obj)['qty'] or 0)

    def get_steps(self, obj):
        return self.context.get('steps', {}).get(obj.id, 0)


class RecipeCardCreateSerializer(serializers.Serializer):
    """Create the initial draft recipe card for a preparation or sale product"""
    product = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    site = serializers.PrimaryKeyRelatedField(queryset=Site.objects.all(), required=False, allow_null=True)
    yield_qty = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    yield_unit = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    recipe_description = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    def validate(self, attrs):
        product_id = str(attrs.get('product') or '').strip()
        if not product_id:
            raise serializers.ValidationError({'product': 'Selecciona un producto para crear la receta.'})

        product = Product.objects.filter(pk=product_id).first() if product_id.isdigit() else None
        if product is None or not product.is_active:
            raise serializers.ValidationError({'product': 'El producto seleccionado no esta activo.'})

        if (product.product_type or '').strip().lower() not in RECIPE_PRODUCT_TYPES:
            raise serializers.ValidationError({'product': 'Solo se permiten productos de tipo preparacion o venta.'})

        if RecipeCard.objects.filter(product=product).exists():
            raise serializers.ValidationError({'product': 'Ese producto ya tiene receta creada.'})

        yield_qty = parse_decimal(attrs.get('yield_qty'))
        if yield_qty is None or yield_qty <= 0:
            yield_qty = Decimal('1')

        attrs['product'] = product
        attrs['yield_qty'] = yield_qty
        attrs['yield_unit'] = (attrs.get('yield_unit') or '').strip() or product.unit or 'un'
        attrs['recipe_description'] = (attrs.get('recipe_description') or '').strip() or None
        return attrs

    def create(self, validated_data):
        return RecipeCard.objects.create(
            status='draft',
            is_active=True,
            **validated_data
        )


class ProductionBatchSerializer(serializers.ModelSerializer):
    """Batch row with product/site names and BOM consumption (map passed in context)"""
    product_name = serializers.SerializerMethodField()
    product_sku = serializers.SerializerMethodField()
    site_name = serializers.SerializerMethodField()
    consumption_lines = serializers.SerializerMethodField()
    consumption_qty = serializers.SerializerMethodField()

    class Meta:
        model = ProductionBatch
        fields = [
            'id', 'site', 'site_name', 'product', 'product_name', 'product_sku',
            'produced_qty', 'produced_unit', 'total_cost', 'unit_cost', 'status',
            'notes', 'consumption_lines', 'consumption_qty', 'created_at'
        ]

    def get_product_name(self, obj):
        return obj.product.name or 'Producto'

    def get_product_sku(self, obj):
        return obj.product.sku or '-'

    def get_site_name(self, obj):
        return obj.site.name or str(obj.site_id)

    def _consumption(self, obj):
        return self.context.get('consumptions', {}).get(obj.id, {'lines': 0, 'qty': Decimal('0')})

    def get_consumption_lines(self, obj):
        return self._consumption(obj)['lines']

    def get_consumption_qty(self, obj):
        return float(self._consumption(obj)['qty'] or 0)
