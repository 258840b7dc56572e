import django_filters
from django.db.models import Q
from .models import Product


def filter_active_flag(queryset, value):
    """Filter by active status (handles string 'true'/'false')"""
    if value is None or value == '':
        return queryset
    if isinstance(value, str):
        is_active = value.lower() == 'true'
    else:
        is_active = bool(value)
    return queryset.filter(is_active=is_active)


class ProductFilter(django_filters.FilterSet):
    """Filter for Product model using django-filter"""

    search = django_filters.CharFilter(method='filter_search', label='Search')
    product_type = django_filters.CharFilter(field_name='product_type', lookup_expr='exact')
    active = django_filters.CharFilter(method='filter_active', label='Active')

    class Meta:
        model = Product
        fields = ['search', 'product_type', 'active']

    def filter_search(self, queryset, name, value):
        """Match every word against name or SKU"""
        if not value:
            return queryset
        for word in value.split():
            queryset = queryset.filter(Q(name__icontains=word) | Q(sku__icontains=word))
        return queryset

    def filter_active(self, queryset, name, value):
        return filter_active_flag(queryset, value)
