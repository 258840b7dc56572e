from django.contrib import admin
from .messages import format_currency
from .models import PurchaseOrder, PurchaseOrderItem


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 1
    fields = ['product', 'quantity', 'unit_cost', 'unit']


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'supplier', 'site', 'expected_at', 'status', 'get_total', 'created_by', 'created_at']
    list_filter = ['status', 'site', 'supplier', 'created_at']
    search_fields = ['order_number', 'supplier__name', 'notes']
    ordering = ['-created_at']
    inlines = [PurchaseOrderItemInline]
    readonly_fields = ['order_number', 'sent_at', 'created_at', 'updated_at']

    def get_total(self, obj):
        return format_currency(obj.get_total(), obj.currency)
    get_total.short_description = 'Total'
