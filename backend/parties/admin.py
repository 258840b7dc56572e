from django.contrib import admin
from .models import Supplier


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'tax_id', 'contact_name', 'phone', 'email', 'is_active', 'created_at']
    list_filter = ['is_active']
    search_fields = ['name', 'tax_id', 'contact_name', 'phone', 'email']
    ordering = ['name']
    readonly_fields = ['created_at', 'updated_at']
