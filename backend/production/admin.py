from django.contrib import admin
from .models import RecipeCard, RecipeIngredient, RecipeStep, ProductionBatch, ProductionBatchConsumption


class RecipeStepInline(admin.TabularInline):
    model = RecipeStep
    extra = 1
    fields = ['step_number', 'description']


@admin.register(RecipeCard)
class RecipeCardAdmin(admin.ModelAdmin):
    list_display = ['product', 'site', 'yield_qty', 'yield_unit', 'status', 'is_active', 'updated_at']
    list_filter = ['status', 'is_active', 'site']
    search_fields = ['product__name', 'product__sku', 'recipe_description']
    ordering = ['-updated_at']
    inlines = [RecipeStepInline]
    readonly_fields = ['created_at', 'updated_at']


@admin.register(RecipeIngredient)
class RecipeIngredientAdmin(admin.ModelAdmin):
    list_display = ['product', 'ingredient', 'quantity', 'unit', 'is_active']
    list_filter = ['is_active']
    search_fields = ['product__name', 'ingredient__name']


class ProductionBatchConsumptionInline(admin.TabularInline):
    model = ProductionBatchConsumption
    extra = 0
    fields = ['ingredient', 'consumed_qty']


@admin.register(ProductionBatch)
class ProductionBatchAdmin(admin.ModelAdmin):
    list_display = ['id', 'product', 'site', 'produced_qty', 'produced_unit', 'total_cost', 'unit_cost', 'status', 'created_at']
    list_filter = ['status', 'site', 'created_at']
    search_fields = ['product__name', 'product__sku', 'notes']
    ordering = ['-created_at']
    inlines = [ProductionBatchConsumptionInline]
    readonly_fields = ['created_at']
