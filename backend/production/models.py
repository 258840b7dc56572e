from django.db import models
from decimal import Decimal
from backend.catalog.models import Product
from backend.core.models import Site, User


class RecipeCard(models.Model):
    """Recipe header for a produced item (one per product)"""
    STATUS_CHOICES = [
        ('draft', 'Borrador'),
        ('published', 'Publicada'),
        ('archived', 'Archivada'),
    ]

    product = models.OneToOneField(Product, on_delete=models.PROTECT, related_name='recipe_card')
    site = models.ForeignKey(Site, on_delete=models.SET_NULL, null=True, blank=True, related_name='recipe_cards')
    yield_qty = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('1'))
    yield_unit = models.CharField(max_length=20, default='un')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='draft')
    is_active = models.BooleanField(default=True)
    recipe_description = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Receta {self.product.name}"

    class Meta:
        db_table = 'recipe_cards'
        ordering = ['-updated_at']
        indexes = [
            models.Index(fields=['site', '-updated_at'], name='idx_recipe_site_updated'),
            models.Index(fields=['status'], name='idx_recipe_status'),
        ]


class RecipeIngredient(models.Model):
    """Bill-of-materials line: ingredient consumed to make a product"""
    product = models.ForeignKey(Product, on_delete=models.CASCADE, related_name='bom_lines')
    ingredient = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='used_in_recipes')
    quantity = models.DecimalField(max_digits=12, decimal_places=3)
    unit = models.CharField(max_length=20, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"{self.product.name} <- {self.quantity} {self.ingredient.name}"

    class Meta:
        db_table = 'recipes'
        ordering = ['id']
        indexes = [
            models.Index(fields=['product', 'is_active'], name='idx_bom_product_active'),
        ]


class RecipeStep(models.Model):
    """Preparation steps of a recipe card"""
    recipe_card = models.ForeignKey(RecipeCard, on_delete=models.CASCADE, related_name='steps')
    step_number = models.PositiveIntegerField()
    description = models.TextField()

    def __str__(self):
        return f"{self.recipe_card} #{self.step_number}"

    class Meta:
        db_table = 'recipe_steps'
        ordering = ['recipe_card', 'step_number']
        unique_together = [('recipe_card', 'step_number')]


class ProductionBatch(models.Model):
    """Production run: finished goods in, BOM consumed"""
    site = models.ForeignKey(Site, on_delete=models.PROTECT, related_name='production_batches')
    product = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='production_batches')
    produced_qty = models.DecimalField(max_digits=12, decimal_places=3)
    produced_unit = models.CharField(max_length=20, default='un')
    total_cost = models.DecimalField(max_digits=14, decimal_places=2, null=True, blank=True)
    unit_cost = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True)
    status = models.CharField(max_length=20, default='posted')
    notes = models.TextField(blank=True, null=True)
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='production_batches')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Lote {self.id} - {self.product.name}"

    class Meta:
        db_table = 'production_batches'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['site', '-created_at'], name='idx_batch_site_created'),
        ]


class ProductionBatchConsumption(models.Model):
    """Ingredient consumed by a production batch"""
    batch = models.ForeignKey(ProductionBatch, on_delete=models.CASCADE, related_name='consumptions')
    ingredient = models.ForeignKey(Product, on_delete=models.PROTECT, related_name='batch_consumptions')
    consumed_qty = models.DecimalField(max_digits=12, decimal_places=3)

    class Meta:
        db_table = 'production_batch_consumptions'
        ordering = ['id']
