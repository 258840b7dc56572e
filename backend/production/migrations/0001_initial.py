# Generated manually for the initial production schema

import django.db.models.deletion
from decimal import Decimal
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('catalog', '0001_initial'),
        ('core', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='RecipeCard',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('yield_qty', models.DecimalField(decimal_places=3, default=Decimal('1'), max_digits=12)),
                ('yield_unit', models.CharField(default='un', max_length=20)),
                ('status', models.CharField(choices=[('draft', 'Borrador'), ('published', 'Publicada'), ('archived', 'Archivada')], default='draft', max_length=20)),
                ('is_active', models.BooleanField(default=True)),
                ('recipe_description', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name='recipe_card', to='catalog.product')),
                ('site', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='recipe_cards', to='core.site')),
            ],
            options={
                'db_table': 'recipe_cards',
                'ordering': ['-updated_at'],
                'indexes': [
                    models.Index(fields=['site', '-updated_at'], name='idx_recipe_site_updated'),
                    models.Index(fields=['status'], name='idx_recipe_status'),
                ],
            },
        ),
        migrations.CreateModel(
            name='RecipeIngredient',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12)),
                ('unit', models.CharField(blank=True, max_length=20)),
                ('is_active', models.BooleanField(default=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('ingredient', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='used_in_recipes', to='catalog.product')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='bom_lines', to='catalog.product')),
            ],
            options={
                'db_table': 'recipes',
                'ordering': ['id'],
                'indexes': [models.Index(fields=['product', 'is_active'], name='idx_bom_product_active')],
            },
        ),
        migrations.CreateModel(
            name='RecipeStep',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('step_number', models.PositiveIntegerField()),
                ('description', models.TextField()),
                ('recipe_card', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='steps', to='production.recipecard')),
            ],
            options={
                'db_table': 'recipe_steps',
                'ordering': ['recipe_card', 'step_number'],
                'unique_together': {('recipe_card', 'step_number')},
            },
        ),
        migrations.CreateModel(
            name='ProductionBatch',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('produced_qty', models.DecimalField(decimal_places=3, max_digits=12)),
                ('produced_unit', models.CharField(default='un', max_length=20)),
                ('total_cost', models.DecimalField(blank=True, decimal_places=2, max_digits=14, null=True)),
                ('unit_cost', models.DecimalField(blank=True, decimal_places=4, max_digits=14, null=True)),
                ('status', models.CharField(default='posted', max_length=20)),
                ('notes', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='production_batches', to=settings.AUTH_USER_MODEL)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='production_batches', to='catalog.product')),
                ('site', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='production_batches', to='core.site')),
            ],
            options={
                'db_table': 'production_batches',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['site', '-created_at'], name='idx_batch_site_created')],
            },
        ),
        migrations.CreateModel(
            name='ProductionBatchConsumption',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('consumed_qty', models.DecimalField(decimal_places=3, max_digits=12)),
                ('batch', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='consumptions', to='production.productionbatch')),
                ('ingredient', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='batch_consumptions', to='catalog.product')),
            ],
            options={
                'db_table': 'production_batch_consumptions',
                'ordering': ['id'],
            },
        ),
    ]
