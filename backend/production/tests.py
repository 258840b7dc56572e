"""
Test suite for Production module
Tests: Recipe card listing and creation rules, candidates, production batch summary
"""
from datetime import timedelta
from decimal import Decimal
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from backend.core.models import AuditLog
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.production.models import (
    RecipeCard, RecipeIngredient, RecipeStep, ProductionBatch, ProductionBatchConsumption
)


class RecipeCardAPITests(TestCase):
    """Test recipe card endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='gerente')
        self.site = TestDataFactory.create_site(name='Planta')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_list_with_counts_and_summary(self):
        sauce = TestDataFactory.create_product(name='Salsa', product_type='preparacion')
        tomato = TestDataFactory.create_product(name='Tomate')
        onion = TestDataFactory.create_product(name='Cebolla')
        card = TestDataFactory.create_recipe_card(product=sauce, site=self.site, status='published')
        RecipeIngredient.objects.create(product=sauce, ingredient=tomato, quantity=Decimal('2.5'), unit='kg')
        RecipeIngredient.objects.create(product=sauce, ingredient=onion, quantity=Decimal('0.5'), unit='kg')
        RecipeIngredient.objects.create(product=sauce, ingredient=onion, quantity=Decimal('9'), unit='kg', is_active=False)
        RecipeStep.objects.create(recipe_card=card, step_number=1, description='Picar')
        TestDataFactory.create_recipe_card(status='draft')

        response = self.client.get('/api/v1/recipes/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['summary'], {'total': 2, 'published': 1, 'draft': 1})

        row = next(item for item in response.data['results'] if item['id'] == card.id)
        self.assertEqual(row['ingredient_lines'], 2)
        self.assertEqual(row['ingredient_qty'], 3.0)
        self.assertEqual(row['steps'], 1)
        self.assertEqual(row['status_label'], 'Publicada')

    def test_list_filters_by_site(self):
        TestDataFactory.create_recipe_card(site=self.site)
        TestDataFactory.create_recipe_card()

        response = self.client.get('/api/v1/recipes/', {'site_id': self.site.id})
        self.assertEqual(response.data['summary']['total'], 1)

        response = self.client.get('/api/v1/recipes/', {'site_id': 'abc'})
        self.assertEqual(response.data['results'], [])

    def test_create_recipe_card(self):
        product = TestDataFactory.create_product(name='Masa', unit='kg', product_type='preparacion')
        data = {'product': product.id, 'site': self.site.id, 'yield_qty': '', 'recipe_description': '  '}
        response = self.client.post('/api/v1/recipes/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['status'], 'draft')
        self.assertEqual(Decimal(response.data['yield_qty']), Decimal('1'))
        self.assertEqual(response.data['yield_unit'], 'kg')
        self.assertIsNone(response.data['recipe_description'])
        self.assertTrue(AuditLog.objects.filter(action='recipe_create').exists())

    def test_create_requires_product(self):
        response = self.client.post('/api/v1/recipes/', {'yield_qty': '2'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data['product'][0]), 'Selecciona un producto para crear la receta.')

    def test_create_rejects_raw_material(self):
        product = TestDataFactory.create_product(product_type='insumo')
        response = self.client.post('/api/v1/recipes/', {'product': product.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            str(response.data['product'][0]),
            'Solo se permiten productos de tipo preparacion o venta.'
        )

    def test_create_rejects_inactive_product(self):
        product = TestDataFactory.create_product(product_type='venta', is_active=False)
        response = self.client.post('/api/v1/recipes/', {'product': product.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data['product'][0]), 'El producto seleccionado no esta activo.')

    def test_create_rejects_duplicate(self):
        card = TestDataFactory.create_recipe_card()
        response = self.client.post('/api/v1/recipes/', {'product': card.product_id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data['product'][0]), 'Ese producto ya tiene receta creada.')
        self.assertEqual(RecipeCard.objects.count(), 1)

    def test_candidates(self):
        free = TestDataFactory.create_product(name='Arepa', product_type='venta')
        taken = TestDataFactory.create_product(name='Bunuelo', product_type='preparacion')
        TestDataFactory.create_recipe_card(product=taken)
        TestDataFactory.create_product(name='Harina', product_type='insumo')
        TestDataFactory.create_product(name='Viejo', product_type='venta', is_active=False)

        response = self.client.get('/api/v1/recipes/candidates/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['id'] for row in response.data], [free.id])

        response = self.client.get('/api/v1/recipes/candidates/', {'product_id': taken.id})
        self.assertEqual([row['id'] for row in response.data], [free.id, taken.id])


class ProductionBatchAPITests(TestCase):
    """Test production batch listing"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='bodeguero')
        self.site = TestDataFactory.create_site(name='Planta')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_batch_list_and_weekly_summary(self):
        flour = TestDataFactory.create_product(name='Harina')
        recent = TestDataFactory.create_production_batch(
            site=self.site, produced_qty=Decimal('10'), total_cost=Decimal('50000'), user=self.user
        )
        ProductionBatchConsumption.objects.create(batch=recent, ingredient=flour, consumed_qty=Decimal('4.5'))
        ProductionBatchConsumption.objects.create(batch=recent, ingredient=flour, consumed_qty=Decimal('0.5'))
        old = TestDataFactory.create_production_batch(
            site=self.site, produced_qty=Decimal('99'), total_cost=Decimal('1000')
        )
        ProductionBatch.objects.filter(id=old.id).update(created_at=timezone.now() - timedelta(days=10))

        response = self.client.get('/api/v1/production-batches/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['results']), 2)
        self.assertEqual(response.data['summary'], {
            'days': 7,
            'batches': 1,
            'produced_qty': 10.0,
            'total_cost': 50000.0,
        })

        row = next(item for item in response.data['results'] if item['id'] == recent.id)
        self.assertEqual(row['consumption_lines'], 2)
        self.assertEqual(row['consumption_qty'], 5.0)
        self.assertEqual(row['site_name'], 'Planta')

    def test_batch_list_filters_by_site(self):
        TestDataFactory.create_production_batch(site=self.site)
        TestDataFactory.create_production_batch()
        response = self.client.get('/api/v1/production-batches/', {'site_id': self.site.id})
        self.assertEqual(len(response.data['results']), 1)
        self.assertEqual(response.data['results'][0]['site'], self.site.id)
