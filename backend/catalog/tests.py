"""
Test suite for Catalog module
Tests: Product filters and API
"""
from django.test import TestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.catalog.models import Product


class ProductAPITests(TestCase):
    """Test product API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_create_product(self):
        data = {'name': 'Harina de trigo', 'sku': '  ', 'product_type': 'insumo'}
        response = self.client.post('/api/v1/products/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertIsNone(response.data['sku'])
        self.assertEqual(response.data['unit'], 'un')
        self.assertEqual(response.data['product_type_label'], 'Insumo')

    def test_blank_skus_do_not_collide(self):
        for name in ('Sal', 'Azucar'):
            response = self.client.post('/api/v1/products/', {'name': name, 'sku': ''}, format='json')
            self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(Product.objects.filter(sku__isnull=True).count(), 2)

    def test_filter_by_type_and_search(self):
        TestDataFactory.create_product(name='Salsa de tomate', sku='SAL-1', product_type='preparacion')
        TestDataFactory.create_product(name='Tomate chonto', sku='TOM-1', product_type='insumo')
        TestDataFactory.create_product(name='Pizza', sku='PIZ-1', product_type='venta', is_active=False)

        response = self.client.get('/api/v1/products/', {'product_type': 'preparacion'})
        self.assertEqual([row['name'] for row in response.data], ['Salsa de tomate'])

        response = self.client.get('/api/v1/products/', {'search': 'tomate chonto'})
        self.assertEqual([row['name'] for row in response.data], ['Tomate chonto'])

        response = self.client.get('/api/v1/products/', {'active': 'false'})
        self.assertEqual([row['name'] for row in response.data], ['Pizza'])

    def test_update_product(self):
        product = TestDataFactory.create_product(name='Leche')
        response = self.client.patch(f'/api/v1/products/{product.id}/', {'unit': 'lt'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['unit'], 'lt')

    def test_delete_product_in_use(self):
        product = TestDataFactory.create_product(name='Leche')
        order = TestDataFactory.create_purchase_order()
        TestDataFactory.create_purchase_order_item(order, product)
        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Product.objects.filter(id=product.id).exists())

    def test_delete_product(self):
        product = TestDataFactory.create_product(name='Leche')
        response = self.client.delete(f'/api/v1/products/{product.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
