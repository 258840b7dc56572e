"""
Test suite for Parties module
Tests: Supplier permissions, validation, review summary and API
"""
from django.test import TestCase
from rest_framework import status
from backend.core.models import AuditLog
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.parties.models import Supplier
from backend.parties.permissions import can_manage_suppliers
from backend.parties.serializers import supplier_summary


class SupplierPermissionTests(TestCase):
    """Who may manage suppliers"""

    def test_manager_roles(self):
        for role in ('propietario', 'gerente_general', 'gerente'):
            user = TestDataFactory.create_user(role=role)
            self.assertTrue(can_manage_suppliers(user), role)

    def test_other_roles(self):
        for role in ('bodeguero', 'cajero', 'compras', ''):
            user = TestDataFactory.create_user(role=role)
            self.assertFalse(can_manage_suppliers(user), role)

    def test_superuser(self):
        user = TestDataFactory.create_user(is_superuser=True)
        self.assertTrue(can_manage_suppliers(user))

    def test_anonymous(self):
        self.assertFalse(can_manage_suppliers(None))


class SupplierSummaryTests(TestCase):

    def test_missing_values_are_not_defined(self):
        supplier = Supplier(name='Carnes del Valle', phone='  ', is_active=False)
        summary = supplier_summary(supplier)
        self.assertEqual(summary['name'], 'Carnes del Valle')
        self.assertEqual(summary['phone'], 'Sin definir')
        self.assertEqual(summary['tax_id'], 'Sin definir')
        self.assertEqual(summary['status'], 'Inactivo')

    def test_active_supplier(self):
        supplier = Supplier(name='Panaderia', tax_id='900111222', is_active=True)
        summary = supplier_summary(supplier)
        self.assertEqual(summary['tax_id'], '900111222')
        self.assertEqual(summary['status'], 'Activo')


class SupplierAPITests(TestCase):
    """Test supplier API endpoints"""

    def setUp(self):
        self.manager = TestDataFactory.create_user(role='gerente')
        self.cashier = TestDataFactory.create_user(role='cajero')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)

    def test_create_supplier(self):
        data = {
            'name': '  Lacteos del Norte ',
            'tax_id': ' 900123456-7 ',
            'contact_name': 'Ana',
            'phone': '3001234567',
            'email': 'ventas@lacteos.co',
        }
        response = self.client.post('/api/v1/suppliers/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Lacteos del Norte')
        self.assertEqual(response.data['tax_id'], '900123456-7')
        self.assertEqual(response.data['summary']['address'], 'Sin definir')
        self.assertEqual(response.data['summary']['status'], 'Activo')
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='Supplier').exists())

    def test_create_supplier_requires_name(self):
        response = self.client.post('/api/v1/suppliers/', {'name': '   '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(
            str(response.data['name'][0]),
            'Completa al menos el nombre del proveedor para guardar.'
        )
        self.assertEqual(Supplier.objects.count(), 0)

    def test_cashier_cannot_create(self):
        self.client.authenticate_user(self.cashier)
        response = self.client.post('/api/v1/suppliers/', {'name': 'Nuevo'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(str(response.data['detail']), 'no_permission')

    def test_cashier_can_list(self):
        TestDataFactory.create_supplier(name='Carnes')
        self.client.authenticate_user(self.cashier)
        response = self.client.get('/api/v1/suppliers/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_list_filters(self):
        TestDataFactory.create_supplier(name='Carnes', tax_id='800')
        inactive = TestDataFactory.create_supplier(name='Verduras')
        inactive.is_active = False
        inactive.save()

        response = self.client.get('/api/v1/suppliers/', {'search': 'carn'})
        self.assertEqual([row['name'] for row in response.data], ['Carnes'])

        response = self.client.get('/api/v1/suppliers/', {'active': 'false'})
        self.assertEqual([row['name'] for row in response.data], ['Verduras'])

    def test_update_supplier(self):
        supplier = TestDataFactory.create_supplier(name='Carnes')
        response = self.client.patch(f'/api/v1/suppliers/{supplier.id}/', {'contact_name': ' Luis '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['contact_name'], 'Luis')
        self.assertEqual(response.data['summary']['contact_name'], 'Luis')

    def test_delete_supplier_with_orders(self):
        supplier = TestDataFactory.create_supplier(name='Carnes')
        TestDataFactory.create_purchase_order(supplier=supplier)
        response = self.client.delete(f'/api/v1/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Supplier.objects.filter(id=supplier.id).exists())

    def test_delete_supplier(self):
        supplier = TestDataFactory.create_supplier(name='Carnes')
        response = self.client.delete(f'/api/v1/suppliers/{supplier.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(Supplier.objects.filter(id=supplier.id).exists())
