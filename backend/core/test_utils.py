"""
Test utilities and factories for creating test data
"""
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from backend.core.models import Site, EmployeeSite
from backend.catalog.models import Product
from backend.parties.models import Supplier
from backend.purchasing.models import PurchaseOrder, PurchaseOrderItem
from backend.purchasing.serializers import generate_order_number
from backend.production.models import RecipeCard, ProductionBatch
from decimal import Decimal
import random
import string

User = get_user_model()


class TestDataFactory:
    """Factory class for creating test data"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def create_user(username=None, email=None, password='testpass123', role='', is_staff=False, is_superuser=False):
        """Create a test user"""
        if not username:
            username = f'testuser_{TestDataFactory.random_string(6)}'
        if not email:
            email = f'{username}@test.com'
        user = User.objects.create_user(
            username=username,
            email=email,
            password=password,
            role=role,
            is_staff=is_staff,
            is_superuser=is_superuser
        )
        return user

    @staticmethod
    def create_site(name=None, code=None, is_active=True):
        """Create a test site"""
        if not name:
            name = f'Site_{TestDataFactory.random_string(6)}'
        if not code:
            code = f'SITE_{TestDataFactory.random_string(6).upper()}'
        return Site.objects.create(name=name, code=code, is_active=is_active)

    @staticmethod
    def create_employee_site(user, site=None, is_primary=False):
        """Assign a site to an employee"""
        if not site:
            site = TestDataFactory.create_site()
        return EmployeeSite.objects.create(user=user, site=site, is_primary=is_primary)

    @staticmethod
    def create_product(name=None, sku=None, unit='un', product_type='insumo', is_active=True):
        """Create a test product"""
        if not name:
            name = f'Product_{TestDataFactory.random_string(6)}'
        if not sku:
            sku = f'SKU_{TestDataFactory.random_string(8)}'
        return Product.objects.create(
            name=name,
            sku=sku,
            unit=unit,
            product_type=product_type,
            is_active=is_active
        )

    @staticmethod
    def create_supplier(name=None, phone=None, email=None, tax_id='', contact_name=''):
        """Create a test supplier"""
        if not name:
            name = f'Supplier_{TestDataFactory.random_string(6)}'
        if not phone:
            phone = f'3{random.randint(100000000, 999999999)}'
        if not email:
            email = f'{name.lower()}@test.com'
        return Supplier.objects.create(
            name=name,
            phone=phone,
            email=email,
            tax_id=tax_id,
            contact_name=contact_name
        )

    @staticmethod
    def create_purchase_order(user=None, supplier=None, site=None, status='draft', expected_at=None, notes=''):
        """Create a test purchase order without lines"""
        if not supplier:
            supplier = TestDataFactory.create_supplier()
        if not site:
            site = TestDataFactory.create_site()
        return PurchaseOrder.objects.create(
            order_number=generate_order_number(),
            supplier=supplier,
            site=site,
            status=status,
            expected_at=expected_at,
            notes=notes,
            created_by=user
        )

    @staticmethod
    def create_purchase_order_item(order, product=None, quantity=None, unit_cost=None, unit='un'):
        """Create a test purchase order line"""
        if not product:
            product = TestDataFactory.create_product()
        if quantity is None:
            quantity = Decimal('10.000')
        if unit_cost is None:
            unit_cost = Decimal('100.00')
        return PurchaseOrderItem.objects.create(
            order=order,
            product=product,
            quantity=quantity,
            unit_cost=unit_cost,
            unit=unit
        )

    @staticmethod
    def create_recipe_card(product=None, site=None, status='draft', yield_qty=None):
        """Create a test recipe card"""
        if not product:
            product = TestDataFactory.create_product(product_type='preparacion')
        return RecipeCard.objects.create(
            product=product,
            site=site,
            status=status,
            yield_qty=yield_qty if yield_qty is not None else Decimal('1'),
            yield_unit=product.unit
        )

    @staticmethod
    def create_production_batch(site=None, product=None, produced_qty=None, total_cost=None, user=None):
        """Create a test production batch"""
        if not site:
            site = TestDataFactory.create_site()
        if not product:
            product = TestDataFactory.create_product(product_type='preparacion')
        if produced_qty is None:
            produced_qty = Decimal('5.000')
        return ProductionBatch.objects.create(
            site=site,
            product=product,
            produced_qty=produced_qty,
            produced_unit=product.unit,
            total_cost=total_cost,
            created_by=user
        )


class AuthenticatedAPIClient(APIClient):
    """APIClient with authentication helper"""

    def authenticate_user(self, user):
        """Authenticate the client with a user"""
        refresh = RefreshToken.for_user(user)
        self.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
        return self

    def logout(self):
        """Remove authentication"""
        self.credentials()
