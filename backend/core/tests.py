"""
Test suite for Core module
Tests: Site resolution, current user, roles, audit logging
"""
from django.test import TestCase, RequestFactory
from rest_framework import status
from backend.core.models import AuditLog
from backend.core.sites import normalize_sites, role_options, sites_for_user
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.core.utils import create_audit_log, get_client_ip


class NormalizeSitesTests(TestCase):
    """Flattening employee-site rows"""

    def test_dict_list_and_missing(self):
        rows = [
            {'site_id': 1, 'sites': {'id': 1, 'name': 'Centro'}},
            {'site_id': 2, 'sites': [{'id': 2, 'name': 'Norte'}, {'id': 9, 'name': 'Ignorada'}]},
            {'site_id': 3, 'sites': []},
            {'site_id': 4, 'sites': None},
            {'site_id': 5},
        ]
        self.assertEqual(normalize_sites(rows), [
            {'id': 1, 'name': 'Centro'},
            {'id': 2, 'name': 'Norte'},
        ])

    def test_empty(self):
        self.assertEqual(normalize_sites(None), [])


class SitesForUserTests(TestCase):

    def setUp(self):
        self.centro = TestDataFactory.create_site(name='Centro')
        self.norte = TestDataFactory.create_site(name='Norte')
        self.cerrada = TestDataFactory.create_site(name='Cerrada', is_active=False)

    def test_employee_sees_assigned_sites(self):
        user = TestDataFactory.create_user(role='cajero')
        TestDataFactory.create_employee_site(user, self.norte)
        TestDataFactory.create_employee_site(user, self.centro, is_primary=True)
        TestDataFactory.create_employee_site(user, self.cerrada)
        self.assertEqual(sites_for_user(user), [
            {'id': self.centro.id, 'name': 'Centro'},
            {'id': self.norte.id, 'name': 'Norte'},
        ])

    def test_owner_sees_all_active_sites(self):
        user = TestDataFactory.create_user(role='propietario')
        names = [site['name'] for site in sites_for_user(user)]
        self.assertEqual(names, ['Centro', 'Norte'])

    def test_employee_without_sites(self):
        user = TestDataFactory.create_user(role='bodeguero')
        self.assertEqual(sites_for_user(user), [])


class AuditLogUtilsTests(TestCase):

    def setUp(self):
        self.factory = RequestFactory()
        self.user = TestDataFactory.create_user()

    def test_client_ip_prefers_forwarded_header(self):
        request = self.factory.get('/', HTTP_X_FORWARDED_FOR='10.0.0.5, 10.0.0.1')
        self.assertEqual(get_client_ip(request), '10.0.0.5')

    def test_create_audit_log(self):
        log = create_audit_log(user=self.user, action='po_send', model_name='PurchaseOrder', object_id=7,
                               object_reference='OC-1')
        self.assertIsNotNone(log)
        self.assertEqual(log.object_id, '7')
        self.assertEqual(log.user, self.user)

    def test_missing_fields_skip_logging(self):
        self.assertIsNone(create_audit_log(user=self.user, action='create', model_name='Supplier'))
        self.assertEqual(AuditLog.objects.count(), 0)


class CoreAPITests(TestCase):
    """Test auth and lookup endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(username='ana', role='gerente')
        self.site = TestDataFactory.create_site(name='Centro')
        TestDataFactory.create_employee_site(self.user, self.site, is_primary=True)
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def test_login(self):
        self.client.logout()
        response = self.client.post('/api/v1/auth/login/', {'username': 'ana', 'password': 'testpass123'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)
        self.assertIn('refresh', response.data)

    def test_login_wrong_password(self):
        self.client.logout()
        response = self.client.post('/api/v1/auth/login/', {'username': 'ana', 'password': 'nope'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me(self):
        response = self.client.get('/api/v1/auth/me/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], 'gerente')
        self.assertEqual(response.data['role_label'], 'Gerente')
        self.assertEqual(response.data['sites'], [{'id': self.site.id, 'name': 'Centro'}])

    def test_sites(self):
        response = self.client.get('/api/v1/sites/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 1)

    def test_roles(self):
        response = self.client.get('/api/v1/roles/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, role_options())
        self.assertIn({'value': 'propietario', 'label': 'Propietario'}, response.data)

    def test_audit_logs_are_scoped_to_user(self):
        other = TestDataFactory.create_user()
        create_audit_log(user=self.user, action='create', model_name='Supplier', object_id=1)
        create_audit_log(user=other, action='create', model_name='Supplier', object_id=2)
        response = self.client.get('/api/v1/audit-logs/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row['object_id'] for row in response.data], ['1'])
