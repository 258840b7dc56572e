"""
Test suite for the Purchasing module
Tests: PDF rendering, supplier message text, line handling, and the purchase order API
"""
import re
from datetime import date
from decimal import Decimal
from django.test import TestCase, SimpleTestCase
from rest_framework import status
from backend.core.models import AuditLog
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from backend.purchasing.documents import build_purchase_order_document
from backend.purchasing.lines import clean_lines, lines_from_form, summarize_lines
from backend.purchasing.messages import (
    build_purchase_order_message, format_currency, format_date, format_number, format_quantity
)
from backend.purchasing.models import PurchaseOrder
from backend.purchasing.pdf import render, sanitize, build_content_stream
from backend.purchasing.serializers import HEADER_REQUIRED_MESSAGE


def content_stream(pdf):
    """Text between 'stream' and 'endstream' of object 4"""
    text = pdf.decode('ascii')
    return text.split(' >> stream\n', 1)[1].split('\nendstream', 1)[0]


class SanitizeTests(SimpleTestCase):
    """Text reduction to printable ASCII"""

    def test_accents_and_reserved_characters(self):
        self.assertEqual(sanitize('café (test)\\'), 'cafe test')

    def test_spanish_accents(self):
        self.assertEqual(sanitize('Preparación Logística Ñandú'), 'Preparacion Logistica Nandu')

    def test_non_printable_becomes_space(self):
        self.assertEqual(sanitize('a\tb\nc'), 'a b c')
        self.assertEqual(sanitize('precio €5'), 'precio  5')

    def test_trims_whitespace(self):
        self.assertEqual(sanitize('   hola   '), 'hola')

    def test_none_and_numbers(self):
        self.assertEqual(sanitize(None), '')
        self.assertEqual(sanitize(42), '42')

    def test_output_is_printable_ascii(self):
        value = sanitize('日本語 (x)   ok \\ emoji \U0001F600')
        self.assertTrue(all(0x20 <= ord(char) <= 0x7e for char in value))
        self.assertNotIn('(', value)
        self.assertNotIn(')', value)
        self.assertNotIn('\\', value)


class RenderTests(SimpleTestCase):
    """One-page PDF structure"""

    def test_header_and_objects(self):
        pdf = render('Orden de compra OC-1', ['Proveedor: Lacteos'])
        self.assertTrue(pdf.startswith(b'%PDF-1.4\n'))
        self.assertTrue(pdf.endswith(b'%%EOF'))
        for number in range(1, 6):
            self.assertIn(f'{number} 0 obj'.encode(), pdf)
        self.assertIn(b'xref\n0 6\n0000000000 65535 f \n', pdf)
        self.assertIn(b'trailer << /Size 6 /Root 1 0 R >>', pdf)
        self.assertIn(b'/MediaBox [0 0 595 842]', pdf)
        self.assertIn(b'/BaseFont /Helvetica', pdf)

    def test_returns_bytes(self):
        self.assertIsInstance(render('T', []), bytes)

    def test_empty_lines_only_title_and_separator(self):
        pdf = render('Solo titulo', [])
        stream = content_stream(pdf)
        self.assertEqual(stream.split('\n'), [
            'BT /F1 11 Tf 50 800 Td (Solo titulo) Tj ET',
            'BT /F1 11 Tf 50 784 Td () Tj ET',
        ])
        self.assertIn(b'xref', pdf)
        self.assertIn(b'startxref', pdf)

    def test_line_layout(self):
        stream = build_content_stream(['Titulo', '', 'Linea (1)'])
        self.assertEqual(stream.split('\n')[2], 'BT /F1 11 Tf 50 768 Td (Linea 1) Tj ET')

    def test_long_documents_are_clipped_to_one_page(self):
        lines = [f'Linea {index}' for index in range(100)]
        stream = content_stream(render('Titulo', lines))
        commands = stream.split('\n')
        self.assertEqual(len(commands), 46)
        self.assertTrue(commands[-1].startswith('BT /F1 11 Tf 50 80 Td'))
        self.assertIn('(Linea 43)', commands[-1])
        self.assertNotIn('Linea 44', stream)

    def test_stream_length_matches(self):
        pdf = render('Titulo', ['uno', 'dos'])
        stream = content_stream(pdf)
        length = int(re.search(rb'/Length (\d+)', pdf).group(1))
        self.assertEqual(length, len(stream))

    def test_xref_offsets_point_at_objects(self):
        pdf = render('Orden', ['Proveedor: Lácteos (Norte)', 'Total estimado: $ 1.234,50'])
        xref_start = int(re.search(rb'startxref\n(\d+)\n', pdf).group(1))
        self.assertEqual(pdf[xref_start:xref_start + 5], b'xref\n')

        entries = re.findall(rb'(\d{10}) 00000 n \n', pdf)
        self.assertEqual(len(entries), 5)
        for number, entry in enumerate(entries, start=1):
            offset = int(entry)
            self.assertTrue(pdf[offset:].startswith(f'{number} 0 obj'.encode()))

    def test_unicode_input_stays_ascii(self):
        pdf = render('Compra – café', ['Año nuevo ✓'])
        pdf.decode('ascii')
        self.assertIn(b'(Compra   cafe)', pdf)


class MessageFormattingTests(SimpleTestCase):
    """es-CO number, currency and date formatting"""

    def test_format_number(self):
        self.assertEqual(format_number(1234.5), '1.234,50')
        self.assertEqual(format_number(Decimal('1234567.891')), '1.234.567,89')
        self.assertEqual(format_number(0), '0,00')
        self.assertEqual(format_number(-2500), '-2.500,00')

    def test_format_currency(self):
        self.assertEqual(format_currency(Decimal('1234.5')), '$ 1.234,50')
        self.assertEqual(format_currency(10, 'usd'), 'USD 10,00')

    def test_format_date(self):
        self.assertEqual(format_date(date(2026, 3, 5)), '5/3/2026')
        self.assertEqual(format_date('2026-11-20'), '20/11/2026')

    def test_format_quantity(self):
        self.assertEqual(format_quantity(Decimal('10.500')), '10,5')
        self.assertEqual(format_quantity(Decimal('3.000')), '3')
        self.assertEqual(format_quantity(1000), '1.000')

    def test_build_message(self):
        message = build_purchase_order_message(
            order_id='OC-20260305-ABCD1234',
            supplier_name='Lacteos del Norte',
            site_name='Centro',
            pdf_url='https://fogo.test/api/v1/purchase-orders/1/pdf/',
            expected_at=date(2026, 3, 5),
            total_amount=Decimal('1234.5'),
        )
        self.assertEqual(message.split('\n'), [
            'Hola Lacteos del Norte,',
            'Adjuntamos la orden de compra OC-20260305-ABCD1234 de Centro.',
            'Fecha esperada: 5/3/2026.',
            'Total estimado: $ 1.234,50.',
            '',
            'PDF: https://fogo.test/api/v1/purchase-orders/1/pdf/',
            '',
            'Gracias.',
        ])

    def test_build_message_without_date_or_total(self):
        message = build_purchase_order_message('OC-1', 'Proveedor', 'Sede', 'http://x/pdf/')
        self.assertIn('Fecha esperada: sin fecha definida.', message)
        self.assertIn('Total estimado: pendiente.', message)


class LineHandlingTests(SimpleTestCase):
    """Valid line filtering and totals"""

    def setUp(self):
        self.rows = [
            {'product_id': '1', 'quantity': '2', 'unit_cost': '1000'},
            {'product_id': '', 'quantity': '5', 'unit_cost': '10'},
            {'product_id': '2', 'quantity': '0', 'unit_cost': '10'},
            {'product_id': '3', 'quantity': '1.5', 'unit_cost': ''},
            {'product_id': '4', 'quantity': 'abc'},
        ]

    def test_summarize_lines(self):
        summary = summarize_lines(self.rows)
        self.assertEqual(summary['valid_lines'], 2)
        self.assertEqual(summary['total'], Decimal('2000'))

    def test_summarize_skips_negative_cost(self):
        rows = [
            {'product_id': '1', 'quantity': '2', 'unit_cost': '100'},
            {'product_id': '2', 'quantity': '1', 'unit_cost': '-50'},
        ]
        summary = summarize_lines(rows)
        self.assertEqual(summary['valid_lines'], 1)
        self.assertEqual(summary['total'], Decimal('200'))

    def test_summarize_respects_max_lines(self):
        summary = summarize_lines(self.rows, max_lines=1)
        self.assertEqual(summary['valid_lines'], 1)

    def test_clean_lines(self):
        lines = clean_lines(self.rows, 15)
        self.assertEqual([line['product_id'] for line in lines], ['1', '3'])
        self.assertEqual(lines[1]['unit_cost'], Decimal('0'))
        self.assertEqual(lines[0]['quantity'], Decimal('2'))

    def test_clean_lines_accepts_product_key(self):
        lines = clean_lines([{'product': 7, 'quantity': 1}], 15)
        self.assertEqual(lines[0]['product_id'], '7')

    def test_lines_from_form(self):
        data = {'item_0_product_id': '5', 'item_0_quantity': '3', 'item_0_unit_cost': '200'}
        lines = lines_from_form(data, 15)
        self.assertEqual(len(lines), 15)
        self.assertEqual(lines[0]['product_id'], '5')
        self.assertEqual(summarize_lines(lines)['valid_lines'], 1)

    def test_lines_from_form_without_items(self):
        self.assertIsNone(lines_from_form({'supplier': '1'}, 15))


class PurchaseOrderModelTests(TestCase):
    """Test PurchaseOrder and PurchaseOrderItem model methods"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.order = TestDataFactory.create_purchase_order(user=self.user)

    def test_order_str(self):
        self.assertEqual(str(self.order), self.order.order_number)
        self.order.order_number = None
        self.assertEqual(str(self.order), f'OC-{self.order.id}')

    def test_order_total(self):
        TestDataFactory.create_purchase_order_item(self.order, quantity=Decimal('10'), unit_cost=Decimal('100'))
        TestDataFactory.create_purchase_order_item(self.order, quantity=Decimal('2.5'), unit_cost=Decimal('40'))
        self.assertEqual(self.order.get_total(), Decimal('1100'))

    def test_empty_order_total(self):
        self.assertEqual(self.order.get_total(), Decimal('0'))


class PurchaseOrderDocumentTests(TestCase):
    """Text content printed in the PDF"""

    def test_document_lines(self):
        supplier = TestDataFactory.create_supplier(name='Lacteos', tax_id='900123456-7', contact_name='Ana')
        site = TestDataFactory.create_site(name='Centro')
        order = TestDataFactory.create_purchase_order(
            supplier=supplier, site=site, expected_at=date(2026, 3, 5), notes='Entregar  temprano'
        )
        product = TestDataFactory.create_product(name='Leche', sku='LEC-1', unit='lt')
        TestDataFactory.create_purchase_order_item(order, product, quantity=Decimal('10.5'), unit_cost=Decimal('3000'), unit='lt')

        title, lines = build_purchase_order_document(order)
        self.assertEqual(title, f'Orden de compra {order.order_number}')
        self.assertEqual(lines[:5], [
            'Proveedor: Lacteos',
            'NIT: 900123456-7',
            'Contacto: Ana',
            'Sede: Centro',
            'Fecha esperada: 5/3/2026',
        ])
        self.assertIn('Estado: Borrador', lines)
        self.assertIn('Lineas: 1', lines)
        self.assertIn('LEC-1 - Leche | 10,5 lt x $ 3.000,00 = $ 31.500,00', lines)
        self.assertIn('Total estimado: $ 31.500,00', lines)
        self.assertEqual(lines[-1], 'Notas: Entregar temprano')


class PurchaseOrderAPITests(TestCase):
    """Test purchase order API endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user(role='compras')
        self.supplier = TestDataFactory.create_supplier(name='Lacteos del Norte')
        self.site = TestDataFactory.create_site(name='Centro')
        self.product = TestDataFactory.create_product(name='Leche', unit='lt')
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)

    def order_payload(self, items):
        return {
            'supplier': self.supplier.id,
            'site': self.site.id,
            'expected_at': '2026-03-05',
            'items': items,
        }

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/purchase-orders/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_create_order(self):
        data = self.order_payload([
            {'product_id': self.product.id, 'quantity': '2', 'unit_cost': '1500'},
            {'product_id': '', 'quantity': ''},
        ])
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data['order_number'].startswith('OC-'))
        self.assertEqual(response.data['status'], 'draft')
        self.assertEqual(len(response.data['items']), 1)
        self.assertEqual(response.data['items'][0]['unit'], 'lt')
        self.assertEqual(response.data['total'], 3000.0)
        self.assertEqual(response.data['currency'], 'COP')
        self.assertTrue(AuditLog.objects.filter(action='create', model_name='PurchaseOrder').exists())

    def test_create_order_from_form_fields(self):
        data = {
            'supplier': self.supplier.id,
            'site': self.site.id,
            'item_0_product_id': self.product.id,
            'item_0_quantity': '4',
            'item_0_unit_cost': '250',
            'item_1_product_id': '',
        }
        response = self.client.post('/api/v1/purchase-orders/', data)
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['items']), 1)
        self.assertEqual(response.data['total'], 1000.0)

    def test_create_order_requires_supplier_and_site(self):
        response = self.client.post('/api/v1/purchase-orders/', {'items': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(str(response.data['supplier'][0]), HEADER_REQUIRED_MESSAGE)
        self.assertEqual(str(response.data['site'][0]), HEADER_REQUIRED_MESSAGE)
        self.assertEqual(PurchaseOrder.objects.count(), 0)

    def test_create_order_unknown_product(self):
        data = self.order_payload([{'product_id': 999999, 'quantity': '1'}])
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(PurchaseOrder.objects.count(), 0)

    def test_create_order_negative_cost(self):
        data = self.order_payload([{'product_id': self.product.id, 'quantity': '1', 'unit_cost': '-5'}])
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(PurchaseOrder.objects.count(), 0)

    def test_create_order_quantity_below_precision(self):
        data = self.order_payload([{'product_id': self.product.id, 'quantity': '0.0001', 'unit_cost': '1'}])
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('items', response.data)
        self.assertEqual(PurchaseOrder.objects.count(), 0)

    def test_create_order_quantity_too_large(self):
        data = self.order_payload([{'product_id': self.product.id, 'quantity': '1e15', 'unit_cost': '1'}])
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('items', response.data)
        self.assertEqual(PurchaseOrder.objects.count(), 0)

    def test_create_order_unit_cost_too_large(self):
        data = self.order_payload([{'product_id': self.product.id, 'quantity': '1', 'unit_cost': '99999999999'}])
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(PurchaseOrder.objects.count(), 0)

    def test_stored_quantity_matches_submitted(self):
        data = self.order_payload([{'product_id': self.product.id, 'quantity': '0.001', 'unit_cost': '2000'}])
        response = self.client.post('/api/v1/purchase-orders/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        order = PurchaseOrder.objects.get(id=response.data['id'])
        self.assertEqual(order.items.get().quantity, Decimal('0.001'))
        self.assertEqual(order.get_total(), Decimal('2'))

    def test_list_invalid_pagination_falls_back_to_defaults(self):
        TestDataFactory.create_purchase_order(user=self.user)
        response = self.client.get('/api/v1/purchase-orders/', {'page': 'abc', 'limit': '0'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['page'], 1)
        self.assertEqual(response.data['page_size'], 15)
        self.assertEqual(response.data['count'], 1)

        response = self.client.get('/api/v1/purchase-orders/', {'page': '-3', 'limit': 'x'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['page'], 1)
        self.assertEqual(response.data['page_size'], 15)

    def test_lines_beyond_max_are_ignored(self):
        items = [{'product_id': self.product.id, 'quantity': '1', 'unit_cost': '10'} for _ in range(20)]
        response = self.client.post('/api/v1/purchase-orders/', self.order_payload(items), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(len(response.data['items']), 15)

    def test_list_orders(self):
        TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier, site=self.site)
        TestDataFactory.create_purchase_order(user=self.user, status='sent')
        response = self.client.get('/api/v1/purchase-orders/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['count'], 2)
        self.assertEqual(response.data['page'], 1)

        response = self.client.get('/api/v1/purchase-orders/', {'status': 'sent'})
        self.assertEqual(response.data['count'], 1)

        response = self.client.get('/api/v1/purchase-orders/', {'supplier': self.supplier.id})
        self.assertEqual(response.data['count'], 1)

    def test_summary(self):
        data = {'items': [
            {'product_id': self.product.id, 'quantity': '3', 'unit_cost': '100'},
            {'product_id': self.product.id, 'quantity': '0', 'unit_cost': '100'},
        ]}
        response = self.client.post('/api/v1/purchase-orders/summary/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['valid_lines'], 1)
        self.assertEqual(response.data['total'], 300.0)
        self.assertEqual(response.data['max_lines'], 15)

    def test_update_replaces_lines(self):
        order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier, site=self.site)
        TestDataFactory.create_purchase_order_item(order, self.product)
        other = TestDataFactory.create_product(name='Queso', unit='kg')

        data = self.order_payload([{'product_id': other.id, 'quantity': '1.5', 'unit_cost': '20000'}])
        response = self.client.put(f'/api/v1/purchase-orders/{order.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['items']), 1)
        self.assertEqual(response.data['items'][0]['product'], other.id)
        self.assertEqual(response.data['total'], 30000.0)

    def test_patch_keeps_lines(self):
        order = TestDataFactory.create_purchase_order(user=self.user)
        TestDataFactory.create_purchase_order_item(order, self.product)
        response = self.client.patch(f'/api/v1/purchase-orders/{order.id}/', {'notes': '  urgente '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['notes'], 'urgente')
        self.assertEqual(len(response.data['items']), 1)

    def test_sent_order_lines_are_locked(self):
        order = TestDataFactory.create_purchase_order(user=self.user, status='sent')
        data = {'items': [{'product_id': self.product.id, 'quantity': '1'}]}
        response = self.client.patch(f'/api/v1/purchase-orders/{order.id}/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('items', response.data)

    def test_delete_order(self):
        order = TestDataFactory.create_purchase_order(user=self.user)
        response = self.client.delete(f'/api/v1/purchase-orders/{order.id}/')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(PurchaseOrder.objects.filter(id=order.id).exists())

    def test_download_pdf(self):
        order = TestDataFactory.create_purchase_order(user=self.user, supplier=self.supplier, site=self.site)
        TestDataFactory.create_purchase_order_item(order, self.product)
        response = self.client.get(f'/api/v1/purchase-orders/{order.id}/pdf/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertIn(f'{order.order_number}.pdf', response['Content-Disposition'])
        self.assertTrue(response.content.startswith(b'%PDF-1.4'))
        self.assertIn(b'Lacteos del Norte', response.content)
        self.assertTrue(AuditLog.objects.filter(action='po_pdf', object_reference=order.order_number).exists())

    def test_pdf_not_found(self):
        response = self.client.get('/api/v1/purchase-orders/999999/pdf/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_message(self):
        order = TestDataFactory.create_purchase_order(
            user=self.user, supplier=self.supplier, site=self.site, expected_at=date(2026, 3, 5)
        )
        TestDataFactory.create_purchase_order_item(order, self.product, quantity=Decimal('2'), unit_cost=Decimal('617.25'))
        response = self.client.get(f'/api/v1/purchase-orders/{order.id}/message/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['pdf_url'].endswith(f'/api/v1/purchase-orders/{order.id}/pdf/'))
        message = response.data['message']
        self.assertTrue(message.startswith('Hola Lacteos del Norte,'))
        self.assertIn(f'orden de compra {order.order_number} de Centro.', message)
        self.assertIn('Fecha esperada: 5/3/2026.', message)
        self.assertIn('Total estimado: $ 1.234,50.', message)
        self.assertIn(f"PDF: {response.data['pdf_url']}", message)

    def test_message_without_lines(self):
        order = TestDataFactory.create_purchase_order(user=self.user)
        response = self.client.get(f'/api/v1/purchase-orders/{order.id}/message/')
        self.assertIn('Total estimado: pendiente.', response.data['message'])

    def test_send_order(self):
        order = TestDataFactory.create_purchase_order(user=self.user)
        TestDataFactory.create_purchase_order_item(order, self.product)
        response = self.client.post(f'/api/v1/purchase-orders/{order.id}/send/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'sent')
        self.assertIsNotNone(response.data['sent_at'])
        self.assertTrue(AuditLog.objects.filter(action='po_send').exists())

        response = self.client.post(f'/api/v1/purchase-orders/{order.id}/send/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_send_order_without_lines(self):
        order = TestDataFactory.create_purchase_order(user=self.user)
        response = self.client.post(f'/api/v1/purchase-orders/{order.id}/send/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        order.refresh_from_db()
        self.assertEqual(order.status, 'draft')
