"""
Test suite for POS proxy routes
Tests: Customer invoices (field remap, delete-as-POST, payments, receipts), Walk-in invoices, Daily cash
"""
from unittest.mock import patch

import requests
from django.test import TestCase, override_settings
from django.utils import timezone
from rest_framework import status

from posdash.core.test_utils import TestDataFactory, ProxyAPIClient, backend_response

BACKEND = 'http://backend.test'


@override_settings(BACKEND_API_BASE_URL=BACKEND, PROXY_LONG_TIMEOUT=120)
class CustomerInvoiceAPITests(TestCase):
    """Test customer invoice endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_update_remaps_fields(self, mock_request):
        """Test customer/total_amount become e_name/e_amount and unknown fields are dropped"""
        mock_request.return_value = backend_response(200, {'message': 'updated'})

        response = self.client.put(
            '/api/customerinvoice/5',
            {'customer': 'Ali', 'total_amount': 1500, 'note': 'x', 'items': [1, 2]},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('PUT', f'{BACKEND}/customerinvoice/UpdateCustomerInvoice/5'))
        self.assertEqual(kwargs['json'], {'e_name': 'Ali', 'e_amount': '1500', 'note': 'x'})

    @patch('posdash.core.forwarder.requests.request')
    def test_update_status_field_passes_through(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'updated'})

        self.client.put('/api/customerinvoice/5', {'status': 'paid'}, format='json')

        self.assertEqual(mock_request.call_args[1]['json'], {'status': 'paid'})

    @patch('posdash.core.forwarder.requests.request')
    def test_delete_is_forwarded_as_post(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'deleted'})

        response = self.client.delete('/api/customerinvoice/5')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/customerinvoice/Deletecustomorder/5'))

    @patch('posdash.core.forwarder.requests.request')
    def test_get_one_order(self, mock_request):
        mock_request.return_value = backend_response(200, {'id': 5})

        self.client.get('/api/customerinvoice/5')

        self.assertEqual(mock_request.call_args[0], ('GET', f'{BACKEND}/customerinvoice/viewcustomerorder/5'))

    @patch('posdash.core.forwarder.requests.request')
    def test_save_customer_order(self, mock_request):
        mock_request.return_value = backend_response(201, {'id': 6})

        self.client.post('/api/customerinvoice/', {'customer': 'Ali', 'items': []}, format='json')

        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/customerinvoice/SaveCustomerOrders'))

    @patch('posdash.core.forwarder.requests.request')
    def test_process_payment_long_timeout(self, mock_request):
        mock_request.return_value = backend_response(200, {'balance': 0})

        self.client.put('/api/customerinvoice/process-payment/5', {'amount': 500}, format='json')

        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('PUT', f'{BACKEND}/customerinvoice/process-payment/5'))
        self.assertEqual(kwargs['timeout'], 120)

    @patch('posdash.core.forwarder.requests.request')
    def test_receipt(self, mock_request):
        mock_request.return_value = backend_response(200, {'pdf_base64': 'JVBERi0='})

        response = self.client.post('/api/customerinvoice/receipt/5')

        self.assertEqual(response.data, {'pdf_base64': 'JVBERi0='})

    @patch('posdash.core.forwarder.requests.request')
    def test_payment_history_and_customer_orders(self, mock_request):
        mock_request.return_value = backend_response(200, [])

        self.client.get('/api/customerinvoice/payment-history/5')
        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/customerinvoice/payment-history/5')

        self.client.get('/api/customerinvoice/customerorders/12?status=pending')
        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/customerinvoice/customerorders/12?status=pending')

        self.client.get('/api/customerinvoice/Customers')
        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/customerinvoice/Customers')


@override_settings(BACKEND_API_BASE_URL=BACKEND)
class WalkinInvoiceAPITests(TestCase):
    """Test walk-in invoice endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_list_defaults_to_today(self, mock_request):
        mock_request.return_value = backend_response(200, [])

        self.client.get('/api/walkin-invoices')

        today = timezone.now().date().isoformat()
        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/walkin-invoices/today?date={today}')

    @patch('posdash.core.forwarder.requests.request')
    def test_create_walkin_invoice(self, mock_request):
        invoice = TestDataFactory.walkin_invoice(1, 2500)
        mock_request.return_value = backend_response(201, invoice)

        response = self.client.post('/api/walkin-invoices', {'total_amount': 2500}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/walkin-invoice/walkin-invoices'))

    @patch('posdash.core.forwarder.requests.request')
    def test_today_reshapes_summary(self, mock_request):
        """Test the per-date answer is reduced to total/cash/invoices"""
        invoices = [TestDataFactory.walkin_invoice(1, 1000), TestDataFactory.walkin_invoice(2, 500, 'card')]
        mock_request.return_value = backend_response(200, {
            'date': '2024-05-01', 'total_amount': 1500, 'cash_amount': 1000,
            'invoices': invoices, 'count': 2,
        })

        response = self.client.get('/api/walkin-invoices/today?date=2024-05-01')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'total_amount': 1500, 'cash_amount': 1000, 'invoices': invoices})
        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/walkin-invoice/date/2024-05-01')

    @patch('posdash.core.forwarder.requests.request')
    def test_today_missing_fields_default_to_zero(self, mock_request):
        mock_request.return_value = backend_response(200, {'total_amount': 700})

        response = self.client.get('/api/walkin-invoices/today?date=2024-05-01')

        self.assertEqual(response.data, {'total_amount': 700, 'cash_amount': 0, 'invoices': []})

    @patch('posdash.core.forwarder.requests.request')
    def test_today_error_keeps_zero_totals(self, mock_request):
        mock_request.side_effect = requests.exceptions.ConnectionError('down')

        response = self.client.get('/api/walkin-invoices/today')

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data['total_amount'], 0)
        self.assertEqual(response.data['cash_amount'], 0)
        self.assertEqual(response.data['invoices'], [])
        self.assertEqual(response.data['error'], 'Backend unavailable')

    @patch('posdash.core.forwarder.requests.request')
    def test_daily_cash_found(self, mock_request):
        mock_request.return_value = backend_response(200, {'found': True, 'opening': 5000})

        response = self.client.get('/api/walkin-invoices/daily-cash/2024-05-01')

        self.assertEqual(response.data, {'found': True, 'opening': 5000})
        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/walkin-invoice/daily-cash/2024-05-01')

    @patch('posdash.core.forwarder.requests.request')
    def test_daily_cash_not_found(self, mock_request):
        mock_request.return_value = backend_response(404, {'detail': 'No record for date'})

        response = self.client.get('/api/walkin-invoices/daily-cash/2024-05-01')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'No record for date', 'status': 404, 'found': False})

    @patch('posdash.core.forwarder.requests.request')
    def test_opening_and_closing(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'saved'})

        self.client.post('/api/walkin-invoices/opening', {'amount': 5000}, format='json')
        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/walkin-invoice/opening'))

        self.client.post('/api/walkin-invoices/closing', {'amount': 9000}, format='json')
        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/walkin-invoice/closing'))
