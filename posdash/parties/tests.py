"""
Test suite for Parties proxy routes
Tests: Customers, Vendors, Vendor payments, Salesmen
"""
from unittest.mock import patch

from django.test import TestCase, override_settings
from rest_framework import status

from posdash.core.test_utils import TestDataFactory, ProxyAPIClient, backend_response

BACKEND = 'http://backend.test'


@override_settings(BACKEND_API_BASE_URL=BACKEND, PROXY_LONG_TIMEOUT=120)
class CustomerAPITests(TestCase):
    """Test customer endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_view_customers(self, mock_request):
        customer = TestDataFactory.customer(1, 'Ali')
        mock_request.return_value = backend_response(200, {'data': [customer], 'total': 1})

        response = self.client.get('/api/customers/viewcustomer?page=1&limit=8&search_string=ali')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data'][0]['cus_name'], 'Ali')
        self.assertEqual(
            mock_request.call_args[0][1],
            f'{BACKEND}/customers/viewcustomer?page=1&limit=8&search_string=ali',
        )

    @patch('posdash.core.forwarder.requests.request')
    def test_create_customer(self, mock_request):
        mock_request.return_value = backend_response(201, {'id': 3})

        response = self.client.post('/api/customers/', {'Name': 'Ali'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/customers/'))

    @patch('posdash.core.forwarder.requests.request')
    def test_update_customer_long_timeout(self, mock_request):
        mock_request.return_value = backend_response(200, {'id': 3})

        self.client.put('/api/customers/3', {'Name': 'Ali Khan'}, format='json')

        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('PUT', f'{BACKEND}/customers/3'))
        self.assertEqual(kwargs['json'], {'Name': 'Ali Khan'})
        self.assertEqual(kwargs['timeout'], 120)

    @patch('posdash.core.forwarder.requests.request')
    def test_delete_missing_customer(self, mock_request):
        """Test a backend 404 with detail surfaces as the error text and status"""
        mock_request.return_value = backend_response(404, {'detail': 'not found'})

        response = self.client.delete('/api/customers/42')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'not found', 'status': 404})
        self.assertEqual(mock_request.call_args[0], ('DELETE', f'{BACKEND}/customers/42'))


@override_settings(BACKEND_API_BASE_URL=BACKEND, PROXY_LONG_TIMEOUT=120)
class VendorAPITests(TestCase):
    """Test vendor endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_list_vendors_paging(self, mock_request):
        mock_request.return_value = backend_response(200, [])

        self.client.get('/api/vendors?skip=8&limit=8&unrelated=1')

        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/vendors/?skip=8&limit=8')

    @patch('posdash.core.forwarder.requests.request')
    def test_update_vendor(self, mock_request):
        mock_request.return_value = backend_response(200, {'id': 4})

        self.client.put('/api/vendors/4', {'Name': 'Supplier'}, format='json')

        self.assertEqual(mock_request.call_args[0], ('PUT', f'{BACKEND}/vendors/4'))

    @patch('posdash.core.forwarder.requests.request')
    def test_vendor_report(self, mock_request):
        mock_request.return_value = backend_response(200, {'pdf': 'JVBERi0='})

        response = self.client.post('/api/vendors/vendorviewreport')

        self.assertEqual(response.data, {'pdf': 'JVBERi0='})
        self.assertEqual(mock_request.call_args[1]['timeout'], 120)

    @patch('posdash.core.forwarder.requests.request')
    def test_vendor_payments(self, mock_request):
        mock_request.return_value = backend_response(200, [])

        self.client.get('/api/vendors/payments?vendor_id=4')
        self.assertEqual(mock_request.call_args[0], ('GET', f'{BACKEND}/vendors/payments?vendor_id=4'))

        self.client.post('/api/vendors/payments', {'vendor_id': 4, 'amount': 500}, format='json')
        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/vendors/payments'))
        self.assertEqual(mock_request.call_args[1]['json'], {'vendor_id': 4, 'amount': 500})


@override_settings(BACKEND_API_BASE_URL=BACKEND)
class SalesmanAPITests(TestCase):
    """Test salesman endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_salesman_crud(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'ok'})

        self.client.get('/api/salesman')
        self.assertEqual(mock_request.call_args[0], ('GET', f'{BACKEND}/salesman/'))

        self.client.post('/api/salesman/', {'name': 'Bilal'}, format='json')
        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/salesman/'))

        self.client.put('/api/salesman/9', {'name': 'Bilal A'}, format='json')
        self.assertEqual(mock_request.call_args[0], ('PUT', f'{BACKEND}/salesman/9'))

        self.client.delete('/api/salesman/9')
        self.assertEqual(mock_request.call_args[0], ('DELETE', f'{BACKEND}/salesman/9'))
