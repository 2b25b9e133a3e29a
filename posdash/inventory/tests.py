"""
Test suite for Inventory proxy routes
Tests: Stock view, Stock adjustment batch, Stock-in, Stock reports
"""
from unittest.mock import patch

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from rest_framework import status

from posdash.core.test_utils import TestDataFactory, ProxyAPIClient, backend_response

BACKEND = 'http://backend.test'


@override_settings(BACKEND_API_BASE_URL=BACKEND, PROXY_LONG_TIMEOUT=120)
class StockAPITests(TestCase):
    """Test stock endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_view_stock_forwards_query(self, mock_request):
        mock_request.return_value = backend_response(200, {'data': [], 'total': 0})

        response = self.client.get('/api/stock/viewstock?branch=Main&page=2&limit=8')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/stock/viewstock?branch=Main&page=2&limit=8')

    @patch('posdash.core.forwarder.requests.request')
    def test_adjust_stock_sends_array(self, mock_request):
        """Test the adjustment batch is relayed as one array with the long timeout"""
        mock_request.return_value = backend_response(200, TestDataFactory.adjust_result(2))
        batch = [
            {'product_id': 1, 'action': 'increase', 'quantity': 5, 'reason': 'Stock count adjustment'},
            {'product_id': 2, 'action': 'decrease', 'quantity': 1, 'reason': 'Damaged'},
        ]

        response = self.client.post('/api/stock/adjuststock', batch, format='json')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data['results']), 2)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', f'{BACKEND}/stock/adjuststock'))
        self.assertEqual(kwargs['json'], batch)
        self.assertEqual(kwargs['timeout'], 120)

    @patch('posdash.core.forwarder.requests.request')
    def test_adjust_stock_backend_rejects(self, mock_request):
        mock_request.return_value = backend_response(400, {'detail': 'Insufficient stock for product 2'})

        response = self.client.post('/api/stock/adjuststock', [{'product_id': 2}], format='json')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Insufficient stock for product 2')

    @patch('posdash.core.forwarder.requests.request')
    def test_save_stock_in(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'saved'})

        self.client.post('/api/stock/savestockin', {'items': [{'product_id': 1, 'quantity': 3}]}, format='json')

        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/stock/savestockin'))

    @patch('posdash.core.forwarder.requests.request')
    def test_stock_report_multipart_text(self, mock_request):
        """Test the stock report relays multipart input and returns plain text"""
        mock_request.return_value = backend_response(200, text='JVBERi0xLjQK', content_type='text/plain')
        upload = SimpleUploadedFile('filter.csv', b'brand\nCA\n', content_type='text/csv')

        response = self.client.post('/api/stock/stockreport', {'branch': 'Main', 'file': upload}, format='multipart')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.content, b'JVBERi0xLjQK')
        self.assertTrue(response['Content-Type'].startswith('text/plain'))
        kwargs = mock_request.call_args[1]
        self.assertEqual(kwargs['data'], {'branch': 'Main'})
        self.assertEqual(kwargs['files']['file'][0], 'filter.csv')
        self.assertNotIn('Content-Type', kwargs['headers'])

    @patch('posdash.core.forwarder.requests.request')
    def test_stock_in_report_requires_dates(self, mock_request):
        response = self.client.post('/api/stock/stockinreport?date_from=2024-01-01')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'date_from and date_to are required'})
        mock_request.assert_not_called()

    @patch('posdash.core.forwarder.requests.request')
    def test_stock_in_report_wraps_pdf(self, mock_request):
        mock_request.return_value = backend_response(200, 'JVBERi0xLjQK')

        response = self.client.post('/api/stock/stockinreport?date_from=2024-01-01&date_to=2024-01-31')

        self.assertEqual(response.data, {'pdf': 'JVBERi0xLjQK'})
        self.assertEqual(
            mock_request.call_args[0][1],
            f'{BACKEND}/stock/stockinreport?date_from=2024-01-01&date_to=2024-01-31',
        )
