"""
Test suite for Catalog proxy routes
Tests: Brands, Categories, Products, Barcode lookup
"""
from unittest.mock import patch

import requests
from django.test import TestCase, override_settings
from rest_framework import status

from posdash.core.test_utils import TestDataFactory, ProxyAPIClient, backend_response

BACKEND = 'http://backend.test'


@override_settings(BACKEND_API_BASE_URL=BACKEND)
class CategoryAPITests(TestCase):
    """Test category endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_list_categories(self, mock_request):
        """Test listing categories relays the backend list and forwards the cookie"""
        rows = [TestDataFactory.category(1, 'Bats'), TestDataFactory.category(2, 'Balls')]
        mock_request.return_value = backend_response(200, rows)

        response = self.client.get('/api/category')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, rows)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('GET', f'{BACKEND}/category/'))
        self.assertEqual(kwargs['headers']['Cookie'], 'session_token=abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_trailing_slash_is_optional(self, mock_request):
        mock_request.return_value = backend_response(200, [])
        self.assertEqual(self.client.get('/api/category/').status_code, status.HTTP_200_OK)
        self.assertEqual(self.client.get('/api/category').status_code, status.HTTP_200_OK)

    @patch('posdash.core.forwarder.requests.request')
    def test_create_category(self, mock_request):
        mock_request.return_value = backend_response(201, TestDataFactory.category(3, 'Gloves'))

        response = self.client.post('/api/category/', {'name': 'Gloves'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(mock_request.call_args[1]['json'], {'name': 'Gloves'})

    @patch('posdash.core.forwarder.requests.request')
    def test_update_and_delete_category(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'ok'})

        self.client.put('/api/category/3', {'name': 'Pads'}, format='json')
        self.assertEqual(mock_request.call_args[0], ('PUT', f'{BACKEND}/category/3'))

        self.client.delete('/api/category/3')
        self.assertEqual(mock_request.call_args[0], ('DELETE', f'{BACKEND}/category/3'))

    @patch('posdash.core.forwarder.requests.request')
    def test_backend_500_with_text_body(self, mock_request):
        """Test a non-JSON error body comes back as error + details"""
        mock_request.return_value = backend_response(500, text='Internal Server Error')

        response = self.client.get('/api/category')

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data['status'], 500)
        self.assertEqual(response.data['details'], 'Internal Server Error')

    @patch('posdash.core.forwarder.requests.request')
    def test_backend_unreachable(self, mock_request):
        mock_request.side_effect = requests.exceptions.ConnectionError('Connection refused')

        response = self.client.get('/api/category')

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data['error'], 'Backend unavailable')


@override_settings(BACKEND_API_BASE_URL=BACKEND)
class BrandAPITests(TestCase):
    """Test brand endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_list_brands(self, mock_request):
        mock_request.return_value = backend_response(200, [TestDataFactory.brand(1, 'CA')])

        response = self.client.get('/api/brand/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data[0]['name'], 'CA')

    @patch('posdash.core.forwarder.requests.request')
    def test_delete_missing_brand(self, mock_request):
        mock_request.return_value = backend_response(404, {'detail': 'Brand not found'})

        response = self.client.delete('/api/brand/99')

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Brand not found', 'status': 404})


@override_settings(BACKEND_API_BASE_URL=BACKEND)
class ProductAPITests(TestCase):
    """Test product endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_list_products_defaults(self, mock_request):
        mock_request.return_value = backend_response(200, [])

        self.client.get('/api/products')

        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/products/view-product?skip=0&limit=100')

    @patch('posdash.core.forwarder.requests.request')
    def test_list_products_with_search(self, mock_request):
        mock_request.return_value = backend_response(200, [])

        self.client.get('/api/products?skip=20&limit=10&search_string=bat')

        self.assertEqual(
            mock_request.call_args[0][1],
            f'{BACKEND}/products/view-product?skip=20&limit=10&search_string=bat',
        )

    @patch('posdash.core.forwarder.requests.request')
    def test_post_create_action(self, mock_request):
        mock_request.return_value = backend_response(201, TestDataFactory.product(5))

        response = self.client.post('/api/products?action=create', {'name': 'Bat'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/products/'))

    @patch('posdash.core.forwarder.requests.request')
    def test_post_without_action_views_products(self, mock_request):
        mock_request.return_value = backend_response(200, [])

        self.client.post('/api/products', {'brand': 'CA'}, format='json')

        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/products/view-product'))

    @patch('posdash.core.forwarder.requests.request')
    def test_delete_product_is_post(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'deleted'})

        self.client.post('/api/products/delete-product/5')

        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/products/delete-product/5'))

    @patch('posdash.core.forwarder.requests.request')
    def test_generate_barcode(self, mock_request):
        mock_request.return_value = backend_response(200, {'barcode': '123456789012'})

        response = self.client.get('/api/products/generate-barcode')

        self.assertEqual(response.data, {'barcode': '123456789012'})
        self.assertEqual(mock_request.call_args[0], ('GET', f'{BACKEND}/products/generate-barcode'))

    @patch('posdash.core.forwarder.requests.request')
    def test_search_by_barcode(self, mock_request):
        product = TestDataFactory.product(7, barcode='8901234567890')
        mock_request.return_value = backend_response(200, product)

        response = self.client.get('/api/products/searchbybarcode?barcode=8901234567890')

        self.assertEqual(response.data, product)
        args, kwargs = mock_request.call_args
        self.assertEqual(args[1], f'{BACKEND}/products/searchbybarcode?barcode=8901234567890')
        self.assertEqual(kwargs['timeout'], 30)

    @patch('posdash.core.forwarder.requests.request')
    def test_search_by_barcode_requires_barcode(self, mock_request):
        response = self.client.get('/api/products/searchbybarcode')

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data, {'error': 'Barcode parameter is required'})
        mock_request.assert_not_called()

    @patch('posdash.core.forwarder.requests.request')
    def test_search_by_barcode_timeout(self, mock_request):
        mock_request.side_effect = requests.exceptions.ReadTimeout('timed out')

        response = self.client.get('/api/products/searchbybarcode?barcode=1')

        self.assertEqual(response.status_code, status.HTTP_504_GATEWAY_TIMEOUT)
        self.assertEqual(response.data, {
            'error': 'Request timeout. Please try again.', 'status': 504, 'type': 'TIMEOUT',
        })
