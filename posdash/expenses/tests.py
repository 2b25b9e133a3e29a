"""
Test suite for Expenses proxy routes
Tests: Expense list/create/update/delete, Expense types
"""
from unittest.mock import patch

from django.test import TestCase, override_settings
from rest_framework import status

from posdash.core.test_utils import TestDataFactory, ProxyAPIClient, backend_response

BACKEND = 'http://backend.test'


@override_settings(BACKEND_API_BASE_URL=BACKEND)
class ExpenseAPITests(TestCase):
    """Test expense endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_list_expenses_with_paging(self, mock_request):
        rows = [{'id': 1, 'amount': 300, 'expense_type': 'Tea'}]
        mock_request.return_value = backend_response(200, TestDataFactory.page(rows, total=9, total_pages=2))

        response = self.client.get('/api/expenses?page=2&limit=8')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['totalPages'], 2)
        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/expenses/?page=2&limit=8')

    @patch('posdash.core.forwarder.requests.request')
    def test_create_update_delete(self, mock_request):
        mock_request.return_value = backend_response(200, {'id': 1})

        self.client.post('/api/expenses/', {'amount': 300}, format='json')
        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/expenses/'))

        self.client.put('/api/expenses/1', {'amount': 350}, format='json')
        self.assertEqual(mock_request.call_args[0], ('PUT', f'{BACKEND}/expenses/1'))
        self.assertEqual(mock_request.call_args[1]['json'], {'amount': 350})

        self.client.delete('/api/expenses/1/')
        self.assertEqual(mock_request.call_args[0], ('DELETE', f'{BACKEND}/expenses/1'))

    @patch('posdash.core.forwarder.requests.request')
    def test_expense_types(self, mock_request):
        mock_request.return_value = backend_response(200, [{'id': 1, 'name': 'Tea'}])

        response = self.client.get('/api/expense-type/?page=1&limit=1000')

        self.assertEqual(response.data, [{'id': 1, 'name': 'Tea'}])
        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/expense-type/?page=1&limit=1000')
