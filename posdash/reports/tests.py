"""
Test suite for Reports proxy routes
Tests: Sales summary, Dashboard stats, Branches
"""
from unittest.mock import patch

import requests
from django.test import TestCase, override_settings
from rest_framework import status

from posdash.core.test_utils import ProxyAPIClient, backend_response

BACKEND = 'http://backend.test'


@override_settings(BACKEND_API_BASE_URL=BACKEND, DEFAULT_BRANCH='Main Branch', PROXY_RETRY_DELAY=0)
class ReportsAPITests(TestCase):
    """Test report endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_sales_summary_default_branch(self, mock_request):
        mock_request.return_value = backend_response(200, {'total_sales': 1000})

        response = self.client.get('/api/sales-view/summary?from_date=2024-01-01&to_date=2024-01-31')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            mock_request.call_args[0][1],
            f'{BACKEND}/sales-view/summary?from_date=2024-01-01&to_date=2024-01-31&branch=Main+Branch',
        )

    @patch('posdash.core.forwarder.requests.request')
    def test_sales_summary_explicit_branch(self, mock_request):
        mock_request.return_value = backend_response(200, {'total_sales': 0})

        self.client.get('/api/sales-view/summary?branch=Outlet')

        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/sales-view/summary?branch=Outlet')

    @patch('posdash.core.forwarder.time.sleep')
    @patch('posdash.core.forwarder.requests.request')
    def test_dashboard_stats_retries(self, mock_request, mock_sleep):
        """Test the dashboard load survives one transient backend failure"""
        mock_request.side_effect = [
            requests.exceptions.ConnectionError('reset'),
            backend_response(200, {'today_sales': 5}),
        ]

        response = self.client.get('/api/dashboard/stats')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'today_sales': 5})
        self.assertEqual(mock_request.call_count, 2)
        self.assertEqual(mock_sleep.call_count, 1)

    @patch('posdash.core.forwarder.time.sleep')
    @patch('posdash.core.forwarder.requests.request')
    def test_dashboard_stats_gives_up(self, mock_request, mock_sleep):
        mock_request.return_value = backend_response(503, text='maintenance')

        response = self.client.get('/api/dashboard/stats')

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(response.data['details'], 'maintenance')
        self.assertEqual(mock_request.call_count, 3)

    @patch('posdash.core.forwarder.requests.request')
    def test_branches(self, mock_request):
        mock_request.return_value = backend_response(200, [{'name': 'Main Branch'}])

        response = self.client.get('/api/branches')

        self.assertEqual(response.data, [{'name': 'Main Branch'}])
