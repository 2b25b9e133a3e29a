"""
Test suite for the gateway core
Tests: forwarder, error normalization, route mapping, session cookie, pagination, auth/admin proxy routes
"""
from unittest.mock import patch

import requests
from django.core.exceptions import PermissionDenied
from django.http import Http404
from django.test import TestCase, RequestFactory, override_settings
from rest_framework import status

from posdash.core.errors import (
    BackendError, BackendTimeout, BackendUnavailable, InvalidBackendResponse,
    MissingParameter, extract_error_message, proxy_exception_handler,
)
from posdash.core.forwarder import BackendForwarder
from posdash.core.pagination import (
    calculate_pagination_meta, get_page_size, page_to_query_params, page_window,
)
from posdash.core.routes import BackendRoute, field_map, long_route, BODY_MULTIPART, QUERY_ONLY, RESPONSE_TEXT
from posdash.core.session import SessionContext, is_protected_path
from posdash.core.test_utils import ProxyAPIClient, backend_response

BACKEND = 'http://backend.test'


@override_settings(BACKEND_API_BASE_URL=BACKEND, PROXY_RETRY_DELAY=0)
class ForwarderTests(TestCase):
    """Test the backend forwarder in isolation"""

    def setUp(self):
        self.forwarder = BackendForwarder()
        self.route = BackendRoute('category.list', 'category/')

    @patch('posdash.core.forwarder.requests.request')
    def test_forwards_cookie_and_relays_json(self, mock_request):
        """Test the inbound cookie reaches the backend and JSON comes back"""
        mock_request.return_value = backend_response(200, [{'id': 1, 'name': 'Bats'}])

        result = self.forwarder.forward(self.route, cookie='session_token=abc')

        self.assertEqual(result.status_code, 200)
        self.assertEqual(result.data, [{'id': 1, 'name': 'Bats'}])
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('GET', f'{BACKEND}/category/'))
        self.assertEqual(kwargs['headers']['Cookie'], 'session_token=abc')
        self.assertEqual(kwargs['timeout'], 30)

    @patch('posdash.core.forwarder.requests.request')
    def test_no_cookie_header_without_cookie(self, mock_request):
        mock_request.return_value = backend_response(200, [])
        self.forwarder.forward(self.route)
        self.assertNotIn('Cookie', mock_request.call_args[1]['headers'])

    @patch('posdash.core.forwarder.requests.request')
    def test_path_params_are_quoted(self, mock_request):
        """Test path parameters cannot escape their segment"""
        mock_request.return_value = backend_response(200, {})
        route = BackendRoute('customers.update', 'customers/{id}', 'PUT')

        self.forwarder.forward(route, path_params={'id': 'a/b c'})

        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/customers/a%2Fb%20c')

    @patch('posdash.core.forwarder.requests.request')
    def test_query_whitelist_with_defaults(self, mock_request):
        mock_request.return_value = backend_response(200, [])
        route = BackendRoute(
            'users.list', 'users/', query=QUERY_ONLY,
            query_params=('search_string', 'skip', 'limit'),
            query_defaults={'skip': '0', 'limit': '100'},
        )

        self.forwarder.forward(route, query={'search_string': 'ali', 'other': 'x'})

        self.assertEqual(
            mock_request.call_args[0][1],
            f'{BACKEND}/users/?search_string=ali&skip=0&limit=100',
        )

    @patch('posdash.core.forwarder.requests.request')
    def test_json_body_uses_field_map(self, mock_request):
        """Test only mapped fields are sent, renamed and transformed"""
        mock_request.return_value = backend_response(200, {'ok': True})
        route = BackendRoute(
            'customerinvoice.update', 'customerinvoice/UpdateCustomerInvoice/{id}', 'PUT',
            fields=field_map(('customer', 'e_name'), ('total_amount', 'e_amount', str), ('note', 'note')),
        )

        self.forwarder.forward(
            route, path_params={'id': 5},
            data={'customer': 'Ali', 'total_amount': 250, 'note': '', 'unexpected': 1},
        )

        kwargs = mock_request.call_args[1]
        self.assertEqual(kwargs['json'], {'e_name': 'Ali', 'e_amount': '250'})
        self.assertEqual(kwargs['headers']['Content-Type'], 'application/json')

    @patch('posdash.core.forwarder.requests.request')
    def test_multipart_route_does_not_force_content_type(self, mock_request):
        mock_request.return_value = backend_response(200, text='report', content_type='text/plain')
        route = BackendRoute('stock.report', 'stock/stockreport', 'POST', body=BODY_MULTIPART, response=RESPONSE_TEXT)

        self.forwarder.forward(route, data={'branch': 'Main'}, files={'file': ('a.csv', b'x', 'text/csv')})

        kwargs = mock_request.call_args[1]
        self.assertNotIn('Content-Type', kwargs['headers'])
        self.assertEqual(kwargs['data'], {'branch': 'Main'})
        self.assertIn('file', kwargs['files'])

    @override_settings(PROXY_LONG_TIMEOUT=120)
    @patch('posdash.core.forwarder.requests.request')
    def test_long_route_timeout(self, mock_request):
        mock_request.return_value = backend_response(200, {})
        self.forwarder.forward(long_route('stock.adjust', 'stock/adjuststock', method='POST'), data=[])
        self.assertEqual(mock_request.call_args[1]['timeout'], 120)

    @patch('posdash.core.forwarder.requests.request')
    def test_non_2xx_with_json_detail(self, mock_request):
        """Test a 404 with {"detail": ...} keeps the backend status and message"""
        mock_request.return_value = backend_response(404, {'detail': 'not found'})

        with self.assertRaises(BackendError) as ctx:
            self.forwarder.forward(self.route)

        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.to_envelope(), {'error': 'not found', 'status': 404})

    @patch('posdash.core.forwarder.requests.request')
    def test_non_2xx_with_text_body(self, mock_request):
        mock_request.return_value = backend_response(500, text='Internal Server Error')

        with self.assertRaises(BackendError) as ctx:
            self.forwarder.forward(self.route)

        self.assertEqual(ctx.exception.to_envelope(), {
            'error': 'Internal Server Error',
            'status': 500,
            'details': 'Internal Server Error',
        })

    @patch('posdash.core.forwarder.requests.request')
    def test_non_2xx_without_body(self, mock_request):
        mock_request.return_value = backend_response(503, text='')

        with self.assertRaises(BackendError) as ctx:
            self.forwarder.forward(self.route)

        self.assertEqual(ctx.exception.message, 'Backend request failed')
        self.assertEqual(ctx.exception.status_code, 503)

    @patch('posdash.core.forwarder.requests.request')
    def test_timeout(self, mock_request):
        mock_request.side_effect = requests.exceptions.Timeout('read timed out')

        with self.assertRaises(BackendTimeout) as ctx:
            self.forwarder.forward(self.route)

        self.assertEqual(ctx.exception.status_code, 504)
        self.assertEqual(ctx.exception.to_envelope()['type'], 'TIMEOUT')
        self.assertEqual(ctx.exception.message, 'Request timeout. Please try again.')

    @patch('posdash.core.forwarder.requests.request')
    def test_connection_error(self, mock_request):
        mock_request.side_effect = requests.exceptions.ConnectionError('refused')

        with self.assertRaises(BackendUnavailable) as ctx:
            self.forwarder.forward(self.route)

        self.assertEqual(ctx.exception.to_envelope(), {
            'error': 'Backend unavailable', 'status': 502, 'details': 'refused',
        })

    @patch('posdash.core.forwarder.requests.request')
    def test_2xx_non_json_body(self, mock_request):
        mock_request.return_value = backend_response(200, text='<html>oops</html>', content_type='text/html')

        with self.assertRaises(InvalidBackendResponse) as ctx:
            self.forwarder.forward(self.route)

        self.assertEqual(ctx.exception.status_code, 502)
        self.assertEqual(ctx.exception.details, '<html>oops</html>')

    @patch('posdash.core.forwarder.requests.request')
    def test_empty_2xx_body(self, mock_request):
        mock_request.return_value = backend_response(204, text='')
        result = self.forwarder.forward(self.route)
        self.assertEqual(result.status_code, 204)
        self.assertIsNone(result.data)

    def test_required_query_parameter(self):
        route = BackendRoute('products.by-barcode', 'products/searchbybarcode', required_query=('barcode',))
        with self.assertRaises(MissingParameter) as ctx:
            self.forwarder.forward(route, query={})
        self.assertEqual(ctx.exception.to_envelope(), {'error': 'Barcode parameter is required'})

    @patch('posdash.core.forwarder.time.sleep')
    @patch('posdash.core.forwarder.requests.request')
    def test_retries_on_5xx_then_succeeds(self, mock_request, mock_sleep):
        """Test a retried route backs off and recovers"""
        mock_request.side_effect = [
            backend_response(502, text='bad gateway'),
            requests.exceptions.ConnectionError('reset'),
            backend_response(200, {'total': 3}),
        ]
        route = BackendRoute('dashboard.stats', 'dashboard/stats', retries=2)

        result = BackendForwarder(retry_delay=0.5).forward(route)

        self.assertEqual(result.data, {'total': 3})
        self.assertEqual(mock_request.call_count, 3)
        self.assertEqual([c[0][0] for c in mock_sleep.call_args_list], [0.5, 1.0])

    @patch('posdash.core.forwarder.time.sleep')
    @patch('posdash.core.forwarder.requests.request')
    def test_no_retry_on_4xx(self, mock_request, mock_sleep):
        mock_request.return_value = backend_response(400, {'detail': 'bad'})
        route = BackendRoute('dashboard.stats', 'dashboard/stats', retries=3)

        with self.assertRaises(BackendError):
            self.forwarder.forward(route)

        self.assertEqual(mock_request.call_count, 1)
        mock_sleep.assert_not_called()


class ErrorMessageTests(TestCase):
    """Test backend error message extraction"""

    def test_detail_wins_over_message(self):
        self.assertEqual(extract_error_message('{"detail": "a", "message": "b"}'), 'a')

    def test_message_when_no_detail(self):
        self.assertEqual(extract_error_message('{"message": "b"}'), 'b')

    def test_validation_list(self):
        body = '{"detail": [{"loc": ["body", "name"], "msg": "field required", "type": "missing"}]}'
        self.assertEqual(extract_error_message(body), 'field required')

    def test_raw_text(self):
        self.assertEqual(extract_error_message('Bad Gateway'), 'Bad Gateway')

    def test_default(self):
        self.assertEqual(extract_error_message('{}'), 'Backend request failed')
        self.assertEqual(extract_error_message(''), 'Backend request failed')


class ExceptionHandlerTests(TestCase):
    """Test the DRF exception handler's envelopes for Django exceptions"""

    def test_http404_is_a_not_found_envelope(self):
        response = proxy_exception_handler(Http404('No such order'), {})

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data, {'error': 'Not found.', 'status': 404})

    def test_permission_denied_is_a_forbidden_envelope(self):
        response = proxy_exception_handler(PermissionDenied(), {})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data['status'], 403)
        self.assertEqual(response.data['error'], 'You do not have permission to perform this action.')

    def test_unexpected_error_is_a_500(self):
        with self.assertLogs('posdash.core.errors', level='ERROR'):
            response = proxy_exception_handler(ValueError('boom'), {})

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data, {'error': 'Internal server error', 'details': 'boom'})


class FieldMapTests(TestCase):
    def test_zero_is_kept_and_empty_dropped(self):
        mapping = field_map(('amount', 'e_amount', str), ('note', 'note'), ('status', 'status'))
        self.assertEqual(
            mapping.apply({'amount': 0, 'note': '', 'status': None}),
            {'e_amount': '0'},
        )


class PaginationHelperTests(TestCase):
    def test_page_to_query_params(self):
        self.assertEqual(page_to_query_params(3, 10), {'skip': 20, 'limit': 10})

    def test_pagination_meta(self):
        meta = calculate_pagination_meta(2, 8, 17)
        self.assertEqual(meta['total_pages'], 3)
        self.assertTrue(meta['has_next_page'])
        self.assertTrue(meta['has_prev_page'])
        self.assertEqual(meta['start_item_index'], 9)
        self.assertEqual(meta['end_item_index'], 16)

    @override_settings(DEFAULT_PAGE_SIZE=8)
    def test_get_page_size(self):
        self.assertEqual(get_page_size(None), 8)
        self.assertEqual(get_page_size('0'), 8)
        self.assertEqual(get_page_size('abc'), 8)
        self.assertEqual(get_page_size('20'), 20)
        self.assertEqual(get_page_size('500'), 100)

    def test_page_window(self):
        self.assertEqual(page_window(6, 10), [1, '...', 4, 5, 6, 7, 8, '...', 10])
        self.assertEqual(page_window(1, 3), [1, 2, 3])
        self.assertEqual(page_window(1, 0), [1])


class SessionContextTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()

    def test_context_from_request(self):
        request = self.factory.get('/api/category', HTTP_COOKIE='session_token=abc; theme=dark')
        context = SessionContext.from_request(request)
        self.assertEqual(context.session_token, 'abc')
        self.assertEqual(context.cookie, 'session_token=abc; theme=dark')
        self.assertTrue(context.is_authenticated)

    def test_anonymous_context(self):
        context = SessionContext.from_request(self.factory.get('/api/category'))
        self.assertIsNone(context.cookie)
        self.assertFalse(context.is_authenticated)

    def test_protected_paths(self):
        self.assertTrue(is_protected_path('/dashboard'))
        self.assertTrue(is_protected_path('/products/'))
        self.assertFalse(is_protected_path('/productsx'))
        self.assertFalse(is_protected_path('/api/products'))
        self.assertFalse(is_protected_path('/login/'))
        self.assertTrue(is_protected_path('/walkin-invoice'))
        self.assertTrue(is_protected_path('/customer-invoices/ord-1/delete/'))


@override_settings(BACKEND_API_BASE_URL=BACKEND)
class AuthAPITests(TestCase):
    """Test auth proxy endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()

    @patch('posdash.core.forwarder.requests.request')
    def test_login_reemits_session_cookie(self, mock_request):
        mock_request.return_value = backend_response(
            200, {'user': {'username': 'admin', 'role': 'admin'}}, cookies={'session_token': 'tok123'},
        )

        response = self.client.post(
            '/api/auth/login',
            {'username': 'admin', 'password': 'secret', 'role': 'admin', 'remember': True},
            format='json',
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['user']['username'], 'admin')
        self.assertEqual(mock_request.call_args[1]['json'], {'username': 'admin', 'password': 'secret', 'role': 'admin'})
        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/auth/session-login')
        cookie = response.cookies['session_token']
        self.assertEqual(cookie.value, 'tok123')
        self.assertTrue(cookie['httponly'])
        self.assertEqual(cookie['samesite'], 'Lax')
        self.assertEqual(cookie['max-age'], 86400)
        self.assertEqual(cookie['path'], '/')

    @patch('posdash.core.forwarder.requests.request')
    def test_login_failure_relays_backend_error(self, mock_request):
        mock_request.return_value = backend_response(401, {'detail': 'Invalid credentials'})

        response = self.client.post('/api/auth/login', {'username': 'x', 'password': 'y'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data, {'error': 'Invalid credentials', 'status': 401})
        self.assertNotIn('session_token', response.cookies)

    @patch('posdash.core.forwarder.requests.request')
    def test_logout_clears_cookie_even_if_backend_fails(self, mock_request):
        mock_request.side_effect = requests.exceptions.ConnectionError('down')
        self.client.login_session('abc')

        response = self.client.post('/api/auth/logout')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.cookies['session_token'].value, '')
        self.assertEqual(mock_request.call_args[1]['headers']['Cookie'], 'session_token=abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_session_forwards_to_auth_me(self, mock_request):
        mock_request.return_value = backend_response(200, {'username': 'admin'})
        self.client.login_session('abc')

        response = self.client.get('/api/auth/session/')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0], ('GET', f'{BACKEND}/auth/me'))


@override_settings(BACKEND_API_BASE_URL=BACKEND)
class AdminAPITests(TestCase):
    """Test users/administration proxy endpoints"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_users_default_paging(self, mock_request):
        mock_request.return_value = backend_response(200, [])

        response = self.client.get('/api/users')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/users/?skip=0&limit=100')

    @patch('posdash.core.forwarder.requests.request')
    def test_view_vendors_long_timeout_and_all_query(self, mock_request):
        mock_request.return_value = backend_response(200, [])

        self.client.get('/api/admin/viewvendor?branch=Main&search_string=a')

        args, kwargs = mock_request.call_args
        self.assertEqual(args[1], f'{BACKEND}/vendors/viewvendor?branch=Main&search_string=a')
        self.assertEqual(kwargs['timeout'], 120)

    @patch('posdash.core.forwarder.requests.request')
    def test_create_admin(self, mock_request):
        mock_request.return_value = backend_response(201, {'id': 7})

        response = self.client.post('/api/admin/createadmin', {'username': 'new', 'password': 'pw'}, format='json')

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(mock_request.call_args[1]['json'], {'username': 'new', 'password': 'pw'})

    @patch('posdash.core.forwarder.requests.request')
    def test_test_backend_success(self, mock_request):
        mock_request.return_value = backend_response(200, [{'username': 'admin'}])

        response = self.client.get('/api/test-backend')

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['success'])
        self.assertEqual(response.data['message'], 'Connection successful')

    @patch('posdash.core.forwarder.requests.request')
    def test_test_backend_unreachable(self, mock_request):
        mock_request.side_effect = requests.exceptions.ConnectionError('refused')

        response = self.client.get('/api/test-backend')

        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['error'], 'Backend unavailable')

    def test_method_not_allowed_envelope(self):
        response = self.client.get('/api/admin/createadmin')
        self.assertEqual(response.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)
        self.assertEqual(response.data['status'], 405)
        self.assertIn('error', response.data)
