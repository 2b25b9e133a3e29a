"""
Test suite for the dashboard pages
Tests: List/search/paginate, CRUD form cycle, Stock adjustment, Page views and session handling
"""
import json
from unittest.mock import patch

from django.contrib.messages import get_messages
from django.test import TestCase, override_settings
from django.urls import reverse

from posdash.catalog import routes as catalog_routes
from posdash.core.errors import ProxyError
from posdash.core.forwarder import BackendForwarder
from posdash.core.test_utils import TestDataFactory, ProxyAPIClient, backend_response
from posdash.parties import routes as party_routes
from posdash.pos import routes as pos_routes

from .crud import CrudController
from .listing import BatchSearch, ClientFilter, ListPage, ListState, ServerSearch
from .notifications import ERROR, SUCCESS, WARNING
from .pages import RESOURCES
from .stock_adjust import AdjustItem, StockAdjustmentSession

BACKEND = 'http://backend.test'
COOKIE = 'session_token=abc'


def toast_texts(collector):
    return [toast.text for toast in collector.toasts]


def message_texts(response):
    return [str(message) for message in get_messages(response.wsgi_request)]


@override_settings(BACKEND_API_BASE_URL=BACKEND, PROXY_RETRY_DELAY=0)
class ListPageTests(TestCase):
    """Test the list/search/paginate controller"""

    def brands(self):
        rows = [TestDataFactory.brand(i, f'Brand {i}') for i in range(1, 18)]
        rows += [TestDataFactory.brand(100 + i, f'Nike {i}') for i in range(3)]
        return rows

    def brand_page(self):
        return ListPage(catalog_routes.LIST_BRANDS, ClientFilter(['name']), page_size=8, cookie=COOKIE)

    @patch('posdash.core.forwarder.requests.request')
    def test_client_filter_slices_locally(self, mock_request):
        mock_request.return_value = backend_response(200, self.brands())

        page = self.brand_page().open()

        self.assertEqual(page.state, ListState.LOADED)
        self.assertEqual(page.total_items, 20)
        self.assertEqual(page.total_pages, 3)
        self.assertEqual(len(page.rows), 8)
        self.assertEqual(mock_request.call_args[0], ('GET', f'{BACKEND}/brand/'))

    @patch('posdash.core.forwarder.requests.request')
    def test_client_filter_search_is_case_insensitive(self, mock_request):
        mock_request.return_value = backend_response(200, self.brands())

        page = self.brand_page().open()
        page.go_to(2)
        page.search('NIKE')

        self.assertEqual(page.current_page, 1)
        self.assertEqual([row['name'] for row in page.rows], ['Nike 0', 'Nike 1', 'Nike 2'])
        self.assertEqual(page.total_pages, 1)

    @patch('posdash.core.forwarder.requests.request')
    def test_set_page_is_clamped(self, mock_request):
        mock_request.return_value = backend_response(200, self.brands())
        page = self.brand_page().open()

        self.assertEqual(page.set_page(10), 3)
        self.assertEqual(page.set_page(0), 1)
        self.assertEqual(page.set_page(-4), 1)

    def test_search_resets_to_first_page(self):
        page = self.brand_page()
        page.current_page = 3

        page.set_search('  bats ')

        self.assertEqual(page.current_page, 1)
        self.assertEqual(page.search_term, 'bats')

    @patch('posdash.core.forwarder.requests.request')
    def test_server_search_sends_paging_and_term(self, mock_request):
        mock_request.return_value = backend_response(200, TestDataFactory.page([TestDataFactory.customer()], 1))
        page = ListPage(party_routes.VIEW_CUSTOMERS, ServerSearch(), page_size=8, cookie=COOKIE)

        page.search('ali')

        self.assertEqual(
            mock_request.call_args[0][1],
            f'{BACKEND}/customers/viewcustomer?page=1&limit=8&search_string=ali',
        )
        self.assertEqual(mock_request.call_args[1]['headers']['Cookie'], COOKIE)
        self.assertEqual(page.total_items, 1)

    @patch('posdash.core.forwarder.requests.request')
    def test_server_search_skip_paging(self, mock_request):
        rows = [TestDataFactory.customer_order(f'ord-{i}') for i in range(8)]
        mock_request.return_value = backend_response(200, TestDataFactory.page(rows, 20))
        page = ListPage(pos_routes.VIEW_CUSTOMER_ORDERS, ServerSearch('skip', 'searchString'), page_size=8)

        page.open(page=2, term='ali')

        self.assertEqual(
            mock_request.call_args[0][1],
            f'{BACKEND}/customerinvoice/viewcustomerorder?skip=8&limit=8&searchString=ali',
        )
        self.assertEqual(page.current_page, 2)
        self.assertEqual(page.total_pages, 3)

    @patch('posdash.core.forwarder.requests.request')
    def test_products_bare_list_pages_locally(self, mock_request):
        """Test the product list, which carries no total, can still be paged past page 1"""
        products = [TestDataFactory.product(i, f'Product {i}') for i in range(1, 21)]
        mock_request.return_value = backend_response(200, products)

        page = RESOURCES['products'].list_page(page_size=8).open(2)

        self.assertEqual(page.current_page, 2)
        self.assertEqual(page.total_pages, 3)
        self.assertEqual([row['pro_id'] for row in page.rows], list(range(9, 17)))
        self.assertEqual(mock_request.call_count, 1)
        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/products/view-product?skip=0&limit=100')

        page.go_to(3)

        self.assertEqual([row['pro_id'] for row in page.rows], list(range(17, 21)))

    @patch('posdash.core.forwarder.requests.request')
    def test_products_search_goes_to_backend(self, mock_request):
        mock_request.return_value = backend_response(200, [TestDataFactory.product(3, 'Bat')])
        page = ListPage(catalog_routes.LIST_PRODUCTS, BatchSearch(), page_size=8)

        page.open(page=2, term='bat')

        self.assertEqual(
            mock_request.call_args[0][1],
            f'{BACKEND}/products/view-product?skip=0&limit=100&search_string=bat',
        )
        self.assertEqual(page.current_page, 1)
        self.assertEqual([row['pro_name'] for row in page.rows], ['Bat'])

    @patch('posdash.core.forwarder.requests.request')
    def test_page_past_the_end_lands_on_last_page(self, mock_request):
        """Test a page beyond the end is refetched as the last page instead of failing"""
        rows = [TestDataFactory.customer(i) for i in range(1, 3)]
        mock_request.side_effect = [
            backend_response(200, TestDataFactory.page([], 10)),
            backend_response(200, TestDataFactory.page(rows, 10)),
        ]
        page = ListPage(party_routes.VIEW_CUSTOMERS, ServerSearch(), page_size=8)

        page.open(page=5)

        self.assertEqual(page.current_page, 2)
        self.assertEqual(page.rows, rows)
        self.assertIn('page=2&limit=8', mock_request.call_args[0][1])

    @patch('posdash.core.forwarder.requests.request')
    def test_reported_total_pages_wins(self, mock_request):
        mock_request.return_value = backend_response(200, TestDataFactory.page([], 100, total_pages=4))
        page = ListPage(party_routes.VIEW_CUSTOMERS, ServerSearch(), page_size=8).open()

        self.assertEqual(page.total_pages, 4)

    @patch('posdash.core.forwarder.requests.request')
    def test_failed_load_keeps_previous_rows(self, mock_request):
        mock_request.side_effect = [
            backend_response(200, self.brands()),
            backend_response(500, {'detail': 'database down'}),
        ]
        page = self.brand_page().open()
        rows = list(page.rows)
        page.drain()

        page.load()

        self.assertEqual(page.state, ListState.ERRORED)
        self.assertEqual(page.rows, rows)
        self.assertEqual(page.error, 'database down')
        self.assertEqual(toast_texts(page), ['Failed to load data'])

    @patch('posdash.core.forwarder.requests.request')
    def test_session_expiry_is_not_swallowed(self, mock_request):
        mock_request.return_value = backend_response(401, {'detail': 'Not authenticated'})

        with self.assertRaises(ProxyError) as ctx:
            self.brand_page().load()
        self.assertEqual(ctx.exception.status_code, 401)

    @patch('posdash.core.forwarder.requests.request')
    def test_max_pages_caps_navigation(self, mock_request):
        mock_request.return_value = backend_response(200, self.brands())
        page = ListPage(catalog_routes.LIST_BRANDS, ClientFilter(['name']), page_size=2, max_pages=5).open()

        self.assertEqual(page.total_pages, 5)
        self.assertEqual(page.set_page(9), 5)


@override_settings(BACKEND_API_BASE_URL=BACKEND, PROXY_RETRY_DELAY=0)
class CrudControllerTests(TestCase):
    """Test the create/update/delete form cycle"""

    def controller(self, slug, **kwargs):
        return CrudController(RESOURCES[slug], cookie=COOKIE, forwarder=BackendForwarder(), **kwargs)

    @patch('posdash.core.forwarder.requests.request')
    def test_invalid_form_makes_no_call(self, mock_request):
        controller = self.controller('brand')

        outcome = controller.submit({'name': ''})

        self.assertFalse(outcome.success)
        self.assertIn('name', outcome.form.errors)
        self.assertEqual(toast_texts(controller), ['Please fill in all required fields'])
        mock_request.assert_not_called()

    @patch('posdash.core.forwarder.requests.request')
    def test_create_posts_once(self, mock_request):
        mock_request.return_value = backend_response(201, {'id': 9, 'name': 'Nike'})
        controller = self.controller('brand')

        outcome = controller.submit({'name': 'Nike'})

        self.assertTrue(outcome.success)
        self.assertEqual(mock_request.call_count, 1)
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', f'{BACKEND}/brand/'))
        self.assertEqual(kwargs['json'], {'name': 'Nike'})
        self.assertEqual(controller.toasts[0].level, SUCCESS)
        self.assertEqual(toast_texts(controller), ['Brand has been created successfully.'])

    @patch('posdash.core.forwarder.requests.request')
    def test_update_puts_once(self, mock_request):
        mock_request.return_value = backend_response(200, {'id': 5})
        controller = self.controller('category')

        controller.submit({'name': 'Bats', 'branch': 'Main'}, record_id=5)

        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('PUT', f'{BACKEND}/category/5'))
        self.assertEqual(kwargs['json'], {'name': 'Bats', 'branch': 'Main'})
        self.assertEqual(toast_texts(controller), ['Category has been updated successfully.'])

    @patch('posdash.core.forwarder.requests.request')
    def test_vendor_contacts_are_packed_as_json(self, mock_request):
        mock_request.return_value = backend_response(201, {'ven_id': 1})

        self.controller('vendors').submit({
            'ven_name': 'Supplier', 'ven_phone': '0300', 'ven_address': 'Lahore',
        })

        body = mock_request.call_args[1]['json']
        self.assertEqual(body['name'], 'Supplier')
        self.assertIsNone(body['branch'])
        self.assertEqual(json.loads(body['contacts']), {'phone': '0300', 'email': '', 'address': 'Lahore'})

    @patch('posdash.core.forwarder.requests.request')
    def test_salesman_create(self, mock_request):
        mock_request.return_value = backend_response(201, {'id': 1})
        controller = self.controller('salesman')

        controller.submit({'name': 'John Smith', 'code': 'SM001', 'commission_rate': '5.5'})

        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', f'{BACKEND}/salesman/'))
        self.assertEqual(kwargs['json'], {
            'name': 'John Smith', 'code': 'SM001', 'phone': '', 'address': '', 'branch': '',
            'commission_rate': 5.5,
        })
        self.assertEqual(toast_texts(controller), ['Salesman has been created successfully.'])

    @patch('posdash.core.forwarder.requests.request')
    def test_customer_invoice_update_renames_fields(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'updated'})
        controller = self.controller('customer-invoices')

        controller.submit(
            {'customer': 'Ali', 'total_amount': '1500', 'note': '', 'status': 'DELIVERED'}, record_id='ord-1',
        )

        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('PUT', f'{BACKEND}/customerinvoice/UpdateCustomerInvoice/ord-1'))
        self.assertEqual(kwargs['json'], {'e_name': 'Ali', 'e_amount': '1500', 'status': 'DELIVERED'})
        self.assertEqual(toast_texts(controller), ['Customer invoice has been updated successfully.'])

    @patch('posdash.core.forwarder.requests.request')
    def test_customer_invoice_unknown_status_is_rejected(self, mock_request):
        outcome = self.controller('customer-invoices').submit(
            {'customer': 'Ali', 'total_amount': '1500', 'status': 'LOST'}, record_id='ord-1',
        )

        self.assertIn('status', outcome.form.errors)
        mock_request.assert_not_called()

    @patch('posdash.core.forwarder.requests.request')
    def test_successful_write_refetches_list(self, mock_request):
        brand = TestDataFactory.brand(9, 'Nike')
        mock_request.side_effect = [backend_response(201, brand), backend_response(200, [brand])]
        list_page = ListPage(catalog_routes.LIST_BRANDS, ClientFilter(['name']), page_size=8)
        controller = self.controller('brand', list_page=list_page)

        controller.submit({'name': 'Nike'})

        self.assertEqual(mock_request.call_count, 2)
        self.assertEqual(list_page.rows, [brand])

    @patch('posdash.core.forwarder.requests.request')
    def test_failed_save_reports_backend_message(self, mock_request):
        mock_request.return_value = backend_response(400, {'detail': 'Brand already exists'})
        controller = self.controller('brand')

        outcome = controller.submit({'name': 'Nike'})

        self.assertFalse(outcome.success)
        self.assertEqual(controller.toasts[0].level, ERROR)
        self.assertEqual(toast_texts(controller), ['Brand already exists'])

    @patch('posdash.core.forwarder.requests.request')
    def test_unconfirmed_delete_makes_no_call(self, mock_request):
        outcome = self.controller('brand').delete(3)

        self.assertFalse(outcome.success)
        mock_request.assert_not_called()

    @patch('posdash.core.forwarder.requests.request')
    def test_confirmed_delete(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'deleted'})
        controller = self.controller('products')

        outcome = controller.delete(12, confirmed=True)

        self.assertTrue(outcome.success)
        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/products/delete-product/12'))
        self.assertEqual(toast_texts(controller), ['Product has been deleted.'])

    @patch('posdash.core.forwarder.requests.request')
    def test_delete_missing_customer_toasts_backend_detail(self, mock_request):
        mock_request.return_value = backend_response(404, {'detail': 'not found'})
        controller = self.controller('customers')

        outcome = controller.delete(42, confirmed=True)

        self.assertFalse(outcome.success)
        self.assertEqual(mock_request.call_args[0], ('DELETE', f'{BACKEND}/customers/42'))
        self.assertEqual(toast_texts(controller), ['not found'])

    @patch('posdash.core.forwarder.requests.request')
    def test_session_expiry_propagates(self, mock_request):
        mock_request.return_value = backend_response(401, {'detail': 'Session expired'})

        with self.assertRaises(ProxyError):
            self.controller('brand').submit({'name': 'Nike'})


@override_settings(BACKEND_API_BASE_URL=BACKEND, PROXY_RETRY_DELAY=0, PROXY_LONG_TIMEOUT=120)
class StockAdjustmentTests(TestCase):
    """Test the barcode-driven stock adjustment workflow"""

    def setUp(self):
        self.product = TestDataFactory.product(7, 'Bat', '8901234567890', stock=5)
        self.session = StockAdjustmentSession(cookie=COOKIE, forwarder=BackendForwarder())

    def scan_product(self, mock_request):
        mock_request.return_value = backend_response(200, self.product)
        return self.session.scan(self.product['pro_barcode'])

    @patch('posdash.core.forwarder.requests.request')
    def test_blank_barcode(self, mock_request):
        self.assertIsNone(self.session.scan('   '))

        self.assertEqual(toast_texts(self.session), ['Please enter a barcode'])
        mock_request.assert_not_called()

    @patch('posdash.core.forwarder.requests.request')
    def test_scan_adds_line_with_defaults(self, mock_request):
        item = self.scan_product(mock_request)

        self.assertEqual(mock_request.call_args[0][1], f'{BACKEND}/products/searchbybarcode?barcode=8901234567890')
        self.assertEqual(self.session.items, [item])
        self.assertEqual(item.product_id, 7)
        self.assertEqual(item.current_stock, 5)
        self.assertEqual(item.action, 'increase')
        self.assertEqual(item.quantity, 0)
        self.assertEqual(item.reason, 'Stock count adjustment')
        self.assertEqual(toast_texts(self.session), ['Product added: Bat'])

    @patch('posdash.core.forwarder.requests.request')
    def test_duplicate_scan_warns(self, mock_request):
        self.scan_product(mock_request)
        self.session.drain()

        self.scan_product(mock_request)

        self.assertEqual(len(self.session.items), 1)
        self.assertEqual(self.session.toasts[0].level, WARNING)
        self.assertEqual(toast_texts(self.session), ['Product already in list'])

    @patch('posdash.core.forwarder.requests.request')
    def test_unknown_barcode(self, mock_request):
        mock_request.return_value = backend_response(404, {'detail': 'Product not found'})

        self.session.scan('000')

        self.assertEqual(self.session.items, [])
        self.assertEqual(toast_texts(self.session), ['Product not found'])

    @patch('posdash.core.forwarder.requests.request')
    def test_empty_lookup_result(self, mock_request):
        mock_request.return_value = backend_response(200, {})

        self.session.scan('000')

        self.assertEqual(toast_texts(self.session), ['Product not found'])

    @patch('posdash.core.forwarder.requests.request')
    def test_submit_without_lines(self, mock_request):
        self.assertFalse(self.session.submit())

        self.assertEqual(toast_texts(self.session), ['Please add at least one product'])
        mock_request.assert_not_called()

    @patch('posdash.core.forwarder.requests.request')
    def test_missing_quantity_blocks_submit(self, mock_request):
        self.scan_product(mock_request)
        self.session.drain()
        mock_request.reset_mock()

        self.assertFalse(self.session.submit())

        self.assertEqual(toast_texts(self.session), ['Please enter quantity for Bat'])
        mock_request.assert_not_called()

    @patch('posdash.core.forwarder.requests.request')
    def test_decrease_beyond_stock_blocks_submit(self, mock_request):
        self.scan_product(mock_request)
        self.session.drain()
        mock_request.reset_mock()
        self.session.update_item(0, action='decrease', quantity='6')

        self.assertFalse(self.session.submit())

        self.assertEqual(toast_texts(self.session), ['Cannot decrease more than current stock for Bat'])
        mock_request.assert_not_called()

    @patch('posdash.core.forwarder.requests.request')
    def test_submit_sends_one_batch(self, mock_request):
        self.scan_product(mock_request)
        self.session.items.append(AdjustItem(8, 'Ball', '111', 2))
        self.session.update_item(0, action='decrease', quantity=5, reason='Damaged')
        self.session.update_item(1, quantity=3)
        self.session.drain()
        mock_request.return_value = backend_response(200, TestDataFactory.adjust_result(2))

        self.assertTrue(self.session.submit())

        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', f'{BACKEND}/stock/adjuststock'))
        self.assertEqual(kwargs['json'], [
            {'product_id': 7, 'quantity': 5, 'action': 'decrease', 'reason': 'Damaged'},
            {'product_id': 8, 'quantity': 3, 'action': 'increase', 'reason': 'Stock count adjustment'},
        ])
        self.assertEqual(kwargs['timeout'], 120)
        self.assertEqual(self.session.items, [])
        self.assertEqual(toast_texts(self.session), ['Stock adjusted for 2 products.'])

    @patch('posdash.core.forwarder.requests.request')
    def test_failed_submit_keeps_lines(self, mock_request):
        self.scan_product(mock_request)
        self.session.update_item(0, quantity=2)
        self.session.drain()
        mock_request.return_value = backend_response(500, {'detail': 'Stock service down'})

        self.assertFalse(self.session.submit())

        self.assertEqual(len(self.session.items), 1)
        self.assertEqual(self.session.items[0].quantity, 2)
        self.assertEqual(toast_texts(self.session), ['Stock service down'])

    def test_round_trips_through_session_storage(self):
        self.session.items.append(AdjustItem(8, 'Ball', '111', 2, 'decrease', 1, 'Lost'))
        storage = {}

        self.session.save(storage)
        restored = StockAdjustmentSession.load(storage)

        self.assertEqual(restored.items, self.session.items)


@override_settings(BACKEND_API_BASE_URL=BACKEND, PROXY_RETRY_DELAY=0)
class SessionPageTests(TestCase):
    """Test login, logout and session expiry on the dashboard pages"""

    def setUp(self):
        self.client = ProxyAPIClient()

    def test_protected_page_redirects_to_login(self):
        response = self.client.get('/brand/')

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response['Location'], '/login/?next=%2Fbrand%2F')

    def test_login_page_renders(self):
        response = self.client.get('/login/?next=/stock/')

        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'dashboard/login.html')
        self.assertEqual(response.context['next'], '/stock/')

    @patch('posdash.core.forwarder.requests.request')
    def test_login_sets_session_cookie(self, mock_request):
        mock_request.return_value = backend_response(
            200, {'message': 'Login successful'}, cookies={'session_token': 'tok123'},
        )

        response = self.client.post('/login/', {
            'username': 'admin', 'password': 'secret', 'role': 'admin', 'next': '/stock/',
        })

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response['Location'], '/stock/')
        self.assertEqual(response.cookies['session_token'].value, 'tok123')
        self.assertTrue(response.cookies['session_token']['httponly'])
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', f'{BACKEND}/auth/session-login'))
        self.assertEqual(kwargs['json'], {'username': 'admin', 'password': 'secret', 'role': 'admin'})

    @patch('posdash.core.forwarder.requests.request')
    def test_login_ignores_offsite_next(self, mock_request):
        mock_request.return_value = backend_response(200, {}, cookies={'session_token': 'tok123'})

        response = self.client.post('/login/', {
            'username': 'admin', 'password': 'secret', 'role': 'admin', 'next': 'https://evil.test/',
        })

        self.assertEqual(response['Location'], '/dashboard/')

    @patch('posdash.core.forwarder.requests.request')
    def test_failed_login_shows_backend_error(self, mock_request):
        mock_request.return_value = backend_response(401, {'detail': 'Invalid credentials'})

        response = self.client.post('/login/', {'username': 'admin', 'password': 'x', 'role': 'admin'})

        self.assertEqual(response.status_code, 200)
        self.assertNotIn('session_token', response.cookies)
        self.assertIn('Invalid credentials', message_texts(response))

    @patch('posdash.core.forwarder.requests.request')
    def test_logout_clears_cookie(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'ok'})
        self.client.login_session('abc')

        response = self.client.post('/logout/')

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response.cookies['session_token'].value, '')
        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/auth/logout'))

    @patch('posdash.core.forwarder.requests.request')
    def test_backend_401_sends_browser_to_login(self, mock_request):
        mock_request.return_value = backend_response(401, {'detail': 'Session expired'})
        self.client.login_session('abc')

        response = self.client.get('/brand/')

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response['Location'], '/login/?next=%2Fbrand%2F')
        self.assertEqual(response.cookies['session_token'].value, '')
        self.assertIn('Session expired. Please log in again.', message_texts(response))


@override_settings(BACKEND_API_BASE_URL=BACKEND, PROXY_RETRY_DELAY=0, DEFAULT_BRANCH='Main')
class DashboardPageTests(TestCase):
    """Test the server-rendered resource, stock and report pages"""

    def setUp(self):
        self.client = ProxyAPIClient()
        self.client.login_session('abc')

    @patch('posdash.core.forwarder.requests.request')
    def test_home_loads_stats_and_summary(self, mock_request):
        mock_request.side_effect = [
            backend_response(200, {'totalSales': 11950}),
            backend_response(200, {'total_sales': 11950, 'invoices': 12}),
        ]

        response = self.client.get('/dashboard/?from_date=2024-01-01')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['stats'], {'totalSales': 11950})
        self.assertEqual(
            mock_request.call_args_list[1][0][1],
            f'{BACKEND}/sales-view/summary?from_date=2024-01-01&branch=Main',
        )

    @patch('posdash.core.forwarder.requests.request')
    def test_brand_list_filters_and_paginates(self, mock_request):
        rows = [TestDataFactory.brand(i, f'Brand {i}') for i in range(1, 11)]
        mock_request.return_value = backend_response(200, rows)

        response = self.client.get('/brand/', {'q': 'brand 1', 'limit': 8})

        self.assertEqual(response.status_code, 200)
        page = response.context['page']
        self.assertEqual(page.search_term, 'brand 1')
        self.assertEqual([row['name'] for row in page.rows], ['Brand 1', 'Brand 10'])
        self.assertContains(response, 'Brand 10')

    @patch('posdash.core.forwarder.requests.request')
    def test_edit_prefills_form(self, mock_request):
        mock_request.return_value = backend_response(200, [TestDataFactory.brand(4, 'Adidas')])

        response = self.client.get('/brand/?edit=4')

        self.assertEqual(response.context['editing'], '4')
        self.assertEqual(response.context['form'].initial, {'name': 'Adidas'})

    @patch('posdash.core.forwarder.requests.request')
    def test_save_creates_and_redirects(self, mock_request):
        mock_request.return_value = backend_response(201, {'id': 1, 'name': 'Nike'})

        response = self.client.post('/brand/save/', {'name': 'Nike'})

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response['Location'], reverse('dashboard-resource-list', kwargs={'slug': 'brand'}))
        self.assertEqual(mock_request.call_count, 1)
        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/brand/'))
        self.assertIn('Brand has been created successfully.', message_texts(response))

    @patch('posdash.core.forwarder.requests.request')
    def test_save_invalid_form_rerenders_without_write(self, mock_request):
        mock_request.return_value = backend_response(200, [])

        response = self.client.post('/brand/save/', {'name': ''})

        self.assertEqual(response.status_code, 400)
        self.assertEqual([c[0][0] for c in mock_request.call_args_list], ['GET'])
        self.assertIn('name', response.context['form'].errors)

    @patch('posdash.core.forwarder.requests.request')
    def test_delete_requires_confirmation(self, mock_request):
        response = self.client.get('/customers/42/delete/')
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'dashboard/confirm_delete.html')

        response = self.client.post('/customers/42/delete/')
        self.assertEqual(response.status_code, 302)

        mock_request.assert_not_called()

    @patch('posdash.core.forwarder.requests.request')
    def test_confirmed_delete_of_missing_customer(self, mock_request):
        mock_request.return_value = backend_response(404, {'detail': 'not found'})

        response = self.client.post('/customers/42/delete/', {'confirm': 'yes'})

        self.assertEqual(response.status_code, 302)
        self.assertEqual(mock_request.call_args[0], ('DELETE', f'{BACKEND}/customers/42'))
        self.assertIn('not found', message_texts(response))

    @patch('posdash.core.forwarder.requests.request')
    def test_stock_adjust_page_keeps_lines_between_posts(self, mock_request):
        product = TestDataFactory.product(7, 'Bat', '8901234567890', stock=5)
        mock_request.return_value = backend_response(200, product)

        response = self.client.post('/stock/adjust/', {'action': 'scan', 'barcode': '8901234567890'})
        self.assertEqual(response.status_code, 302)

        response = self.client.get('/stock/adjust/')
        items = response.context['items']
        self.assertEqual([item.product_name for item in items], ['Bat'])

    @patch('posdash.core.forwarder.requests.request')
    def test_stock_adjust_submit_from_page(self, mock_request):
        product = TestDataFactory.product(7, 'Bat', '8901234567890', stock=5)
        mock_request.return_value = backend_response(200, product)
        self.client.post('/stock/adjust/', {'action': 'scan', 'barcode': '8901234567890'})
        mock_request.return_value = backend_response(200, TestDataFactory.adjust_result(1))

        response = self.client.post('/stock/adjust/', {
            'action': 'submit', 'action-0': 'increase', 'quantity-0': '4', 'reason-0': 'Recount',
        })

        self.assertIn('Stock adjusted for 1 products.', message_texts(response))
        self.assertEqual(mock_request.call_args[1]['json'], [
            {'product_id': 7, 'quantity': 4, 'action': 'increase', 'reason': 'Recount'},
        ])
        response = self.client.get('/stock/adjust/')
        self.assertEqual(response.context['items'], [])

    @patch('posdash.core.forwarder.requests.request')
    def test_stock_in_report_download(self, mock_request):
        mock_request.return_value = backend_response(200, 'JVBERi0xLjQ=')

        response = self.client.get('/stock/report/stock-in/?date_from=2024-01-01&date_to=2024-01-31')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['Content-Type'], 'application/pdf')
        self.assertEqual(response.content, b'%PDF-1.4')
        self.assertEqual(
            mock_request.call_args[0],
            ('POST', f'{BACKEND}/stock/stockinreport?date_from=2024-01-01&date_to=2024-01-31'),
        )

    @patch('posdash.core.forwarder.requests.request')
    def test_stock_in_report_requires_dates(self, mock_request):
        response = self.client.get('/stock/report/stock-in/?date_from=2024-01-01')

        self.assertEqual(response.status_code, 302)
        self.assertIn('date_from and date_to are required', message_texts(response))
        mock_request.assert_not_called()

    @patch('posdash.core.forwarder.requests.request')
    def test_category_page_shows_backend_rows(self, mock_request):
        mock_request.return_value = backend_response(200, [{'id': '1', 'name': 'Shoes', 'branch': 'Main'}])

        response = self.client.get('/category/')

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Shoes')
        self.assertContains(response, 'Main')
        self.assertEqual(mock_request.call_args[0], ('GET', f'{BACKEND}/category/'))
        self.assertIn('session_token=abc', mock_request.call_args[1]['headers']['Cookie'])

    @patch('posdash.core.forwarder.requests.request')
    def test_list_links_are_reversed(self, mock_request):
        mock_request.return_value = backend_response(200, [TestDataFactory.brand(4, 'Adidas')])

        response = self.client.get('/brand/')

        self.assertContains(response, f'action="{reverse("dashboard-resource-save", args=["brand"])}"')
        self.assertContains(response, f'href="{reverse("dashboard-resource-delete", args=["brand", 4])}"')

    @patch('posdash.core.forwarder.requests.request')
    def test_products_page_two(self, mock_request):
        products = [TestDataFactory.product(i, f'Product {i}') for i in range(1, 21)]
        mock_request.return_value = backend_response(200, products)

        response = self.client.get('/products/', {'page': 2, 'limit': 8})

        page = response.context['page']
        self.assertEqual(page.current_page, 2)
        self.assertContains(response, 'Product 9')
        self.assertNotContains(response, 'Product 17<')

    @patch('posdash.core.forwarder.requests.request')
    def test_salesman_page(self, mock_request):
        mock_request.return_value = backend_response(200, [TestDataFactory.salesman(1, 'John Smith', 'SM001')])

        response = self.client.get('/salesman/')

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'SM001')
        self.assertIsNotNone(response.context['form'])
        self.assertEqual(mock_request.call_args[0], ('GET', f'{BACKEND}/salesman/'))

    @patch('posdash.core.forwarder.requests.request')
    def test_salesman_delete(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'deleted'})

        response = self.client.post('/salesman/3/delete/', {'confirm': 'yes'})

        self.assertEqual(response.status_code, 302)
        self.assertEqual(mock_request.call_args[0], ('DELETE', f'{BACKEND}/salesman/3'))
        self.assertIn('Salesman has been deleted.', message_texts(response))

    @patch('posdash.core.forwarder.requests.request')
    def test_customer_invoice_list_has_no_create_form(self, mock_request):
        order = TestDataFactory.customer_order('ord-1', 'Ali')
        mock_request.return_value = backend_response(200, TestDataFactory.page([order], 1))

        response = self.client.get('/customer-invoices/', {'q': 'ali', 'limit': 8})

        self.assertEqual(
            mock_request.call_args[0][1],
            f'{BACKEND}/customerinvoice/viewcustomerorder?skip=0&limit=8&searchString=ali',
        )
        self.assertContains(response, 'INV-ord-1')
        self.assertIsNone(response.context['form'])

    @patch('posdash.core.forwarder.requests.request')
    def test_customer_invoice_edit_prefills_form(self, mock_request):
        order = TestDataFactory.customer_order('ord-1', 'Ali', status='DELIVERED')
        mock_request.return_value = backend_response(200, TestDataFactory.page([order], 1))

        response = self.client.get('/customer-invoices/?edit=ord-1')

        self.assertEqual(response.context['editing'], 'ord-1')
        initial = response.context['form'].initial
        self.assertEqual((initial['customer'], initial['status']), ('Ali', 'DELIVERED'))

    @patch('posdash.core.forwarder.requests.request')
    def test_customer_invoice_cannot_be_created(self, mock_request):
        response = self.client.post('/customer-invoices/save/', {
            'customer': 'Ali', 'total_amount': '1500', 'status': 'PENDING',
        })

        self.assertEqual(response.status_code, 404)
        mock_request.assert_not_called()

    @patch('posdash.core.forwarder.requests.request')
    def test_customer_invoice_delete_posts(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'deleted'})

        self.client.post('/customer-invoices/ord-1/delete/', {'confirm': 'yes'})

        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/customerinvoice/Deletecustomorder/ord-1'))

    @patch('posdash.core.forwarder.requests.request')
    def test_walkin_day_shows_sales_and_cash(self, mock_request):
        invoices = [TestDataFactory.walkin_invoice(1, 2000), TestDataFactory.walkin_invoice(2, 1000, 'card')]
        mock_request.side_effect = [
            backend_response(200, {'total_amount': 3000, 'cash_amount': 2000, 'invoices': invoices}),
            backend_response(200, {'found': True, 'cash_opening': 500, 'cash_closing': None}),
        ]

        response = self.client.get('/walkin-invoice/?date=2024-05-01')

        self.assertEqual(response.status_code, 200)
        self.assertEqual([c[0][1] for c in mock_request.call_args_list], [
            f'{BACKEND}/walkin-invoice/date/2024-05-01',
            f'{BACKEND}/walkin-invoice/daily-cash/2024-05-01',
        ])
        self.assertEqual(response.context['summary']['total_amount'], 3000)
        self.assertEqual(len(response.context['summary']['invoices']), 2)
        self.assertTrue(response.context['opened'])
        self.assertFalse(response.context['closed'])
        self.assertFalse(response.context['is_today'])

    @patch('posdash.core.forwarder.requests.request')
    def test_walkin_day_without_cash_record(self, mock_request):
        mock_request.side_effect = [
            backend_response(200, {'total_amount': 0, 'cash_amount': 0, 'invoices': []}),
            backend_response(404, {'detail': 'No cash record'}),
        ]

        response = self.client.get('/walkin-invoice/')

        self.assertEqual(response.context['date'], pos_routes.today())
        self.assertTrue(response.context['is_today'])
        self.assertFalse(response.context['opened'])
        self.assertEqual(message_texts(response), [])
        self.assertContains(response, 'Save opening')

    @patch('posdash.core.forwarder.requests.request')
    def test_walkin_opening(self, mock_request):
        mock_request.return_value = backend_response(200, {'message': 'ok'})

        response = self.client.post('/walkin-invoice/', {'action': 'opening', 'amount': '500', 'notes': 'Float'})

        self.assertEqual(response.status_code, 302)
        self.assertEqual(response['Location'], f'/walkin-invoice?date={pos_routes.today()}')
        args, kwargs = mock_request.call_args
        self.assertEqual(args, ('POST', f'{BACKEND}/walkin-invoice/opening'))
        self.assertEqual(kwargs['json'], {'date': pos_routes.today(), 'amount': 500.0, 'notes': 'Float'})
        self.assertIn('Opening balance has been recorded.', message_texts(response))

    @patch('posdash.core.forwarder.requests.request')
    def test_walkin_closing_reports_difference(self, mock_request):
        mock_request.return_value = backend_response(200, {
            'opening': 500, 'sales': 2000, 'expected': 2500, 'closing': 2400, 'difference': -100,
        })

        response = self.client.post('/walkin-invoice/', {'action': 'closing', 'amount': '2400'})

        self.assertEqual(mock_request.call_args[0], ('POST', f'{BACKEND}/walkin-invoice/closing'))
        self.assertIn(
            'Closing balance recorded. Opening: Rs. 500, Cash sales: Rs. 2000, Expected: Rs. 2500, '
            'Closing: Rs. 2400, Difference: Rs. 100 (Short)',
            message_texts(response),
        )

    @patch('posdash.core.forwarder.requests.request')
    def test_walkin_negative_amount_is_rejected(self, mock_request):
        response = self.client.post('/walkin-invoice/', {'action': 'opening', 'amount': '-5'})

        self.assertEqual(response.status_code, 302)
        self.assertIn('Please enter a valid amount', message_texts(response))
        mock_request.assert_not_called()

    def test_unknown_resource_is_404(self):
        response = self.client.get('/stock/unknown/delete/')

        self.assertEqual(response.status_code, 404)
