"""
Dashboard resources: which backend routes, form, columns and search policy
each list page uses.
"""
from dataclasses import dataclass, field
from typing import Callable, Optional

from posdash.catalog import routes as catalog_routes
from posdash.core import routes as core_routes
from posdash.core.routes import BackendRoute
from posdash.expenses import routes as expense_routes
from posdash.inventory import routes as inventory_routes
from posdash.parties import routes as party_routes
from posdash.pos import routes as pos_routes

from .crud import (
    AdminUserForm, BrandForm, CategoryForm, CustomerForm, CustomerInvoiceForm, ExpenseForm, PayloadForm,
    ProductForm, SalesmanForm, VendorForm,
)
from .listing import BatchSearch, ClientFilter, ListPage, ServerSearch


@dataclass(frozen=True)
class Resource:
    slug: str
    label: str
    title: str
    list_route: BackendRoute
    policy: Callable[[], object]
    columns: tuple
    id_field: str = 'id'
    form_class: Optional[type] = None
    create_route: Optional[BackendRoute] = None
    update_route: Optional[BackendRoute] = None
    delete_route: Optional[BackendRoute] = None
    extra_query: dict = field(default_factory=dict)
    error_message: str = 'Failed to load data'

    @property
    def editable(self):
        return self.form_class is not None

    @property
    def creatable(self):
        return self.editable and self.create_route is not None

    def list_page(self, cookie=None, forwarder=None, page_size=None):
        return ListPage(
            self.list_route,
            self.policy(),
            page_size=page_size,
            extra_query=self.extra_query,
            forwarder=forwarder,
            cookie=cookie,
            error_message=self.error_message,
        )

    def record_id(self, row):
        return row.get(self.id_field)

    def cells(self, row):
        return [row.get(name) for name, _ in self.columns]


def client_filter(*fields):
    return lambda: ClientFilter(fields)


def server_search(paging='page', search_param='search_string'):
    return lambda: ServerSearch(paging, search_param)


def batch_search(batch_size=100):
    return lambda: BatchSearch(batch_size)


RESOURCES = {
    'brand': Resource(
        slug='brand',
        label='Brand',
        title='Brands',
        list_route=catalog_routes.LIST_BRANDS,
        policy=client_filter('name'),
        columns=(('name', 'Name'),),
        form_class=BrandForm,
        create_route=catalog_routes.CREATE_BRAND,
        update_route=catalog_routes.UPDATE_BRAND,
        delete_route=catalog_routes.DELETE_BRAND,
        error_message='Failed to fetch brands',
    ),
    'category': Resource(
        slug='category',
        label='Category',
        title='Categories',
        list_route=catalog_routes.LIST_CATEGORIES,
        policy=client_filter('name', 'branch'),
        columns=(('name', 'Name'), ('branch', 'Branch'), ('created_at', 'Created At')),
        form_class=CategoryForm,
        create_route=catalog_routes.CREATE_CATEGORY,
        update_route=catalog_routes.UPDATE_CATEGORY,
        delete_route=catalog_routes.DELETE_CATEGORY,
        error_message='Failed to fetch categories',
    ),
    'products': Resource(
        slug='products',
        label='Product',
        title='Products',
        list_route=catalog_routes.LIST_PRODUCTS,
        policy=batch_search(),
        columns=(
            ('pro_name', 'Name'), ('pro_barcode', 'Barcode'), ('pro_price', 'Price'), ('stock', 'Stock'),
        ),
        id_field='pro_id',
        form_class=ProductForm,
        create_route=catalog_routes.CREATE_PRODUCT,
        update_route=catalog_routes.UPDATE_PRODUCT,
        delete_route=catalog_routes.DELETE_PRODUCT,
        error_message='Failed to fetch products',
    ),
    'stock': Resource(
        slug='stock',
        label='Stock',
        title='Stock',
        list_route=inventory_routes.VIEW_STOCK,
        policy=server_search(),
        columns=(
            ('vendor_name', 'Vendor'), ('product_name', 'Product'), ('category', 'Category'),
            ('stock', 'Stock'), ('price', 'Price'), ('cost', 'Cost'), ('barcode', 'Barcode'),
            ('margin', 'Margin (%)'), ('brand', 'Brand'), ('branch', 'Branch'),
        ),
        id_field='pro_id',
        error_message='Failed to fetch stock',
    ),
    'customers': Resource(
        slug='customers',
        label='Customer',
        title='Customers',
        list_route=party_routes.VIEW_CUSTOMERS,
        policy=server_search(),
        columns=(
            ('cus_name', 'Name'), ('cus_phone', 'Phone'), ('cus_cnic', 'CNIC'),
            ('cus_address', 'Address'), ('branch', 'Branch'),
        ),
        id_field='cus_id',
        form_class=CustomerForm,
        create_route=party_routes.CREATE_CUSTOMER,
        update_route=party_routes.UPDATE_CUSTOMER,
        delete_route=party_routes.DELETE_CUSTOMER,
        error_message='Failed to fetch customers',
    ),
    'salesman': Resource(
        slug='salesman',
        label='Salesman',
        title='Salesmen',
        list_route=party_routes.LIST_SALESMEN,
        policy=client_filter('name', 'code', 'phone', 'branch'),
        columns=(
            ('name', 'Name'), ('code', 'Code'), ('phone', 'Phone'), ('address', 'Address'),
            ('branch', 'Branch'), ('commission_rate', 'Commission (%)'),
        ),
        form_class=SalesmanForm,
        create_route=party_routes.CREATE_SALESMAN,
        update_route=party_routes.UPDATE_SALESMAN,
        delete_route=party_routes.DELETE_SALESMAN,
        error_message='Failed to fetch salesmen',
    ),
    'customer-invoices': Resource(
        slug='customer-invoices',
        label='Customer invoice',
        title='Customer Invoices',
        list_route=pos_routes.VIEW_CUSTOMER_ORDERS,
        policy=server_search('skip', search_param='searchString'),
        columns=(
            ('invoice_no', 'Invoice'), ('status', 'Status'), ('customer', 'Customer'),
            ('teamname', 'Team'), ('quantity', 'Quantity'), ('total_amount', 'Total'), ('date', 'Date'),
        ),
        id_field='orderid',
        form_class=CustomerInvoiceForm,
        update_route=pos_routes.UPDATE_CUSTOMER_INVOICE,
        delete_route=pos_routes.DELETE_CUSTOMER_ORDER,
        error_message='Failed to fetch customer orders',
    ),
    'vendors': Resource(
        slug='vendors',
        label='Vendor',
        title='Vendors',
        list_route=core_routes.ADMIN_VIEW_VENDORS,
        policy=server_search(),
        columns=(
            ('ven_name', 'Name'), ('ven_phone', 'Phone'), ('ven_address', 'Address'),
            ('branch', 'Branch'), ('vend_balance', 'Balance'),
        ),
        id_field='ven_id',
        form_class=VendorForm,
        create_route=party_routes.CREATE_VENDOR,
        update_route=party_routes.UPDATE_VENDOR,
        delete_route=core_routes.ADMIN_DELETE_VENDOR,
        error_message='Failed to fetch vendors',
    ),
    'expenses': Resource(
        slug='expenses',
        label='Expense',
        title='Expenses',
        list_route=expense_routes.LIST_EXPENSES,
        policy=server_search(),
        columns=(
            ('expense', 'Expense'), ('expense_type', 'Type'), ('amount', 'Amount'),
            ('expense_date', 'Date'), ('branch', 'Branch'),
        ),
        form_class=ExpenseForm,
        create_route=expense_routes.CREATE_EXPENSE,
        update_route=expense_routes.UPDATE_EXPENSE,
        delete_route=expense_routes.DELETE_EXPENSE,
        error_message='Failed to fetch expenses',
    ),
    'administration': Resource(
        slug='administration',
        label='User',
        title='Administration',
        list_route=core_routes.VIEW_ADMINS,
        policy=client_filter('ad_name', 'ad_role', 'ad_branch', 'ad_phone'),
        columns=(
            ('ad_name', 'Name'), ('ad_role', 'Role'), ('ad_phone', 'Phone'),
            ('ad_cnic', 'CNIC'), ('ad_address', 'Address'), ('ad_branch', 'Branch'),
        ),
        id_field='ad_id',
        form_class=AdminUserForm,
        create_route=core_routes.CREATE_ADMIN,
        update_route=core_routes.UPDATE_ADMIN,
        delete_route=core_routes.DELETE_ADMIN,
        error_message='Failed to fetch users',
    ),
}


def form_for(resource, record=None, data=None):
    """Bound form for a POST, or an unbound one pre-filled from `record` when editing"""
    form_class = resource.form_class or PayloadForm
    if data is not None:
        return form_class(data)
    if record is not None:
        return form_class(initial=form_class.initial_from(record))
    return form_class()
