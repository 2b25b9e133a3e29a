"""
Backend routes for customer invoices (credit orders) and walk-in invoices
"""
from django.utils import timezone

from posdash.core.routes import (
    BackendRoute, field_map, long_route, BODY_NONE, QUERY_NONE, QUERY_ONLY,
)


def today():
    return timezone.now().date().isoformat()


# Customer invoices
SAVE_CUSTOMER_ORDER = BackendRoute(
    'customerinvoice.save', 'customerinvoice/SaveCustomerOrders', 'POST', query=QUERY_NONE,
)
VIEW_CUSTOMER_ORDERS = BackendRoute(
    'customerinvoice.list', 'customerinvoice/viewcustomerorder', body=BODY_NONE,
)
VIEW_CUSTOMER_ORDER = BackendRoute(
    'customerinvoice.detail', 'customerinvoice/viewcustomerorder/{id}', body=BODY_NONE, query=QUERY_NONE,
)
UPDATE_CUSTOMER_INVOICE = BackendRoute(
    'customerinvoice.update', 'customerinvoice/UpdateCustomerInvoice/{id}', 'PUT', query=QUERY_NONE,
    fields=field_map(
        ('customer', 'e_name'),
        ('total_amount', 'e_amount', str),
        ('note', 'note'),
        ('status', 'status'),
    ),
)
# The backend deletes customer orders through a POST
DELETE_CUSTOMER_ORDER = BackendRoute(
    'customerinvoice.delete', 'customerinvoice/Deletecustomorder/{id}', 'POST', body=BODY_NONE, query=QUERY_NONE,
)
PROCESS_PAYMENT = long_route(
    'customerinvoice.process-payment', 'customerinvoice/process-payment/{id}', method='PUT', query=QUERY_NONE,
)
RECEIPT = BackendRoute(
    'customerinvoice.receipt', 'customerinvoice/receipt/{id}', 'POST', body=BODY_NONE, query=QUERY_NONE,
)
UPDATE_STATUS = BackendRoute(
    'customerinvoice.update-status', 'customerinvoice/update-status/{id}', 'PUT', query=QUERY_NONE,
)
PAYMENT_HISTORY = BackendRoute(
    'customerinvoice.payment-history', 'customerinvoice/payment-history/{id}', body=BODY_NONE, query=QUERY_NONE,
)
CUSTOMER_ORDERS = BackendRoute(
    'customerinvoice.customer-orders', 'customerinvoice/customerorders/{id}', body=BODY_NONE,
)
INVOICE_CUSTOMERS = BackendRoute('customerinvoice.customers', 'customerinvoice/Customers', body=BODY_NONE)

# Walk-in invoices
LIST_WALKIN_INVOICES = BackendRoute(
    'walkin.list', 'walkin-invoices/today', body=BODY_NONE, query=QUERY_ONLY,
    query_params=('date',), query_defaults={'date': today},
)
CREATE_WALKIN_INVOICE = BackendRoute(
    'walkin.create', 'walkin-invoice/walkin-invoices', 'POST', query=QUERY_NONE,
)
WALKIN_BY_DATE = BackendRoute('walkin.by-date', 'walkin-invoice/date/{date}', body=BODY_NONE, query=QUERY_NONE)
DAILY_CASH = BackendRoute('walkin.daily-cash', 'walkin-invoice/daily-cash/{date}', body=BODY_NONE, query=QUERY_NONE)
OPENING_CASH = BackendRoute('walkin.opening', 'walkin-invoice/opening', 'POST', query=QUERY_NONE)
CLOSING_CASH = BackendRoute('walkin.closing', 'walkin-invoice/closing', 'POST', query=QUERY_NONE)
