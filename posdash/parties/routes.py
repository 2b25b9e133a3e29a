"""
Backend routes for customers, vendors and salesmen
"""
from posdash.core.routes import BackendRoute, long_route, BODY_NONE, QUERY_NONE, QUERY_ONLY

# Customers
VIEW_CUSTOMERS = BackendRoute('customers.view', 'customers/viewcustomer', body=BODY_NONE)
CREATE_CUSTOMER = BackendRoute('customers.create', 'customers/', 'POST', query=QUERY_NONE)
UPDATE_CUSTOMER = long_route('customers.update', 'customers/{id}', method='PUT', query=QUERY_NONE)
DELETE_CUSTOMER = long_route('customers.delete', 'customers/{id}', method='DELETE', body=BODY_NONE, query=QUERY_NONE)

# Vendors
LIST_VENDORS = BackendRoute(
    'vendors.list', 'vendors/', body=BODY_NONE, query=QUERY_ONLY,
    query_params=('skip', 'limit', 'search_string'),
)
CREATE_VENDOR = BackendRoute('vendors.create', 'vendors/', 'POST', query=QUERY_NONE)
UPDATE_VENDOR = BackendRoute('vendors.update', 'vendors/{id}', 'PUT', query=QUERY_NONE)
VENDOR_REPORT = long_route('vendors.report', 'vendors/vendorviewreport', method='POST', body=BODY_NONE, query=QUERY_NONE)
LIST_VENDOR_PAYMENTS = BackendRoute('vendors.payments', 'vendors/payments', body=BODY_NONE)
CREATE_VENDOR_PAYMENT = BackendRoute('vendors.pay', 'vendors/payments', 'POST', query=QUERY_NONE)

# Salesmen
LIST_SALESMEN = BackendRoute('salesman.list', 'salesman/', body=BODY_NONE)
CREATE_SALESMAN = BackendRoute('salesman.create', 'salesman/', 'POST', query=QUERY_NONE)
UPDATE_SALESMAN = BackendRoute('salesman.update', 'salesman/{id}', 'PUT', query=QUERY_NONE)
DELETE_SALESMAN = BackendRoute('salesman.delete', 'salesman/{id}', 'DELETE', body=BODY_NONE, query=QUERY_NONE)
