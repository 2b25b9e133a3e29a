from rest_framework.decorators import api_view

from posdash.core.proxy import forward_request
from . import routes

EMPTY_DAY = {'total_amount': 0, 'cash_amount': 0, 'invoices': []}


def day_summary(data):
    """Reduce the backend's per-date answer to the totals the cash screen shows"""
    data = data or {}
    return {
        'total_amount': data.get('total_amount') or 0,
        'cash_amount': data.get('cash_amount') or 0,
        'invoices': data.get('invoices') or [],
    }


# Customer invoice endpoints
@api_view(['POST'])
def customer_invoice_create(request):
    return forward_request(request, routes.SAVE_CUSTOMER_ORDER)


@api_view(['GET'])
def customer_invoice_list(request):
    return forward_request(request, routes.VIEW_CUSTOMER_ORDERS)


@api_view(['GET', 'PUT', 'DELETE'])
def customer_invoice_detail(request, pk):
    """
    GET reads one order, PUT updates it (customer/total_amount are renamed to
    the backend's e_name/e_amount), DELETE removes it.
    """
    if request.method == 'GET':
        return forward_request(request, routes.VIEW_CUSTOMER_ORDER, id=pk)
    if request.method == 'PUT':
        return forward_request(request, routes.UPDATE_CUSTOMER_INVOICE, id=pk)
    return forward_request(request, routes.DELETE_CUSTOMER_ORDER, id=pk)


@api_view(['PUT'])
def process_payment(request, pk):
    return forward_request(request, routes.PROCESS_PAYMENT, id=pk)


@api_view(['POST'])
def receipt(request, pk):
    """Base64 receipt PDF for one invoice"""
    return forward_request(request, routes.RECEIPT, id=pk)


@api_view(['PUT'])
def update_status(request, pk):
    return forward_request(request, routes.UPDATE_STATUS, id=pk)


@api_view(['GET'])
def payment_history(request, pk):
    return forward_request(request, routes.PAYMENT_HISTORY, id=pk)


@api_view(['GET'])
def customer_orders(request, pk):
    return forward_request(request, routes.CUSTOMER_ORDERS, id=pk)


@api_view(['GET'])
def invoice_customers(request):
    return forward_request(request, routes.INVOICE_CUSTOMERS)


# Walk-in invoice endpoints
@api_view(['GET', 'POST'])
def walkin_invoice_list_create(request):
    if request.method == 'GET':
        return forward_request(request, routes.LIST_WALKIN_INVOICES)
    return forward_request(request, routes.CREATE_WALKIN_INVOICE)


@api_view(['GET'])
def walkin_today(request):
    date = request.query_params.get('date') or routes.today()
    return forward_request(
        request, routes.WALKIN_BY_DATE,
        transform=day_summary, error_extra=EMPTY_DAY, date=date,
    )


@api_view(['GET'])
def daily_cash(request, date):
    return forward_request(request, routes.DAILY_CASH, error_extra={'found': False}, date=date)


@api_view(['POST'])
def opening_cash(request):
    return forward_request(request, routes.OPENING_CASH)


@api_view(['POST'])
def closing_cash(request):
    return forward_request(request, routes.CLOSING_CASH)
