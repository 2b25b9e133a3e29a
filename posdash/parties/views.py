from rest_framework.decorators import api_view

from posdash.core.proxy import forward_request
from . import routes


# Customer endpoints
@api_view(['GET'])
def customer_view(request):
    return forward_request(request, routes.VIEW_CUSTOMERS)


@api_view(['POST'])
def customer_create(request):
    return forward_request(request, routes.CREATE_CUSTOMER)


@api_view(['PUT', 'DELETE'])
def customer_detail(request, pk):
    if request.method == 'PUT':
        return forward_request(request, routes.UPDATE_CUSTOMER, id=pk)
    return forward_request(request, routes.DELETE_CUSTOMER, id=pk)


# Vendor endpoints
@api_view(['GET', 'POST'])
def vendor_list_create(request):
    if request.method == 'GET':
        return forward_request(request, routes.LIST_VENDORS)
    return forward_request(request, routes.CREATE_VENDOR)


@api_view(['PUT'])
def vendor_update(request, pk):
    return forward_request(request, routes.UPDATE_VENDOR, id=pk)


@api_view(['POST'])
def vendor_report(request):
    return forward_request(request, routes.VENDOR_REPORT)


@api_view(['GET', 'POST'])
def vendor_payments(request):
    if request.method == 'GET':
        return forward_request(request, routes.LIST_VENDOR_PAYMENTS)
    return forward_request(request, routes.CREATE_VENDOR_PAYMENT)


# Salesman endpoints
@api_view(['GET', 'POST'])
def salesman_list_create(request):
    if request.method == 'GET':
        return forward_request(request, routes.LIST_SALESMEN)
    return forward_request(request, routes.CREATE_SALESMAN)


@api_view(['PUT', 'DELETE'])
def salesman_detail(request, pk):
    if request.method == 'PUT':
        return forward_request(request, routes.UPDATE_SALESMAN, id=pk)
    return forward_request(request, routes.DELETE_SALESMAN, id=pk)
