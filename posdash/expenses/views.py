from rest_framework.decorators import api_view

from posdash.core.proxy import forward_request
from . import routes


@api_view(['GET', 'POST'])
def expense_list_create(request):
    if request.method == 'GET':
        return forward_request(request, routes.LIST_EXPENSES)
    return forward_request(request, routes.CREATE_EXPENSE)


@api_view(['PUT', 'DELETE'])
def expense_detail(request, pk):
    if request.method == 'PUT':
        return forward_request(request, routes.UPDATE_EXPENSE, id=pk)
    return forward_request(request, routes.DELETE_EXPENSE, id=pk)


@api_view(['GET'])
def expense_type_list(request):
    return forward_request(request, routes.LIST_EXPENSE_TYPES)
