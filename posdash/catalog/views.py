from rest_framework.decorators import api_view

from posdash.core.proxy import forward_request
from . import routes


# Brand endpoints
@api_view(['GET', 'POST'])
def brand_list_create(request):
    if request.method == 'GET':
        return forward_request(request, routes.LIST_BRANDS)
    return forward_request(request, routes.CREATE_BRAND)


@api_view(['PUT', 'DELETE'])
def brand_detail(request, pk):
    if request.method == 'PUT':
        return forward_request(request, routes.UPDATE_BRAND, id=pk)
    return forward_request(request, routes.DELETE_BRAND, id=pk)


# Category endpoints
@api_view(['GET', 'POST'])
def category_list_create(request):
    if request.method == 'GET':
        return forward_request(request, routes.LIST_CATEGORIES)
    return forward_request(request, routes.CREATE_CATEGORY)


@api_view(['PUT', 'DELETE'])
def category_detail(request, pk):
    if request.method == 'PUT':
        return forward_request(request, routes.UPDATE_CATEGORY, id=pk)
    return forward_request(request, routes.DELETE_CATEGORY, id=pk)


# Product endpoints
@api_view(['GET', 'POST'])
def product_list_create(request):
    """
    GET lists products (skip/limit/search_string).
    POST creates with `?action=create`, otherwise runs a filtered product view.
    """
    if request.method == 'GET':
        return forward_request(request, routes.LIST_PRODUCTS)
    if request.query_params.get('action') == 'create':
        return forward_request(request, routes.CREATE_PRODUCT)
    return forward_request(request, routes.SEARCH_PRODUCTS)


@api_view(['PUT'])
def product_update(request, pk):
    return forward_request(request, routes.UPDATE_PRODUCT, id=pk)


@api_view(['POST'])
def product_delete(request, pk):
    return forward_request(request, routes.DELETE_PRODUCT, id=pk)


@api_view(['GET'])
def generate_barcode(request):
    return forward_request(request, routes.GENERATE_BARCODE)


@api_view(['GET'])
def product_by_barcode(request):
    """Exact-match product lookup used by the scanner workflows"""
    return forward_request(request, routes.PRODUCT_BY_BARCODE)
