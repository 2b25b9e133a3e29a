from rest_framework.decorators import api_view

from posdash.core.proxy import forward_request
from . import routes


def wrap_pdf(data):
    return {'pdf': data}


@api_view(['GET'])
def view_stock(request):
    return forward_request(request, routes.VIEW_STOCK)


@api_view(['POST'])
def adjust_stock(request):
    """Apply a batch of stock adjustments (one JSON array)"""
    return forward_request(request, routes.ADJUST_STOCK)


@api_view(['POST'])
def save_stock_in(request):
    return forward_request(request, routes.SAVE_STOCK_IN)


@api_view(['POST'])
def save_stock_in_with_barcode(request):
    return forward_request(request, routes.SAVE_STOCK_IN_WITH_BARCODE)


@api_view(['POST'])
def generate_barcodes_only(request):
    return forward_request(request, routes.GENERATE_BARCODES_ONLY)


@api_view(['POST'])
def stock_report(request):
    """Multipart form in, base64 PDF text out"""
    return forward_request(request, routes.STOCK_REPORT)


@api_view(['POST'])
def stock_in_report(request):
    """Date-wise stock-in report; answers {"pdf": <base64>}"""
    return forward_request(request, routes.STOCK_IN_REPORT, transform=wrap_pdf)
