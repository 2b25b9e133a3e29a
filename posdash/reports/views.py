from rest_framework.decorators import api_view

from posdash.core.proxy import forward_request
from . import routes


@api_view(['GET'])
def sales_summary(request):
    """Sales totals for a date range; branch defaults to DEFAULT_BRANCH"""
    return forward_request(request, routes.SALES_SUMMARY)


@api_view(['GET'])
def dashboard_stats(request):
    return forward_request(request, routes.DASHBOARD_STATS)


@api_view(['GET'])
def branch_list(request):
    return forward_request(request, routes.BRANCHES)
