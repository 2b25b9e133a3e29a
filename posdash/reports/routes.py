"""
Backend routes for the sales summary and dashboard figures.

These are read-only page loads, so they retry on connection errors and 5xx.
"""
from django.conf import settings

from posdash.core.routes import BackendRoute, BODY_NONE, QUERY_ONLY

DASHBOARD_RETRIES = 2


def default_branch():
    return getattr(settings, 'DEFAULT_BRANCH', '')


SALES_SUMMARY = BackendRoute(
    'sales-view.summary', 'sales-view/summary', body=BODY_NONE, query=QUERY_ONLY,
    query_params=('from_date', 'to_date', 'branch'),
    query_defaults={'branch': default_branch},
    retries=DASHBOARD_RETRIES,
)
DASHBOARD_STATS = BackendRoute('dashboard.stats', 'dashboard/stats', body=BODY_NONE, retries=DASHBOARD_RETRIES)
BRANCHES = BackendRoute('branches.list', 'branches', body=BODY_NONE, retries=DASHBOARD_RETRIES)
