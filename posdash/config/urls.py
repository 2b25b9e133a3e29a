"""
URL configuration for the POS dashboard gateway.

Browser-facing proxy routes live under `api/`; each app contributes its own
`urls.py`. The server-rendered dashboard pages are mounted at the root.
"""
from django.urls import path, include

urlpatterns = [
    path('api/', include('posdash.core.urls')),
    path('api/', include('posdash.catalog.urls')),
    path('api/', include('posdash.inventory.urls')),
    path('api/', include('posdash.parties.urls')),
    path('api/', include('posdash.pos.urls')),
    path('api/', include('posdash.expenses.urls')),
    path('api/', include('posdash.reports.urls')),
    path('', include('posdash.dashboard.urls')),
]
