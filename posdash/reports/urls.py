from django.urls import re_path
from .views import sales_summary, dashboard_stats, branch_list

urlpatterns = [
    re_path(r'^sales-view/summary/?$', sales_summary, name='sales-summary'),
    re_path(r'^dashboard/stats/?$', dashboard_stats, name='dashboard-stats'),
    re_path(r'^branches/?$', branch_list, name='branch-list'),
]
