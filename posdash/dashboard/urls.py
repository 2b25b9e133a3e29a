from django.urls import re_path
from django.views.generic import RedirectView

from .pages import RESOURCES
from .views import (
    login_view, logout_view,
    home,
    stock_adjust, stock_in_report, vendor_report,
    walkin_day,
    resource_list, resource_save, resource_delete,
)

RESOURCE_SLUGS = '|'.join(RESOURCES)

urlpatterns = [
    re_path(r'^$', RedirectView.as_view(url='/dashboard/'), name='dashboard-root'),

    # Session pages
    re_path(r'^login/?$', login_view, name='dashboard-login'),
    re_path(r'^logout/?$', logout_view, name='dashboard-logout'),

    re_path(r'^dashboard/?$', home, name='dashboard-home'),

    # Stock and report pages (before the generic resource routes)
    re_path(r'^stock/adjust/?$', stock_adjust, name='dashboard-stock-adjust'),
    re_path(r'^stock/report/stock-in/?$', stock_in_report, name='dashboard-stock-in-report'),
    re_path(r'^vendors/report/?$', vendor_report, name='dashboard-vendor-report'),
    re_path(r'^walkin-invoice/?$', walkin_day, name='dashboard-walkin-day'),

    # Resource list/create/update/delete pages
    re_path(rf'^(?P<slug>{RESOURCE_SLUGS})/?$', resource_list, name='dashboard-resource-list'),
    re_path(rf'^(?P<slug>{RESOURCE_SLUGS})/save/?$', resource_save, name='dashboard-resource-save'),
    re_path(rf'^(?P<slug>{RESOURCE_SLUGS})/(?P<pk>[^/]+)/delete/?$', resource_delete, name='dashboard-resource-delete'),
]
