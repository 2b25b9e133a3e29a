from django.urls import re_path
from .views import (
    customer_view, customer_create, customer_detail,
    vendor_list_create, vendor_update, vendor_report, vendor_payments,
    salesman_list_create, salesman_detail,
)

urlpatterns = [
    # Customer endpoints
    re_path(r'^customers/viewcustomer/?$', customer_view, name='customer-view'),
    re_path(r'^customers/?$', customer_create, name='customer-create'),
    re_path(r'^customers/(?P<pk>[^/]+)/?$', customer_detail, name='customer-detail'),

    # Vendor endpoints
    re_path(r'^vendors/?$', vendor_list_create, name='vendor-list-create'),
    re_path(r'^vendors/vendorviewreport/?$', vendor_report, name='vendor-report'),
    re_path(r'^vendors/payments/?$', vendor_payments, name='vendor-payments'),
    re_path(r'^vendors/(?P<pk>[^/]+)/?$', vendor_update, name='vendor-update'),

    # Salesman endpoints
    re_path(r'^salesman/?$', salesman_list_create, name='salesman-list-create'),
    re_path(r'^salesman/(?P<pk>[^/]+)/?$', salesman_detail, name='salesman-detail'),
]
