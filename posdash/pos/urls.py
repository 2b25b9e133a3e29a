from django.urls import re_path
from .views import (
    customer_invoice_create, customer_invoice_list, customer_invoice_detail,
    process_payment, receipt, update_status, payment_history, customer_orders, invoice_customers,
    walkin_invoice_list_create, walkin_today, daily_cash, opening_cash, closing_cash,
)

urlpatterns = [
    # Customer invoice endpoints
    re_path(r'^customerinvoice/?$', customer_invoice_create, name='customer-invoice-create'),
    re_path(r'^customerinvoice/viewcustomerorder/?$', customer_invoice_list, name='customer-invoice-list'),
    re_path(r'^customerinvoice/Customers/?$', invoice_customers, name='customer-invoice-customers'),
    re_path(r'^customerinvoice/process-payment/(?P<pk>[^/]+)/?$', process_payment, name='customer-invoice-process-payment'),
    re_path(r'^customerinvoice/receipt/(?P<pk>[^/]+)/?$', receipt, name='customer-invoice-receipt'),
    re_path(r'^customerinvoice/update-status/(?P<pk>[^/]+)/?$', update_status, name='customer-invoice-update-status'),
    re_path(r'^customerinvoice/payment-history/(?P<pk>[^/]+)/?$', payment_history, name='customer-invoice-payment-history'),
    re_path(r'^customerinvoice/customerorders/(?P<pk>[^/]+)/?$', customer_orders, name='customer-invoice-customer-orders'),
    re_path(r'^customerinvoice/(?P<pk>[^/]+)/?$', customer_invoice_detail, name='customer-invoice-detail'),

    # Walk-in invoice endpoints
    re_path(r'^walkin-invoices/?$', walkin_invoice_list_create, name='walkin-invoice-list-create'),
    re_path(r'^walkin-invoices/today/?$', walkin_today, name='walkin-invoice-today'),
    re_path(r'^walkin-invoices/daily-cash/(?P<date>[^/]+)/?$', daily_cash, name='walkin-invoice-daily-cash'),
    re_path(r'^walkin-invoices/opening/?$', opening_cash, name='walkin-invoice-opening'),
    re_path(r'^walkin-invoices/closing/?$', closing_cash, name='walkin-invoice-closing'),
]
