from django.urls import re_path
from .views import (
    view_stock, adjust_stock,
    save_stock_in, save_stock_in_with_barcode, generate_barcodes_only,
    stock_report, stock_in_report,
)

urlpatterns = [
    re_path(r'^stock/viewstock/?$', view_stock, name='stock-view'),
    re_path(r'^stock/adjuststock/?$', adjust_stock, name='stock-adjust'),
    re_path(r'^stock/savestockin/?$', save_stock_in, name='stock-in-save'),
    re_path(r'^stock/savestockinwithbarcode/?$', save_stock_in_with_barcode, name='stock-in-save-with-barcode'),
    re_path(r'^stock/generatebarcodesonly/?$', generate_barcodes_only, name='stock-generate-barcodes'),

    # Reports
    re_path(r'^stock/stockreport/?$', stock_report, name='stock-report'),
    re_path(r'^stock/stockinreport/?$', stock_in_report, name='stock-in-report'),
]
