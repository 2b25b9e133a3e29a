"""
Backend routes for stock levels, stock-in and stock reports.

Bulk writes and reports run long on the backend and get the long timeout.
"""
from posdash.core.routes import (
    BackendRoute, long_route, BODY_MULTIPART, BODY_NONE, QUERY_NONE, QUERY_ONLY, RESPONSE_TEXT,
)

VIEW_STOCK = BackendRoute('stock.view', 'stock/viewstock', body=BODY_NONE)
ADJUST_STOCK = long_route('stock.adjust', 'stock/adjuststock', method='POST', query=QUERY_NONE)
SAVE_STOCK_IN = long_route('stock.stock-in', 'stock/savestockin', method='POST', query=QUERY_NONE)
SAVE_STOCK_IN_WITH_BARCODE = long_route(
    'stock.stock-in-with-barcode', 'stock/savestockinwithbarcode', method='POST', query=QUERY_NONE,
)
GENERATE_BARCODES_ONLY = long_route(
    'stock.generate-barcodes', 'stock/generatebarcodesonly', method='POST', query=QUERY_NONE,
)
STOCK_REPORT = long_route(
    'stock.report', 'stock/stockreport', method='POST',
    body=BODY_MULTIPART, response=RESPONSE_TEXT, query=QUERY_NONE,
)
STOCK_IN_REPORT = long_route(
    'stock.stock-in-report', 'stock/stockinreport', method='POST', body=BODY_NONE,
    query=QUERY_ONLY, query_params=('date_from', 'date_to'), required_query=('date_from', 'date_to'),
)
