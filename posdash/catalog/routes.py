"""
Backend routes for brands, categories and products
"""
from posdash.core.routes import BackendRoute, BODY_NONE, QUERY_NONE, QUERY_ONLY

# Brands
LIST_BRANDS = BackendRoute('brand.list', 'brand/', body=BODY_NONE)
CREATE_BRAND = BackendRoute('brand.create', 'brand/', 'POST', query=QUERY_NONE)
UPDATE_BRAND = BackendRoute('brand.update', 'brand/{id}', 'PUT', query=QUERY_NONE)
DELETE_BRAND = BackendRoute('brand.delete', 'brand/{id}', 'DELETE', body=BODY_NONE, query=QUERY_NONE)

# Categories
LIST_CATEGORIES = BackendRoute('category.list', 'category/', body=BODY_NONE)
CREATE_CATEGORY = BackendRoute('category.create', 'category/', 'POST', query=QUERY_NONE)
UPDATE_CATEGORY = BackendRoute('category.update', 'category/{id}', 'PUT', query=QUERY_NONE)
DELETE_CATEGORY = BackendRoute('category.delete', 'category/{id}', 'DELETE', body=BODY_NONE, query=QUERY_NONE)

# Products
LIST_PRODUCTS = BackendRoute(
    'products.list', 'products/view-product', body=BODY_NONE, query=QUERY_ONLY,
    query_params=('skip', 'limit', 'search_string'),
    query_defaults={'skip': '0', 'limit': '100'},
)
SEARCH_PRODUCTS = BackendRoute('products.search', 'products/view-product', 'POST', query=QUERY_NONE)
CREATE_PRODUCT = BackendRoute('products.create', 'products/', 'POST', query=QUERY_NONE)
UPDATE_PRODUCT = BackendRoute('products.update', 'products/{id}', 'PUT', query=QUERY_NONE)
DELETE_PRODUCT = BackendRoute(
    'products.delete', 'products/delete-product/{id}', 'POST', body=BODY_NONE, query=QUERY_NONE,
)
GENERATE_BARCODE = BackendRoute('products.generate-barcode', 'products/generate-barcode', body=BODY_NONE, query=QUERY_NONE)
PRODUCT_BY_BARCODE = BackendRoute(
    'products.by-barcode', 'products/searchbybarcode', body=BODY_NONE, timeout=30,
    query=QUERY_ONLY, query_params=('barcode',), required_query=('barcode',),
)
