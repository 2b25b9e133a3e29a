from django.urls import re_path
from .views import (
    brand_list_create, brand_detail,
    category_list_create, category_detail,
    product_list_create, product_update, product_delete,
    generate_barcode, product_by_barcode,
)

urlpatterns = [
    # Brand endpoints
    re_path(r'^brand/?$', brand_list_create, name='brand-list-create'),
    re_path(r'^brand/(?P<pk>[^/]+)/?$', brand_detail, name='brand-detail'),

    # Category endpoints
    re_path(r'^category/?$', category_list_create, name='category-list-create'),
    re_path(r'^category/(?P<pk>[^/]+)/?$', category_detail, name='category-detail'),

    # Product endpoints (fixed actions before the id catch-all)
    re_path(r'^products/?$', product_list_create, name='product-list-create'),
    re_path(r'^products/generate-barcode/?$', generate_barcode, name='product-generate-barcode'),
    re_path(r'^products/searchbybarcode/?$', product_by_barcode, name='product-by-barcode'),
    re_path(r'^products/delete-product/(?P<pk>[^/]+)/?$', product_delete, name='product-delete'),
    re_path(r'^products/(?P<pk>[^/]+)/?$', product_update, name='product-update'),
]
