from django.urls import re_path
from .views import expense_list_create, expense_detail, expense_type_list

urlpatterns = [
    re_path(r'^expenses/?$', expense_list_create, name='expense-list-create'),
    re_path(r'^expenses/(?P<pk>[^/]+)/?$', expense_detail, name='expense-detail'),
    re_path(r'^expense-type/?$', expense_type_list, name='expense-type-list'),
]
