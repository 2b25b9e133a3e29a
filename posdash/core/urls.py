from django.urls import re_path
from .views import (
    login, logout, session,
    user_list,
    create_admin, view_admins, update_admin, delete_admin,
    admin_view_vendors, admin_delete_vendor, customer_vendor_by_branch,
    test_backend,
)

urlpatterns = [
    # Auth endpoints
    re_path(r'^auth/login/?$', login, name='auth-login'),
    re_path(r'^auth/logout/?$', logout, name='auth-logout'),
    re_path(r'^auth/session/?$', session, name='auth-session'),

    # User endpoints
    re_path(r'^users/?$', user_list, name='user-list'),

    # Administration endpoints
    re_path(r'^admin/createadmin/?$', create_admin, name='admin-create'),
    re_path(r'^admin/viewadmins/?$', view_admins, name='admin-list'),
    re_path(r'^admin/updateadmin/(?P<pk>[^/]+)/?$', update_admin, name='admin-update'),
    re_path(r'^admin/deleteadmin/(?P<pk>[^/]+)/?$', delete_admin, name='admin-delete'),
    re_path(r'^admin/viewvendor/?$', admin_view_vendors, name='admin-vendor-list'),
    re_path(r'^admin/deletevendor/(?P<pk>[^/]+)/?$', admin_delete_vendor, name='admin-vendor-delete'),
    re_path(r'^admin/getcustomervendorbybranch/?$', customer_vendor_by_branch, name='admin-customer-vendor-by-branch'),

    # Connectivity probe
    re_path(r'^test-backend/?$', test_backend, name='test-backend'),
]
