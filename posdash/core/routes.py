"""
Building blocks for the per-app backend route tables.

A `BackendRoute` describes one backend endpoint: where it lives, which method
it expects, how long we wait for it, what body/query it takes and how its
response is read. Apps declare their tables in their own `routes.py`.
"""
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple
from urllib.parse import quote

from django.conf import settings

BODY_JSON = 'json'
BODY_MULTIPART = 'multipart'
BODY_NONE = 'none'

RESPONSE_JSON = 'json'
RESPONSE_TEXT = 'text'

TIMEOUT_LONG = 'long'

# Query handling
QUERY_ALL = 'all'
QUERY_NONE = 'none'
QUERY_ONLY = 'only'


def default_timeout():
    return getattr(settings, 'PROXY_DEFAULT_TIMEOUT', 30)


def long_timeout():
    return getattr(settings, 'PROXY_LONG_TIMEOUT', 120)


@dataclass(frozen=True)
class FieldMapping:
    source: str
    target: str
    transform: Optional[Callable[[Any], Any]] = None


@dataclass(frozen=True)
class FieldMap:
    """
    Renames inbound body fields to the names the backend expects.

    Only fields listed here are sent. A field that is missing, None or an
    empty string is left out of the outbound body.
    """
    mappings: Tuple[FieldMapping, ...]

    def apply(self, body):
        if not isinstance(body, dict):
            return body
        mapped = {}
        for mapping in self.mappings:
            value = body.get(mapping.source)
            if value is None or value == '':
                continue
            mapped[mapping.target] = mapping.transform(value) if mapping.transform else value
        return mapped


def field_map(*pairs):
    """field_map(('customer', 'e_name'), ('total_amount', 'e_amount', str))"""
    return FieldMap(tuple(FieldMapping(*pair) for pair in pairs))


@dataclass(frozen=True)
class BackendRoute:
    name: str
    path: str
    method: str = 'GET'
    timeout: Any = None
    body: str = BODY_JSON
    response: str = RESPONSE_JSON
    query: str = QUERY_ALL
    query_params: Tuple[str, ...] = ()
    query_defaults: Dict[str, Any] = field(default_factory=dict)
    required_query: Tuple[str, ...] = ()
    fields: Optional[FieldMap] = None
    retries: int = 0

    def resolve_path(self, path_params=None):
        params = {key: quote(str(value), safe='') for key, value in (path_params or {}).items()}
        return self.path.format(**params)

    def resolve_timeout(self):
        if self.timeout == TIMEOUT_LONG:
            return long_timeout()
        return self.timeout if self.timeout is not None else default_timeout()

    def build_query(self, inbound=None):
        """
        Turn inbound query parameters into the list of (key, value) pairs sent
        to the backend. Defaults fill in for absent or empty values.
        """
        inbound = inbound or {}
        if self.query == QUERY_NONE:
            return []

        pairs = []
        if self.query == QUERY_ALL:
            for key in inbound.keys():
                for value in _getlist(inbound, key):
                    pairs.append((key, value))
            for key, value in self.query_defaults.items():
                if not inbound.get(key):
                    pairs = [(k, v) for k, v in pairs if k != key]
                    pairs.append((key, _resolve(value)))
            return pairs

        for key in self.query_params:
            value = inbound.get(key)
            if not value:
                value = _resolve(self.query_defaults.get(key))
            if value is None or value == '':
                continue
            pairs.append((key, value))
        return pairs

    def map_body(self, body):
        if self.fields is None:
            return body
        return self.fields.apply(body)


def _getlist(params, key):
    if hasattr(params, 'getlist'):
        return params.getlist(key)
    value = params.get(key)
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _resolve(value):
    return value() if callable(value) else value


def long_route(name, path, **kwargs):
    """A route whose backend work can take minutes (reports, bulk writes)"""
    kwargs.setdefault('timeout', TIMEOUT_LONG)
    return BackendRoute(name, path, **kwargs)


# Auth, users and administration
SESSION_LOGIN = BackendRoute(
    'auth.session-login', 'auth/session-login', 'POST', query=QUERY_NONE,
    fields=field_map(('username', 'username'), ('password', 'password'), ('role', 'role')),
)
LOGOUT = BackendRoute('auth.logout', 'auth/logout', 'POST', query=QUERY_NONE)
CURRENT_USER = BackendRoute('auth.me', 'auth/me', body=BODY_NONE, query=QUERY_NONE)

LIST_USERS = BackendRoute(
    'users.list', 'users/', body=BODY_NONE, query=QUERY_ONLY,
    query_params=('search_string', 'skip', 'limit'),
    query_defaults={'skip': '0', 'limit': '100'},
)

CREATE_ADMIN = BackendRoute('admin.create', 'admin/createadmin', 'POST', query=QUERY_NONE)
VIEW_ADMINS = BackendRoute(
    'admin.list', 'admin/viewadmins', body=BODY_NONE, query=QUERY_ONLY,
    query_params=('search_string',),
)
UPDATE_ADMIN = BackendRoute('admin.update', 'admin/updateadmin/{id}', 'PUT', query=QUERY_NONE)
DELETE_ADMIN = BackendRoute('admin.delete', 'admin/deleteadmin/{id}', 'DELETE', body=BODY_NONE, query=QUERY_NONE)
ADMIN_VIEW_VENDORS = long_route('admin.vendors', 'vendors/viewvendor', body=BODY_NONE)
ADMIN_DELETE_VENDOR = BackendRoute('admin.delete-vendor', 'vendors/{id}', 'DELETE', body=BODY_NONE, query=QUERY_NONE)
CUSTOMER_VENDOR_BY_BRANCH = BackendRoute(
    'admin.customer-vendor-by-branch', 'admin/getcustomervendorbybranch', body=BODY_NONE,
)

BACKEND_PROBE = BackendRoute('admin.probe', 'admin/viewadmins', body=BODY_NONE, query=QUERY_NONE)
