"""
List/search/paginate controller shared by the dashboard list pages.

A `ListPage` owns the paging state of one page (current page, page size,
search term, loaded rows). How rows are fetched and filtered is delegated to a
policy:

- `ClientFilter` fetches the whole collection once per load and filters and
  slices it locally (small collections such as brands and categories).
- `ServerSearch` sends page/limit (or skip/limit) and the search term to the
  backend and trusts the page it returns.
- `BatchSearch` sends the search term to the backend but fetches a single
  batch and slices it locally (products, whose list carries no total).
"""
import enum
import logging
import math

from posdash.core.errors import ProxyError, is_session_expired
from posdash.core.forwarder import BackendForwarder
from posdash.core.pagination import (
    calculate_pagination_meta, default_page_size, page_to_query_params, page_window,
)

from .notifications import ERROR, ToastCollector

logger = logging.getLogger(__name__)


class ListState(enum.Enum):
    IDLE = 'idle'
    LOADING = 'loading'
    LOADED = 'loaded'
    ERRORED = 'errored'


def rows_from(data):
    """Backend lists arrive either bare or wrapped as {"data": [...]}"""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return data.get('data') or []
    return []


class ClientFilter:
    """Case-insensitive substring search over `fields`, paginated locally"""

    def __init__(self, fields):
        self.fields = tuple(fields)

    def matches(self, row, term):
        term = term.lower()
        for name in self.fields:
            value = row.get(name)
            if value is not None and term in str(value).lower():
                return True
        return False

    def fetch(self, page, forwarder, cookie):
        result = forwarder.forward(page.route, cookie=cookie, query=dict(page.extra_query))
        rows = rows_from(result.data)
        if page.search_term:
            rows = [row for row in rows if self.matches(row, page.search_term)]
        page.total_items = len(rows)
        page.reported_total_pages = None
        page.all_rows = rows
        page.rows = self.slice(page)

    def slice(self, page):
        start = (page.current_page - 1) * page.page_size
        return page.all_rows[start:start + page.page_size]

    def repage(self, page, forwarder, cookie):
        page.rows = self.slice(page)


class ServerSearch:
    """
    Delegate paging and search to the backend.

    Args:
        paging: 'page' sends page/limit, 'skip' sends skip/limit
        search_param: Query parameter carrying the search term
    """

    def __init__(self, paging='page', search_param='search_string'):
        self.paging = paging
        self.search_param = search_param

    def build_query(self, page):
        query = dict(page.extra_query)
        if self.paging == 'skip':
            query.update(page_to_query_params(page.current_page, page.page_size))
        else:
            query.update({'page': page.current_page, 'limit': page.page_size})
        if page.search_term:
            query[self.search_param] = page.search_term
        return {key: str(value) for key, value in query.items()}

    def fetch(self, page, forwarder, cookie):
        result = forwarder.forward(page.route, cookie=cookie, query=self.build_query(page))
        data = result.data
        rows = rows_from(data)
        if isinstance(data, dict):
            page.total_items = data.get('total') or len(rows)
            page.reported_total_pages = data.get('totalPages') or data.get('total_pages')
        else:
            page.total_items = len(rows)
            page.reported_total_pages = None
        page.rows = rows

    def repage(self, page, forwarder, cookie):
        self.fetch(page, forwarder, cookie)


class BatchSearch(ClientFilter):
    """
    Send the search term to the backend, fetch one batch of rows and page
    through it locally.

    For list endpoints that answer skip/limit with a bare list and no total,
    so the number of pages cannot be known from a single server page.

    Args:
        batch_size: Rows requested per load (skip is always 0)
        search_param: Query parameter carrying the search term
    """

    def __init__(self, batch_size=100, search_param='search_string'):
        super().__init__(())
        self.batch_size = batch_size
        self.search_param = search_param

    def build_query(self, page):
        query = dict(page.extra_query)
        query.update(page_to_query_params(1, self.batch_size))
        if page.search_term:
            query[self.search_param] = page.search_term
        return {key: str(value) for key, value in query.items()}

    def fetch(self, page, forwarder, cookie):
        result = forwarder.forward(page.route, cookie=cookie, query=self.build_query(page))
        rows = rows_from(result.data)
        page.total_items = len(rows)
        page.reported_total_pages = None
        page.all_rows = rows
        page.rows = self.slice(page)


class ListPage(ToastCollector):
    """
    Paging state and loader for one list page.

    `max_pages` caps the number of reachable pages when set.
    """

    def __init__(self, route, policy, page_size=None, max_pages=None, extra_query=None,
                 forwarder=None, cookie=None, error_message='Failed to load data'):
        super().__init__()
        self.route = route
        self.policy = policy
        self.page_size = page_size or default_page_size()
        self.max_pages = max_pages
        self.extra_query = dict(extra_query or {})
        self.forwarder = forwarder or BackendForwarder()
        self.cookie = cookie
        self.error_message = error_message

        self.state = ListState.IDLE
        self.current_page = 1
        self.search_term = ''
        self.rows = []
        self.all_rows = []
        self.total_items = 0
        self.reported_total_pages = None
        self.error = None

    @property
    def total_pages(self):
        if self.reported_total_pages:
            pages = int(self.reported_total_pages)
        else:
            pages = math.ceil(self.total_items / self.page_size) if self.page_size else 0
        if self.max_pages is not None:
            pages = min(pages, self.max_pages)
        return pages

    def clamp(self, page):
        return min(max(page, 1), max(self.total_pages, 1))

    def set_page(self, page):
        self.current_page = self.clamp(page)
        return self.current_page

    def set_search(self, term):
        self.search_term = (term or '').strip()
        self.current_page = 1

    def load(self):
        """
        Fetch the current page. A failed load keeps the previously loaded
        rows and records an error toast.
        """
        self.state = ListState.LOADING
        try:
            self.policy.fetch(self, self.forwarder, self.cookie)
            if self.current_page > max(self.total_pages, 1):
                self.current_page = self.clamp(self.current_page)
                self.policy.repage(self, self.forwarder, self.cookie)
        except ProxyError as e:
            if is_session_expired(e):
                raise
            logger.warning(f"Loading {self.route.name} failed: {e.message}")
            self.state = ListState.ERRORED
            self.error = e.message or self.error_message
            self.toast(ERROR, self.error_message)
            return self
        self.state = ListState.LOADED
        self.error = None
        return self

    def open(self, page=1, term=''):
        """First load for a request; an out-of-range page lands on the last one"""
        self.search_term = (term or '').strip()
        self.current_page = max(page, 1)
        return self.load()

    def go_to(self, page):
        self.set_page(page)
        return self.load()

    def search(self, term):
        self.set_search(term)
        return self.load()

    @property
    def meta(self):
        return calculate_pagination_meta(self.current_page, self.page_size, self.total_items)

    @property
    def window(self):
        return page_window(self.current_page, self.total_pages)
