"""
Page arithmetic shared by the list pages.
"""
import math

from django.conf import settings

ELLIPSIS = '...'


def default_page_size():
    return getattr(settings, 'DEFAULT_PAGE_SIZE', 8)


def max_page_size():
    return getattr(settings, 'MAX_PAGE_SIZE', 100)


def page_size_options():
    return getattr(settings, 'PAGE_SIZE_OPTIONS', [8, 10, 20, 50])


def page_to_query_params(page=1, limit=None):
    """Convert a 1-based page into the skip/limit pair the backend expects"""
    if limit is None:
        limit = default_page_size()
    return {'skip': (page - 1) * limit, 'limit': limit}


def calculate_pagination_meta(current_page, page_size, total):
    total_pages = math.ceil(total / page_size) if page_size else 0
    return {
        'current_page': current_page,
        'page_size': page_size,
        'total': total,
        'total_pages': total_pages,
        'has_next_page': current_page < total_pages,
        'has_prev_page': current_page > 1,
        'start_item_index': (current_page - 1) * page_size + 1,
        'end_item_index': min(current_page * page_size, total),
    }


def get_page_size(value=None):
    """
    Page size from a query string value, falling back to DEFAULT_PAGE_SIZE.

    Values below 1 (or unparseable) use the default; values above the
    maximum are capped.
    """
    if value in (None, ''):
        return default_page_size()
    try:
        page_size = int(value)
    except (TypeError, ValueError):
        return default_page_size()
    if page_size < 1:
        return default_page_size()
    return min(page_size, max_page_size())


def get_page_number(value=None):
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    return max(page, 1)


def page_window(current_page, total_pages, delta=2):
    """
    Page numbers to render around the current page, e.g.
    page_window(6, 10) -> [1, '...', 4, 5, 6, 7, 8, '...', 10]
    """
    if total_pages <= 1:
        return [1]

    middle = list(range(max(2, current_page - delta), min(total_pages - 1, current_page + delta) + 1))

    window = [1]
    if current_page - delta > 2:
        window.append(ELLIPSIS)
    window.extend(middle)
    if current_page + delta < total_pages - 1:
        window.append(ELLIPSIS)
    window.append(total_pages)
    return window
