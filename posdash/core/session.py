"""
Per-request session context.

The backend owns authentication; the gateway only carries the backend's
`session_token` cookie between the browser and the backend.
"""
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlencode

from django.conf import settings
from django.http import HttpResponseRedirect

logger = logging.getLogger(__name__)


def session_cookie_name():
    return getattr(settings, 'SESSION_TOKEN_COOKIE', 'session_token')


@dataclass(frozen=True)
class SessionContext:
    """Inbound Cookie header and the session token found in it"""
    cookie_header: str = ''
    session_token: Optional[str] = None

    @classmethod
    def from_request(cls, request):
        return cls(
            cookie_header=request.META.get('HTTP_COOKIE', ''),
            session_token=request.COOKIES.get(session_cookie_name()) or None,
        )

    @property
    def is_authenticated(self):
        return bool(self.session_token)

    @property
    def cookie(self):
        return self.cookie_header or None


def get_session_context(request):
    context = getattr(request, 'session_context', None)
    if context is None:
        context = SessionContext.from_request(request)
        request.session_context = context
    return context


def is_protected_path(path):
    for prefix in getattr(settings, 'PROTECTED_PATH_PREFIXES', []):
        if path == prefix or path.startswith(prefix.rstrip('/') + '/'):
            return True
    return False


def set_session_cookie(response, token):
    response.set_cookie(
        session_cookie_name(),
        token,
        max_age=getattr(settings, 'SESSION_TOKEN_MAX_AGE', 60 * 60 * 24),
        path='/',
        secure=getattr(settings, 'SESSION_TOKEN_SECURE', not settings.DEBUG),
        httponly=True,
        samesite='Lax',
    )
    return response


def clear_session_cookie(response):
    response.delete_cookie(session_cookie_name(), path='/', samesite='Lax')
    return response


def login_redirect(next_path=None):
    url = getattr(settings, 'LOGIN_URL', '/login/')
    if next_path:
        url = f"{url}?{urlencode({'next': next_path})}"
    return HttpResponseRedirect(url)


class SessionContextMiddleware:
    """
    Attaches `request.session_context` and keeps anonymous browsers out of
    the dashboard pages. `/api/` routes are never redirected.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        context = SessionContext.from_request(request)
        request.session_context = context

        if not context.is_authenticated and is_protected_path(request.path):
            logger.info(f"No session cookie for {request.path}, redirecting to login")
            return login_redirect(request.get_full_path())

        return self.get_response(request)
