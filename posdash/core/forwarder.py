"""
Request forwarder: relays one browser request to the backend API.

The forwarder keeps no state between calls. It copies the inbound Cookie
header, builds the backend URL from the route table, applies the route
timeout and turns every failure into a ProxyError carrying the normalized
error envelope.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Optional
from urllib.parse import urlencode

import requests
from django.conf import settings

from .errors import (
    BackendTimeout, BackendUnavailable, InvalidBackendResponse,
    MissingParameter, backend_error_from_response,
)
from .routes import BODY_JSON, BODY_MULTIPART, RESPONSE_TEXT

logger = logging.getLogger(__name__)

DEFAULT_BACKEND_URL = 'http://localhost:8000'


def get_backend_base_url():
    base_url = getattr(settings, 'BACKEND_API_BASE_URL', '') or DEFAULT_BACKEND_URL
    return base_url.rstrip('/')


@dataclass
class BackendResult:
    """A successful (2xx) backend answer"""
    status_code: int
    data: Any
    content_type: str = 'application/json'
    cookies: Optional[requests.cookies.RequestsCookieJar] = None

    @property
    def is_text(self):
        return not self.content_type.startswith('application/json')


class BackendForwarder:
    """
    Forwards requests described by a `BackendRoute` to the backend.

    Args:
        base_url: Backend base address; defaults to settings.BACKEND_API_BASE_URL
        retry_delay: Base delay (seconds) for exponential backoff on retried routes
    """

    def __init__(self, base_url=None, retry_delay=None):
        self.base_url = (base_url or get_backend_base_url()).rstrip('/')
        if retry_delay is None:
            retry_delay = getattr(settings, 'PROXY_RETRY_DELAY', 1.0)
        self.retry_delay = retry_delay

    def build_url(self, route, path_params=None, query=None):
        url = f"{self.base_url}/{route.resolve_path(path_params).lstrip('/')}"
        pairs = route.build_query(query)
        if pairs:
            url = f"{url}?{urlencode(pairs)}"
        return url

    def build_headers(self, route, cookie=None):
        headers = {}
        if route.body != BODY_MULTIPART:
            headers['Content-Type'] = 'application/json'
        if cookie:
            headers['Cookie'] = cookie
        return headers

    def check_required(self, route, query):
        query = query or {}
        missing = [key for key in route.required_query if not query.get(key)]
        if not missing:
            return
        required = route.required_query
        if len(required) == 1:
            message = f"{required[0].capitalize()} parameter is required"
        else:
            message = f"{', '.join(required[:-1])} and {required[-1]} are required"
        raise MissingParameter(message)

    def forward(self, route, cookie=None, path_params=None, query=None, data=None, files=None):
        """
        Send the request and return a BackendResult for 2xx answers.

        Raises:
            MissingParameter: a required query parameter is absent
            BackendTimeout: the backend did not answer within the route timeout
            BackendUnavailable: the backend could not be reached
            BackendError: the backend answered with a non-2xx status
            InvalidBackendResponse: a 2xx JSON route answered with something else
        """
        self.check_required(route, query)

        url = self.build_url(route, path_params, query)
        kwargs = {
            'headers': self.build_headers(route, cookie),
            'timeout': route.resolve_timeout(),
        }
        if route.body == BODY_JSON and data is not None:
            kwargs['json'] = route.map_body(data)
        elif route.body == BODY_MULTIPART:
            kwargs['data'] = data or {}
            if files:
                kwargs['files'] = files

        response = self._send(route, url, kwargs)
        return self._read_response(route, url, response)

    def _send(self, route, url, kwargs):
        attempt = 0
        while True:
            logger.info(f"Forwarding {route.method} {url} ({route.name})")
            try:
                response = requests.request(route.method, url, **kwargs)
            except requests.exceptions.Timeout:
                logger.error(f"Backend timeout after {kwargs['timeout']}s: {route.method} {url}")
                raise BackendTimeout()
            except requests.exceptions.RequestException as e:
                if attempt < route.retries:
                    self._backoff(route, url, attempt, str(e))
                    attempt += 1
                    continue
                logger.error(f"Backend unreachable for {route.method} {url}: {str(e)}")
                raise BackendUnavailable(details=str(e))

            if response.status_code >= 500 and attempt < route.retries:
                self._backoff(route, url, attempt, f"status {response.status_code}")
                attempt += 1
                continue
            return response

    def _backoff(self, route, url, attempt, reason):
        delay = self.retry_delay * (2 ** attempt)
        logger.warning(f"Retrying {route.method} {url} in {delay}s after {reason} (attempt {attempt + 1}/{route.retries})")
        time.sleep(delay)

    def _read_response(self, route, url, response):
        if not response.ok:
            error = backend_error_from_response(response)
            logger.warning(f"Backend returned {response.status_code} for {route.method} {url}: {error.message}")
            raise error

        if route.response == RESPONSE_TEXT:
            return BackendResult(response.status_code, response.text, 'text/plain', response.cookies)

        if not response.content:
            return BackendResult(response.status_code, None, cookies=response.cookies)

        try:
            data = response.json()
        except ValueError:
            logger.warning(f"Non-JSON response from backend for {route.method} {url}")
            raise InvalidBackendResponse(details=response.text)
        return BackendResult(response.status_code, data, cookies=response.cookies)
