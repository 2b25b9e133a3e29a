"""
Error normalization for proxied requests.

Every failure between the browser and the backend (connection problems,
timeouts, non-2xx responses with or without a JSON body) ends up as the same
envelope shape:

    {"error": str, "status"?: int, "details"?: str, "type"?: "TIMEOUT"}
"""
import json
import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response

logger = logging.getLogger(__name__)

DEFAULT_BACKEND_ERROR = 'Backend request failed'


class ProxyError(Exception):
    """Base class for failures surfaced to the browser as an error envelope"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Internal server error'
    error_type = None
    include_status = True

    def __init__(self, message=None, status_code=None, details=None, extra=None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        self.details = details
        self.extra = dict(extra or {})
        super().__init__(self.message)

    def to_envelope(self):
        envelope = {'error': self.message}
        if self.include_status:
            envelope['status'] = self.status_code
        if self.details:
            envelope['details'] = self.details
        if self.error_type:
            envelope['type'] = self.error_type
        envelope.update(self.extra)
        return envelope


class BackendError(ProxyError):
    """Backend answered with a non-2xx status"""
    default_message = DEFAULT_BACKEND_ERROR


class BackendTimeout(ProxyError):
    status_code = status.HTTP_504_GATEWAY_TIMEOUT
    default_message = 'Request timeout. Please try again.'
    error_type = 'TIMEOUT'


class BackendUnavailable(ProxyError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = 'Backend unavailable'


class InvalidBackendResponse(ProxyError):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_message = 'Backend returned non-JSON response'


class MissingParameter(ProxyError):
    status_code = status.HTTP_400_BAD_REQUEST
    include_status = False


def _detail_to_text(detail):
    # FastAPI validation errors arrive as a list of {"loc", "msg", "type"}
    if isinstance(detail, list):
        messages = [item.get('msg') if isinstance(item, dict) else str(item) for item in detail]
        return '; '.join(m for m in messages if m)
    if isinstance(detail, dict):
        return detail.get('message') or json.dumps(detail)
    return str(detail)


def parse_error_body(text):
    """
    Pull a human readable message out of a backend error body.

    Returns a tuple (message, is_json). `detail` wins over `message`; a body
    that is not JSON is returned as-is.
    """
    if not text:
        return None, False
    try:
        payload = json.loads(text)
    except ValueError:
        return text.strip() or None, False

    if isinstance(payload, dict):
        for key in ('detail', 'message', 'error'):
            value = payload.get(key)
            if value:
                return _detail_to_text(value), True
    return None, True


def extract_error_message(text, default=DEFAULT_BACKEND_ERROR):
    message, _ = parse_error_body(text)
    return message or default


def backend_error_from_response(response, extra=None):
    """Build a BackendError for a non-2xx `requests` response"""
    text = response.text or ''
    message, is_json = parse_error_body(text)
    return BackendError(
        message=message or DEFAULT_BACKEND_ERROR,
        status_code=response.status_code,
        details=None if is_json else text or None,
        extra=extra,
    )


def is_session_expired(exc):
    """The backend rejected the session cookie"""
    return isinstance(exc, ProxyError) and exc.status_code == status.HTTP_401_UNAUTHORIZED


def error_response(exc):
    return Response(exc.to_envelope(), status=exc.status_code)


def proxy_exception_handler(exc, context):
    """
    DRF exception handler rendering every failure as an error envelope.

    Unexpected exceptions are logged with their traceback and reported as a
    500 so the caller always receives JSON.
    """
    if isinstance(exc, ProxyError):
        return error_response(exc)

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, PermissionDenied):
        exc = exceptions.PermissionDenied()

    if isinstance(exc, exceptions.APIException):
        detail = exc.detail
        if isinstance(detail, (list, dict)):
            message = exc.default_detail
            details = json.dumps(detail)
        else:
            message = str(detail)
            details = None
        envelope = {'error': str(message), 'status': exc.status_code}
        if details:
            envelope['details'] = details
        response = Response(envelope, status=exc.status_code)
        if getattr(exc, 'wait', None):
            response['Retry-After'] = str(int(exc.wait))
        return response

    view = context.get('view')
    logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'proxy view'}: {str(exc)}")
    return Response(
        {'error': 'Internal server error', 'details': str(exc)},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
