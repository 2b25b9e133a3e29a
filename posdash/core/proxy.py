"""
Glue between inbound DRF requests and the backend forwarder.
"""
from django.http import HttpResponse, QueryDict
from rest_framework.response import Response

from .errors import ProxyError
from .forwarder import BackendForwarder
from .routes import BODY_MULTIPART, BODY_NONE
from .session import get_session_context


def request_body(request, route):
    """Returns (data, files) for the outbound call"""
    if route.body == BODY_NONE:
        return None, None

    if route.body == BODY_MULTIPART:
        fields = {key: request.data.get(key) for key in request.data.keys() if key not in request.FILES}
        files = {key: (f.name, f.read(), f.content_type) for key, f in request.FILES.items()}
        return fields, files or None

    data = request.data
    if isinstance(data, QueryDict):
        data = data.dict()
    if not data and not isinstance(data, list):
        return None, None
    return data, None


def forward_request(request, route, query=None, data=None, transform=None, error_extra=None, **path_params):
    """
    Forward `request` to `route` and build the browser response.

    Args:
        query: Overrides the inbound query parameters
        data: Overrides the inbound body
        transform: Callable applied to the parsed backend JSON before relaying
        error_extra: Keys merged into the error envelope if the call fails
    """
    context = get_session_context(request)
    if data is None:
        data, files = request_body(request, route)
    else:
        files = None

    try:
        result = BackendForwarder().forward(
            route,
            cookie=context.cookie,
            path_params=path_params,
            query=request.query_params if query is None else query,
            data=data,
            files=files,
        )
    except ProxyError as e:
        if error_extra:
            e.extra.update(error_extra)
        raise

    if result.is_text:
        return HttpResponse(result.data, status=result.status_code, content_type='text/plain; charset=utf-8')

    payload = result.data
    if transform is not None:
        payload = transform(payload)
    return Response(payload, status=result.status_code)
