import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from . import routes
from .errors import ProxyError
from .forwarder import BackendForwarder
from .proxy import forward_request
from .session import clear_session_cookie, get_session_context, session_cookie_name, set_session_cookie

logger = logging.getLogger(__name__)


def backend_login(username, password, role=None, cookie=None):
    """
    Forward credentials to the backend session login.

    Returns the BackendResult; the backend-issued session token (if any) is
    available in `result.cookies`.
    """
    return BackendForwarder().forward(
        routes.SESSION_LOGIN,
        cookie=cookie,
        data={'username': username, 'password': password, 'role': role},
    )


def backend_logout(cookie):
    """Best-effort logout; failures are logged and otherwise ignored"""
    if not cookie:
        return
    try:
        BackendForwarder().forward(routes.LOGOUT, cookie=cookie)
    except ProxyError as e:
        logger.warning(f"Backend logout failed: {e.message}")


def session_token_from(result):
    if result.cookies is None:
        return None
    return result.cookies.get(session_cookie_name())


# Auth endpoints
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Log in against the backend and hand its session cookie to the browser"""
    data = request.data
    result = backend_login(
        data.get('username'),
        data.get('password'),
        data.get('role'),
        cookie=get_session_context(request).cookie,
    )
    response = Response(result.data, status=result.status_code)
    token = session_token_from(result)
    if token:
        set_session_cookie(response, token)
    else:
        logger.warning("Backend login succeeded without issuing a session cookie")
    return response


@api_view(['POST'])
@permission_classes([AllowAny])
def logout(request):
    backend_logout(get_session_context(request).cookie)
    response = Response({'message': 'Logged out successfully'})
    return clear_session_cookie(response)


@api_view(['GET'])
@permission_classes([AllowAny])
def session(request):
    return forward_request(request, routes.CURRENT_USER)


# User endpoints
@api_view(['GET'])
def user_list(request):
    return forward_request(request, routes.LIST_USERS)


# Administration endpoints
@api_view(['POST'])
def create_admin(request):
    return forward_request(request, routes.CREATE_ADMIN)


@api_view(['GET'])
def view_admins(request):
    return forward_request(request, routes.VIEW_ADMINS)


@api_view(['PUT'])
def update_admin(request, pk):
    return forward_request(request, routes.UPDATE_ADMIN, id=pk)


@api_view(['DELETE', 'POST'])
def delete_admin(request, pk):
    return forward_request(request, routes.DELETE_ADMIN, id=pk)


@api_view(['GET'])
def admin_view_vendors(request):
    return forward_request(request, routes.ADMIN_VIEW_VENDORS)


@api_view(['POST', 'DELETE'])
def admin_delete_vendor(request, pk):
    return forward_request(request, routes.ADMIN_DELETE_VENDOR, id=pk)


@api_view(['GET'])
def customer_vendor_by_branch(request):
    return forward_request(request, routes.CUSTOMER_VENDOR_BY_BRANCH)


@api_view(['GET'])
def test_backend(request):
    """Connectivity probe against the backend"""
    try:
        result = BackendForwarder().forward(
            routes.BACKEND_PROBE, cookie=get_session_context(request).cookie,
        )
    except ProxyError as e:
        logger.error(f"Backend connectivity check failed: {e.message}")
        e.extra.update({'success': False})
        raise
    return Response({
        'success': True,
        'status': result.status_code,
        'data': result.data,
        'message': 'Connection successful',
    }, status=status.HTTP_200_OK)
