import base64
import binascii
import functools
import logging
from urllib.parse import urlencode

from django import forms
from django.contrib import messages
from django.http import Http404, HttpResponse, HttpResponseRedirect
from django.shortcuts import render
from django.urls import reverse
from django.utils.dateparse import parse_date
from django.utils.http import url_has_allowed_host_and_scheme
from django.views.decorators.http import require_http_methods, require_POST

from posdash.core.errors import ProxyError, is_session_expired
from posdash.core.forwarder import BackendForwarder
from posdash.core.pagination import ELLIPSIS, get_page_number, get_page_size, page_size_options
from posdash.core.session import clear_session_cookie, get_session_context, login_redirect, set_session_cookie
from posdash.core.views import backend_login, backend_logout, session_token_from
from posdash.inventory import routes as inventory_routes
from posdash.parties import routes as party_routes
from posdash.pos import routes as pos_routes
from posdash.pos.views import day_summary
from posdash.reports import routes as report_routes

from . import notifications
from .crud import ROLE_CHOICES, CrudController
from .pages import RESOURCES, form_for
from .stock_adjust import StockAdjustmentSession, to_int

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = 'Session expired. Please log in again.'
HOME_URL = '/dashboard/'


def redirect_on_session_expired(view):
    """Turn a backend 401 into a fresh login: drop the cookie and send the browser to /login/"""
    @functools.wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except ProxyError as e:
            if not is_session_expired(e):
                raise
            logger.info(f"Backend rejected the session on {request.path}")
            messages.error(request, SESSION_EXPIRED_MESSAGE)
            return clear_session_cookie(login_redirect(request.get_full_path()))
    return wrapper


def get_resource_or_404(slug):
    try:
        return RESOURCES[slug]
    except KeyError:
        raise Http404(f"Unknown page {slug}")


def cookie_for(request):
    return get_session_context(request).cookie


# Login / logout
class LoginForm(forms.Form):
    username = forms.CharField(max_length=150)
    password = forms.CharField(widget=forms.PasswordInput)
    role = forms.ChoiceField(choices=ROLE_CHOICES, initial='admin')


def safe_next(request, candidate):
    if candidate and url_has_allowed_host_and_scheme(
        candidate, allowed_hosts={request.get_host()}, require_https=request.is_secure(),
    ):
        return candidate
    return HOME_URL


@require_http_methods(['GET', 'POST'])
def login_view(request):
    next_url = request.POST.get('next') or request.GET.get('next') or ''
    form = LoginForm(request.POST or None)

    if request.method == 'POST' and form.is_valid():
        data = form.cleaned_data
        try:
            result = backend_login(data['username'], data['password'], data['role'], cookie=cookie_for(request))
        except ProxyError as e:
            logger.warning(f"Login failed for {data['username']}: {e.message}")
            messages.error(request, e.message or 'Login failed')
        else:
            token = session_token_from(result)
            if token:
                logger.info(f"User {data['username']} logged in")
                return set_session_cookie(HttpResponseRedirect(safe_next(request, next_url)), token)
            messages.error(request, 'Login failed')

    return render(request, 'dashboard/login.html', {'form': form, 'next': next_url})


@require_http_methods(['GET', 'POST'])
def logout_view(request):
    backend_logout(cookie_for(request))
    messages.info(request, 'Logged out successfully')
    return clear_session_cookie(HttpResponseRedirect(reverse('dashboard-login')))


# Dashboard home
def load_figures(forwarder, route, cookie, toasts, query=None, path_params=None, missing_ok=False):
    """Backend data for one panel, or None after a toast. `missing_ok` treats a 404 as no data yet."""
    try:
        return forwarder.forward(route, cookie=cookie, path_params=path_params, query=query).data
    except ProxyError as e:
        if is_session_expired(e):
            raise
        if missing_ok and e.status_code == 404:
            return None
        logger.warning(f"Loading {route.name} failed: {e.message}")
        toasts.toast(notifications.ERROR, e.message or 'Failed to load dashboard data')
        return None


@redirect_on_session_expired
@require_http_methods(['GET'])
def home(request):
    forwarder = BackendForwarder()
    cookie = cookie_for(request)
    toasts = notifications.ToastCollector()

    summary_query = {
        key: request.GET[key] for key in ('from_date', 'to_date', 'branch') if request.GET.get(key)
    }
    stats = load_figures(forwarder, report_routes.DASHBOARD_STATS, cookie, toasts)
    summary = load_figures(forwarder, report_routes.SALES_SUMMARY, cookie, toasts, query=summary_query)
    notifications.push(request, toasts.drain())

    return render(request, 'dashboard/home.html', {
        'stats': stats if isinstance(stats, dict) else {},
        'summary': summary if isinstance(summary, dict) else {},
        'summary_query': summary_query,
    })


# Resource list pages
def list_url(slug, page=None, term='', limit=None):
    query = {}
    if page and page > 1:
        query['page'] = page
    if term:
        query['q'] = term
    if limit:
        query['limit'] = limit
    url = reverse('dashboard-resource-list', kwargs={'slug': slug})
    return f"{url}?{urlencode(query)}" if query else url


def page_links(slug, list_page):
    links = []
    for number in list_page.window:
        if number == ELLIPSIS:
            links.append({'ellipsis': True})
            continue
        links.append({
            'number': number,
            'current': number == list_page.current_page,
            'url': list_url(slug, number, list_page.search_term, list_page.page_size),
        })
    return links


def render_list(request, resource, form=None, editing=None, status=200):
    page = resource.list_page(cookie=cookie_for(request), page_size=get_page_size(request.GET.get('limit')))
    page.open(get_page_number(request.GET.get('page')), request.GET.get('q', ''))
    notifications.push(request, page.drain())

    editing = editing or request.GET.get('edit')
    if resource.editable and form is None:
        record = None
        if editing:
            record = next((row for row in page.rows if str(resource.record_id(row)) == str(editing)), None)
            if record is None:
                editing = None
        if record is not None or resource.creatable:
            form = form_for(resource, record)

    rows = [{'id': resource.record_id(row), 'cells': resource.cells(row)} for row in page.rows]
    context = {
        'resource': resource,
        'page': page,
        'rows': rows,
        'meta': page.meta,
        'links': page_links(resource.slug, page),
        'prev_url': list_url(resource.slug, page.current_page - 1, page.search_term, page.page_size),
        'next_url': list_url(resource.slug, page.current_page + 1, page.search_term, page.page_size),
        'page_size_options': page_size_options(),
        'form': form,
        'editing': editing,
    }
    return render(request, 'dashboard/list.html', context, status=status)


@redirect_on_session_expired
@require_http_methods(['GET'])
def resource_list(request, slug):
    return render_list(request, get_resource_or_404(slug))


@redirect_on_session_expired
@require_POST
def resource_save(request, slug):
    """Create or update one record, then return to the list it came from"""
    resource = get_resource_or_404(slug)
    if not resource.editable:
        raise Http404(f"{resource.title} are read-only")

    record_id = request.POST.get('record_id') or None
    if record_id is None and not resource.creatable:
        raise Http404(f"{resource.title} cannot be created here")
    controller = CrudController(resource, cookie=cookie_for(request))
    outcome = controller.submit(request.POST, record_id=record_id)
    notifications.push(request, controller.drain())

    if outcome.success:
        return HttpResponseRedirect(list_url(slug, get_page_number(request.POST.get('page')), request.POST.get('q', '')))
    return render_list(request, resource, form=outcome.form, editing=record_id, status=400)


@redirect_on_session_expired
@require_http_methods(['GET', 'POST'])
def resource_delete(request, slug, pk):
    """GET asks for confirmation; only a confirmed POST reaches the backend"""
    resource = get_resource_or_404(slug)
    if resource.delete_route is None:
        raise Http404(f"{resource.title} cannot be deleted")

    if request.method == 'GET':
        return render(request, 'dashboard/confirm_delete.html', {'resource': resource, 'record_id': pk})

    controller = CrudController(resource, cookie=cookie_for(request))
    controller.delete(pk, confirmed=request.POST.get('confirm') == 'yes')
    notifications.push(request, controller.drain())
    return HttpResponseRedirect(list_url(slug))


# Stock adjustment
def apply_line_fields(adjustment, data):
    for index in range(len(adjustment.items)):
        adjustment.update_item(
            index,
            action=data.get(f'action-{index}'),
            quantity=data.get(f'quantity-{index}'),
            reason=data.get(f'reason-{index}'),
        )


@redirect_on_session_expired
@require_http_methods(['GET', 'POST'])
def stock_adjust(request):
    adjustment = StockAdjustmentSession.load(request.session, cookie=cookie_for(request))

    if request.method == 'GET':
        return render(request, 'dashboard/stock_adjust.html', {'items': adjustment.items})

    # Row remove buttons post their index as "remove"
    action = request.POST.get('action') or ('remove' if 'remove' in request.POST else None)
    if action == 'scan':
        apply_line_fields(adjustment, request.POST)
        adjustment.scan(request.POST.get('barcode'))
    elif action == 'update':
        apply_line_fields(adjustment, request.POST)
    elif action == 'remove':
        apply_line_fields(adjustment, request.POST)
        index = to_int(request.POST.get('remove'), -1)
        if 0 <= index < len(adjustment.items):
            adjustment.remove_item(index)
    elif action == 'clear':
        adjustment.clear()
    elif action == 'submit':
        apply_line_fields(adjustment, request.POST)
        adjustment.submit()
    else:
        return HttpResponse('Unknown action', status=400)

    adjustment.save(request.session)
    notifications.push(request, adjustment.drain())
    return HttpResponseRedirect(reverse('dashboard-stock-adjust'))


# Walk-in invoices and the day's cash
class CashEntryForm(forms.Form):
    amount = forms.DecimalField(min_value=0, decimal_places=2)
    notes = forms.CharField(max_length=500, required=False)


CASH_ROUTES = {
    'opening': pos_routes.OPENING_CASH,
    'closing': pos_routes.CLOSING_CASH,
}


def parse_day(value):
    try:
        day = parse_date(value or '')
    except ValueError:
        day = None
    return day.isoformat() if day else pos_routes.today()


def walkin_url(day):
    return f"{reverse('dashboard-walkin-day')}?{urlencode({'date': day})}"


def closing_message(result):
    """Toast text for a recorded closing, with the reconciliation the backend computed"""
    result = result if isinstance(result, dict) else {}
    message = (
        f"Closing balance recorded. Opening: Rs. {result.get('opening', 0)}, "
        f"Cash sales: Rs. {result.get('sales', 0)}, Expected: Rs. {result.get('expected', 0)}, "
        f"Closing: Rs. {result.get('closing', 0)}"
    )
    difference = float(result.get('difference') or 0)
    if difference:
        return f"{message}, Difference: Rs. {abs(difference):g} ({'Extra' if difference > 0 else 'Short'})"
    return f"{message}. Balanced."


def record_cash(request, forwarder, cookie):
    action = request.POST.get('action')
    route = CASH_ROUTES.get(action)
    if route is None:
        return HttpResponse('Unknown action', status=400)

    day = pos_routes.today()
    form = CashEntryForm(request.POST)
    if not form.is_valid():
        messages.error(request, 'Please enter a valid amount')
        return HttpResponseRedirect(walkin_url(day))

    payload = {
        'date': day,
        'amount': float(form.cleaned_data['amount']),
        'notes': form.cleaned_data.get('notes') or '',
    }
    try:
        result = forwarder.forward(route, cookie=cookie, data=payload)
    except ProxyError as e:
        if is_session_expired(e):
            raise
        logger.warning(f"Saving {action} cash for {day} failed: {e.message}")
        messages.error(request, e.message or f"Failed to save {action}")
    else:
        logger.info(f"Recorded {action} cash for {day}")
        if action == 'opening':
            messages.success(request, 'Opening balance has been recorded.')
        else:
            messages.success(request, closing_message(result.data))
    return HttpResponseRedirect(walkin_url(day))


@redirect_on_session_expired
@require_http_methods(['GET', 'POST'])
def walkin_day(request):
    """
    Walk-in sales for one date (?date=YYYY-MM-DD, today by default) next to
    that day's cash opening and closing. POST records today's opening or
    closing amount.
    """
    forwarder = BackendForwarder()
    cookie = cookie_for(request)
    if request.method == 'POST':
        return record_cash(request, forwarder, cookie)

    day = parse_day(request.GET.get('date'))
    toasts = notifications.ToastCollector()
    sales = load_figures(forwarder, pos_routes.WALKIN_BY_DATE, cookie, toasts, path_params={'date': day})
    # No daily-cash record yet means the day has not been opened
    cash = load_figures(
        forwarder, pos_routes.DAILY_CASH, cookie, toasts, path_params={'date': day}, missing_ok=True,
    )
    notifications.push(request, toasts.drain())

    cash = cash if isinstance(cash, dict) else {}
    found = bool(cash.get('found'))
    return render(request, 'dashboard/walkin_day.html', {
        'date': day,
        'is_today': day == pos_routes.today(),
        'summary': day_summary(sales if isinstance(sales, dict) else None),
        'cash': cash,
        'opened': found and float(cash.get('cash_opening') or 0) > 0,
        'closed': found and cash.get('cash_closing') is not None,
        'form': CashEntryForm(),
    })


# Report downloads
def pdf_response(request, route, query, filename, fallback_url):
    """Fetch a base64 report from the backend and serve it as a PDF download"""
    try:
        result = BackendForwarder().forward(route, cookie=cookie_for(request), query=query)
    except ProxyError as e:
        if is_session_expired(e):
            raise
        logger.warning(f"Report {route.name} failed: {e.message}")
        messages.error(request, e.message or 'Failed to generate report')
        return HttpResponseRedirect(fallback_url)

    encoded = result.data.get('pdf') if isinstance(result.data, dict) else result.data
    try:
        content = base64.b64decode(encoded or '', validate=True)
    except (binascii.Error, TypeError, ValueError):
        logger.error(f"Report {route.name} returned data that is not base64")
        messages.error(request, 'Failed to generate report')
        return HttpResponseRedirect(fallback_url)

    response = HttpResponse(content, content_type='application/pdf')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


@redirect_on_session_expired
@require_http_methods(['GET'])
def stock_in_report(request):
    date_from = request.GET.get('date_from', '')
    date_to = request.GET.get('date_to', '')
    query = {key: value for key, value in (('date_from', date_from), ('date_to', date_to)) if value}
    return pdf_response(
        request, inventory_routes.STOCK_IN_REPORT, query,
        f'stock-in-report_{date_from}_{date_to}.pdf', list_url('stock'),
    )


@redirect_on_session_expired
@require_http_methods(['GET'])
def vendor_report(request):
    return pdf_response(request, party_routes.VENDOR_REPORT, None, 'vendor-report.pdf', list_url('vendors'))
