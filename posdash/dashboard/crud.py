"""
Create/update/delete cycle for the dashboard resources.

Each resource has a Django form that enforces its required fields and builds
the payload the backend expects. `CrudController` runs one submit or delete
through the forwarder and reports the outcome as toasts.
"""
import json
import logging
import time
from dataclasses import dataclass
from typing import Optional

from django import forms
from django.utils import timezone

from posdash.core.errors import ProxyError, is_session_expired
from posdash.core.forwarder import BackendForwarder

from .notifications import ERROR, SUCCESS, ToastCollector

logger = logging.getLogger(__name__)


class PayloadForm(forms.Form):
    """A form whose cleaned data becomes a backend request body"""

    def to_payload(self):
        return dict(self.cleaned_data)

    @classmethod
    def initial_from(cls, record):
        """Form initial values for editing an existing backend record"""
        return {name: record.get(name) for name in cls.base_fields}


class BrandForm(PayloadForm):
    name = forms.CharField(max_length=255)


class CategoryForm(PayloadForm):
    name = forms.CharField(max_length=255)
    branch = forms.CharField(max_length=255)


class ExpenseForm(PayloadForm):
    expense = forms.CharField(max_length=255)
    expense_type = forms.CharField(max_length=255)
    amount = forms.DecimalField(min_value=0, decimal_places=2)
    branch = forms.CharField(max_length=255)
    date = forms.DateField(required=False)

    def to_payload(self):
        data = self.cleaned_data
        expense_date = data.get('date') or timezone.now().date()
        return {
            'expense_type': data['expense_type'],
            'expense': data['expense'],
            'amount': float(data['amount']),
            'expense_date': expense_date.isoformat(),
            'branch': data['branch'],
        }

    @classmethod
    def initial_from(cls, record):
        return {
            'expense': record.get('expense'),
            'expense_type': record.get('expense_type'),
            'amount': record.get('amount'),
            'branch': record.get('branch'),
            'date': record.get('expense_date'),
        }


class VendorForm(PayloadForm):
    ven_name = forms.CharField(max_length=255, label='Name')
    ven_phone = forms.CharField(max_length=50, label='Phone')
    ven_address = forms.CharField(max_length=500, label='Address')
    branch = forms.CharField(max_length=255, required=False)

    def to_payload(self):
        data = self.cleaned_data
        # The backend stores contact details as a JSON string
        contacts = {'phone': data['ven_phone'], 'email': '', 'address': data['ven_address']}
        return {
            'name': data['ven_name'],
            'contacts': json.dumps(contacts),
            'branch': data.get('branch') or None,
        }


class CustomerForm(PayloadForm):
    cus_name = forms.CharField(max_length=255, label='Name')
    cus_phone = forms.CharField(max_length=50, label='Phone')
    cus_address = forms.CharField(max_length=500, required=False, label='Address')
    cus_cnic = forms.CharField(max_length=50, required=False, label='CNIC')
    cus_sal_id_fk = forms.CharField(max_length=50, required=False, label='Salesman')
    branch = forms.CharField(max_length=255, required=False)

    def to_payload(self):
        data = self.cleaned_data
        address = data.get('cus_address') or ''
        street = json.dumps({'street': address, 'city': '', 'country': ''})
        return {
            'name': data['cus_name'],
            'contacts': json.dumps({'phone': data['cus_phone'], 'email': '', 'address': address}),
            'billing_addr': street,
            'shipping_addr': street,
            'cnic': data.get('cus_cnic') or '',
            'sal_id_fk': data.get('cus_sal_id_fk') or None,
            'branch': data.get('branch') or None,
        }


class SalesmanForm(PayloadForm):
    name = forms.CharField(max_length=255)
    code = forms.CharField(max_length=50)
    phone = forms.CharField(max_length=50, required=False)
    address = forms.CharField(max_length=500, required=False)
    branch = forms.CharField(max_length=255, required=False)
    commission_rate = forms.DecimalField(min_value=0, max_value=100, decimal_places=2, required=False,
                                         label='Commission (%)')

    def to_payload(self):
        data = self.cleaned_data
        return {
            'name': data['name'],
            'code': data['code'],
            'phone': data.get('phone') or '',
            'address': data.get('address') or '',
            'branch': data.get('branch') or '',
            'commission_rate': float(data.get('commission_rate') or 0),
        }


INVOICE_STATUS_CHOICES = [
    ('PENDING', 'Pending'), ('DELIVERED', 'Delivered'), ('COMPLETED', 'Completed'), ('CANCEL', 'Cancelled'),
]


class CustomerInvoiceForm(PayloadForm):
    """Edits an existing customer order; the update route renames the fields for the backend"""
    customer = forms.CharField(max_length=255)
    total_amount = forms.DecimalField(min_value=0, decimal_places=2)
    note = forms.CharField(widget=forms.Textarea, required=False)
    status = forms.ChoiceField(choices=INVOICE_STATUS_CHOICES, initial='PENDING')

    def to_payload(self):
        data = self.cleaned_data
        return {
            'customer': data['customer'],
            'total_amount': data['total_amount'],
            'note': data.get('note') or '',
            'status': data['status'],
        }


def generate_sku(name):
    """SKU from the first three letters of the name and the clock, e.g. BAT-52873611"""
    return f"{name[:3].upper()}-{str(int(time.time() * 1000))[5:]}"


class ProductForm(PayloadForm):
    name = forms.CharField(max_length=255)
    barcode = forms.CharField(max_length=64)
    unit_price = forms.DecimalField(min_value=0, decimal_places=2)
    cost_price = forms.DecimalField(min_value=0, decimal_places=2)
    discount = forms.DecimalField(min_value=0, decimal_places=2, required=False)
    limited_qty = forms.IntegerField(min_value=0, required=False)
    category = forms.CharField(max_length=255)
    branch = forms.CharField(max_length=255, required=False)
    brand_action = forms.CharField(max_length=255, required=False, label='Brand')
    sku = forms.CharField(max_length=64, required=False)
    desc = forms.CharField(widget=forms.Textarea, required=False, label='Description')

    def to_payload(self):
        data = self.cleaned_data
        return {
            'sku': data.get('sku') or generate_sku(data['name']),
            'name': data['name'],
            'desc': data.get('desc') or '',
            'unit_price': float(data['unit_price']),
            'cost_price': float(data['cost_price']),
            'tax_rate': 0,
            'vendor_id': None,
            'stock_level': 0,
            'barcode': data['barcode'],
            'discount': float(data.get('discount') or 0),
            'category': data['category'],
            'branch': data.get('branch') or '',
            'limited_qty': data.get('limited_qty') or 0,
            'brand_action': data.get('brand_action') or '',
        }

    @classmethod
    def initial_from(cls, record):
        return {
            'name': record.get('pro_name'),
            'barcode': record.get('pro_barcode'),
            'unit_price': record.get('pro_price'),
            'cost_price': record.get('pro_cost'),
            'discount': record.get('pro_dis'),
            'limited_qty': record.get('limitedquan'),
            'category': record.get('cat_id_fk'),
            'branch': record.get('branch'),
            'brand_action': record.get('brand'),
        }


ROLE_CHOICES = [('admin', 'Admin'), ('manager', 'Manager'), ('cashier', 'Cashier')]


class AdminUserForm(PayloadForm):
    ad_name = forms.CharField(max_length=150, label='Name')
    ad_password = forms.CharField(widget=forms.PasswordInput, required=False, label='Password')
    ad_role = forms.ChoiceField(choices=ROLE_CHOICES, initial='cashier', label='Role')
    ad_phone = forms.CharField(max_length=50, required=False, label='Phone')
    ad_cnic = forms.CharField(max_length=50, required=False, label='CNIC')
    ad_address = forms.CharField(max_length=500, required=False, label='Address')
    ad_branch = forms.CharField(max_length=255, required=False, label='Branch')

    def to_payload(self):
        return {name: value or '' for name, value in self.cleaned_data.items()}

    @classmethod
    def initial_from(cls, record):
        initial = super().initial_from(record)
        # Passwords are never echoed back into the form
        initial.pop('ad_password', None)
        return initial


@dataclass
class CrudOutcome:
    success: bool
    form: Optional[forms.Form] = None
    data: object = None


class CrudController(ToastCollector):
    """
    Runs the create/update/delete cycle for one resource.

    Args:
        resource: A `Resource` describing routes, form and toast texts
        cookie: The inbound Cookie header to forward
        list_page: Optional `ListPage` reloaded after every successful write
    """

    def __init__(self, resource, cookie=None, forwarder=None, list_page=None):
        super().__init__()
        self.resource = resource
        self.cookie = cookie
        self.forwarder = forwarder or BackendForwarder()
        self.list_page = list_page

    def submit(self, data, record_id=None):
        """Validate and issue exactly one create (POST) or update (PUT)"""
        form = self.resource.form_class(data)
        if not form.is_valid():
            self.toast(ERROR, 'Please fill in all required fields')
            return CrudOutcome(False, form)

        updating = record_id not in (None, '')
        route = self.resource.update_route if updating else self.resource.create_route
        path_params = {'id': record_id} if updating else None
        try:
            result = self.forwarder.forward(
                route, cookie=self.cookie, path_params=path_params, data=form.to_payload(),
            )
        except ProxyError as e:
            if is_session_expired(e):
                raise
            logger.warning(f"Saving {self.resource.label} failed: {e.message}")
            self.toast(ERROR, e.message or f"Failed to save {self.resource.label.lower()}")
            return CrudOutcome(False, form)

        verb = 'updated' if updating else 'created'
        self.toast(SUCCESS, f"{self.resource.label} has been {verb} successfully.")
        self.refetch()
        return CrudOutcome(True, form, result.data)

    def delete(self, record_id, confirmed=False):
        """Delete after explicit confirmation; unconfirmed deletes never reach the backend"""
        if not confirmed:
            return CrudOutcome(False)
        try:
            result = self.forwarder.forward(
                self.resource.delete_route, cookie=self.cookie, path_params={'id': record_id},
            )
        except ProxyError as e:
            if is_session_expired(e):
                raise
            logger.warning(f"Deleting {self.resource.label} {record_id} failed: {e.message}")
            self.toast(ERROR, e.message or f"Failed to delete {self.resource.label.lower()}")
            return CrudOutcome(False)

        self.toast(SUCCESS, f"{self.resource.label} has been deleted.")
        self.refetch()
        return CrudOutcome(True, data=result.data)

    def refetch(self):
        if self.list_page is not None:
            self.list_page.load()
            self.toasts.extend(self.list_page.drain())
