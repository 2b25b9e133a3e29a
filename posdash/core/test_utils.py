"""
Test utilities and factories for backend payloads and fake backend responses
"""
import json
import random
import string

import requests
from django.conf import settings
from rest_framework.test import APIClient


def backend_response(status_code=200, json_data=None, text=None, cookies=None, content_type=None):
    """
    Build a real `requests.Response` as the backend would return it.

    Pass `json_data` for a JSON body or `text` for a raw body.
    """
    response = requests.Response()
    response.status_code = status_code
    response.encoding = 'utf-8'
    if json_data is not None:
        response._content = json.dumps(json_data).encode('utf-8')
        response.headers['Content-Type'] = content_type or 'application/json'
    else:
        response._content = (text or '').encode('utf-8')
        response.headers['Content-Type'] = content_type or 'text/plain'
    for name, value in (cookies or {}).items():
        response.cookies.set(name, value)
    return response


class TestDataFactory:
    """Factory class for backend payloads"""

    @staticmethod
    def random_string(length=10):
        """Generate a random string"""
        return ''.join(random.choices(string.ascii_letters + string.digits, k=length))

    @staticmethod
    def random_barcode():
        return ''.join(random.choices(string.digits, k=12))

    @staticmethod
    def category(category_id=None, name=None):
        """A category row as listed by the backend"""
        return {
            'id': category_id or random.randint(1, 10000),
            'name': name or f'Category_{TestDataFactory.random_string(6)}',
        }

    @staticmethod
    def brand(brand_id=None, name=None):
        return {
            'id': brand_id or random.randint(1, 10000),
            'name': name or f'Brand_{TestDataFactory.random_string(6)}',
        }

    @staticmethod
    def product(product_id=None, name=None, barcode=None, stock=10):
        """A product as returned by the exact barcode lookup"""
        return {
            'pro_id': product_id or random.randint(1, 10000),
            'pro_name': name or f'Product_{TestDataFactory.random_string(6)}',
            'pro_barcode': barcode or TestDataFactory.random_barcode(),
            'pro_price': 1500,
            'stock': stock,
        }

    @staticmethod
    def customer(customer_id=None, name=None, branch=None):
        return {
            'cus_id': customer_id or random.randint(1, 10000),
            'cus_name': name or f'Customer_{TestDataFactory.random_string(6)}',
            'cus_phone': '03001234567',
            'cus_address': 'Mall Road',
            'branch': branch or getattr(settings, 'DEFAULT_BRANCH', ''),
        }

    @staticmethod
    def salesman(salesman_id=None, name=None, code=None):
        return {
            'id': salesman_id or random.randint(1, 10000),
            'name': name or f'Salesman_{TestDataFactory.random_string(6)}',
            'code': code or f'SM{random.randint(100, 999)}',
            'phone': '03001234567',
            'address': 'Mall Road',
            'branch': getattr(settings, 'DEFAULT_BRANCH', ''),
            'commission_rate': 5.0,
        }

    @staticmethod
    def customer_order(order_id=None, customer=None, status='PENDING', amount=1500):
        """A row of the customer order list"""
        order_id = order_id or TestDataFactory.random_string(8)
        return {
            'orderid': order_id,
            'invoice_no': f'INV-{order_id}',
            'status': status,
            'customer': customer or f'Customer_{TestDataFactory.random_string(6)}',
            'teamname': 'Eagles',
            'quantity': 3,
            'total_amount': amount,
            'date': '2024-05-01',
        }

    @staticmethod
    def walkin_invoice(invoice_id=None, amount=1000, payment_method='cash'):
        return {
            'id': invoice_id or random.randint(1, 10000),
            'total_amount': amount,
            'payment_method': payment_method,
        }

    @staticmethod
    def adjust_result(count):
        """Backend answer to a stock adjustment batch of `count` products"""
        return {'results': [{'product_id': i + 1, 'status': 'ok'} for i in range(count)]}

    @staticmethod
    def page(rows, total=None, total_pages=None):
        payload = {'data': rows, 'total': len(rows) if total is None else total}
        if total_pages is not None:
            payload['totalPages'] = total_pages
        return payload


class ProxyAPIClient(APIClient):
    """APIClient with session cookie helpers"""

    def login_session(self, token='abc'):
        """Present the backend session cookie on every request"""
        self.cookies[getattr(settings, 'SESSION_TOKEN_COOKIE', 'session_token')] = token
        return self

    def logout_session(self):
        """Drop the session cookie"""
        self.cookies.pop(getattr(settings, 'SESSION_TOKEN_COOKIE', 'session_token'), None)
