"""
Barcode-driven stock adjustment.

A cashier scans products one at a time into a list of adjustment lines, sets
an action (increase/decrease), a quantity and a reason on each line, then
submits the whole batch to the backend in one request.
"""
import logging
from dataclasses import asdict, dataclass

from posdash.catalog import routes as catalog_routes
from posdash.core.errors import ProxyError, is_session_expired
from posdash.core.forwarder import BackendForwarder
from posdash.inventory import routes as inventory_routes

from .notifications import ERROR, SUCCESS, WARNING, ToastCollector

logger = logging.getLogger(__name__)

INCREASE = 'increase'
DECREASE = 'decrease'
ACTIONS = (INCREASE, DECREASE)
DEFAULT_REASON = 'Stock count adjustment'

SESSION_KEY = 'stock_adjustment_items'


def to_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class AdjustItem:
    product_id: object
    product_name: str
    barcode: str
    current_stock: int
    action: str = INCREASE
    quantity: int = 0
    reason: str = DEFAULT_REASON

    @classmethod
    def from_product(cls, product):
        return cls(
            product_id=product['pro_id'],
            product_name=product.get('pro_name') or '',
            barcode=product.get('pro_barcode') or '',
            current_stock=to_int(product.get('stock')),
        )

    def to_payload(self):
        return {
            'product_id': self.product_id,
            'quantity': self.quantity,
            'action': self.action,
            'reason': self.reason,
        }


class StockAdjustmentSession(ToastCollector):
    """
    The adjustment lines of one cashier, kept between form posts.

    Nothing reaches the backend until `submit()`; a failed submit keeps every
    line so the batch can be retried.
    """

    def __init__(self, items=None, cookie=None, forwarder=None):
        super().__init__()
        self.items = list(items or [])
        self.cookie = cookie
        self.forwarder = forwarder or BackendForwarder()

    def find(self, product_id):
        for index, item in enumerate(self.items):
            if str(item.product_id) == str(product_id):
                return index
        return None

    def scan(self, barcode):
        """Look up a barcode and append its product as a new line"""
        barcode = (barcode or '').strip()
        if not barcode:
            self.toast(ERROR, 'Please enter a barcode')
            return None

        try:
            result = self.forwarder.forward(
                catalog_routes.PRODUCT_BY_BARCODE, cookie=self.cookie, query={'barcode': barcode},
            )
        except ProxyError as e:
            if is_session_expired(e):
                raise
            logger.warning(f"Barcode lookup for {barcode} failed: {e.message}")
            self.toast(ERROR, 'Product not found')
            return None

        product = result.data
        if not isinstance(product, dict) or not product.get('pro_id'):
            self.toast(ERROR, 'Product not found')
            return None

        if self.find(product['pro_id']) is not None:
            self.toast(WARNING, 'Product already in list')
            return None

        item = AdjustItem.from_product(product)
        self.items.append(item)
        self.toast(SUCCESS, f"Product added: {item.product_name}")
        return item

    def update_item(self, index, action=None, quantity=None, reason=None):
        item = self.items[index]
        if action in ACTIONS:
            item.action = action
        if quantity is not None:
            item.quantity = max(to_int(quantity), 0)
        if reason is not None:
            item.reason = reason
        return item

    def remove_item(self, index):
        return self.items.pop(index)

    def clear(self):
        self.items = []

    def validate(self):
        """Queue an error toast for the first problem found; True when the batch can be sent"""
        if not self.items:
            self.toast(ERROR, 'Please add at least one product')
            return False
        for item in self.items:
            if item.quantity <= 0:
                self.toast(ERROR, f"Please enter quantity for {item.product_name}")
                return False
            if item.action == DECREASE and item.quantity > item.current_stock:
                self.toast(ERROR, f"Cannot decrease more than current stock for {item.product_name}")
                return False
        return True

    def submit(self):
        """Send every line as one batch. Returns True when the backend accepted it."""
        if not self.validate():
            return False

        payload = [item.to_payload() for item in self.items]
        try:
            result = self.forwarder.forward(inventory_routes.ADJUST_STOCK, cookie=self.cookie, data=payload)
        except ProxyError as e:
            if is_session_expired(e):
                raise
            logger.warning(f"Stock adjustment of {len(payload)} lines failed: {e.message}")
            self.toast(ERROR, e.message or 'Failed to adjust stock')
            return False

        data = result.data if isinstance(result.data, dict) else {}
        count = len(data.get('results') or [])
        logger.info(f"Stock adjusted for {count} products")
        self.toast(SUCCESS, f"Stock adjusted for {count} products.")
        self.clear()
        return True

    def to_dict(self):
        return [asdict(item) for item in self.items]

    @classmethod
    def from_dict(cls, data, **kwargs):
        return cls(items=[AdjustItem(**row) for row in (data or [])], **kwargs)

    def save(self, session):
        session[SESSION_KEY] = self.to_dict()

    @classmethod
    def load(cls, session, **kwargs):
        return cls.from_dict(session.get(SESSION_KEY), **kwargs)
