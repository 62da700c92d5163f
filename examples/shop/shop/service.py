"""Order business logic."""

from shop.notify import send_receipt
from shop.repo import OrderRepository

_repo = OrderRepository()


def place_order(sku, qty):
    order = _repo.save(sku, qty)
    send_receipt(order)
    return order


def cancel(order_id):
    _repo.delete(order_id)
