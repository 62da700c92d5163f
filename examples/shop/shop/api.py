"""HTTP-facing handlers."""

from shop import service
from shop.tasks import schedule


def create_order(payload):
    order = service.place_order(payload["sku"], payload["qty"])
    return {"id": order.id}


def cancel_order(order_id):
    def _cancel():
        service.cancel(order_id)

    schedule(_cancel)
    return {"status": "queued"}


def health():
    return {"ok": True}
