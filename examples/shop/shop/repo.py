"""In-memory order storage."""


class Order:
    def __init__(self, id, sku, qty):
        self.id = id
        self.sku = sku
        self.qty = qty


class OrderRepository:
    def __init__(self):
        self._rows = {}

    def save(self, sku, qty):
        order = Order(len(self._rows) + 1, sku, qty)
        self._rows[order.id] = order
        return order

    def delete(self, order_id):
        self._rows.pop(order_id, None)
