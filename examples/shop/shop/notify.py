"""Customer notifications."""


def send_receipt(order):
    print(f"receipt for order {order.id}")
