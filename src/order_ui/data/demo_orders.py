"""
Demo order book in the API's wire shape.

Orders are generated deterministically from a handful of customer and
material templates so the demo list is long enough to exercise infinite
scroll (57 orders, i.e. three pages at the default page size of 20).
"""

from datetime import datetime, timedelta

DEMO_ORDER_COUNT = 57

_BASE_DATE = datetime(2024, 11, 4, 10, 30)

_CUSTOMERS = (
    {"id": "11", "fname": "John", "admsite_code": 101},
    {"id": "12", "fname": "Priya", "admsite_code": 101},
    {"id": "13", "fname": "Arjun", "admsite_code": 102},
    {"id": "14", "fname": "Meera", "admsite_code": 102},
    {"id": "15", "fname": "Johnny", "admsite_code": 103},
    {"id": "16", "fname": "Fatima", "admsite_code": 103},
)

_MATERIALS = (
    {"id": "201", "name": "Linen Shirt", "price": 1450.0},
    {"id": "202", "name": "Wool Trouser", "price": 2200.0},
    {"id": "203", "name": "Silk Kurta", "price": 3100.0},
    {"id": "204", "name": "Cotton Blazer", "price": 5400.0},
    {"id": "205", "name": "Sherwani", "price": 12500.0},
)

_SITES = ("Main Workshop", "Embroidery Unit", "Finishing Unit")

DEMO_STATUSES = {
    "1": "Pending",
    "2": "In Progress",
    "3": "Completed",
    "4": "Cancelled",
    "5": "Ready for Trial",
    "6": "Partial",
}

DEMO_PAYMENT_MODES = (
    {"id": "1", "mode_name": "Cash"},
    {"id": "2", "mode_name": "Card"},
    {"id": "3", "mode_name": "UPI"},
    {"id": "4", "mode_name": "Bank Transfer"},
)


def _timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M:%S")


def _status(status_id: str) -> dict:
    return {"id": status_id, "status_name": DEMO_STATUSES[status_id]}


def _line_items(order_id: str, index: int, order_date: datetime) -> list[dict]:
    count = index % 3 + 1
    items = []
    for offset in range(count):
        material = _MATERIALS[(index + offset) % len(_MATERIALS)]
        item_id = str(int(order_id) * 10 + offset)
        trial = order_date + timedelta(days=7 + offset) if offset == 0 else None
        items.append(
            {
                "id": item_id,
                "order_id": order_id,
                "measurement_main_id": str(5000 + int(item_id)),
                "image_url": [],
                "material_master_id": material["id"],
                "trial_date": _timestamp(trial) if trial else None,
                "delivery_date": _timestamp(order_date + timedelta(days=14)),
                "item_amt": material["price"],
                "ord_qty": 1,
                "delivered_qty": 0,
                "cancelled_qty": 0,
                "desc1": None,
                "ext": None,
                "item_ref": f"REF-{item_id}",
                "orderStatus": _status("1" if index % 4 else "2"),
                "material": {"id": material["id"], "name": material["name"]},
                "jobOrderDetails": [
                    {"adminSite": {"sitename": _SITES[(index + offset) % len(_SITES)]}}
                ],
            }
        )
    return items


def build_demo_orders(count: int = DEMO_ORDER_COUNT) -> list[dict]:
    """
    Build ``count`` orders with nested line items, newest first.

    Returns:
        Orders in the ``orderMain`` wire shape.
    """
    orders = []
    for index in range(count):
        order_id = str(1000 + count - index)
        customer = _CUSTOMERS[index % len(_CUSTOMERS)]
        order_date = _BASE_DATE - timedelta(days=index)
        items = _line_items(order_id, index, order_date)
        ord_amt = sum(item["item_amt"] * item["ord_qty"] for item in items)
        amt_paid = round(ord_amt * 0.5, 2) if index % 2 else 0.0
        orders.append(
            {
                "id": order_id,
                "user_id": customer["id"],
                "docno": f"SO-{order_id}",
                "order_date": _timestamp(order_date),
                "ord_amt": ord_amt,
                "amt_paid": amt_paid,
                "amt_due": round(ord_amt - amt_paid, 2),
                "ord_qty": sum(item["ord_qty"] for item in items),
                "delivered_qty": 0,
                "cancelled_qty": 0,
                "tentitive_delivery_date": _timestamp(order_date + timedelta(days=14)),
                "delivery_date": None,
                "desc1": "Rush order" if index % 5 == 0 else None,
                "ext": None,
                "user": dict(customer),
                "orderStatus": items[0]["orderStatus"],
                "orderDetails": items,
            }
        )
    return orders


def build_demo_payments(orders: list[dict]) -> dict[str, list[dict]]:
    """Build the payment history implied by each order's ``amt_paid``."""
    payments: dict[str, list[dict]] = {}
    for order in orders:
        history = []
        if order["amt_paid"]:
            history.append(
                {
                    "id": f"P{order['id']}",
                    "docno": f"RCPT-{order['id']}",
                    "admsite_code": str(order["user"]["admsite_code"]),
                    "payment_date": order["order_date"],
                    "payment_ref": None,
                    "payment_amt": order["amt_paid"],
                    "payment_type": "Advance",
                    "paymentMode": dict(DEMO_PAYMENT_MODES[0]),
                }
            )
        payments[order["id"]] = history
    return payments
