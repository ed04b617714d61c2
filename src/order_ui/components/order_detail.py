"""
Selected order detail pane.

Shows the resident order with its line items, the payment history and the
forms for every order change (line item edit, status, payment, delivered
and cancelled quantities). Forms are disabled while a change is saving.
"""

import reflex as rx

from order_ui.models.reflex_models import LineItemModel, OptionModel, PaymentModel
from order_ui.state import OrderState


def order_detail() -> rx.Component:
    """
    Build the detail pane for the selected order.

    Returns:
        The detail pane component, or the placeholder when nothing is selected.
    """
    return rx.box(
        rx.cond(
            OrderState.has_detail,
            _detail(),
            rx.cond(
                OrderState.detail_loading,
                _loading(),
                _placeholder(),
            ),
        ),
        class_name="detail-pane",
    )


def _detail() -> rx.Component:
    detail = OrderState.detail
    return rx.box(
        rx.box(
            rx.box(
                rx.heading(detail.docno, size="4", as_="h2", class_name="mono"),
                rx.text(detail.customer_name, class_name="muted"),
                class_name="detail-title",
            ),
            rx.badge(detail.status_name, class_name=f"status-tag {detail.severity}"),
            rx.button(
                rx.icon("x", size=16),
                on_click=OrderState.close_detail,
                variant="ghost",
                title="Close",
            ),
            class_name="detail-header",
        ),
        rx.cond(OrderState.detail_loading, rx.box(class_name="progress-bar")),
        rx.box(
            _info("Ordered", detail.order_date),
            _info("First trial", detail.first_trial_date),
            _info("Delivery", detail.tentative_delivery_date),
            _info("Amount", detail.ord_amt),
            _info("Paid", detail.amt_paid),
            _info("Due", detail.amt_due),
            _info("Pieces", detail.ord_qty),
            _info("Delivered", detail.delivered_qty),
            _info("Cancelled", detail.cancelled_qty),
            class_name="detail-grid",
        ),
        _line_items(),
        _quantity_forms(),
        _payments(),
        class_name="card detail-card",
    )


def _line_items() -> rx.Component:
    return rx.box(
        rx.heading(
            f"Line Items ({OrderState.detail.line_items.length()})", size="2", as_="h4"
        ),
        rx.box(
            rx.foreach(OrderState.detail.line_items, _line_item_card),
            class_name="line-items-list",
        ),
        class_name="line-items",
    )


def _line_item_card(item: LineItemModel) -> rx.Component:
    return rx.box(
        rx.box(
            rx.text(item.material_name, class_name="line-item-title"),
            rx.text(item.item_ref, class_name="muted mono"),
            rx.select.root(
                rx.select.trigger(placeholder="Status"),
                rx.select.content(rx.foreach(OrderState.statuses, _option)),
                value=item.status_id,
                on_change=lambda status_id: OrderState.update_item_status(
                    item.id, status_id
                ),
                disabled=OrderState.saving,
            ),
            class_name="line-item-header",
        ),
        rx.box(
            _info("Trial", item.trial_date),
            _info("Delivery", item.delivery_date),
            _info("Amount", item.item_amt_display),
            _info("Qty", item.ord_qty),
            class_name="line-item-grid",
        ),
        rx.cond(
            item.assigned_sites.length() > 0,
            rx.box(
                rx.foreach(
                    item.assigned_sites,
                    lambda site: rx.text(site, class_name="badge outline"),
                ),
                class_name="badge-list",
            ),
        ),
        rx.el.details(
            rx.el.summary(rx.text("Edit", class_name="toggle-text")),
            _line_item_form(item),
        ),
        class_name="line-item-card",
    )


def _line_item_form(item: LineItemModel) -> rx.Component:
    return rx.form(
        rx.el.input(type="hidden", name="line_item_id", value=item.id),
        rx.box(
            _field(
                "Trial date",
                rx.input(type="date", name="trial_date", default_value=item.trial_date_value),
            ),
            _field(
                "Delivery date",
                rx.input(type="date", name="delivery_date", default_value=item.delivery_date_value),
            ),
            _field(
                "Amount",
                rx.input(
                    type="number",
                    name="item_amt",
                    min=0,
                    step="0.01",
                    default_value=item.item_amt.to_string(),
                ),
            ),
            _field(
                "Quantity",
                rx.input(
                    type="number",
                    name="ord_qty",
                    min=0,
                    default_value=item.ord_qty.to_string(),
                ),
            ),
            class_name="form-grid",
        ),
        _field("Note", rx.text_area(name="description", default_value=item.description)),
        rx.button("Save", type="submit", loading=OrderState.saving),
        on_submit=OrderState.save_line_item,
        reset_on_submit=False,
        class_name="line-item-form",
    )


def _quantity_forms() -> rx.Component:
    return rx.cond(
        OrderState.detail.open_qty > 0,
        rx.box(
            _quantity_form("Mark delivered", OrderState.mark_delivered),
            _quantity_form("Mark cancelled", OrderState.mark_cancelled),
            class_name="quantity-forms",
        ),
    )


def _quantity_form(label: str, handler) -> rx.Component:
    return rx.form(
        rx.input(
            type="number",
            name="quantity",
            min=1,
            max=OrderState.detail.open_qty,
            placeholder="Pieces",
        ),
        rx.button(label, type="submit", variant="soft", loading=OrderState.saving),
        on_submit=handler,
        reset_on_submit=True,
        class_name="inline-form",
    )


def _payments() -> rx.Component:
    return rx.box(
        rx.heading(f"Payments ({OrderState.payments_total})", size="2", as_="h4"),
        rx.cond(
            OrderState.detail.amt_due_value > 0,
            _payment_form(),
            rx.text("Fully paid", class_name="muted"),
        ),
        rx.box(
            rx.foreach(OrderState.payments, _payment_row),
            class_name="payments-list",
        ),
        rx.cond(
            OrderState.payments_has_more,
            rx.button(
                "Load more payments",
                on_click=OrderState.load_more_payments,
                variant="ghost",
            ),
        ),
        class_name="payments",
    )


def _payment_form() -> rx.Component:
    return rx.form(
        rx.box(
            _field("Amount", rx.input(type="number", name="amount", min=0, step="0.01")),
            _field("Date", rx.input(type="date", name="payment_date")),
            _field(
                "Mode",
                rx.select.root(
                    rx.select.trigger(placeholder="Payment mode"),
                    rx.select.content(rx.foreach(OrderState.payment_modes, _option)),
                    name="payment_mode_id",
                ),
            ),
            _field("Reference", rx.input(name="reference")),
            class_name="form-grid",
        ),
        rx.button("Receive payment", type="submit", loading=OrderState.saving),
        on_submit=OrderState.receive_payment,
        reset_on_submit=True,
        class_name="payment-form",
    )


def _payment_row(payment: PaymentModel) -> rx.Component:
    return rx.box(
        rx.text(payment.payment_date, class_name="value"),
        rx.text(payment.mode_name, class_name="muted"),
        rx.text(payment.payment_ref, class_name="muted mono"),
        rx.text(payment.payment_amt, class_name="value"),
        class_name="payment-row",
        key=payment.id,
    )


def _option(option: OptionModel) -> rx.Component:
    return rx.select.item(option.label, value=option.value)


def _field(label: str, control: rx.Component) -> rx.Component:
    return rx.box(
        rx.text(label, class_name="label"),
        control,
        class_name="form-field",
    )


def _info(label: str, value) -> rx.Component:
    return rx.box(
        rx.text(label, class_name="label"),
        rx.text(value, class_name="value"),
        class_name="info-block",
    )


def _loading() -> rx.Component:
    return rx.box(
        rx.box(class_name="spinner"),
        rx.text("Loading order...", class_name="muted"),
        class_name="card loading-state",
    )


def _placeholder() -> rx.Component:
    return rx.box(
        rx.icon("clipboard-list", class_name="empty-icon", size=48),
        rx.text("Select an order to see its garments and payments.", class_name="muted"),
        class_name="card empty-state",
    )
