"""
GraphQL documents for the sales order API, keyed by operation name.

The gateway contract is ``execute(operation, variables)``; the live gateway
looks the document up here, the demo gateway dispatches on the same names.
"""

LIST_ORDERS = "orderMains"
GET_ORDER = "orderMain"
UPDATE_LINE_ITEM = "updateOrderDetail"
UPDATE_LINE_ITEM_STATUS = "updateSalesOrderStatus"
CAPTURE_PAYMENT = "createOrderPayment"
MARK_DELIVERED = "markOrderDelivered"
MARK_CANCELLED = "markOrderCancelled"
LIST_PAYMENTS = "getOrderInfoByOrderId"
LIST_PAYMENT_MODES = "paymentModes"

_PAGINATOR_INFO = """
    paginatorInfo {
      count
      currentPage
      lastPage
      perPage
      total
      hasMorePages
    }
"""

ORDER_MAINS = f"""
query OrderMains($first: Int!, $page: Int!, $search: String) {{
  orderMains(first: $first, page: $page, search: $search) {{
    {_PAGINATOR_INFO}
    data {{
      id
      user_id
      docno
      order_date
      ord_amt
      amt_paid
      amt_due
      ord_qty
      delivered_qty
      cancelled_qty
      tentitive_delivery_date
      desc1
      user {{
        id
        fname
        admsite_code
      }}
      orderStatus {{
        id
        status_name
      }}
    }}
  }}
}}
"""

ORDER_MAIN = """
query OrderMain($id: ID!) {
  orderMain(id: $id) {
    id
    user_id
    docno
    order_date
    ord_amt
    amt_paid
    amt_due
    ord_qty
    delivered_qty
    cancelled_qty
    tentitive_delivery_date
    delivery_date
    desc1
    ext
    user {
      id
      fname
      admsite_code
    }
    orderStatus {
      id
      status_name
    }
    orderDetails {
      id
      order_id
      measurement_main_id
      image_url
      material_master_id
      trial_date
      delivery_date
      item_amt
      ord_qty
      delivered_qty
      cancelled_qty
      desc1
      ext
      item_ref
      orderStatus {
        id
        status_name
      }
      material {
        id
        name
      }
      jobOrderDetails {
        adminSite {
          sitename
        }
      }
    }
  }
}
"""

UPDATE_ORDER_DETAIL = """
mutation UpdateOrderDetail($id: ID!, $input: UpdateOrderDetailInput!) {
  updateOrderDetail(id: $id, input: $input) {
    id
  }
}
"""

UPDATE_SALES_ORDER_STATUS = """
mutation UpdateSalesOrderStatus($id: ID!, $input: OrderStatusInput!) {
  updateSalesOrderStatus(id: $id, input: $input) {
    id
  }
}
"""

CREATE_ORDER_PAYMENT = """
mutation CreateOrderPayment($id: ID!, $input: CreateOrderPaymentInput!) {
  createOrderPayment(id: $id, input: $input) {
    id
  }
}
"""

MARK_ORDER_DELIVERED = """
mutation MarkOrderDelivered($id: ID!, $input: MarkOrderDeliveredInput!) {
  markOrderDelivered(id: $id, input: $input) {
    id
  }
}
"""

MARK_ORDER_CANCELLED = """
mutation MarkOrderCancelled($id: ID!, $input: MarkOrderCancelledInput!) {
  markOrderCancelled(id: $id, input: $input) {
    id
  }
}
"""

GET_ORDER_INFO_BY_ORDER_ID = f"""
query GetOrderInfoByOrderId($order_id: ID!, $first: Int!, $page: Int!) {{
  getOrderInfoByOrderId(order_id: $order_id, first: $first, page: $page) {{
    {_PAGINATOR_INFO}
    data {{
      id
      docno
      admsite_code
      payment_date
      payment_ref
      payment_amt
      payment_type
      paymentMode {{
        id
        mode_name
      }}
    }}
  }}
}}
"""

PAYMENT_MODES = """
query PaymentModes {
  paymentModes {
    id
    mode_name
  }
}
"""

DOCUMENTS: dict[str, str] = {
    LIST_ORDERS: ORDER_MAINS,
    GET_ORDER: ORDER_MAIN,
    UPDATE_LINE_ITEM: UPDATE_ORDER_DETAIL,
    UPDATE_LINE_ITEM_STATUS: UPDATE_SALES_ORDER_STATUS,
    CAPTURE_PAYMENT: CREATE_ORDER_PAYMENT,
    MARK_DELIVERED: MARK_ORDER_DELIVERED,
    MARK_CANCELLED: MARK_ORDER_CANCELLED,
    LIST_PAYMENTS: GET_ORDER_INFO_BY_ORDER_ID,
    LIST_PAYMENT_MODES: PAYMENT_MODES,
}
