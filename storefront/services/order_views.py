"""
Read-side projections for orders

Product and user display fields are joined when an order is read, so they
follow later catalog edits. Prices always come from the stored snapshot.
"""
from sqlalchemy.orm import Session
from storefront.models.catalog import Product
from storefront.models.order import Order, OrderItem
from storefront.models.schemas import (
    AdminOrderDetail,
    AdminOrderSummary,
    OrderDetailResponse,
    OrderItemDetail,
    OrderItemResponse,
    OrderResponse,
    ProductDisplay,
    ShippingAddress,
    UserContact,
    UserSummary,
    VariantSelector,
)
from typing import Dict, Iterable


def _item_fields(item: OrderItem) -> dict:
    return {
        "product_id": item.product_id,
        "variant": VariantSelector(size=item.size, color=item.color),
        "quantity": item.quantity,
        "price": item.price,
    }


def _order_fields(order: Order) -> dict:
    return {
        "order_id": order.order_id,
        "subtotal": order.subtotal,
        "delivery_fee": order.delivery_fee,
        "total_amount": order.total_amount,
        "status": order.status,
        "payment_status": order.payment_status,
        "payment_method": order.payment_method,
        "reject_reason": order.reject_reason,
        "address": ShippingAddress.model_validate(order.address),
        "created_at": order.created_at,
        "updated_at": order.updated_at,
    }


def _product_displays(db: Session, orders: Iterable[Order]) -> Dict[int, ProductDisplay]:
    """Name and first image for every product referenced by the orders"""
    product_ids = {item.product_id for order in orders for item in order.items}
    if not product_ids:
        return {}
    # Soft-deleted products still resolve: the order history refers to them
    products = db.query(Product).filter(Product.id.in_(product_ids)).all()
    return {
        p.id: ProductDisplay(id=p.id, name=p.name, image=p.image)
        for p in products
    }


def order_view(order: Order) -> OrderResponse:
    return OrderResponse(
        **_order_fields(order),
        items=[OrderItemResponse(**_item_fields(item)) for item in order.items],
    )


def order_detail_view(db: Session, order: Order) -> OrderDetailResponse:
    displays = _product_displays(db, [order])
    return OrderDetailResponse(
        **_order_fields(order),
        items=[
            OrderItemDetail(**_item_fields(item), product=displays.get(item.product_id))
            for item in order.items
        ],
    )


def admin_order_summary(order: Order) -> AdminOrderSummary:
    user = order.user
    return AdminOrderSummary(
        **_order_fields(order),
        items=[OrderItemResponse(**_item_fields(item)) for item in order.items],
        user=UserSummary.model_validate(user) if user else None,
    )


def admin_order_detail(db: Session, order: Order) -> AdminOrderDetail:
    displays = _product_displays(db, [order])
    user = order.user
    return AdminOrderDetail(
        **_order_fields(order),
        items=[
            OrderItemDetail(**_item_fields(item), product=displays.get(item.product_id))
            for item in order.items
        ],
        user=UserContact.model_validate(user) if user else None,
    )
