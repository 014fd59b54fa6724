"""
FastAPI routes for order administration
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from storefront.db.database import get_db
from storefront.api.deps import require_admin, paginate
from storefront.services.order_service import OrderService
from storefront.services.order_views import order_view, admin_order_summary, admin_order_detail
from storefront.models.order import OrderStatus, PaymentStatus
from storefront.models.user import User
from storefront.models.schemas import (
    AdminOrderDetail,
    AdminOrderListResponse,
    ApiResponse,
    OrderReject,
    OrderResponse,
    OrderStatusUpdate,
    PaymentStatusUpdate,
    ok,
)
from storefront.config import settings
from typing import Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/admin/order",
    tags=["admin"],
    dependencies=[Depends(require_admin)]
)


@router.get("/getall", response_model=ApiResponse[AdminOrderListResponse])
def list_orders(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    status: Optional[OrderStatus] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None, alias="paymentStatus"),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    """List all orders with the placing user's name and email"""
    logger.info(f"Admin listing orders: page={page}, limit={limit}, status={status}, payment_status={payment_status}")
    
    orders, total = OrderService.get_orders(
        db=db,
        page=page,
        limit=limit,
        status=status,
        payment_status=payment_status,
        search=search
    )
    
    return ok(
        AdminOrderListResponse(
            orders=[admin_order_summary(o) for o in orders],
            pagination=paginate(total, page, limit)
        ),
        "Orders fetched successfully"
    )


@router.get("/get/{order_id}", response_model=ApiResponse[AdminOrderDetail])
def get_order(order_id: str, db: Session = Depends(get_db)):
    order = OrderService.get_order(db, order_id)
    return ok(admin_order_detail(db, order), "Order fetched successfully")


@router.patch("/reject/{order_id}", response_model=ApiResponse[OrderResponse])
def reject_order(
    order_id: str,
    body: OrderReject,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """Reject an order that is not yet rejected, cancelled, delivered or refunded"""
    logger.info(f"Admin {admin.id} rejecting order {order_id}")
    
    order = OrderService.reject_order(db, order_id, body.reject_reason)
    return ok(order_view(order), "Order rejected successfully")


@router.patch("/update-payment/{order_id}", response_model=ApiResponse[OrderResponse])
def update_payment(
    order_id: str,
    body: PaymentStatusUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Update payment status
    
    Available statuses: pending, completed, failed, refunded
    """
    logger.info(f"Admin {admin.id} updating payment of order {order_id} to {body.payment_status}")
    
    order = OrderService.update_payment_status(db, order_id, body.payment_status)
    return ok(order_view(order), "Payment status updated successfully")


@router.patch("/update-status/{order_id}", response_model=ApiResponse[OrderResponse])
def update_status(
    order_id: str,
    body: OrderStatusUpdate,
    admin: User = Depends(require_admin),
    db: Session = Depends(get_db)
):
    """
    Update order status
    
    Available statuses:
    - pending
    - preparing
    - cancelled
    - shipped
    - delivered
    - refunded
    """
    logger.info(f"Admin {admin.id} updating order {order_id} status to {body.status}")
    
    order = OrderService.update_status(db, order_id, body.status)
    return ok(order_view(order), "Order status updated successfully")
