"""
FastAPI routes for the caller's own orders
"""
from fastapi import APIRouter, Depends, Header, Query, Response, status
from sqlalchemy.orm import Session
from storefront.db.database import get_db
from storefront.api.deps import get_current_user, paginate
from storefront.services.order_service import OrderService
from storefront.services.order_views import order_view, order_detail_view
from storefront.models.order import OrderStatus
from storefront.models.user import User
from storefront.models.schemas import (
    ApiResponse,
    OrderDetailResponse,
    OrderListResponse,
    OrderPlace,
    OrderResponse,
    ok,
)
from storefront.config import settings
from typing import Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/orders", tags=["orders"])


@router.post(
    "/place",
    response_model=ApiResponse[OrderResponse],
    status_code=status.HTTP_201_CREATED
)
def place_order(
    order_data: OrderPlace,
    response: Response,
    idempotency_key: Optional[str] = Header(None, alias="Idempotency-Key", max_length=255),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Place an order from the caller's cart
    
    Prices are snapshotted from the catalog and the cart is emptied in the
    same transaction. Repeating a request with the same **Idempotency-Key**
    header returns the first order with status 200.
    
    - **address**: shipping address (defaults to the saved address)
    - **deliveryFee**: delivery fee added to the subtotal
    - **paymentMethod**: card, bank, paypal, cash or other
    """
    logger.info(f"Placing order for user {user.id}")
    
    order, created = OrderService.place_order(db, user, order_data, idempotency_key)
    if not created:
        response.status_code = status.HTTP_200_OK
        return ok(order_view(order), "Order already placed")
    
    return ok(order_view(order), "Order placed successfully", status.HTTP_201_CREATED)


@router.put("/cancel/{order_id}", response_model=ApiResponse[OrderResponse])
def cancel_order(
    order_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Cancel an order
    
    Only pending or preparing orders can be cancelled.
    """
    logger.info(f"Cancelling order {order_id}")
    
    order = OrderService.cancel_order(db, user, order_id)
    return ok(order_view(order), "Order cancelled successfully")


@router.get("/getall", response_model=ApiResponse[OrderListResponse])
def list_orders(
    page: int = Query(1, ge=1, description="Page number"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Orders per page"),
    status: Optional[OrderStatus] = Query(None, description="Filter by status"),
    search: Optional[str] = Query(None, description="Substring of the order id"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """List the caller's orders, newest first"""
    logger.info(f"Listing orders for user {user.id}: page={page}, limit={limit}, status={status}")
    
    orders, total = OrderService.get_orders(
        db=db,
        page=page,
        limit=limit,
        user_id=user.id,
        status=status,
        search=search
    )
    
    return ok(
        OrderListResponse(
            orders=[order_view(o) for o in orders],
            pagination=paginate(total, page, limit)
        ),
        "Orders fetched successfully"
    )


@router.get("/order/{order_id}", response_model=ApiResponse[OrderDetailResponse])
def get_order(
    order_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Get one of the caller's orders with product names and images"""
    order = OrderService.get_order(db, order_id, user_id=user.id)
    return ok(order_detail_view(db, order), "Order fetched successfully")
