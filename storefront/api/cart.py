"""FastAPI routes for the cart"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from storefront.db.database import get_db
from storefront.api.deps import get_current_user
from storefront.services.cart_service import CartService, cart_item_view
from storefront.models.user import User
from storefront.models.schemas import ApiResponse, CartAdd, CartItemResponse, CartUpdate, ok
from typing import List
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/cart", tags=["cart"])


@router.get("/getall", response_model=ApiResponse[List[CartItemResponse]])
def get_cart(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    items = CartService.get_cart(db, user)
    return ok([cart_item_view(item) for item in items], "Cart fetched successfully")


@router.post("/add", response_model=ApiResponse[CartItemResponse])
def add_to_cart(
    data: CartAdd,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    item = CartService.add_item(db, user, data)
    return ok(cart_item_view(item), "Product added to cart")


@router.put("/update/{item_id}", response_model=ApiResponse[CartItemResponse])
def update_cart_item(
    item_id: int,
    data: CartUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    item = CartService.update_quantity(db, user, item_id, data.quantity)
    return ok(cart_item_view(item), "Cart item updated")


@router.delete("/remove/{item_id}", response_model=ApiResponse[None])
def remove_cart_item(
    item_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    CartService.remove_item(db, user, item_id)
    return ok(None, "Cart item removed")


@router.delete("/clear", response_model=ApiResponse[None])
def clear_cart(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    cleared = CartService.clear_cart(db, user)
    logger.info(f"Cleared {cleared} cart item(s) for user {user.id}")
    return ok(None, "Cart cleared successfully")
