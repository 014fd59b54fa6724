"""Cart business logic"""
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.sql import func
from storefront.models.cart import CartItem
from storefront.models.catalog import Product
from storefront.models.user import User
from storefront.models.schemas import CartAdd, CartItemResponse, CartProduct, VariantSelector
from storefront.errors import ValidationError, NotFoundError
from typing import List, Optional
from opentelemetry import trace
import logging

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def cart_item_view(item: CartItem) -> CartItemResponse:
    product = item.product
    return CartItemResponse(
        id=item.id,
        product_id=item.product_id,
        variant=VariantSelector(size=item.size, color=item.color),
        quantity=item.quantity,
        product=CartProduct(
            id=product.id,
            name=product.name,
            price=product.price,
            discount=product.discount,
            final_price=product.final_price,
            image=product.image,
        ) if product else None,
        created_at=item.created_at,
    )


class CartService:
    """Cart service for business logic"""

    @staticmethod
    def active_items(db: Session, user: User):
        """Query for the user's live cart lines, oldest first"""
        return (
            db.query(CartItem)
            .filter(CartItem.user_id == user.id, CartItem.deleted_at.is_(None))
            .order_by(CartItem.created_at, CartItem.id)
        )

    @staticmethod
    def _get_item(db: Session, user: User, item_id: int) -> CartItem:
        item = (
            CartService.active_items(db, user)
            .filter(CartItem.id == item_id)
            .first()
        )
        if not item:
            raise NotFoundError("Cart item not found")
        return item

    @staticmethod
    def add_item(db: Session, user: User, data: CartAdd) -> CartItem:
        """Add a variant to the cart, merging with an existing line"""
        with tracer.start_as_current_span("cart_service.add_item") as span:
            span.set_attribute("user.id", user.id)
            span.set_attribute("product.id", data.product_id)

            product = (
                db.query(Product)
                .filter(
                    Product.id == data.product_id,
                    Product.is_active.is_(True),
                    Product.deleted_at.is_(None)
                )
                .first()
            )
            if not product:
                raise NotFoundError("Product not found")

            variant = product.find_variant(data.variant.size, data.variant.color)
            if not variant:
                raise ValidationError("Invalid product variant")

            if variant.stock < data.quantity:
                raise ValidationError("Not enough stock for this variant")

            item = (
                CartService.active_items(db, user)
                .filter(
                    CartItem.product_id == product.id,
                    CartItem.size == variant.size,
                    CartItem.color == variant.color
                )
                .first()
            )

            if item:
                if item.quantity + data.quantity > variant.stock:
                    raise ValidationError("Exceeds available stock")
                item.quantity += data.quantity
            else:
                item = CartItem(
                    user_id=user.id,
                    product_id=product.id,
                    size=variant.size,
                    color=variant.color,
                    quantity=data.quantity
                )
                db.add(item)

            db.commit()
            db.refresh(item)

            logger.info(f"Cart item {item.id} for user {user.id} now has quantity {item.quantity}")
            return item

    @staticmethod
    def get_cart(db: Session, user: User) -> List[CartItem]:
        """Live cart lines; lines that can no longer be bought are removed"""
        with tracer.start_as_current_span("cart_service.get_cart") as span:
            span.set_attribute("user.id", user.id)

            items = (
                CartService.active_items(db, user)
                .options(selectinload(CartItem.product).selectinload(Product.variants))
                .all()
            )

            valid_items = []
            pruned = 0
            for item in items:
                product = item.product
                variant = product.find_variant(item.size, item.color) if product else None
                if not product or not product.is_available or not variant or variant.stock <= 0:
                    item.deleted_at = func.now()
                    pruned += 1
                    continue
                valid_items.append(item)

            if pruned:
                db.commit()
                logger.info(f"Removed {pruned} unavailable cart item(s) for user {user.id}")

            span.set_attribute("cart.items", len(valid_items))
            return valid_items

    @staticmethod
    def update_quantity(db: Session, user: User, item_id: int, quantity: int) -> CartItem:
        """Set a line's quantity; zero or less removes it"""
        with tracer.start_as_current_span("cart_service.update_quantity") as span:
            span.set_attribute("user.id", user.id)
            span.set_attribute("cart_item.id", item_id)

            item = CartService._get_item(db, user, item_id)
            product = item.product

            if not product or not product.is_available:
                item.deleted_at = func.now()
                db.commit()
                raise NotFoundError("Product no longer available, removed from cart")

            variant = product.find_variant(item.size, item.color)
            if not variant:
                item.deleted_at = func.now()
                db.commit()
                raise NotFoundError("Product variant not available, removed from cart")

            if variant.stock <= 0:
                item.deleted_at = func.now()
                db.commit()
                raise ValidationError("Product out of stock, removed from cart")

            if quantity <= 0:
                item.deleted_at = func.now()
            else:
                if quantity > variant.stock:
                    raise ValidationError(f"Only {variant.stock} item(s) available for this variant")
                item.quantity = quantity

            db.commit()
            db.refresh(item)
            return item

    @staticmethod
    def remove_item(db: Session, user: User, item_id: int):
        with tracer.start_as_current_span("cart_service.remove_item") as span:
            span.set_attribute("cart_item.id", item_id)

            item = CartService._get_item(db, user, item_id)
            item.deleted_at = func.now()
            db.commit()

            logger.info(f"Cart item {item_id} removed for user {user.id}")

    @staticmethod
    def clear_cart(
        db: Session,
        user: User,
        item_ids: Optional[List[int]] = None,
        commit: bool = True
    ) -> int:
        """
        Soft-delete live cart lines; returns how many were removed

        Args:
            item_ids: only these lines (default: the whole cart)
        """
        with tracer.start_as_current_span("cart_service.clear_cart") as span:
            span.set_attribute("user.id", user.id)

            query = db.query(CartItem).filter(
                CartItem.user_id == user.id,
                CartItem.deleted_at.is_(None)
            )
            if item_ids is not None:
                query = query.filter(CartItem.id.in_(item_ids))

            cleared = query.update({CartItem.deleted_at: func.now()}, synchronize_session="fetch")
            if commit:
                db.commit()

            span.set_attribute("cart.cleared", cleared)
            return cleared
