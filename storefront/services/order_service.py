# storefront/services/order_service.py
"""
Order workflow: placement from the cart and status/payment transitions
"""
from sqlalchemy.orm import Session, selectinload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from storefront.models.order import (
    Order,
    OrderItem,
    OrderStatus,
    PaymentStatus,
    USER_CANCELLABLE,
    FINAL_STATUSES,
    ADMIN_ASSIGNABLE,
)
from storefront.models.user import User
from storefront.models.schemas import OrderPlace, ShippingAddress
from storefront.services.address_service import AddressService
from storefront.services.cart_service import CartService
from storefront.errors import ValidationError, NotFoundError, ConflictError, ServerError
from typing import List, Optional, Tuple
from opentelemetry import trace
import logging

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def _parse_status(enum_cls, value: Optional[str], allowed, field: str):
    """Map a raw string onto an allowed enum member or raise ValidationError"""
    try:
        parsed = enum_cls(value.strip()) if value else None
    except ValueError:
        parsed = None
    if parsed is None or parsed not in allowed:
        choices = ", ".join(s.value for s in enum_cls if s in allowed)
        raise ValidationError(f"Invalid {field}. Allowed values: {choices}")
    return parsed


class OrderService:
    """Order service for business logic"""

    @staticmethod
    def _base_query(db: Session):
        return (
            db.query(Order)
            .options(selectinload(Order.items), selectinload(Order.user))
            .filter(Order.deleted_at.is_(None))
        )

    @staticmethod
    def get_order(
        db: Session,
        order_id: str,
        user_id: Optional[int] = None,
        for_update: bool = False
    ) -> Order:
        """
        Get an order by its public identifier

        Args:
            user_id: restrict to orders owned by this user
            for_update: lock the row until the transaction ends
        """
        with tracer.start_as_current_span("order_service.get_order") as span:
            span.set_attribute("order.id", order_id)

            query = OrderService._base_query(db).filter(Order.order_id == order_id)
            if user_id is not None:
                query = query.filter(Order.user_id == user_id)
            if for_update:
                query = query.with_for_update(of=Order)

            order = query.first()
            if not order:
                raise NotFoundError(f"Order {order_id} not found")
            return order

    @staticmethod
    def get_orders(
        db: Session,
        page: int = 1,
        limit: int = 10,
        user_id: Optional[int] = None,
        status: Optional[OrderStatus] = None,
        payment_status: Optional[PaymentStatus] = None,
        search: Optional[str] = None
    ) -> Tuple[List[Order], int]:
        """Get list of orders with filters, newest first"""
        with tracer.start_as_current_span("order_service.get_orders") as span:
            query = OrderService._base_query(db)

            if user_id is not None:
                query = query.filter(Order.user_id == user_id)
                span.set_attribute("filter.user_id", user_id)

            if status:
                query = query.filter(Order.status == status)
                span.set_attribute("filter.status", status.value)

            if payment_status:
                query = query.filter(Order.payment_status == payment_status)
                span.set_attribute("filter.payment_status", payment_status.value)

            if search:
                query = query.filter(Order.order_id.icontains(search.strip(), autoescape=True))
                span.set_attribute("filter.search", search)

            total = query.count()
            orders = (
                query.order_by(Order.created_at.desc(), Order.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )

            span.set_attribute("orders.total", total)
            span.set_attribute("orders.returned", len(orders))

            return orders, total

    @staticmethod
    def _shipping_address(db: Session, user: User, address: Optional[ShippingAddress]) -> dict:
        """Address snapshot for a new order; falls back to the saved address"""
        if address is not None:
            return address.model_dump()

        saved = AddressService.get_address(db, user)
        if not saved:
            raise ValidationError("Shipping address is required")

        return ShippingAddress(
            full_name=user.fullname,
            phone=user.phone,
            line1=saved.line1,
            line2=saved.line2,
            city=saved.city,
            state=saved.state,
            postal_code=saved.postal_code,
            country=saved.country,
        ).model_dump()

    @staticmethod
    def place_order(
        db: Session,
        user: User,
        order_data: OrderPlace,
        idempotency_key: Optional[str] = None
    ) -> Tuple[Order, bool]:
        """
        Convert the user's whole cart into one order

        Process:
        1. Return the earlier order if the idempotency key was already used
        2. Resolve every cart line's product and snapshot its final price
        3. Compute subtotal and total
        4. Create the order and clear the cart in one transaction

        Returns:
            (order, created) where created is False for a replayed key
        """
        with tracer.start_as_current_span("order_service.place_order") as span:
            span.set_attribute("user.id", user.id)

            if idempotency_key:
                existing = OrderService._find_by_idempotency_key(db, user, idempotency_key)
                if existing:
                    logger.info(f"Replaying order {existing.order_id} for idempotency key {idempotency_key}")
                    return existing, False

            lines = CartService.active_items(db, user).all()
            if not lines:
                raise ValidationError("Cart is empty")

            span.set_attribute("items.count", len(lines))
            logger.info(f"Placing order for user {user.id} with {len(lines)} cart item(s)")

            address = OrderService._shipping_address(db, user, order_data.address)

            order = Order(
                user_id=user.id,
                delivery_fee=order_data.delivery_fee,
                payment_method=order_data.payment_method,
                status=OrderStatus.PENDING,
                payment_status=PaymentStatus.PENDING,
                address=address,
                idempotency_key=idempotency_key
            )

            for position, line in enumerate(lines):
                product = line.product
                if not product or not product.is_available:
                    logger.warning(f"Cart item {line.id} references unavailable product {line.product_id}")
                    raise NotFoundError(f"Product {line.product_id} not found")

                price = product.final_price
                if price is None:
                    price = product.price

                order.items.append(OrderItem(
                    position=position,
                    product_id=product.id,
                    size=line.size,
                    color=line.color,
                    quantity=line.quantity,
                    price=price
                ))

            order.recalculate_totals()
            span.set_attribute("order.total_amount", order.total_amount)

            try:
                db.add(order)
                CartService.clear_cart(db, user, item_ids=[line.id for line in lines], commit=False)
                db.commit()
            except IntegrityError:
                db.rollback()
                # Lost a race against a retry carrying the same key
                if idempotency_key:
                    existing = OrderService._find_by_idempotency_key(db, user, idempotency_key)
                    if existing:
                        return existing, False
                logger.error(f"Failed to place order for user {user.id}", exc_info=True)
                raise ServerError("Failed to place order. Please try again.")
            except SQLAlchemyError:
                db.rollback()
                logger.error(f"Failed to place order for user {user.id}", exc_info=True)
                raise ServerError("Failed to place order. Please try again.")

            db.refresh(order)

            span.set_attribute("order.id", order.order_id)
            logger.info(f"Order {order.order_id} placed: subtotal={order.subtotal}, total={order.total_amount}")

            return order, True

    @staticmethod
    def _find_by_idempotency_key(db: Session, user: User, key: str) -> Optional[Order]:
        """Keys stay reserved after the order is deleted"""
        order = (
            db.query(Order)
            .options(selectinload(Order.items), selectinload(Order.user))
            .filter(Order.user_id == user.id, Order.idempotency_key == key)
            .first()
        )
        if order is not None and order.deleted_at is not None:
            raise ConflictError("Idempotency key was used by an order that no longer exists")
        return order

    @staticmethod
    def _save(db: Session, order: Order) -> Order:
        order_id = order.order_id
        try:
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.error(f"Failed to update order {order_id}", exc_info=True)
            raise ServerError("Failed to update order. Please try again.")
        db.refresh(order)
        return order

    @staticmethod
    def cancel_order(db: Session, user: User, order_id: str) -> Order:
        """Cancel an order on behalf of its owner"""
        with tracer.start_as_current_span("order_service.cancel_order") as span:
            span.set_attribute("order.id", order_id)

            order = OrderService.get_order(db, order_id, user_id=user.id, for_update=True)

            if order.status not in USER_CANCELLABLE:
                logger.warning(f"Cannot cancel order {order_id} with status {order.status.value}")
                raise ConflictError(f"Order cannot be cancelled when status is '{order.status.value}'")

            order.status = OrderStatus.CANCELLED
            OrderService._save(db, order)

            logger.info(f"Order {order_id} cancelled by user {user.id}")
            return order

    @staticmethod
    def reject_order(db: Session, order_id: str, reject_reason: Optional[str]) -> Order:
        """
        Reject an order that has not reached a final status

        The reason must contain non-whitespace text and is stored as given.
        """
        with tracer.start_as_current_span("order_service.reject_order") as span:
            span.set_attribute("order.id", order_id)

            order = OrderService.get_order(db, order_id, for_update=True)

            if not reject_reason or not reject_reason.strip():
                raise ValidationError("Reject reason is required")

            if order.status in FINAL_STATUSES:
                logger.warning(f"Cannot reject order {order_id} with status {order.status.value}")
                raise ConflictError(f"Order cannot be rejected when status is '{order.status.value}'")

            old_status = order.status
            order.status = OrderStatus.REJECTED
            order.reject_reason = reject_reason
            OrderService._save(db, order)

            span.set_attribute("status.old", old_status.value)
            logger.info(f"Order {order_id} rejected: {old_status.value} -> rejected")
            return order

    @staticmethod
    def update_payment_status(db: Session, order_id: str, payment_status: Optional[str]) -> Order:
        """Set the payment status; order status is left alone"""
        with tracer.start_as_current_span("order_service.update_payment_status") as span:
            span.set_attribute("order.id", order_id)

            new_status = _parse_status(PaymentStatus, payment_status, set(PaymentStatus), "payment status")
            order = OrderService.get_order(db, order_id, for_update=True)

            old_status = order.payment_status
            order.payment_status = new_status
            OrderService._save(db, order)

            span.set_attribute("payment_status.new", new_status.value)
            logger.info(f"Order {order_id} payment status updated: {old_status.value} -> {new_status.value}")
            return order

    @staticmethod
    def update_status(db: Session, order_id: str, status: Optional[str]) -> Order:
        """Set any admin-assignable status regardless of the current one"""
        with tracer.start_as_current_span("order_service.update_status") as span:
            span.set_attribute("order.id", order_id)

            new_status = _parse_status(OrderStatus, status, ADMIN_ASSIGNABLE, "status")
            order = OrderService.get_order(db, order_id, for_update=True)

            old_status = order.status
            order.status = new_status
            if new_status != OrderStatus.REJECTED:
                order.reject_reason = None
            OrderService._save(db, order)

            span.set_attribute("status.old", old_status.value)
            span.set_attribute("status.new", new_status.value)
            logger.info(f"Order {order_id} status updated: {old_status.value} -> {new_status.value}")
            return order
