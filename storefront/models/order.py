"""
Order database models and status transition rules
"""
from sqlalchemy import (
    Column, Integer, String, Float, DateTime, JSON, Enum as SQLEnum, ForeignKey, UniqueConstraint
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from storefront.db.database import Base
import enum
import uuid


class OrderStatus(str, enum.Enum):
    """Order status enum"""
    PENDING = "pending"
    PREPARING = "preparing"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    REFUNDED = "refunded"


class PaymentStatus(str, enum.Enum):
    """Payment status enum, independent of OrderStatus"""
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


class PaymentMethod(str, enum.Enum):
    CARD = "card"
    BANK = "bank"
    PAYPAL = "paypal"
    CASH = "cash"
    OTHER = "other"


# Statuses the owning user may cancel from
USER_CANCELLABLE = frozenset({OrderStatus.PENDING, OrderStatus.PREPARING})

# No rejection once an order is here
FINAL_STATUSES = frozenset({
    OrderStatus.REJECTED,
    OrderStatus.CANCELLED,
    OrderStatus.DELIVERED,
    OrderStatus.REFUNDED,
})

# Targets an admin may set directly; rejection goes through reject() with a reason
ADMIN_ASSIGNABLE = frozenset(set(OrderStatus) - {OrderStatus.REJECTED})


def generate_order_id() -> str:
    return f"ORD-{uuid.uuid4()}"


class Order(Base):
    """Order model"""
    __tablename__ = "orders"
    
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(String(64), unique=True, index=True, nullable=False, default=generate_order_id)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    
    subtotal = Column(Float, nullable=False)
    delivery_fee = Column(Float, default=0, nullable=False)
    total_amount = Column(Float, nullable=False)
    
    status = Column(SQLEnum(OrderStatus), default=OrderStatus.PENDING, nullable=False, index=True)
    payment_method = Column(SQLEnum(PaymentMethod), default=PaymentMethod.CASH, nullable=False)
    payment_status = Column(SQLEnum(PaymentStatus), default=PaymentStatus.PENDING, nullable=False, index=True)
    reject_reason = Column(String(500), nullable=True)
    
    # Snapshot of the shipping address at placement time
    address = Column(JSON, nullable=False)
    
    idempotency_key = Column(String(255), nullable=True)
    
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    user = relationship("User")
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position"
    )
    
    __table_args__ = (
        UniqueConstraint("user_id", "idempotency_key", name="uq_orders_user_idempotency_key"),
    )
    
    def recalculate_totals(self):
        """Recompute subtotal and total from the line snapshots"""
        self.subtotal = round(sum(item.quantity * item.price for item in self.items), 2)
        self.total_amount = round(self.subtotal + (self.delivery_fee or 0), 2)
    
    def __repr__(self):
        return f"<Order(order_id={self.order_id}, status={self.status}, total={self.total_amount})>"


class OrderItem(Base):
    """Order line with the unit price frozen at placement"""
    __tablename__ = "order_items"
    
    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("orders.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    size = Column(String(50), nullable=False)
    color = Column(String(50), nullable=False)
    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    
    order = relationship("Order", back_populates="items")
    product = relationship("Product")
    
    def __repr__(self):
        return f"<OrderItem(id={self.id}, product_id={self.product_id}, qty={self.quantity})>"
