from storefront.models.user import User, Address, UserRole, Currency
from storefront.models.catalog import Category, Product, ProductVariant
from storefront.models.cart import CartItem
from storefront.models.order import Order, OrderItem, OrderStatus, PaymentStatus, PaymentMethod

__all__ = [
    "User",
    "Address",
    "UserRole",
    "Currency",
    "Category",
    "Product",
    "ProductVariant",
    "CartItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "PaymentStatus",
    "PaymentMethod",
]
