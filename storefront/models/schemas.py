"""
Pydantic schemas for request/response validation

JSON keys are camelCase on the wire; either casing is accepted on input.
"""
from pydantic import BaseModel, Field, EmailStr, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Generic, List, Optional, TypeVar
from datetime import datetime
from storefront.models.user import UserRole, Currency
from storefront.models.order import OrderStatus, PaymentStatus, PaymentMethod

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base schema with camelCase aliases"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True
    )


class ApiResponse(CamelModel, Generic[T]):
    """Success envelope shared by every endpoint"""
    status_code: int = 200
    data: Optional[T] = None
    message: str = "Success"
    success: bool = True


def ok(data=None, message: str = "Success", status_code: int = 200) -> ApiResponse:
    """Wrap data in the success envelope"""
    return ApiResponse(status_code=status_code, data=data, message=message, success=status_code < 400)


class Pagination(CamelModel):
    total: int
    page: int
    limit: int
    total_pages: int


# Users

class UserRegister(CamelModel):
    """Schema for registering a user"""
    fullname: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=6, max_length=100)


class LoginRequest(CamelModel):
    """Schema for login request"""
    email: EmailStr
    password: str


class UserResponse(CamelModel):
    """Schema for user response"""
    id: int
    uid: str
    fullname: str
    email: str
    phone: str
    avatar: Optional[str] = None
    role: UserRole
    currency: Currency
    is_verified: bool
    created_at: datetime


class LoginResponse(CamelModel):
    """Schema for login response"""
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class UserSummary(CamelModel):
    """Lightweight user info attached to admin order listings"""
    id: int
    uid: str
    fullname: str
    email: str


class UserContact(UserSummary):
    phone: str


# Address book

class AddressCreate(CamelModel):
    line1: str = Field(..., min_length=1, max_length=255)
    line2: Optional[str] = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)


class AddressUpdate(CamelModel):
    """All fields optional; missing fields keep their value"""
    line1: Optional[str] = Field(None, min_length=1, max_length=255)
    line2: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: Optional[str] = Field(None, min_length=1, max_length=100)


class AddressResponse(AddressCreate):
    id: int
    created_at: datetime
    updated_at: Optional[datetime] = None


# Catalog

class CategoryResponse(CamelModel):
    id: int
    name: str


class ProductImage(CamelModel):
    url: str
    alt: str = ""


class VariantSelector(CamelModel):
    size: str = Field(..., min_length=1, max_length=50)
    color: str = Field(..., min_length=1, max_length=50)


class VariantResponse(VariantSelector):
    stock: int


class ProductCard(CamelModel):
    """Product as shown in listings"""
    id: int
    name: str
    price: float
    discount: float
    final_price: float
    image: Optional[str] = None
    category: Optional[str] = None
    total_stock: int


class ProductDetail(ProductCard):
    description: str
    images: List[ProductImage] = []
    variants: List[VariantResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None


class ProductListResponse(CamelModel):
    products: List[ProductCard]
    pagination: Pagination


# Cart

class CartAdd(CamelModel):
    product_id: int = Field(..., gt=0)
    variant: VariantSelector
    quantity: int = Field(..., ge=1)


class CartUpdate(CamelModel):
    """A quantity of zero or less removes the line"""
    quantity: int


class CartProduct(CamelModel):
    id: int
    name: str
    price: float
    discount: float
    final_price: float
    image: Optional[str] = None


class CartItemResponse(CamelModel):
    id: int
    product_id: int
    variant: VariantSelector
    quantity: int
    product: Optional[CartProduct] = None
    created_at: datetime


# Orders

class ShippingAddress(CamelModel):
    """Address copied onto an order"""
    full_name: str = Field(..., min_length=1, max_length=255)
    phone: str = Field(..., min_length=1, max_length=50)
    line1: str = Field(..., min_length=1, max_length=255)
    line2: Optional[str] = Field(None, max_length=255)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    postal_code: Optional[str] = Field(None, max_length=20)
    country: str = Field(..., min_length=1, max_length=100)


class OrderPlace(CamelModel):
    """Schema for placing an order from the caller's cart"""
    address: Optional[ShippingAddress] = None
    delivery_fee: float = Field(0, ge=0)
    payment_method: PaymentMethod = PaymentMethod.CASH


class OrderReject(CamelModel):
    reject_reason: Optional[str] = None


class PaymentStatusUpdate(CamelModel):
    payment_status: Optional[str] = None


class OrderStatusUpdate(CamelModel):
    status: Optional[str] = None


class ProductDisplay(CamelModel):
    """Product fields resolved when an order is read"""
    id: int
    name: str
    image: Optional[str] = None


class OrderItemResponse(CamelModel):
    product_id: int
    variant: VariantSelector
    quantity: int
    price: float


class OrderItemDetail(OrderItemResponse):
    product: Optional[ProductDisplay] = None


class OrderResponse(CamelModel):
    """Schema for order response"""
    order_id: str
    items: List[OrderItemResponse]
    subtotal: float
    delivery_fee: float
    total_amount: float
    status: OrderStatus
    payment_status: PaymentStatus
    payment_method: PaymentMethod
    reject_reason: Optional[str] = None
    address: ShippingAddress
    created_at: datetime
    updated_at: Optional[datetime] = None


class OrderDetailResponse(OrderResponse):
    items: List[OrderItemDetail]


class AdminOrderSummary(OrderResponse):
    user: Optional[UserSummary] = None


class AdminOrderDetail(OrderDetailResponse):
    user: Optional[UserContact] = None


class OrderListResponse(CamelModel):
    """Schema for list of orders"""
    orders: List[OrderResponse]
    pagination: Pagination


class AdminOrderListResponse(CamelModel):
    orders: List[AdminOrderSummary]
    pagination: Pagination
