"""
User and address database models
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum as SQLEnum, ForeignKey
from sqlalchemy.sql import func
from storefront.db.database import Base
import enum
import secrets

DEFAULT_AVATAR = "https://res.cloudinary.com/dfnyh1dnu/image/upload/v1738077224/logo_ghgifr.webp"


class UserRole(str, enum.Enum):
    """User role enum"""
    USER = "User"
    ADMIN = "Admin"
    SUPPORT = "Support"


class Currency(str, enum.Enum):
    USD = "USD"
    GBP = "GBP"
    EUR = "EUR"
    PKR = "PKR"


def generate_uid() -> str:
    """12 character public user id"""
    return secrets.token_urlsafe(9)


class User(Base):
    """User model"""
    __tablename__ = "users"
    
    id = Column(Integer, primary_key=True, index=True)
    uid = Column(String(32), unique=True, index=True, nullable=False, default=generate_uid)
    fullname = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(50), nullable=False)
    hashed_password = Column(String(255), nullable=False)
    avatar = Column(String(500), default=DEFAULT_AVATAR)
    is_verified = Column(Boolean, default=False, nullable=False)
    role = Column(SQLEnum(UserRole), default=UserRole.USER, nullable=False)
    currency = Column(SQLEnum(Currency), default=Currency.USD, nullable=False)
    
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
    
    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class Address(Base):
    """Saved shipping address, one active row per user"""
    __tablename__ = "addresses"
    
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    line1 = Column(String(255), nullable=False)
    line2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    postal_code = Column(String(20), nullable=True)
    country = Column(String(100), nullable=False)
    
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    def __repr__(self):
        return f"<Address(id={self.id}, user_id={self.user_id}, city={self.city})>"
