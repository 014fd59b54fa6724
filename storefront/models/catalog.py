"""
Catalog database models
"""
from sqlalchemy import (
    Column, Integer, String, Text, Float, Boolean, DateTime, ForeignKey, JSON, event
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, Session
from typing import Optional
from storefront.db.database import Base


class Category(Base):
    """Category model"""
    __tablename__ = "categories"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    def __repr__(self):
        return f"<Category(id={self.id}, name={self.name})>"


class Product(Base):
    """Product model"""
    __tablename__ = "products"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, default="", nullable=False)
    price = Column(Float, nullable=False)
    discount = Column(Float, default=0, nullable=False)  # percentage 0-100
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    images = Column(JSON, default=list, nullable=False)  # [{"url": ..., "alt": ...}]
    total_stock = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    
    deleted_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    
    category = relationship("Category")
    variants = relationship(
        "ProductVariant",
        back_populates="product",
        cascade="all, delete-orphan",
        order_by="ProductVariant.id"
    )
    
    @property
    def final_price(self) -> Optional[float]:
        """Price after discount, rounded to cents"""
        if self.price is None:
            return None
        discount = self.discount or 0
        return round(self.price - (self.price * discount) / 100, 2)
    
    @property
    def image(self) -> Optional[str]:
        """URL of the first image"""
        if self.images:
            return self.images[0].get("url")
        return None
    
    @property
    def is_available(self) -> bool:
        return bool(self.is_active) and self.deleted_at is None
    
    def find_variant(self, size: str, color: str) -> Optional["ProductVariant"]:
        for variant in self.variants:
            if variant.size == size and variant.color == color:
                return variant
        return None
    
    def recalculate_total_stock(self):
        self.total_stock = sum(v.stock or 0 for v in self.variants)
    
    def __repr__(self):
        return f"<Product(id={self.id}, name={self.name}, price={self.price})>"


class ProductVariant(Base):
    """Size/color combination with its own stock"""
    __tablename__ = "product_variants"
    
    id = Column(Integer, primary_key=True, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    size = Column(String(50), nullable=False)
    color = Column(String(50), nullable=False)
    stock = Column(Integer, default=0, nullable=False)
    
    product = relationship("Product", back_populates="variants")
    
    def __repr__(self):
        return f"<ProductVariant(product_id={self.product_id}, size={self.size}, color={self.color}, stock={self.stock})>"


@event.listens_for(Session, "before_flush")
def _sync_total_stock(session, flush_context, instances):
    """Keep Product.total_stock equal to the sum of its variant stocks"""
    products = set()
    for obj in list(session.new) + list(session.dirty):
        if isinstance(obj, Product):
            products.add(obj)
        elif isinstance(obj, ProductVariant) and obj.product is not None:
            products.add(obj.product)
    for product in products:
        product.recalculate_total_stock()
