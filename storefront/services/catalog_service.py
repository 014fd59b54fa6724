"""Catalog read logic: categories and products"""
from sqlalchemy.orm import Session, selectinload
from storefront.models.catalog import Category, Product
from storefront.models.schemas import ProductCard, ProductDetail, ProductImage, VariantResponse
from storefront.errors import NotFoundError
from typing import List, Optional, Tuple
from opentelemetry import trace
import logging

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


def product_card(product: Product) -> ProductCard:
    return ProductCard(
        id=product.id,
        name=product.name,
        price=product.price,
        discount=product.discount,
        final_price=product.final_price,
        image=product.image,
        category=product.category.name if product.category else None,
        total_stock=product.total_stock,
    )


def product_detail(product: Product) -> ProductDetail:
    return ProductDetail(
        **product_card(product).model_dump(),
        description=product.description or "",
        images=[ProductImage(**image) for image in (product.images or [])],
        variants=[VariantResponse.model_validate(v) for v in product.variants],
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


class CatalogService:
    """Catalog service for public listings"""
    
    @staticmethod
    def _listed(db: Session):
        """Products visible to shoppers"""
        return (
            db.query(Product)
            .options(selectinload(Product.category))
            .filter(
                Product.is_active.is_(True),
                Product.deleted_at.is_(None),
                Product.total_stock > 0
            )
        )
    
    @staticmethod
    def get_categories(db: Session) -> List[Category]:
        with tracer.start_as_current_span("catalog_service.get_categories"):
            categories = (
                db.query(Category)
                .filter(Category.deleted_at.is_(None))
                .order_by(Category.name)
                .all()
            )
            if not categories:
                raise NotFoundError("No categories found")
            return categories
    
    @staticmethod
    def get_category(db: Session, ref: str) -> Optional[Category]:
        """Resolve a category by id or by name"""
        query = db.query(Category).filter(Category.deleted_at.is_(None))
        if ref.isdigit():
            return query.filter(Category.id == int(ref)).first()
        return query.filter(Category.name == ref).first()
    
    @staticmethod
    def get_featured(db: Session, limit: int) -> List[Product]:
        with tracer.start_as_current_span("catalog_service.get_featured") as span:
            products = (
                CatalogService._listed(db)
                .filter(Product.is_featured.is_(True))
                .order_by(Product.created_at.desc(), Product.id.desc())
                .limit(limit)
                .all()
            )
            span.set_attribute("products.returned", len(products))
            return products
    
    @staticmethod
    def get_products(
        db: Session,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        min_price: Optional[float] = None,
        max_price: Optional[float] = None,
        category: Optional[str] = None
    ) -> Tuple[List[Product], int]:
        """Get list of products with filters and pagination"""
        with tracer.start_as_current_span("catalog_service.get_products") as span:
            query = CatalogService._listed(db)
            
            if search:
                query = query.filter(Product.name.icontains(search, autoescape=True))
                span.set_attribute("filter.search", search)
            if min_price is not None:
                query = query.filter(Product.price >= min_price)
            if max_price is not None:
                query = query.filter(Product.price <= max_price)
            if category:
                # Unknown categories do not narrow the listing
                found = CatalogService.get_category(db, category)
                if found:
                    query = query.filter(Product.category_id == found.id)
                    span.set_attribute("filter.category_id", found.id)
            
            total = query.count()
            products = (
                query.order_by(Product.created_at.desc(), Product.id.desc())
                .offset((page - 1) * limit)
                .limit(limit)
                .all()
            )
            
            span.set_attribute("products.total", total)
            return products, total
    
    @staticmethod
    def get_product(db: Session, product_id: int) -> Product:
        """Get a listed product by ID"""
        with tracer.start_as_current_span("catalog_service.get_product") as span:
            span.set_attribute("product.id", product_id)
            product = (
                db.query(Product)
                .filter(
                    Product.id == product_id,
                    Product.is_active.is_(True),
                    Product.deleted_at.is_(None)
                )
                .first()
            )
            if not product:
                raise NotFoundError("Product not found")
            return product
