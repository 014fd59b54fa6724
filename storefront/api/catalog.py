"""FastAPI routes for the public catalog"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from storefront.db.database import get_db
from storefront.api.deps import paginate
from storefront.services.catalog_service import CatalogService, product_card, product_detail
from storefront.models.schemas import (
    ApiResponse,
    CategoryResponse,
    ProductCard,
    ProductDetail,
    ProductListResponse,
    ok,
)
from storefront.config import settings
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["catalog"])


@router.get("/categories/getall", response_model=ApiResponse[List[CategoryResponse]])
def list_categories(db: Session = Depends(get_db)):
    """List all categories"""
    categories = CatalogService.get_categories(db)
    return ok([CategoryResponse.model_validate(c) for c in categories], "Categories fetched successfully")


@router.get("/products/featured", response_model=ApiResponse[List[ProductCard]])
def list_featured(db: Session = Depends(get_db)):
    """Featured products that are in stock"""
    products = CatalogService.get_featured(db, settings.featured_limit)
    return ok([product_card(p) for p in products], "Featured products fetched successfully")


@router.get("/products/getall", response_model=ApiResponse[ProductListResponse])
def list_products(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    search: Optional[str] = Query(None, description="Case-insensitive match on product name"),
    min_price: Optional[float] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(None, alias="maxPrice", ge=0),
    category: Optional[str] = Query(None, description="Category id or name"),
    db: Session = Depends(get_db)
):
    """
    List products with pagination and filters
    
    - **search**: substring of the product name
    - **minPrice** / **maxPrice**: price range
    - **category**: category id or name
    """
    logger.info(f"Listing products: page={page}, limit={limit}")
    
    products, total = CatalogService.get_products(
        db=db,
        page=page,
        limit=limit,
        search=search,
        min_price=min_price,
        max_price=max_price,
        category=category
    )
    
    return ok(
        ProductListResponse(
            products=[product_card(p) for p in products],
            pagination=paginate(total, page, limit)
        ),
        "Products fetched successfully"
    )


@router.get("/products/details/{product_id}", response_model=ApiResponse[ProductDetail])
def get_product(product_id: int, db: Session = Depends(get_db)):
    """Get a specific product by ID"""
    product = CatalogService.get_product(db, product_id)
    return ok(product_detail(product), "Product details fetched successfully")
