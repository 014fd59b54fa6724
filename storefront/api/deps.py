"""
FastAPI dependencies shared by the routers

The authenticated user is resolved here and handed to the services as an
explicit argument.
"""
from fastapi import Depends, Request
from sqlalchemy.orm import Session
from storefront.db.database import get_db
from storefront.models.user import User
from storefront.models.schemas import Pagination
from storefront.services.auth import decode_access_token
from storefront.services.user_service import UserService
from storefront.errors import AuthError, ForbiddenError
from storefront.config import settings
from typing import Optional
import math
import logging

logger = logging.getLogger(__name__)


def get_token(request: Request) -> Optional[str]:
    """Access token from the auth cookie or a Bearer header"""
    token = request.cookies.get(settings.auth_cookie_name)
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    if authorization.startswith("Bearer "):
        return authorization[len("Bearer "):].strip() or None
    return None


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Dependency for the authenticated user"""
    token = get_token(request)
    if not token:
        raise AuthError("Unauthorized: No token provided")
    
    claims = decode_access_token(token)
    user = UserService.get_user_by_uid(db, claims.get("uid", ""))
    if not user:
        raise AuthError("Unauthorized: User not found")
    
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Dependency for admin-only routes"""
    if not user.is_admin:
        logger.warning(f"User {user.id} denied admin access")
        raise ForbiddenError("Access denied: Admins only")
    return user


def paginate(total: int, page: int, limit: int) -> Pagination:
    return Pagination(
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit) if limit else 0
    )
