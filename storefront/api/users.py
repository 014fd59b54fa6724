"""FastAPI routes for users and sessions"""
from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session
from storefront.db.database import get_db
from storefront.api.deps import get_current_user
from storefront.services.auth import create_access_token
from storefront.services.user_service import UserService
from storefront.models.user import User
from storefront.models.schemas import (
    ApiResponse,
    LoginRequest,
    LoginResponse,
    UserRegister,
    UserResponse,
    ok,
)
from storefront.config import settings
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/users", tags=["users"])


@router.get("/hello", response_model=ApiResponse[str])
def hello():
    return ok("Hello World")


@router.post("/register", response_model=ApiResponse[UserResponse], status_code=status.HTTP_201_CREATED)
def register_user(user: UserRegister, db: Session = Depends(get_db)):
    """Register a new user"""
    created = UserService.create_user(db, user)
    return ok(UserResponse.model_validate(created), "User registered successfully", status.HTTP_201_CREATED)


@router.post("/login", response_model=ApiResponse[LoginResponse])
def login(credentials: LoginRequest, response: Response, db: Session = Depends(get_db)):
    """Login user, return a JWT and set it as the auth cookie"""
    user = UserService.authenticate_user(db, credentials.email, credentials.password)
    
    access_token = create_access_token(
        data={"sub": str(user.id), "uid": user.uid, "email": user.email, "role": user.role.value}
    )
    
    response.set_cookie(
        key=settings.auth_cookie_name,
        value=access_token,
        httponly=True,
        secure=settings.environment != "dev",
        samesite="lax",
        max_age=settings.access_token_expire_minutes * 60
    )
    
    return ok(
        LoginResponse(access_token=access_token, user=UserResponse.model_validate(user)),
        "Logged in successfully"
    )


@router.get("/me", response_model=ApiResponse[UserResponse])
def get_me(user: User = Depends(get_current_user)):
    """Get the authenticated user"""
    return ok(UserResponse.model_validate(user), "User fetched successfully")
