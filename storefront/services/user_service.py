"""User business logic"""
from sqlalchemy.orm import Session
from storefront.models.user import User
from storefront.models.schemas import UserRegister
from storefront.errors import ValidationError, AuthError
from typing import Optional
from passlib.context import CryptContext
from opentelemetry import trace
import logging

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


class UserService:
    """User service for business logic"""
    
    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password"""
        return pwd_context.hash(password)
    
    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify a password"""
        return pwd_context.verify(plain_password, hashed_password)
    
    @staticmethod
    def get_user(db: Session, user_id: int) -> Optional[User]:
        """Get active user by ID"""
        with tracer.start_as_current_span("user_service.get_user") as span:
            span.set_attribute("user.id", user_id)
            return db.query(User).filter(User.id == user_id, User.deleted_at.is_(None)).first()
    
    @staticmethod
    def get_user_by_uid(db: Session, uid: str) -> Optional[User]:
        """Get active user by public uid"""
        return db.query(User).filter(User.uid == uid, User.deleted_at.is_(None)).first()
    
    @staticmethod
    def get_user_by_email(db: Session, email: str) -> Optional[User]:
        """Get user by email, deleted or not"""
        return db.query(User).filter(User.email == email.strip().lower()).first()
    
    @staticmethod
    def create_user(db: Session, user_data: UserRegister) -> User:
        """Create new user"""
        with tracer.start_as_current_span("user_service.create_user") as span:
            email = user_data.email.strip().lower()
            
            if UserService.get_user_by_email(db, email):
                raise ValidationError(f"Email {email} already exists")
            
            user = User(
                fullname=user_data.fullname.strip(),
                email=email,
                phone=user_data.phone.strip(),
                hashed_password=UserService.hash_password(user_data.password)
            )
            
            db.add(user)
            db.commit()
            db.refresh(user)
            
            span.set_attribute("user.id", user.id)
            logger.info(f"Created user {user.id}: {user.email}")
            
            return user
    
    @staticmethod
    def authenticate_user(db: Session, email: str, password: str) -> User:
        """Authenticate user, raising AuthError on bad credentials"""
        with tracer.start_as_current_span("user_service.authenticate") as span:
            span.set_attribute("user.email", email)
            
            user = UserService.get_user_by_email(db, email)
            if not user or user.deleted_at is not None:
                logger.warning(f"User {email} not found")
                raise AuthError("Invalid email or password")
            
            if not UserService.verify_password(password, user.hashed_password):
                logger.warning(f"Invalid password for user {email}")
                raise AuthError("Invalid email or password")
            
            logger.info(f"User {email} authenticated successfully")
            return user
