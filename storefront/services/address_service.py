"""Address book business logic"""
from sqlalchemy.orm import Session
from storefront.models.user import User, Address
from storefront.models.schemas import AddressCreate, AddressUpdate
from storefront.errors import ValidationError, NotFoundError
from typing import Optional
from opentelemetry import trace
import logging

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)


class AddressService:
    """One saved address per user"""
    
    @staticmethod
    def get_address(db: Session, user: User) -> Optional[Address]:
        with tracer.start_as_current_span("address_service.get_address") as span:
            span.set_attribute("user.id", user.id)
            return (
                db.query(Address)
                .filter(Address.user_id == user.id, Address.deleted_at.is_(None))
                .first()
            )
    
    @staticmethod
    def add_address(db: Session, user: User, data: AddressCreate) -> Address:
        with tracer.start_as_current_span("address_service.add_address") as span:
            span.set_attribute("user.id", user.id)
            
            if AddressService.get_address(db, user):
                raise ValidationError("User already has an address")
            
            address = Address(user_id=user.id, **data.model_dump())
            db.add(address)
            db.commit()
            db.refresh(address)
            
            logger.info(f"Address {address.id} added for user {user.id}")
            return address
    
    @staticmethod
    def update_address(db: Session, user: User, data: AddressUpdate) -> Address:
        with tracer.start_as_current_span("address_service.update_address") as span:
            span.set_attribute("user.id", user.id)
            
            address = AddressService.get_address(db, user)
            if not address:
                raise NotFoundError("Address not found")
            
            for field, value in data.model_dump(exclude_unset=True, exclude_none=True).items():
                setattr(address, field, value)
            
            db.commit()
            db.refresh(address)
            
            logger.info(f"Address {address.id} updated for user {user.id}")
            return address
