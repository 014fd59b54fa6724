"""FastAPI routes for the address book"""
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from storefront.db.database import get_db
from storefront.api.deps import get_current_user
from storefront.services.address_service import AddressService
from storefront.models.user import User
from storefront.models.schemas import AddressCreate, AddressResponse, AddressUpdate, ApiResponse, ok
from typing import Optional

router = APIRouter(prefix="/api/v1/address", tags=["address"])


@router.get("/get", response_model=ApiResponse[Optional[AddressResponse]])
def get_address(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    address = AddressService.get_address(db, user)
    data = AddressResponse.model_validate(address) if address else None
    return ok(data, "Address fetched successfully")


@router.post("/add", response_model=ApiResponse[AddressResponse], status_code=status.HTTP_201_CREATED)
def add_address(
    data: AddressCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    address = AddressService.add_address(db, user, data)
    return ok(AddressResponse.model_validate(address), "Address added successfully", status.HTTP_201_CREATED)


@router.put("/update", response_model=ApiResponse[AddressResponse])
def update_address(
    data: AddressUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    address = AddressService.update_address(db, user, data)
    return ok(AddressResponse.model_validate(address), "Address updated successfully")
