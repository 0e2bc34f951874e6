from fastapi import APIRouter, Depends
from typing import List

from storefront.api.deps import get_address_service, get_current_user_id
from storefront.domain.exceptions import AddressNotFound
from storefront.domain.schemas import AddressCreate, AddressOut
from storefront.services.address_service import AddressService

router = APIRouter(prefix="/addresses", tags=["addresses"])


@router.post("", response_model=AddressOut, status_code=201)
def create_address(
    payload: AddressCreate,
    user_id: int = Depends(get_current_user_id),
    svc: AddressService = Depends(get_address_service),
):
    return svc.create_address(user_id, payload)


@router.get("", response_model=List[AddressOut])
def list_addresses(
    user_id: int = Depends(get_current_user_id),
    svc: AddressService = Depends(get_address_service),
):
    return svc.list_addresses(user_id)


# before /{address_id}, otherwise "default" is parsed as an id
@router.get("/default", response_model=AddressOut)
def get_default_address(
    user_id: int = Depends(get_current_user_id),
    svc: AddressService = Depends(get_address_service),
):
    address = svc.get_default_address(user_id)
    if not address:
        raise AddressNotFound("default")
    return address


@router.get("/{address_id}", response_model=AddressOut)
def get_address(
    address_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: AddressService = Depends(get_address_service),
):
    return svc.get_address(user_id, address_id)


@router.put("/{address_id}", response_model=AddressOut)
def update_address(
    address_id: int,
    payload: AddressCreate,
    user_id: int = Depends(get_current_user_id),
    svc: AddressService = Depends(get_address_service),
):
    """
    Replaces the address with a new one (new id). Past orders keep the old
    address, a cart using it is moved to the new one.
    """
    return svc.update_address(user_id, address_id, payload)


@router.put("/{address_id}/default", response_model=AddressOut)
def set_default_address(
    address_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: AddressService = Depends(get_address_service),
):
    return svc.set_default_address(user_id, address_id)


@router.delete("/{address_id}", status_code=204)
def delete_address(
    address_id: int,
    user_id: int = Depends(get_current_user_id),
    svc: AddressService = Depends(get_address_service),
):
    svc.delete_address(user_id, address_id)
