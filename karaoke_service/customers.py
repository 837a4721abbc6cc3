from typing import List

from fastapi import APIRouter, Depends, status

from . import schemas
from .stores import CustomerStore, get_customer_store

router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("", response_model=schemas.CustomerRead, status_code=status.HTTP_201_CREATED)
def create_customer(
    customer_in: schemas.CustomerCreate,
    customers: CustomerStore = Depends(get_customer_store),
):
    """
    Register a customer.

    The e-mail is lower-cased and must not belong to another customer;
    phone and e-mail must match their expected formats.
    """
    return customers.insert(**customer_in.model_dump())


@router.get("", response_model=List[schemas.CustomerRead])
def list_customers(customers: CustomerStore = Depends(get_customer_store)):
    """List customers ordered by name."""
    return customers.list()


@router.get("/{customer_id}", response_model=schemas.CustomerRead)
def get_customer(customer_id: int, customers: CustomerStore = Depends(get_customer_store)):
    return customers.get(customer_id)


@router.put("/{customer_id}", response_model=schemas.CustomerRead)
def update_customer(
    customer_id: int,
    update_data: schemas.CustomerUpdate,
    customers: CustomerStore = Depends(get_customer_store),
):
    return customers.update(customer_id, **update_data.model_dump(exclude_unset=True))


@router.delete("/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_customer(customer_id: int, customers: CustomerStore = Depends(get_customer_store)):
    # Bookings of the customer are not removed
    customers.delete(customer_id)
    return
