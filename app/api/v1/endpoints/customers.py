# app/api/v1/endpoints/customers.py
from typing import List
from fastapi import APIRouter, Depends
from app.api.deps import get_gateway
from app.schemas.bridge import ErrorResponse
from app.schemas.catalog import Customer
from app.services.gateway import QueryGateway

router = APIRouter()

@router.get("", response_model=List[Customer], responses={500: {"model": ErrorResponse}})
def read_customers(gateway: QueryGateway = Depends(get_gateway)):
    """Клиенты, по имени"""
    return gateway.list_customers()
