# app/api/v1/endpoints/products.py
from typing import List
from fastapi import APIRouter, Depends
from app.api.deps import get_gateway
from app.schemas.bridge import ErrorResponse
from app.schemas.catalog import ProductRecord
from app.services.gateway import QueryGateway

router = APIRouter()

@router.get("", response_model=List[ProductRecord], responses={500: {"model": ErrorResponse}})
def read_products(gateway: QueryGateway = Depends(get_gateway)):
    """Товары в наличии, по имени"""
    return gateway.list_products()
