# app/api/v1/endpoints/orders.py
from fastapi import APIRouter, Depends
from app.api.deps import get_gateway
from app.schemas.bridge import ErrorResponse
from app.schemas.order import Order, OrderCreate
from app.services.gateway import QueryGateway

router = APIRouter()

@router.post("", response_model=Order, responses={500: {"model": ErrorResponse}})
def create_order(order_in: OrderCreate, gateway: QueryGateway = Depends(get_gateway)):
    """
    Записать заказ в ERP.
    Повтор не идемпотентен: каждый номер заказа создает новую запись.
    """
    return gateway.create_order(order_in)
