# app/api/v1/endpoints/health.py
from fastapi import APIRouter, Depends
from app.api.deps import get_gateway
from app.schemas.bridge import HealthResponse, HealthErrorResponse
from app.services.gateway import QueryGateway

router = APIRouter()

@router.get(
    "/health",
    response_model=HealthResponse,
    responses={500: {"model": HealthErrorResponse}}
)
def health(gateway: QueryGateway = Depends(get_gateway)):
    """
    Проверка relay и удаленной базы.
    При недоступности базы возвращает 500 с текстом ошибки драйвера.
    """
    return gateway.health()
