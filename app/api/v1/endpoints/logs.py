# app/api/v1/endpoints/logs.py
from typing import List
from fastapi import APIRouter, Depends
from app.api.deps import get_gateway
from app.schemas.bridge import QueryLogEntry
from app.services.gateway import QueryGateway

router = APIRouter()

@router.get("", response_model=List[QueryLogEntry])
def read_logs(gateway: QueryGateway = Depends(get_gateway)):
    """Последние запросы relay, новые первыми"""
    return gateway.logs()
