# app/api/deps.py
from app.services.gateway import QueryGateway, gateway

def get_gateway() -> QueryGateway:
    """FastAPI dependency: шлюз запросов relay-процесса"""
    return gateway
