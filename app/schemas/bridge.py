from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

class ConnectionStatus(str, Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    CHECKING = "checking"

# Настройки подключения витрины, сохраняются между сессиями
class BridgeConfig(BaseModel):
    base_url: str = Field("http://localhost:3000", alias="baseUrl")
    status: ConnectionStatus = ConnectionStatus.DISCONNECTED
    last_ping: Optional[datetime] = Field(None, alias="lastPing")

    class Config:
        populate_by_name = True

class QueryType(str, Enum):
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    ERROR = "ERROR"

class QueryLogEntry(BaseModel):
    timestamp: datetime
    query: str
    type: QueryType

# Ошибка подключения для показа пользователю
class ConnectionProblem(BaseModel):
    title: str
    message: str

class HealthResponse(BaseModel):
    status: str = "OK"
    db: str
    latency: str
    server: str

class HealthErrorResponse(BaseModel):
    status: str = "ERROR"
    message: str

class ErrorResponse(BaseModel):
    error: str
