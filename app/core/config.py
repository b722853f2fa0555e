from typing import Optional, List
from urllib.parse import quote_plus
from pydantic_settings import BaseSettings
from pydantic import validator

class Settings(BaseSettings):
    PROJECT_NAME: str = "ERP Bridge"
    VERSION: str = "3.2.0"

    # Удаленная база ERP (SQL Server)
    ERP_DB_DRIVER: str = "mssql+pyodbc"
    ERP_DB_SERVER: str = "localhost"
    ERP_DB_PORT: int = 1433
    ERP_DB_USER: str = "erp_bridge"
    ERP_DB_PASSWORD: str = "erp_bridge_password"
    ERP_DB_NAME: str = "enterpriseadmindb"
    ERP_ODBC_DRIVER: str = "ODBC Driver 18 for SQL Server"
    ERP_ENCRYPT: bool = True
    ERP_TRUST_SERVER_CERTIFICATE: bool = True
    ERP_DATABASE_URL: Optional[str] = None

    @validator("ERP_DATABASE_URL", pre=True, always=True)
    def assemble_erp_connection(cls, v: Optional[str], values: dict) -> str:
        if isinstance(v, str) and v:
            return v
        user = quote_plus(values.get("ERP_DB_USER", ""))
        password = quote_plus(values.get("ERP_DB_PASSWORD", ""))
        url = (
            f"{values.get('ERP_DB_DRIVER')}://{user}:{password}"
            f"@{values.get('ERP_DB_SERVER')}:{values.get('ERP_DB_PORT')}"
            f"/{values.get('ERP_DB_NAME')}"
        )
        if values.get("ERP_DB_DRIVER", "").endswith("pyodbc"):
            # Опции шифрования передаются драйверу через строку подключения
            url += (
                f"?driver={quote_plus(values.get('ERP_ODBC_DRIVER', ''))}"
                f"&Encrypt={'yes' if values.get('ERP_ENCRYPT') else 'no'}"
                f"&TrustServerCertificate={'yes' if values.get('ERP_TRUST_SERVER_CERTIFICATE') else 'no'}"
            )
        return url

    ERP_CONNECT_TIMEOUT: int = 30           # секунды
    ERP_POOL_RECYCLE: int = 300             # пересоздание соединений каждые 5 мин
    ERP_SCHEMA: Optional[str] = "dbo"       # пусто для SQLite

    @validator("ERP_SCHEMA", pre=True)
    def empty_schema_is_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None

    # Запросы
    PRODUCTS_LIMIT: int = 100
    CUSTOMERS_LIMIT: int = 200
    QUERY_LOG_CAPACITY: int = 30

    # HTTP relay
    BRIDGE_HOST: str = "0.0.0.0"
    BRIDGE_PORT: int = 3000
    BACKEND_CORS_ORIGINS: List[str] = ["*"]

    # Клиент витрины
    BRIDGE_BASE_URL: str = "http://localhost:3000"
    BRIDGE_TIMEOUT: int = 30
    BRIDGE_CONFIG_FILE: str = ".erp_bridge_config.json"
    PLACEHOLDER_IMAGE: str = "https://images.unsplash.com/photo-1581091226825-a6a2a5aee158?w=400"

    # Настройки логирования
    LOG_LEVEL: str = "INFO"
    LOG_FILE: Optional[str] = None

    class Config:
        case_sensitive = True
        env_file = ".env"

settings = Settings()
