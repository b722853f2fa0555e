# app/database.py - пул соединений к удаленной базе ERP
import logging
import threading
from typing import Optional, Dict, Any
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import declarative_base
from app.core.config import settings

logger = logging.getLogger(__name__)

# Базовый класс для моделей удаленных таблиц
Base = declarative_base()

class ConnectionFailure(Exception):
    """Не удалось открыть соединение с удаленной базой"""
    pass

def driver_message(exc: Exception) -> str:
    """Текст ошибки драйвера без обертки SQLAlchemy"""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    return str(exc)

def _connect_args(backend: str, timeout: int) -> Dict[str, Any]:
    """Таймаут подключения в терминах конкретного драйвера"""
    if backend == "sqlite":
        return {"timeout": timeout, "check_same_thread": False}
    if backend == "postgresql":
        return {"connect_timeout": timeout}
    if backend == "mssql":
        return {"timeout": timeout}
    return {}

class RemotePool:
    """
    Единственное переиспользуемое подключение к удаленной базе.

    Движок создается лениво при первом acquire(). Неудачная попытка
    не кэшируется: следующий acquire() подключается заново.
    """

    def __init__(
        self,
        url: str,
        connect_timeout: int = 30,
        schema: Optional[str] = None,
        pool_recycle: int = 300
    ):
        self.url = make_url(url)
        self.connect_timeout = connect_timeout
        self.schema = schema
        self.pool_recycle = pool_recycle

        self._engine: Optional[Engine] = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls) -> "RemotePool":
        return cls(
            settings.ERP_DATABASE_URL,
            connect_timeout=settings.ERP_CONNECT_TIMEOUT,
            schema=settings.ERP_SCHEMA,
            pool_recycle=settings.ERP_POOL_RECYCLE
        )

    @property
    def connected(self) -> bool:
        return self._engine is not None

    @property
    def server_identity(self) -> str:
        return self.url.host or self.url.database or self.url.get_backend_name()

    @property
    def database_name(self) -> str:
        return self.url.database or ""

    def acquire(self) -> Engine:
        """Вернуть открытый движок, при необходимости подключившись"""
        engine = self._engine
        if engine is not None:
            return engine

        # Параллельные холодные запросы ждут одну попытку подключения
        with self._lock:
            if self._engine is None:
                self._engine = self._open()
            return self._engine

    def _open(self) -> Engine:
        logger.info(f"Connecting to remote database {self.server_identity}...")

        execution_options = {}
        if self.schema:
            execution_options["schema_translate_map"] = {None: self.schema}

        engine = create_engine(
            self.url,
            pool_pre_ping=True,                 # проверка соединения
            pool_recycle=self.pool_recycle,
            connect_args=_connect_args(self.url.get_backend_name(), self.connect_timeout),
            execution_options=execution_options,
            echo=False
        )

        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except Exception as e:
            engine.dispose()
            message = driver_message(e)
            logger.error(f"Connection to {self.server_identity} failed: {message}")
            raise ConnectionFailure(message) from e

        logger.info(f"Connected to remote database {self.server_identity}")
        return engine

    def invalidate(self):
        """Сбросить сломанное подключение, следующий acquire() переподключится"""
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
                logger.warning(f"Connection to {self.server_identity} invalidated")

    def dispose(self):
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
                logger.info(f"Disconnected from remote database {self.server_identity}")

# Подключение relay-процесса
pool = RemotePool.from_settings()
