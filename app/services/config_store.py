import json
import logging
import os
import tempfile
from pydantic import ValidationError
from app.core.config import settings
from app.schemas.bridge import BridgeConfig, ConnectionStatus

logger = logging.getLogger(__name__)

class BridgeConfigStore:
    """Хранение BridgeConfig между сессиями в JSON файле"""

    def __init__(self, path: str = settings.BRIDGE_CONFIG_FILE):
        self.path = path

    def default(self) -> BridgeConfig:
        return BridgeConfig(baseUrl=settings.BRIDGE_BASE_URL, status=ConnectionStatus.DISCONNECTED)

    def load(self) -> BridgeConfig:
        if not os.path.exists(self.path):
            return self.default()

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                config = BridgeConfig.model_validate(json.load(f))
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable bridge config {self.path}: {e}")
            return self.default()

        # Прерванная проверка из прошлой сессии
        if config.status == ConnectionStatus.CHECKING:
            config.status = ConnectionStatus.DISCONNECTED
        return config

    def save(self, config: BridgeConfig):
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(config.model_dump_json(by_alias=True))
            os.replace(tmp_path, self.path)
        except OSError:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
