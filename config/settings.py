"""
Конфигурация сервиса SwitchPortReset
Все настройки загружаются из переменных окружения с префиксом SWITCHPORTRESET_
и fallback на значения по умолчанию.
"""
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings
from typing import Optional

LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class ConfigError(Exception):
    """Окружение не удалось прочитать или оно содержит некорректные значения."""


class Settings(BaseSettings):
    """Основные настройки сервиса"""

    # ==================== Mode ====================
    # false - FastAPI/uvicorn работают в production (тихом) режиме
    debug: bool = True

    # ==================== UniFi Controller ====================
    baseurl: str = "https://demo.ui.com"
    username: str = "admin"
    password: str = "password"
    request_timeout: float = Field(30.0, gt=0)  # в секундах, на каждый вызов
    verify_ssl: bool = True

    # ==================== API Server ====================
    api_host: str = "0.0.0.0"
    api_port: int = Field(9000, gt=0, lt=65536)

    # ==================== System ====================
    log_level: str = "INFO"

    @field_validator("baseurl")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        value = value.strip().rstrip("/")
        if not value.startswith(("http://", "https://")):
            raise ValueError("baseurl must start with http:// or https://")
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        value = value.upper()
        if value not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return value

    class Config:
        env_prefix = "SWITCHPORTRESET_"
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"  # Игнорировать неизвестные поля
        frozen = True


# Глобальный экземпляр настроек (создается лениво)
_settings: Optional[Settings] = None


def load_settings() -> Settings:
    """Читает настройки из окружения, ошибки валидации превращаются в ConfigError."""
    try:
        return Settings()
    except ValidationError as e:
        raise ConfigError(f"Invalid SWITCHPORTRESET_* configuration: {e}") from e


def get_settings() -> Settings:
    """Возвращает экземпляр настроек."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
