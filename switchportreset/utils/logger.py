"""
Модуль логирования для SwitchPortReset
"""
import logging
import os
import sys

ROOT_LOGGER_NAME = "switchportreset"


def setup_logger(name: str, level: str | None = None) -> logging.Logger:
    """Настройка логгера для модуля"""
    logger = logging.getLogger(name)
    level = (level or os.getenv("SWITCHPORTRESET_LOG_LEVEL", "INFO")).upper()
    # некорректный уровень из окружения отловит валидация настроек
    if not isinstance(logging.getLevelName(level), int):
        level = "INFO"
    logger.setLevel(level)

    # Проверяем, не добавлены ли уже handlers
    if logger.handlers:
        return logger

    # Формат логов
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Handler для консоли (файлов на диске сервис не пишет)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Возвращает дочерний логгер, пишущий через общий handler сервиса."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


logger = setup_logger(ROOT_LOGGER_NAME)
