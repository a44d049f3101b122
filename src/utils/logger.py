"""
Logger — настройка loguru

Модули пишут через `from loguru import logger` с префиксом компонента
("[Metrics] ...", "[Physics] ..."). Здесь только конфигурация sink'ов:
stderr и, опционально, файл с ротацией по дате.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from src.config.settings import LogConfig

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {message}"


def configure_logging(config: Optional[LogConfig] = None) -> None:
    """
    Переконфигурация глобального logger.

    Повторный вызов заменяет sink'и, а не дублирует их.

    Args:
        config: LogConfig (по умолчанию INFO в stderr)
    """
    config = config or LogConfig()

    logger.remove()
    logger.add(sys.stderr, level=config.level, format=LOG_FORMAT)

    if config.dir is not None:
        Path(config.dir).mkdir(parents=True, exist_ok=True)
        logger.add(
            sink=str(Path(config.dir) / "{time:YYYY-MM-DD}.log"),
            rotation=config.rotation,
            retention=config.retention,
            level=config.level,
            format=LOG_FORMAT,
            backtrace=True,
            diagnose=False,
        )

    logger.info(f"[Logger] configured: level={config.level}, dir={config.dir}")
