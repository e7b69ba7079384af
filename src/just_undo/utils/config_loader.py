# src/just_undo/utils/config_loader.py
import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional

import platformdirs
import toml

from .logging_setup import setup_logging

logger = logging.getLogger(__name__)

APP_NAME = "just-undo"
APP_AUTHOR = "dimnissv"
CONFIG_FILE_NAME = "history.toml"

# Ключи, которые можно задать в файле; хуки задаются только из кода
FILE_KEYS = ("max_undo", "log_level")


class ConfigError(Exception):
    """Ошибка при загрузке, парсинге или проверке конфигурации."""
    pass


def _noop():
    pass


@dataclass(frozen=True)
class HistoryConfig:
    """Неизменяемые настройки менеджера истории. Каждый менеджер хранит свою копию."""

    max_undo: int = 20
    on_undo_change: Callable[[], None] = _noop
    on_redo_change: Callable[[], None] = _noop

    def __post_init__(self):
        if isinstance(self.max_undo, bool) or not isinstance(self.max_undo, int) or self.max_undo <= 0:
            raise ConfigError(f"max_undo must be a positive integer, got {self.max_undo!r}")
        for name in ("on_undo_change", "on_redo_change"):
            if not callable(getattr(self, name)):
                raise ConfigError(f"{name} must be callable")

    def merged(self, changes: Mapping[str, Any]) -> "HistoryConfig":
        """Возвращает новую конфигурацию с примененными изменениями. Неизвестные ключи отклоняются."""
        known = {f.name for f in fields(self)}
        unknown = sorted(set(changes) - known)
        if unknown:
            raise ConfigError(f"Unknown history option(s): {', '.join(unknown)}")
        return replace(self, **changes)


def load_toml(file_path: Path) -> Dict[str, Any]:
    """
    Загружает TOML файл с настройками истории.

    Args:
        file_path: Путь к TOML файлу.

    Returns:
        Словарь с данными из файла.

    Raises:
        FileNotFoundError: Если файл не найден.
        ConfigError: Если произошла ошибка парсинга или чтения TOML.
    """
    if not file_path.is_file():
        raise FileNotFoundError(f"History config file not found: {file_path}")

    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            return toml.load(f)
    except toml.TomlDecodeError as e:
        raise ConfigError(f"History config {file_path} is not valid TOML: {e}") from e
    except IOError as e:
        raise ConfigError(f"Cannot read history config {file_path}: {e}") from e


def default_config_path() -> Path:
    config_dir = Path(platformdirs.user_config_dir(APP_NAME, APP_AUTHOR))
    return config_dir / CONFIG_FILE_NAME


def load_history_config(path: Optional[Path] = None, base: Optional[HistoryConfig] = None) -> HistoryConfig:
    """
    Читает таблицу [history] из TOML файла и накладывает ее на base.

    Распознаются ключи max_undo и log_level. Если файла нет, возвращается base
    (или настройки по умолчанию) с предупреждением в лог.
    """
    base = base or HistoryConfig()
    path = Path(path) if path is not None else default_config_path()
    if not path.is_file():
        logger.warning(f"History config not found: {path}. Using defaults.")
        return base

    data = load_toml(path)
    section = data.get("history", {})
    if not isinstance(section, dict):
        raise ConfigError(f"[history] in {path} must be a table")

    unknown = sorted(set(section) - set(FILE_KEYS))
    if unknown:
        raise ConfigError(f"Unknown key(s) in [history] of {path}: {', '.join(unknown)}")

    changes = dict(section)
    log_level = changes.pop("log_level", None)
    if log_level is not None:
        setup_logging(str(log_level))

    config = base.merged(changes)
    logger.info(f"Loaded history config from {path}: max_undo={config.max_undo}")
    return config
