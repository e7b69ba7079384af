# src/just_undo/__init__.py
"""
Менеджер истории undo/redo: хост регистрирует обратные действия,
менеджер воспроизводит их в хронологическом порядке с поддержкой групп.
"""

# Экспорт ключевых классов для удобства использования
from .state.history import UndoManager, Mode
from .state.registry import Action
from .state.errors import HistoryError, ActionNotFound, InvalidResume, NoActiveGroup
from .utils.config_loader import HistoryConfig, ConfigError, load_history_config

__version__ = "0.1.0"

__all__ = [
    "UndoManager",
    "Mode",
    "Action",
    "HistoryConfig",
    "HistoryError",
    "ActionNotFound",
    "InvalidResume",
    "NoActiveGroup",
    "ConfigError",
    "load_history_config",
    "__version__",
]
