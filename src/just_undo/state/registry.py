# src/just_undo/state/registry.py
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import ActionNotFound

logger = logging.getLogger(__name__)


@dataclass
class Action:
    """Именованное действие с привязанными аргументами (обратное уже выполненному хостом)."""

    name: str
    invoke: Callable[..., Any]
    arguments: Tuple[Any, ...] = field(default_factory=tuple)
    receiver: Any = None  # Если задан, передается первым аргументом
    members: Optional[List[int]] = None  # Только у составных действий (групп)

    @property
    def is_group(self) -> bool:
        return self.members is not None

    def run(self) -> Any:
        if self.receiver is None:
            return self.invoke(*self.arguments)
        return self.invoke(self.receiver, *self.arguments)


class ActionRegistry:
    """
    Хранилище живых действий: идентификатор -> Action.
    Идентификаторы монотонно растут и никогда не переиспользуются.
    """

    def __init__(self):
        self._actions: Dict[int, Action] = {}
        self._next_id = 1

    def reserve_id(self) -> int:
        """Выдает следующий свободный идентификатор, ничего не сохраняя."""
        action_id = self._next_id
        self._next_id += 1
        return action_id

    def insert(self, action: Action, action_id: Optional[int] = None) -> int:
        """
        Сохраняет действие.
        Если action_id передан (зарезервирован ранее), запись сохраняется под ним,
        иначе выдается новый идентификатор.
        """
        if action_id is None:
            action_id = self.reserve_id()
        self._actions[action_id] = action
        logger.debug(f"Registered action #{action_id} '{action.name}'")
        return action_id

    def get(self, action_id: int) -> Optional[Action]:
        return self._actions.get(action_id)

    def take(self, action_id: int) -> Action:
        """Удаляет и возвращает действие. ActionNotFound, если его нет."""
        try:
            return self._actions.pop(action_id)
        except KeyError:
            raise ActionNotFound(action_id) from None

    def remove(self, action_id: int):
        """Удаляет действие, если оно есть (для массовой очистки). Для групп удаляет и их участников."""
        action = self._actions.pop(action_id, None)
        if action is not None and action.members:
            for member_id in action.members:
                self.remove(member_id)

    def __contains__(self, action_id: int) -> bool:
        return action_id in self._actions

    def __len__(self) -> int:
        return len(self._actions)
