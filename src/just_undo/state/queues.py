# src/just_undo/state/queues.py
import logging
from collections import deque
from typing import Deque, List, Tuple

from .registry import ActionRegistry

logger = logging.getLogger(__name__)


class HistoryQueue:
    """
    Ограниченная очередь идентификаторов одной стороны истории (undo или redo).

    Новые элементы добавляются в конец, извлекаются тоже с конца (последнее
    действие отменяется первым), а при переполнении выбрасывается самый старый
    элемент вместе с его записью в реестре. Параллельно ведется список имен
    для UI; его порядок всегда совпадает с порядком очереди.
    """

    def __init__(self, side: str, registry: ActionRegistry, capacity: int):
        self.side = side
        self._registry = registry
        self._capacity = capacity
        self._ids: Deque[int] = deque()
        self._names: Deque[str] = deque()

    @property
    def capacity(self) -> int:
        return self._capacity

    @capacity.setter
    def capacity(self, value: int):
        self._capacity = value
        self.trim()

    @property
    def count(self) -> int:
        return len(self._ids)

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(self._names)

    @property
    def ids(self) -> Tuple[int, ...]:
        return tuple(self._ids)

    def push(self, action_id: int, name: str):
        """Добавляет идентификатор и имя, затем обрезает очередь до capacity."""
        self._ids.append(action_id)
        self._names.append(name)
        logger.debug(f"Pushed #{action_id} '{name}' to {self.side} queue ({len(self._ids)}/{self._capacity})")
        self.trim()

    def pop(self) -> int:
        """Извлекает самый новый идентификатор. IndexError, если очередь пуста."""
        action_id = self._ids.pop()
        self._names.pop()
        return action_id

    def trim(self) -> List[int]:
        """Выбрасывает самые старые элементы сверх capacity. Возвращает их идентификаторы."""
        evicted = []
        while len(self._ids) > self._capacity:
            action_id = self._ids.popleft()
            name = self._names.popleft()
            self._registry.remove(action_id)
            evicted.append(action_id)
            logger.debug(f"Evicted #{action_id} '{name}' from {self.side} queue")
        return evicted

    def clear(self):
        """Удаляет все записи этой стороны из реестра и очищает очередь."""
        for action_id in self._ids:
            self._registry.remove(action_id)
        self._ids.clear()
        self._names.clear()
        logger.debug(f"{self.side.capitalize()} queue cleared")

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)
