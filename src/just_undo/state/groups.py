# src/just_undo/state/groups.py
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .errors import NoActiveGroup
from .registry import ActionRegistry

logger = logging.getLogger(__name__)


@dataclass
class Group:
    """Накопитель незавершенного составного действия."""

    name: str
    id: int
    pending: List[int] = field(default_factory=list)
    resumed: bool = False  # Возобновлена через resume_group: уже стоит в очереди


class GroupStack:
    """
    Стек групп для вложенной группировки.
    Активна всегда только верхняя группа, остальные приостановлены.
    """

    def __init__(self, registry: ActionRegistry):
        self._registry = registry
        self._active: Optional[Group] = None
        self._suspended: List[Group] = []

    @property
    def active(self) -> Optional[Group]:
        return self._active

    @property
    def depth(self) -> int:
        """Количество открытых групп, включая активную."""
        return len(self._suspended) + (self._active is not None)

    def _suspend_active(self):
        if self._active is not None:
            self._suspended.append(self._active)

    def open(self, name: str) -> int:
        self._suspend_active()
        self._active = Group(name=name, id=self._registry.reserve_id())
        logger.debug(f"Opened group '{name}' (#{self._active.id}), depth {self.depth}")
        return self._active.id

    def resume(self, group: Group):
        self._suspend_active()
        self._active = group
        logger.debug(f"Resumed group '{group.name}' (#{group.id}), depth {self.depth}")

    def close(self) -> Group:
        """Снимает активную группу и восстанавливает предыдущую из стека."""
        if self._active is None:
            raise NoActiveGroup("No group is open")
        group = self._active
        self._active = self._suspended.pop() if self._suspended else None
        logger.debug(f"Closed group '{group.name}' (#{group.id}) with {len(group.pending)} actions")
        return group

    def append(self, action_id: int):
        if self._active is None:
            raise NoActiveGroup(f"Cannot add action #{action_id}: no group is open")
        self._active.pending.append(action_id)
