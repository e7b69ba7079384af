# src/just_undo/state/history.py
import enum
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator, List, Optional, Sequence, Tuple

from .errors import InvalidResume
from .groups import Group, GroupStack
from .queues import HistoryQueue
from .registry import Action, ActionRegistry
from ..utils.config_loader import HistoryConfig

logger = logging.getLogger(__name__)


class Mode(enum.Enum):
    IDLE = "idle"
    UNDOING = "undoing"
    REDOING = "redoing"


class UndoManager:
    """
    Управляет историей undo/redo.

    Хост выполняет действие сам и регистрирует через register() обратное ему.
    undo() выполняет последнее обратное действие; все, что оно зарегистрирует
    в ответ, собирается в одну группу и попадает в очередь redo. redo() делает
    то же самое в обратную сторону. Группы (start_group/end_group) объединяют
    несколько действий в одну запись истории и могут быть вложенными.
    """

    def __init__(self, config: Optional[HistoryConfig] = None, **changes: Any):
        self._config = (config or HistoryConfig()).merged(changes)
        self._registry = ActionRegistry()
        self._undo = HistoryQueue("undo", self._registry, self._config.max_undo)
        self._redo = HistoryQueue("redo", self._registry, self._config.max_undo)
        self._groups = GroupStack(self._registry)
        self._mode = Mode.IDLE
        self._current_action: Optional[Action] = None

    # --- Конфигурация и состояние ---

    @property
    def config(self) -> HistoryConfig:
        return self._config

    def update_config(self, **changes: Any) -> "UndoManager":
        """Применяет изменения настроек. Уменьшение max_undo сразу обрезает обе очереди."""
        self._config = self._config.merged(changes)
        if "max_undo" in changes:
            undo_before, redo_before = self._undo.count, self._redo.count
            self._undo.capacity = self._config.max_undo
            self._redo.capacity = self._config.max_undo
            if self._undo.count != undo_before:
                self._notify_undo()
            if self._redo.count != redo_before:
                self._notify_redo()
        logger.debug(f"History config updated: {sorted(changes)}")
        return self

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def active_group_id(self) -> Optional[int]:
        group = self._groups.active
        return group.id if group is not None else None

    @property
    def undo_available_count(self) -> int:
        return self._undo.count

    @property
    def undo_names(self) -> Tuple[str, ...]:
        return self._undo.names

    @property
    def redo_available_count(self) -> int:
        return self._redo.count

    @property
    def redo_names(self) -> Tuple[str, ...]:
        return self._redo.names

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    # --- Уведомления ---

    def _fire(self, hook: Callable[[], None], side: str):
        try:
            hook()
        except Exception as e:
            logger.error(f"Error executing {side} change hook {getattr(hook, '__name__', hook)}: {e}",
                         exc_info=True)

    def _notify_undo(self):
        self._fire(self._config.on_undo_change, "undo")

    def _notify_redo(self):
        self._fire(self._config.on_redo_change, "redo")

    # --- Регистрация ---

    def register(self, name: str, invoke: Callable[..., Any], arguments: Sequence[Any] = (),
                 receiver: Any = None, *, action_id: Optional[int] = None,
                 add_to_queue: bool = True) -> int:
        """
        Регистрирует действие, отменяющее то, что хост только что сделал.

        При открытой группе действие добавляется в нее. Иначе во время undo
        оно уходит в очередь redo, в остальных случаях в очередь undo; новое
        действие верхнего уровня (вне undo/redo) очищает очередь redo.
        add_to_queue=False только индексирует действие, не ставя его в очередь.
        """
        return self._route(Action(name, invoke, tuple(arguments), receiver), action_id, add_to_queue)

    def _route(self, action: Action, action_id: Optional[int], add_to_queue: bool) -> int:
        name = action.name
        if self._groups.active is not None:
            action_id = self._registry.insert(action, action_id)
            self._groups.append(action_id)
            logger.debug(f"Action '{name}' (#{action_id}) added to group '{self._groups.active.name}'")
            return action_id

        action_id = self._registry.insert(action, action_id)
        if not add_to_queue:
            return action_id

        if self._mode is Mode.UNDOING:
            # Запись "отменить отмену" показывается под именем отменяемого действия
            self._redo.push(action_id, self._display_name(name))
            self._notify_redo()
            return action_id

        if self._mode is Mode.IDLE:
            # Новое действие начинает новую ветку истории
            self.clear_redo_queue()
        self._undo.push(action_id, self._display_name(name))
        self._notify_undo()
        return action_id

    def _display_name(self, name: str) -> str:
        if self._mode is not Mode.IDLE and self._current_action is not None:
            return self._current_action.name
        return name

    # --- Undo / Redo ---

    @contextmanager
    def _working(self, mode: Mode, action: Action) -> Iterator[None]:
        """Устанавливает режим и текущее действие, восстанавливая прежние при любом выходе."""
        previous = (self._mode, self._current_action)
        self._mode, self._current_action = mode, action
        try:
            yield
        finally:
            self._mode, self._current_action = previous

    def _replay(self, action: Action):
        """Выполняет действие внутри служебной группы, чтобы его ответ стал одной записью."""
        group_id = self._groups.open(action.name)
        try:
            action.run()
        except Exception as e:
            logger.error(f"Error during {self._mode.value} of '{action.name}': {e}", exc_info=True)
            self._discard_until(group_id)
            for member_id in action.members or ():
                self._registry.remove(member_id)
            raise
        self.end_group()

    def undo(self) -> "UndoManager":
        """Отменяет последнее действие или группу действий."""
        if not self._undo:
            logger.warning("Undo queue is empty.")
            return self

        action = self._registry.take(self._undo.pop())
        logger.debug(f"Undoing '{action.name}'")
        try:
            with self._working(Mode.UNDOING, action):
                self._replay(action)
        finally:
            self._notify_undo()
        return self

    def redo(self) -> "UndoManager":
        """Повторяет последнее отмененное действие или группу."""
        if not self._redo:
            logger.warning("Redo queue is empty.")
            return self

        action = self._registry.take(self._redo.pop())
        logger.debug(f"Redoing '{action.name}'")
        try:
            with self._working(Mode.REDOING, action):
                self._replay(action)
        finally:
            self._notify_redo()
        return self

    # --- Очистка ---

    def clear_undo_queue(self) -> "UndoManager":
        self._undo.clear()
        self._notify_undo()
        return self

    def clear_redo_queue(self) -> "UndoManager":
        self._redo.clear()
        self._notify_redo()
        return self

    def clear_all_queues(self) -> "UndoManager":
        self._undo.clear()
        self._redo.clear()
        self._notify_undo()
        self._notify_redo()
        return self

    # --- Группы ---

    def _run_group(self, pending: List[int]):
        """Выполняет действия группы, начиная с последнего добавленного."""
        while pending:
            action = self._registry.take(pending.pop())
            action.run()

    def start_group(self, name: str) -> int:
        """Открывает группу (вложенную, если уже есть активная). Возвращает ее id."""
        return self._groups.open(name)

    def end_group(self) -> "UndoManager":
        """Закрывает активную группу и регистрирует ее как одно действие по правилам текущего режима."""
        group = self._groups.close()
        composite = Action(group.name, self._run_group, (group.pending,), members=group.pending)
        if group.resumed:
            # Составное действие уже стоит в очереди: только обновляем запись в реестре
            self._registry.insert(composite, group.id)
        else:
            self._route(composite, group.id, add_to_queue=True)
        return self

    def _discard_only(self) -> Group:
        """Снимает активную группу, не выполняя и не записывая ее действия."""
        group = self._groups.close()
        if not group.resumed:
            # Записи возобновленной группы принадлежат уже зарегистрированному составному действию
            for action_id in group.pending:
                self._registry.remove(action_id)
        logger.debug(f"Discarded group '{group.name}' (#{group.id})")
        return group

    def _discard_until(self, group_id: int) -> Group:
        """Снимает группы со стека, пока не будет снята группа group_id (включительно)."""
        while True:
            group = self._discard_only()
            if group.id == group_id:
                return group

    def _run_and_discard(self):
        """Откатывает активную группу: выполняет ее действия, ничего не записывая в историю."""
        group = self._groups.close()
        logger.debug(f"Rolling back group '{group.name}' ({len(group.pending)} actions)")
        # Все, что зарегистрируют откатываемые действия, собирается здесь и выбрасывается
        capture_id = self._groups.open("rolling back")
        try:
            self._run_group(group.pending)
        finally:
            self._discard_until(capture_id)
            if not group.resumed:
                for action_id in group.pending:
                    self._registry.remove(action_id)

    def exit_group(self, rollback: bool = True) -> "UndoManager":
        """
        Покидает активную группу, не записывая ее в историю.
        При rollback=True ее действия сразу выполняются в обратном порядке.
        """
        if rollback:
            self._run_and_discard()
        else:
            self._discard_only()
        return self

    def resume_group(self, group_id: int) -> "UndoManager":
        """Снова открывает ранее закрытую группу, пока она еще есть в истории."""
        action = self._registry.get(group_id)
        if action is None or not action.is_group:
            raise InvalidResume(f"#{group_id} is not a registered group")
        self._groups.resume(Group(name=action.name, id=group_id, pending=action.members, resumed=True))
        return self

    @contextmanager
    def group(self, name: str = "Grouped action") -> Iterator[int]:
        """Контекстный менеджер для группировки. При исключении группа откатывается."""
        group_id = self.start_group(name)
        try:
            yield group_id
        except Exception:
            logger.debug(f"Group '{name}' failed, rolling back")
            self.exit_group(rollback=True)
            raise
        self.end_group()
