# src/just_undo/state/errors.py
class HistoryError(Exception):
    """Базовая ошибка менеджера истории."""
    pass


class ActionNotFound(HistoryError, KeyError):
    """Идентификатор отсутствует в реестре действий."""

    def __init__(self, action_id: int):
        super().__init__(action_id)
        self.action_id = action_id

    def __str__(self):
        return f"Action #{self.action_id} is not registered"


class InvalidResume(HistoryError):
    """resume_group вызван для идентификатора, который не является зарегистрированной группой."""
    pass


class NoActiveGroup(HistoryError):
    """Операция требует открытой группы, но ни одна группа не активна."""
    pass
