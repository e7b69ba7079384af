import pytest

from just_undo import UndoManager


class Recorder:
    """Хост для тестов: журнал вызванных действий."""

    def __init__(self):
        self.calls = []

    def action(self, label):
        def invoke(*args):
            self.calls.append((label,) + args)
        invoke.__name__ = f"invoke_{label}"
        return invoke


class Counter:
    """Простейший хост: значение, которое можно увеличивать с поддержкой undo/redo."""

    def __init__(self, manager):
        self.manager = manager
        self.value = 0

    def add(self, amount, name="add"):
        self.value += amount
        self.manager.register(name, self.add, (-amount, name))


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def hooks():
    fired = {"undo": 0, "redo": 0}

    def on_undo_change():
        fired["undo"] += 1

    def on_redo_change():
        fired["redo"] += 1

    fired["on_undo_change"] = on_undo_change
    fired["on_redo_change"] = on_redo_change
    return fired


@pytest.fixture
def manager(hooks):
    return UndoManager(max_undo=20, on_undo_change=hooks["on_undo_change"],
                       on_redo_change=hooks["on_redo_change"])


@pytest.fixture
def counter(manager):
    return Counter(manager)
