from just_undo.state.queues import HistoryQueue
from just_undo.state.registry import Action, ActionRegistry


def _queue(capacity=3):
    registry = ActionRegistry()
    return registry, HistoryQueue("undo", registry, capacity)


def _push(registry, queue, name):
    action_id = registry.insert(Action(name, print))
    queue.push(action_id, name)
    return action_id


def test_pop_returns_newest_and_names_follow():
    registry, queue = _queue()
    _push(registry, queue, "x")
    y = _push(registry, queue, "y")
    assert queue.pop() == y
    assert queue.names == ("x",)
    assert queue.count == 1


def test_eviction_drops_oldest_and_its_record():
    registry, queue = _queue(capacity=2)
    x = _push(registry, queue, "x")
    y = _push(registry, queue, "y")
    z = _push(registry, queue, "z")
    assert queue.ids == (y, z)
    assert queue.names == ("y", "z")
    assert x not in registry
    assert len(registry) == 2


def test_lowering_capacity_trims():
    registry, queue = _queue(capacity=5)
    ids = [_push(registry, queue, name) for name in "abcd"]
    queue.capacity = 2
    assert queue.ids == tuple(ids[2:])
    assert queue.names == ("c", "d")
    assert len(registry) == 2


def test_clear_removes_records():
    registry, queue = _queue()
    _push(registry, queue, "a")
    _push(registry, queue, "b")
    other = registry.insert(Action("elsewhere", print))
    queue.clear()
    assert not queue
    assert queue.names == ()
    assert len(registry) == 1
    assert other in registry
