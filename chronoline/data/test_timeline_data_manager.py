"""
Tests for the timeline session state.
"""

import pytest

from chronoline.data.models import DateValue, TimelineEvent, TimelineFrame, TimelinePeriod
from chronoline.data.timeline_data_manager import TimelineDataManager, sample_items
from chronoline.timeline_config import TimelineConfig
from chronoline.utils.error_handler import ItemNotFoundError


@pytest.fixture
def manager():
    return TimelineDataManager()


@pytest.fixture
def rome(manager):
    manager.add_items(sample_items())
    return manager


def test_viewport_from_config():
    config = TimelineConfig()
    config.set_view_range(1900, 2000)

    manager = TimelineDataManager(config)

    assert manager.viewport.snapshot().as_tuple() == (1900, 2000)


def test_add_item_assigns_id_and_containment(rome):
    event = rome.add_item(TimelineEvent('', 'Battle of Actium', DateValue(-31, 9, 2)))

    assert event.id
    assert event.period_id == '1'
    assert event.frame_id == '5'
    assert rome.get_item(event.id) == event


def test_duplicate_ids_are_reassigned(manager):
    first = manager.add_item(TimelineEvent('x', 'A', DateValue(1)))
    second = manager.add_item(TimelineEvent('x', 'B', DateValue(2)))

    assert first.id == 'x'
    assert second.id != 'x'


def test_sample_data_containment(rome):
    caesar = rome.get_item('3')
    assert caesar.period_id == '1'
    assert caesar.frame_id == '5'
    assert rome.get_item('2').frame_id == '5'
    assert rome.get_item('9').period_id == '8'


def test_get_unknown_item_raises(manager):
    with pytest.raises(ItemNotFoundError):
        manager.get_item('missing')


def test_update_item_rederives_containment(rome):
    caesar = rome.get_item('3')
    moved = TimelineEvent(caesar.id, caesar.title, DateValue(100), color=caesar.color)

    updated = rome.update_item(moved)

    assert updated.period_id == '2'
    assert updated.frame_id == '5'


def test_editing_container_reparents_children(rome):
    republic = rome.get_item('1')
    rome.update_item(TimelinePeriod(republic.id, republic.title, DateValue(-509), DateValue(-50)))

    assert rome.get_item('3').period_id is None


def test_delete_container_clears_references(rome):
    rome.delete_item('5')

    assert rome.get_item('3').frame_id is None
    assert rome.get_item('1').frame_id is None


def test_delete_unknown_item_raises(manager):
    with pytest.raises(ItemNotFoundError):
        manager.delete_item('missing')


def test_links(rome):
    rome.begin_link('6')
    link = rome.complete_link('7', color='red')

    assert link.source_id == '6'
    assert link.target_id == '7'
    assert rome.links == (link,)

    updated = rome.update_link(link.id, 'blue')
    assert updated.color == 'blue'

    rome.delete_link(link.id)
    assert rome.links == ()
    with pytest.raises(ItemNotFoundError):
        rome.delete_link(link.id)


def test_link_onto_source_cancels(rome):
    rome.begin_link('6')
    assert rome.complete_link('6') is None
    assert rome.link_source_id is None
    assert rome.links == ()


def test_complete_without_begin_does_nothing(rome):
    assert rome.complete_link('6') is None


def test_delete_item_removes_its_links(rome):
    rome.begin_link('6')
    rome.complete_link('7')

    rome.delete_item('7')

    assert rome.links == ()


def test_drag_commits_rounded_levels(rome):
    rome.begin_drag('6')
    rome.drag_by(0.4)
    rome.drag_by(0.8)

    assert rome.get_item('6').y_level == 0

    moved = rome.end_drag()

    assert moved.y_level == 1
    assert rome.drag_item_id is None


def test_frame_drag_snaps_to_half_levels(rome):
    rome.begin_drag('5')
    rome.drag_by(-0.3)
    moved = rome.end_drag()

    assert moved.start_y == pytest.approx(-1.0)


def test_cancel_gesture_discards_drag_and_link(rome):
    rome.begin_drag('6')
    rome.drag_by(3)
    rome.begin_link('7')

    rome.cancel_gesture()

    assert rome.end_drag() is None
    assert rome.get_item('6').y_level == 0
    assert rome.link_source_id is None


def test_small_drag_commits_nothing(rome):
    calls = []
    rome.add_listener(lambda: calls.append(1))
    rome.begin_drag('6')
    rome.drag_by(0.2)

    assert rome.end_drag() is None
    assert calls == []


def test_listeners_are_notified(manager):
    calls = []

    def listener():
        calls.append(len(manager.items))

    manager.add_listener(listener)
    manager.add_item(TimelineEvent('', 'A', DateValue(1)))
    manager.pan(100, 1000)
    manager.remove_listener(listener)
    manager.add_item(TimelineEvent('', 'B', DateValue(2)))

    assert calls == [1, 1]


def test_zoom_and_pan_delegate_to_viewport(manager):
    manager.zoom(0.5, 525)
    assert manager.viewport.span == pytest.approx(1525)

    manager.pan(1000, 1000)
    assert manager.viewport.start == pytest.approx(-237.5 + 1525)


def test_load_replaces_state_and_drops_dangling_links(manager):
    from chronoline.data.models import TimelineLink

    items = [
        TimelineFrame('f', 'Frame', DateValue(0), DateValue(100)),
        TimelineEvent('e', 'Event', DateValue(50)),
    ]
    links = [TimelineLink('l1', 'f', 'e'), TimelineLink('l2', 'e', 'gone')]

    manager.load(items, links, viewport=(0, 100))

    assert [item.id for item in manager.items] == ['f', 'e']
    assert manager.get_item('e').frame_id == 'f'
    assert [link.id for link in manager.links] == ['l1']
    assert manager.viewport.snapshot().as_tuple() == (0, 100)


def test_clear(rome):
    rome.viewport.pan(500, 1000)
    rome.clear()

    assert rome.items == ()
    assert rome.links == ()
    assert rome.viewport.snapshot().as_tuple() == (-1000, 2050)


def test_load_clamps_oversized_viewport_and_zoom_recovers(manager):
    manager.load([], viewport=(0, 20000))
    assert manager.viewport.span == pytest.approx(10000)

    manager.zoom(0.9, 10000)
    assert manager.viewport.span == pytest.approx(9000)
    manager.zoom(1.1, 10000)
    assert manager.viewport.span <= 10000
