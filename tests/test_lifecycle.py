"""
Auto-close and auto-delete sweeps
"""
import pytest

from ticketkeeper.services.lifecycle import LifecycleSweeper, threshold_exceeded
from tests.conftest import (
    NOW, FakeOracle, MemoryTicketStore, RecordingActions, closed_ticket, open_ticket
)

THRESHOLD = 86400


def make_sweeper(store, oracle=None, actions=None):
    return LifecycleSweeper(
        store,
        oracle or FakeOracle(),
        actions or RecordingActions(),
        auto_close_threshold=THRESHOLD,
        auto_delete_threshold=THRESHOLD,
        clock=lambda: NOW,
    )


def test_threshold_is_strict():
    assert threshold_exceeded(NOW, NOW - THRESHOLD - 1, THRESHOLD)
    assert not threshold_exceeded(NOW, NOW - THRESHOLD, THRESHOLD)
    assert not threshold_exceeded(NOW, NOW - 10, THRESHOLD)
    assert not threshold_exceeded(NOW, None, THRESHOLD)


@pytest.mark.asyncio
async def test_inactive_open_ticket_is_closed_once():
    store = MemoryTicketStore({'T1': open_ticket()})
    oracle = FakeOracle({'T1': NOW - 90000})
    actions = RecordingActions()

    closed = await make_sweeper(store, oracle, actions).auto_close_pass()

    assert closed == ['T1']
    assert actions.closed == ['T1']


@pytest.mark.asyncio
async def test_recently_active_open_ticket_is_left_open():
    store = MemoryTicketStore({'T2': open_ticket()})
    oracle = FakeOracle({'T2': NOW - 80000})
    actions = RecordingActions()

    await make_sweeper(store, oracle, actions).auto_close_pass()

    assert actions.closed == []


@pytest.mark.asyncio
async def test_open_ticket_exactly_at_threshold_is_not_closed():
    store = MemoryTicketStore({'edge': open_ticket()})
    oracle = FakeOracle({'edge': NOW - THRESHOLD})
    actions = RecordingActions()

    await make_sweeper(store, oracle, actions).auto_close_pass()

    assert actions.closed == []


@pytest.mark.asyncio
async def test_open_ticket_without_known_activity_is_skipped():
    store = MemoryTicketStore({'silent': open_ticket()})
    oracle = FakeOracle({})
    actions = RecordingActions()

    closed = await make_sweeper(store, oracle, actions).auto_close_pass()

    assert closed == []
    assert actions.closed == []
    assert oracle.queried == ['silent']


@pytest.mark.asyncio
async def test_auto_close_only_considers_open_tickets():
    store = MemoryTicketStore({
        'open': open_ticket(),
        'closed': closed_ticket(closed_seconds_ago=100000),
        'odd': {'status': 'Archived'},
    })
    oracle = FakeOracle({'open': NOW - 90000, 'closed': NOW - 90000, 'odd': NOW - 90000})
    actions = RecordingActions()

    await make_sweeper(store, oracle, actions).auto_close_pass()

    assert oracle.queried == ['open']
    assert actions.closed == ['open']


@pytest.mark.asyncio
async def test_auto_close_failure_does_not_stop_the_pass():
    store = MemoryTicketStore({
        'a': open_ticket(),
        'broken': open_ticket(),
        'unreadable': open_ticket(),
        'b': open_ticket(),
    })
    oracle = FakeOracle(
        {'a': NOW - 90000, 'broken': NOW - 90000, 'b': NOW - 90000},
        failing={'unreadable'},
    )
    actions = RecordingActions(failing={'broken'})

    closed = await make_sweeper(store, oracle, actions).auto_close_pass()

    assert closed == ['a', 'b']
    assert actions.closed == ['a', 'b']
    assert oracle.queried == ['a', 'broken', 'unreadable', 'b']


@pytest.mark.asyncio
async def test_old_closed_ticket_is_deleted_once():
    store = MemoryTicketStore({'T3': closed_ticket(closed_seconds_ago=90000)})
    actions = RecordingActions()

    deleted = await make_sweeper(store, actions=actions).auto_delete_pass()

    assert deleted == ['T3']
    assert actions.deleted == ['T3']


@pytest.mark.asyncio
async def test_closed_ticket_without_closing_time_is_skipped():
    store = MemoryTicketStore({'T4': closed_ticket()})
    actions = RecordingActions()

    deleted = await make_sweeper(store, actions=actions).auto_delete_pass()

    assert deleted == []
    assert actions.deleted == []


@pytest.mark.asyncio
async def test_closed_ticket_at_or_below_threshold_is_kept():
    store = MemoryTicketStore({
        'edge': closed_ticket(closed_seconds_ago=THRESHOLD),
        'recent': closed_ticket(closed_seconds_ago=60),
    })
    actions = RecordingActions()

    await make_sweeper(store, actions=actions).auto_delete_pass()

    assert actions.deleted == []


@pytest.mark.asyncio
async def test_closing_time_in_milliseconds_is_compared_in_seconds():
    # Flooring to whole seconds moves a closing time 1 ms before the boundary past it
    closed_at_ms = (NOW - THRESHOLD) * 1000 - 1
    store = MemoryTicketStore({'ms': {'status': 'Closed', 'closedAt': closed_at_ms}})
    actions = RecordingActions()

    await make_sweeper(store, actions=actions).auto_delete_pass()

    assert actions.deleted == ['ms']


@pytest.mark.asyncio
async def test_auto_delete_ignores_open_tickets_with_stale_closing_time():
    store = MemoryTicketStore({'reopened': open_ticket(closedAt=(NOW - 200000) * 1000)})
    actions = RecordingActions()

    await make_sweeper(store, actions=actions).auto_delete_pass()

    assert actions.deleted == []


@pytest.mark.asyncio
async def test_auto_delete_failure_does_not_stop_the_pass():
    store = MemoryTicketStore({
        'x': closed_ticket(closed_seconds_ago=90000),
        'stuck': closed_ticket(closed_seconds_ago=90000),
        'y': closed_ticket(closed_seconds_ago=90000),
    })
    actions = RecordingActions(failing={'stuck'})

    deleted = await make_sweeper(store, actions=actions).auto_delete_pass()

    assert deleted == ['x', 'y']


@pytest.mark.asyncio
async def test_each_pass_reads_its_own_snapshot():
    store = MemoryTicketStore({'T1': open_ticket()})
    sweeper = make_sweeper(store, FakeOracle({'T1': NOW - 90000}))

    await sweeper.auto_close_pass()
    await sweeper.auto_delete_pass()

    assert store.reads == 2


@pytest.mark.asyncio
async def test_ticket_closed_elsewhere_is_not_counted():
    store = MemoryTicketStore({'manual': open_ticket(), 'idle': open_ticket()})
    oracle = FakeOracle({'manual': NOW - 90000, 'idle': NOW - 90000})
    actions = RecordingActions(already_closed={'manual'})

    closed = await make_sweeper(store, oracle, actions).auto_close_pass()

    assert closed == ['idle']


@pytest.mark.asyncio
async def test_closing_time_stored_as_text_is_still_compared():
    store = MemoryTicketStore({
        'text': closed_ticket(closedAt=str((NOW - 90000) * 1000)),
        'good': closed_ticket(closed_seconds_ago=90000),
    })
    actions = RecordingActions()

    deleted = await make_sweeper(store, actions=actions).auto_delete_pass()

    assert deleted == ['text', 'good']


@pytest.mark.asyncio
async def test_unreadable_closing_time_does_not_stop_the_pass():
    store = MemoryTicketStore({
        'garbled': closed_ticket(closedAt="yesterday"),
        'nested': closed_ticket(closedAt={'$date': 5}),
        'good': closed_ticket(closed_seconds_ago=90000),
    })
    actions = RecordingActions()

    deleted = await make_sweeper(store, actions=actions).auto_delete_pass()

    assert deleted == ['good']
    assert actions.deleted == ['good']
