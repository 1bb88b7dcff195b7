"""Tests for the state transitions of stempel.ledger."""
import copy

import pytest
from arrow import Arrow

from stempel.duration import Duration, ZERO
from stempel.errors import (AlreadyOnBreak, AlreadyStarted, NegativeDuration, NoActiveBreak,
                            NotStarted, NotWorking, NothingToCancel, OnBreakConflict, UsageError)
from stempel.ledger import Ledger, State


def snapshot(ledger):
    return copy.deepcopy(ledger)


def test_start_from_idle(ledger, t0):
    assert ledger.state == State.IDLE
    ledger.start(t0)
    assert ledger.state == State.WORKING
    assert ledger.open_start == t0


def test_no_double_start(working, on_break, t0):
    for ledger in (working, on_break):
        before = snapshot(ledger)
        with pytest.raises(AlreadyStarted) as info:
            ledger.start(t0.shift(hours=2))
        assert info.value.start == t0
        assert ledger == before


def test_start_normalizes_to_utc(ledger):
    ledger.start(Arrow(2021, 1, 27, 15, 0, tzinfo='Europe/Berlin'))
    assert ledger.open_start == Arrow(2021, 1, 27, 14, 0, tzinfo='UTC')
    assert ledger.open_start.tzinfo.utcoffset(None).total_seconds() == 0


def test_start_then_stop(ledger, t0):
    ledger.start(t0)
    assert ledger.stop(t0.shift(seconds=10)) == Duration(10)
    assert ledger.state == State.IDLE
    assert ledger.history == {t0.shift(seconds=10): Duration(10)}
    assert ledger.pending_breaks == []


def test_stop_requires_start(ledger, t0):
    with pytest.raises(NotStarted):
        ledger.stop(t0)


def test_stop_refused_on_break(on_break, t0):
    before = snapshot(on_break)
    with pytest.raises(OnBreakConflict) as info:
        on_break.stop(t0.shift(hours=2))
    assert info.value.break_start == t0.shift(hours=1)
    assert on_break == before


def test_break_is_subtracted(ledger, t0):
    ledger.start(t0)
    assert ledger.start_break(t0.shift(minutes=20)) == Duration.minutes(20)
    assert ledger.finish_break(t0.shift(minutes=25)) == Duration.minutes(5)
    assert ledger.stop(t0.shift(hours=1)) == Duration.minutes(55)
    assert ledger.history[t0.shift(hours=1)] == Duration.minutes(55)


def test_several_breaks(working, t0):
    working.start_break(t0.shift(minutes=10))
    working.finish_break(t0.shift(minutes=20))
    working.start_break(t0.shift(minutes=30))
    working.finish_break(t0.shift(minutes=45))
    assert working.accumulated_breaks() == Duration.minutes(25)
    assert working.stop(t0.shift(hours=2)) == Duration.minutes(95)


def test_breaks_longer_than_work_are_rejected(working, t0):
    working.add_break(Duration.hours(2), t0.shift(minutes=30))
    before = snapshot(working)
    with pytest.raises(NegativeDuration):
        working.stop(t0.shift(hours=1))
    assert working == before
    assert working.history == {}


def test_stop_before_start_is_rejected(working, t0):
    with pytest.raises(NegativeDuration):
        working.stop(t0.shift(minutes=-1))
    assert working.state == State.WORKING


def test_break_nesting(ledger, working, on_break, t0):
    with pytest.raises(NotWorking):
        ledger.start_break(t0)
    with pytest.raises(AlreadyOnBreak):
        on_break.start_break(t0.shift(hours=2))
    with pytest.raises(NotWorking):
        ledger.finish_break(t0)
    with pytest.raises(NoActiveBreak):
        working.finish_break(t0)

    assert on_break.finish_break(t0.shift(hours=1, minutes=15)) == Duration.minutes(15)
    assert on_break.open_break is None
    assert on_break.pending_breaks == [(t0.shift(hours=1), Duration.minutes(15))]
    assert on_break.state == State.WORKING


def test_break_cannot_end_before_it_began(on_break, t0):
    with pytest.raises(NegativeDuration):
        on_break.finish_break(t0)
    assert on_break.state == State.ON_BREAK


def test_cancel_break_keeps_finished_breaks(working, t0):
    working.start_break(t0.shift(minutes=10))
    working.finish_break(t0.shift(minutes=20))
    working.start_break(t0.shift(minutes=30))
    working.cancel()
    assert working.state == State.WORKING
    assert working.pending_breaks == [(t0.shift(minutes=10), Duration.minutes(10))]


def test_cancel_work_discards_breaks(working, t0):
    working.add_break(Duration.minutes(5), t0.shift(minutes=10))
    working.cancel()
    assert working.state == State.IDLE
    assert working.pending_breaks == []


def test_cancel_on_idle(ledger):
    with pytest.raises(NothingToCancel):
        ledger.cancel()


def test_cancel_all_the_way_down(on_break):
    on_break.cancel()
    on_break.cancel()
    with pytest.raises(NothingToCancel):
        on_break.cancel()


def test_usage_errors_share_a_base(ledger, t0):
    with pytest.raises(UsageError):
        ledger.stop(t0)


def test_add_break(working, on_break, ledger, t0):
    begin = working.add_break(Duration.minutes(30), t0.shift(hours=2))
    assert begin == t0.shift(hours=1, minutes=30)
    assert working.accumulated_breaks() == Duration.minutes(30)
    with pytest.raises(NotWorking):
        ledger.add_break(Duration.minutes(30), t0)
    with pytest.raises(OnBreakConflict):
        on_break.add_break(Duration.minutes(30), t0)
    with pytest.raises(NegativeDuration):
        working.add_break(Duration.minutes(-1), t0)


def test_cross_day_stop_keeps_date_when_confirmed(ledger):
    start = Arrow(2021, 1, 27, 7, tzinfo='UTC')
    stop = Arrow(2021, 1, 28, 15, tzinfo='UTC')
    asked = []

    def keep(s, t):
        asked.append((s, t))
        return True

    ledger.start(start)
    assert ledger.stop(stop, keep_date=keep) == Duration.hours(32)
    assert asked == [(start, stop)]
    assert list(ledger.history) == [stop]


def test_cross_day_stop_moved_to_start_day(ledger):
    ledger.start(Arrow(2021, 1, 27, 7, tzinfo='UTC'))
    net = ledger.stop(Arrow(2021, 1, 28, 15, tzinfo='UTC'), keep_date=lambda s, t: False)
    assert net == Duration.hours(8)
    assert list(ledger.history) == [Arrow(2021, 1, 27, 15, tzinfo='UTC')]


def test_same_day_stop_does_not_ask(working, t0):
    def fail(s, t):
        raise AssertionError('must not be asked')

    assert working.stop(t0.shift(hours=1), keep_date=fail) == Duration.hours(1)


def test_cross_day_is_judged_in_local_time(ledger):
    # 23:30 UTC is already the next day in Berlin
    ledger.start(Arrow(2021, 1, 27, 23, 0, tzinfo='Europe/Berlin'))
    net = ledger.stop(Arrow(2021, 1, 27, 23, 30, tzinfo='UTC'), keep_date=lambda s, t: True)
    assert net == Duration.minutes(90)


def test_history_stays_sorted(ledger, t0):
    ledger.insert(t0.shift(days=2), Duration(2))
    ledger.insert(t0, Duration(0))
    ledger.insert(t0.shift(days=1), Duration(1))
    assert list(ledger.history.values()) == [Duration(0), Duration(1), Duration(2)]


def test_insert_overwrites_same_time(ledger, t0):
    ledger.insert(t0, Duration(1))
    ledger.insert(t0, Duration(5))
    assert ledger.history == {t0: Duration(5)}


def test_state_names():
    assert str(State.ON_BREAK) == 'on break'


def test_empty_ledgers_are_equal():
    assert Ledger() == Ledger()
    assert Ledger().accumulated_breaks() == ZERO
