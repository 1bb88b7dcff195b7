import copy

from arrow import Arrow

from stempel.canonical import canonicalize
from stempel.duration import Duration
from stempel.ledger import Ledger
from stempel.ranges import local


def at(*args):
    return Arrow(*args, tzinfo='UTC')


def test_same_day_entries_are_merged():
    ledger = Ledger()
    ledger.insert(at(2021, 1, 27, 9), Duration.minutes(10))
    ledger.insert(at(2021, 1, 27, 15), Duration.minutes(12))
    assert canonicalize(ledger) == 1
    assert ledger.history == {at(2021, 1, 27, 9): Duration.minutes(22)}


def test_chains_collapse_into_the_first_entry():
    ledger = Ledger()
    for hour in (8, 10, 12, 14):
        ledger.insert(at(2021, 1, 27, hour), Duration.hours(1))
    ledger.insert(at(2021, 1, 28, 9), Duration.hours(2))
    assert canonicalize(ledger) == 3
    assert list(ledger.history.items()) == [
        (at(2021, 1, 27, 8), Duration.hours(4)),
        (at(2021, 1, 28, 9), Duration.hours(2)),
    ]


def test_dates_are_compared_locally():
    ledger = Ledger()
    # 23:30 UTC on the 26th is already the 27th in Berlin
    ledger.insert(at(2021, 1, 26, 23, 30), Duration.minutes(5))
    ledger.insert(at(2021, 1, 27, 10), Duration.minutes(5))
    canonicalize(ledger)
    assert ledger.history == {at(2021, 1, 26, 23, 30): Duration.minutes(10)}


def test_idempotent():
    ledger = Ledger()
    for day, hour in [(25, 8), (25, 18), (26, 9), (27, 7), (27, 8), (27, 20)]:
        ledger.insert(at(2021, 1, day, hour), Duration.minutes(day + hour))
    canonicalize(ledger)
    once = copy.deepcopy(ledger)
    assert canonicalize(ledger) == 0
    assert ledger == once
    days = [local(t).date() for t in ledger.history]
    assert len(days) == len(set(days))


def test_empty_and_open_state_untouched(t0):
    ledger = Ledger()
    ledger.start(t0)
    assert canonicalize(ledger) == 0
    assert ledger.open_start == t0


def test_local_dates_follow_daylight_saving():
    # 22:30 and 23:30 in January are the same day in Berlin
    winter = Ledger()
    winter.insert(at(2021, 1, 27, 21, 30), Duration.minutes(5))
    winter.insert(at(2021, 1, 27, 22, 30), Duration.minutes(5))
    assert canonicalize(winter) == 1

    # 23:30 and 00:30 in July are not
    summer = Ledger()
    summer.insert(at(2021, 7, 27, 21, 30), Duration.minutes(5))
    summer.insert(at(2021, 7, 27, 22, 30), Duration.minutes(5))
    assert canonicalize(summer) == 0
    assert len(summer.history) == 2
