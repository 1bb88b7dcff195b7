"""One-shot conversion of the old record list format into a ledger.

The old format kept a flat list of typed records::

    {"name": "me", "work_sets": [{"ty": "Work", "duration": {"secs": 2, "nanos": 0},
                                  "start": "2020-03-10T08:00:00Z"}, ...]}
"""
import json
import logging
import shutil
from enum import Enum, unique

from arrow import Arrow

from stempel import storage
from stempel.canonical import canonicalize
from stempel.duration import Duration
from stempel.errors import CorruptLedger, DataError
from stempel.ledger import Ledger

log = logging.getLogger(__name__)


@unique
class WorkType(Enum):
    WORK = 'Work'
    START = 'Start'
    BREAK = 'Break'

    def __str__(self):
        return self.value

    @classmethod
    def from_str(cls, s: str):
        return cls[s.upper()]


class WorkSet:
    def __init__(self, ty: WorkType, duration: Duration, start: Arrow):
        self.ty = ty
        self.duration = duration
        self.start = start

    @classmethod
    def from_dict(cls, obj):
        return cls(WorkType.from_str(obj['ty']), storage.decode_duration(obj['duration']),
                   storage.parse_time(obj['start']))

    def __repr__(self):
        return 'WorkSet({}, {}, {})'.format(repr(self.ty), repr(self.duration), repr(self.start))


class WorkStorage:
    def __init__(self, name: str, work_sets: list):
        self.name = name
        self.work_sets = work_sets

    @classmethod
    def loads(cls, data):
        try:
            obj = json.loads(data)
            return cls(obj['name'], [WorkSet.from_dict(w) for w in obj['work_sets']])
        except (KeyError, ValueError, TypeError) as e:
            raise DataError('Not a file in the old format: {}'.format(e)) from e

    def of_type(self, ty: WorkType):
        return [w for w in self.work_sets if w.ty == ty]


def to_ledger(old: WorkStorage):
    ledger = Ledger()

    starts = old.of_type(WorkType.START)
    if starts:
        ledger.open_start = starts[0].start.to('UTC')

    breaks = old.of_type(WorkType.BREAK)
    if breaks and ledger.open_start is not None:
        last = breaks[-1]
        # a break without duration was still running
        if last.duration:
            ledger.pending_breaks.append((last.start.to('UTC'), last.duration))
        else:
            ledger.open_break = last.start.to('UTC')

    for work in old.of_type(WorkType.WORK):
        ledger.insert(work.start.shift(seconds=work.duration.seconds), work.duration)

    merged = canonicalize(ledger)
    log.info('Migrated %d work records of %s, merged %d same-day entries',
             len(old.of_type(WorkType.WORK)), old.name, merged)
    return ledger


def migrate(file_name: str):
    """Rewrite `file_name` in the ledger format, keeping the original as `<file_name>.bak`."""
    try:
        with open(file_name, 'rb') as f:
            data = f.read()
    except OSError as e:
        raise DataError('Failed to open {} for migration'.format(file_name)) from e

    try:
        storage.loads(data)
    except CorruptLedger:
        pass
    else:
        raise DataError('{} is already in the current format'.format(file_name))

    ledger = to_ledger(WorkStorage.loads(data))
    backup = file_name + '.bak'
    try:
        shutil.copyfile(file_name, backup)
    except OSError as e:
        raise DataError('Failed to back up {} to {}'.format(file_name, backup)) from e
    storage.save(file_name, ledger)
    return ledger, backup
