"""Reading and writing a ledger as JSON.

The file holds a single object::

    {"start": "2021-01-27T14:19:21Z", "breaking": ..., "breaks": [[time, {"secs": 600, "nanos": 0}]],
     "config": {"month_stats": 2, "daily_hours": 8, "weekly_stats": true},
     "account": {"2021-01-27T14:19:31Z": {"secs": 10, "nanos": 0}}}

Unset optional fields are left out.
"""
import json
import logging
import os
import tempfile
from os import path

import arrow

from stempel.duration import Duration
from stempel.errors import CorruptLedger, DataError
from stempel.ledger import Config, Ledger

log = logging.getLogger(__name__)


def format_time(time):
    return time.to('UTC').isoformat().replace('+00:00', 'Z')


def parse_time(value):
    if not isinstance(value, str):
        raise TypeError('timestamp must be a string, got {!r}'.format(value))
    return arrow.get(value).to('UTC')


def encode_duration(duration: Duration):
    return {'secs': duration.seconds, 'nanos': 0}


def _is_int(value):
    return isinstance(value, int) and not isinstance(value, bool)


def decode_duration(value):
    secs = value['secs']
    if not _is_int(secs):
        raise TypeError('duration seconds must be an integer, got {!r}'.format(secs))
    return Duration(secs)


def encode_config(config: Config):
    obj = {'month_stats': config.month_stats}
    if config.daily_hours is not None:
        obj['daily_hours'] = config.daily_hours
    if config.weekly_stats is not None:
        obj['weekly_stats'] = config.weekly_stats
    return obj


def decode_config(obj):
    month_stats = obj['month_stats']
    daily_hours = obj.get('daily_hours')
    weekly_stats = obj.get('weekly_stats')
    if not _is_int(month_stats):
        raise TypeError('month_stats must be an integer, got {!r}'.format(month_stats))
    if daily_hours is not None and not _is_int(daily_hours):
        raise TypeError('daily_hours must be an integer, got {!r}'.format(daily_hours))
    if weekly_stats is not None and not isinstance(weekly_stats, bool):
        raise TypeError('weekly_stats must be true or false, got {!r}'.format(weekly_stats))
    return Config(month_stats=month_stats, daily_hours=daily_hours, weekly_stats=weekly_stats)


def to_dict(ledger: Ledger):
    obj = {}
    if ledger.open_start is not None:
        obj['start'] = format_time(ledger.open_start)
    if ledger.open_break is not None:
        obj['breaking'] = format_time(ledger.open_break)
    obj['breaks'] = [[format_time(t), encode_duration(d)] for t, d in ledger.pending_breaks]
    if ledger.config is not None:
        obj['config'] = encode_config(ledger.config)
    obj['account'] = {format_time(t): encode_duration(d) for t, d in ledger.history.items()}
    return obj


def from_dict(obj):
    start = obj.get('start')
    breaking = obj.get('breaking')
    config = obj.get('config')
    pending_breaks = [(parse_time(t), decode_duration(d)) for t, d in obj['breaks']]
    if start is None and (breaking is not None or pending_breaks):
        raise ValueError('breaks recorded without a started work period')
    return Ledger(
        open_start=parse_time(start) if start is not None else None,
        open_break=parse_time(breaking) if breaking is not None else None,
        pending_breaks=pending_breaks,
        config=decode_config(config) if config is not None else None,
        history={parse_time(t): decode_duration(d) for t, d in obj['account'].items()},
    )


def dumps(ledger: Ledger):
    return json.dumps(to_dict(ledger), indent=2) + '\n'


def loads(data):
    try:
        obj = json.loads(data)
        if not isinstance(obj, dict):
            raise TypeError('expected a json object')
        return from_dict(obj)
    except KeyError as e:
        raise CorruptLedger('missing field {}'.format(e)) from e
    except (ValueError, TypeError, AttributeError) as e:
        raise CorruptLedger(str(e)) from e


def load(file_name: str, create: bool = False):
    try:
        with open(file_name, 'rb') as f:
            data = f.read()
    except FileNotFoundError as e:
        if create:
            log.info('No ledger at %s yet, starting an empty one', file_name)
            return Ledger()
        raise DataError('There is no ledger at {}, start working first'.format(file_name)) from e
    except OSError as e:
        raise DataError('Failed to open ledger {}'.format(file_name)) from e
    return loads(data)


def write_atomic(file_name: str, content: str):
    directory = path.dirname(path.abspath(file_name))
    os.makedirs(directory, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(dir=directory, prefix='.tmp_', suffix='.json')
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_name, file_name)
    except BaseException:
        if path.exists(temp_name):
            os.unlink(temp_name)
        raise


def save(file_name: str, ledger: Ledger):
    try:
        write_atomic(file_name, dumps(ledger))
    except OSError as e:
        raise DataError('Failed to write ledger {}'.format(file_name)) from e
    log.debug('Wrote %d history entries to %s', len(ledger.history), file_name)
