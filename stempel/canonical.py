import logging

from stempel.errors import InternalError
from stempel.ledger import Ledger
from stempel.ranges import local

log = logging.getLogger(__name__)


def canonicalize(ledger: Ledger):
    """Merge history entries that share a local calendar date.

    The earliest entry of each day keeps its key and absorbs the
    durations of the later ones. Returns the number of removed entries.
    """
    keep = None
    merged = 0
    for time in list(ledger.history):
        if keep is None or local(keep).date() != local(time).date():
            keep = time
            continue
        try:
            ledger.history[keep] = ledger.history[keep] + ledger.history.pop(time)
        except KeyError as e:
            raise InternalError('History entry {} vanished while merging'.format(e)) from e
        log.debug('Merged entry %s into %s', time, keep)
        merged += 1
    return merged
