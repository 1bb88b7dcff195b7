from arrow import Arrow
from dateutil import tz


def _clock(time: Arrow):
    return time.to(tz.tzlocal()).format('HH:mm')


class StempelError(Exception):
    pass


class UsageError(StempelError):
    """The user asked for a transition that the current state does not allow."""


class AlreadyStarted(UsageError):
    def __init__(self, start: Arrow):
        super().__init__('You already started at {}'.format(_clock(start)))
        self.start = start


class NotStarted(UsageError):
    def __init__(self):
        super().__init__('You did not start working')


class OnBreakConflict(UsageError):
    def __init__(self, break_start: Arrow):
        super().__init__("You're on a break since {}, won't stop your current work"
                         .format(_clock(break_start)))
        self.break_start = break_start


class NothingToCancel(UsageError):
    def __init__(self):
        super().__init__('Nothing to cancel')


class NotWorking(UsageError):
    def __init__(self):
        super().__init__("You're not tracking your work so you can't take a break")


class AlreadyOnBreak(UsageError):
    def __init__(self, break_start: Arrow):
        super().__init__('You already started a break at {}'.format(_clock(break_start)))
        self.break_start = break_start


class NoActiveBreak(UsageError):
    def __init__(self):
        super().__init__("You're not on a break right now")


class NegativeDuration(UsageError):
    def __init__(self, message='Your break was longer than your work'):
        super().__init__(message)


class DataError(StempelError):
    """Persisted or computed data cannot be interpreted."""


class InvalidRange(DataError):
    pass


class CorruptLedger(DataError):
    def __init__(self, reason: str):
        super().__init__('Failed to deserialize json: {}. '
                         "Try 'stempel migrate' to migrate to the new json format.".format(reason))


class InternalError(StempelError):
    pass
