from datetime import timedelta
from functools import total_ordering

from arrow import Arrow


@total_ordering
class Duration:
    """Signed span of time with a resolution of one second.

    Anything below a second is dropped, rounding toward zero, so that two
    timestamps a few microseconds apart count as no time at all.
    """

    __slots__ = ('seconds',)

    def __init__(self, seconds: int = 0):
        self.seconds = int(seconds)

    @classmethod
    def hours(cls, hours: int):
        return cls(hours * 3600)

    @classmethod
    def minutes(cls, minutes: int):
        return cls(minutes * 60)

    @classmethod
    def from_timedelta(cls, delta: timedelta):
        micros = (delta.days * 86400 + delta.seconds) * 10 ** 6 + delta.microseconds
        if micros < 0:
            return cls(-(-micros // 10 ** 6))
        return cls(micros // 10 ** 6)

    @classmethod
    def between(cls, earlier: Arrow, later: Arrow):
        return cls.from_timedelta(later - earlier)

    def to_timedelta(self):
        return timedelta(seconds=self.seconds)

    def is_negative(self):
        return self.seconds < 0

    def hours_minutes(self):
        secs = abs(self.seconds)
        return secs // 3600, (secs // 60) % 60

    def __bool__(self):
        return self.seconds != 0

    def __add__(self, other):
        if isinstance(other, Duration):
            return Duration(self.seconds + other.seconds)
        if isinstance(other, int) and other == 0:
            return self
        return NotImplemented

    # sum() starts from the integer 0
    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, Duration):
            return Duration(self.seconds - other.seconds)
        return NotImplemented

    def __neg__(self):
        return Duration(-self.seconds)

    def __abs__(self):
        return Duration(abs(self.seconds))

    def __mul__(self, factor: int):
        if isinstance(factor, int):
            return Duration(self.seconds * factor)
        return NotImplemented

    __rmul__ = __mul__

    def __eq__(self, other):
        if isinstance(other, Duration):
            return self.seconds == other.seconds
        return NotImplemented

    def __lt__(self, other):
        if isinstance(other, Duration):
            return self.seconds < other.seconds
        return NotImplemented

    def __hash__(self):
        return hash(self.seconds)

    def __repr__(self):
        return 'Duration({})'.format(self.seconds)


ZERO = Duration()
