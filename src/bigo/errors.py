"""Exception types raised at the public boundary."""


class BigOError(Exception):
    """Base class for all errors raised by bigo."""


class InvalidQualityRating(BigOError, ValueError):
    """Quality rating is not an integer between 0 and 5."""


class InvalidPriorState(BigOError, ValueError):
    """Scheduling state handed to the scheduler violates its invariants."""


class ProblemNotFound(BigOError, KeyError):
    """No problem with the requested id exists in the store."""


class BackupFormatError(BigOError, ValueError):
    """Backup document could not be understood."""
