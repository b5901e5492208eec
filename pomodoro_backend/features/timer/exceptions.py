"""Errors raised by the timer feature"""


class TimerError(Exception):
    """Base class for timer feature errors"""


class InvalidActionError(TimerError):
    """The requested action is not one the timer understands"""

    def __init__(self, action: object):
        self.action = action
        super().__init__(f"Unknown timer action: {action!r}")


class PersistenceError(TimerError):
    """The datastore could not be read or written"""
