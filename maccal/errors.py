from enum import Enum


class ErrorKind(Enum):
    NO_INPUT = 'no_input'
    ACCESS_DENIED = 'access_denied'
    NO_DEFAULT_DESTINATION = 'no_default_destination'
    PERSIST_FAILED = 'persist_failed'


MESSAGES = {
    ErrorKind.NO_INPUT: "Type something to add an event",
    ErrorKind.ACCESS_DENIED: "Calendar access denied. Grant access in System Settings > Privacy",
    ErrorKind.NO_DEFAULT_DESTINATION: "No default calendar set",
    ErrorKind.PERSIST_FAILED: "Failed to save event",
}


class QuickAddError(Exception):
    """A quick-add failure with a short message suitable for a notification"""

    def __init__(self, kind, cause=None):
        self.kind = kind
        self.cause = cause
        message = MESSAGES[kind]
        if cause is not None:
            message = f"{message}: {cause}"
        self.message = message
        super().__init__(message)
