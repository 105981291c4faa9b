"""Domain-specific exception types."""


class BusyCalendarError(Exception):
    """Base application error."""


class PersistenceError(BusyCalendarError):
    """Raised when the interval store cannot be read or written."""


class SettingsError(BusyCalendarError):
    """Raised when settings cannot be validated or saved."""
