# errors.py
"""Exceptions shared by the CRTS admin desk."""


class CRTSError(Exception):
    """Base class for everything this app raises on purpose."""


class ConfigError(CRTSError):
    pass


class Unauthenticated(CRTSError):
    """No staff member is signed in."""

    def __init__(self, message="Please log in"):
        super().__init__(message)


class ValidationError(CRTSError):
    pass


class MalformedRecord(CRTSError):
    """A single complaint record could not be parsed."""

    def __init__(self, key, reason):
        super().__init__(f"complaint {key!r}: {reason}")
        self.key = key
        self.reason = reason


class StoreError(CRTSError):
    pass


class StoreReadError(StoreError):
    pass


class StoreWriteError(StoreError):
    pass
