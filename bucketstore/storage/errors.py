"""Errors raised by the storage layer. Raw OSErrors never leave it."""


class StorageError(Exception):
    pass


class Unauthorized(StorageError):
    """Unknown user or wrong key (deliberately not telling which)"""


class InvalidName(StorageError, ValueError):
    """A bucket or file name that cannot be used"""


class NotFound(StorageError):
    pass


class Conflict(StorageError):
    """Creating a file that already exists"""


class InternalError(StorageError):
    pass
