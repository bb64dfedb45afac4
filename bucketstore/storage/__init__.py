"""
File storage: <storage_root>/<user folder>/<bucket>/<file>

All filesystem access goes through the blocking I/O pool (bucketstore.storage.blocking).
"""

from bucketstore.storage.bucket import Bucket
from bucketstore.storage.errors import Conflict, InternalError, InvalidName, NotFound, StorageError, Unauthorized
from bucketstore.storage.storagefile import StorageFile
from bucketstore.storage.userdir import UserDir

__all__ = [
    "Bucket",
    "Conflict",
    "InternalError",
    "InvalidName",
    "NotFound",
    "StorageError",
    "StorageFile",
    "Unauthorized",
    "UserDir",
]
