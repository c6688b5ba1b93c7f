"""Asset error taxonomy.

Every failure that crosses a layer boundary is one of these. The HTTP layer
maps them to status codes through ``status_code`` and to the ``error`` field of
the JSON error body through ``kind``; the client store maps the body back.
"""


class AssetError(Exception):
    """Base class for asset inventory failures"""

    kind = "ServiceError"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ServiceError(AssetError):
    """Unexpected failure while handling a request"""


class InvalidArgument(AssetError):
    """Caller supplied malformed or missing data"""

    kind = "InvalidArgument"
    status_code = 400


class NotFound(AssetError):
    """Operation targeted an id that does not exist"""

    kind = "NotFound"
    status_code = 404


class StorageError(AssetError):
    """The store failed"""

    kind = "StorageError"


class StorageUnavailable(StorageError):
    """The store could not be reached or did not answer in time"""

    kind = "StorageUnavailable"


class StorageWriteError(StorageError):
    """The store did not acknowledge a write"""

    kind = "StorageWriteError"


ERROR_KINDS = {
    cls.kind: cls
    for cls in (
        ServiceError,
        InvalidArgument,
        NotFound,
        StorageError,
        StorageUnavailable,
        StorageWriteError,
    )
}


def error_from_kind(kind: str, message: str) -> AssetError:
    """Rebuild an error from the ``error`` field of a JSON error body"""
    return ERROR_KINDS.get(kind, ServiceError)(message)
