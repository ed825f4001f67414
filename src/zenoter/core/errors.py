"""Error taxonomy shared by the storage engine, the boundary and the client."""

from __future__ import annotations


class ZenoterError(Exception):
    """Base class for every error raised by zenoter."""


class InitializationError(ZenoterError):
    """The backing file could not be opened or a migration failed."""


class NotInitializedError(ZenoterError):
    """A storage operation was called before a successful initialize()."""


class BridgeUnavailableError(ZenoterError):
    """The UI side has no connection to the storage host."""


class OperationError(ZenoterError):
    """The store rejected an operation."""


# Error classes that keep their identity when they cross the boundary.
REMOTE_ERRORS: dict[str, type[ZenoterError]] = {
    cls.__name__: cls
    for cls in (InitializationError, NotInitializedError, OperationError)
}


def remote_error(error_type: str | None, message: str) -> ZenoterError:
    cls = REMOTE_ERRORS.get(error_type or "", OperationError)
    return cls(message)
