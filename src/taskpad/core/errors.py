# src/taskpad/core/errors.py

"""
Error taxonomy shared by the remote client and the controller.

- NetworkError: the service could not be reached at all.
- ServiceError: the service answered with a non-success status.
- ValidationError: rejected locally, never sent.
- BatchError: at least one call of a fan-out batch failed.
- StorageError: a local prefs write (trash, dark mode) did not stick.

describe_error() is the single place where failures become user-facing text.
"""

from __future__ import annotations

LIST_PATH = "/api/todos"


class TaskpadError(Exception):
    """Base class for errors the controller knows how to report."""


class ValidationError(TaskpadError):
    pass


class NetworkError(TaskpadError):
    pass


class ServiceError(TaskpadError):
    def __init__(self, status: int, message: str = "", *, path: str = "") -> None:
        self.status = int(status)
        self.message = message or f"Server error: {self.status}"
        self.path = path
        super().__init__(self.message)


class StorageError(TaskpadError):
    pass


class BatchError(TaskpadError):
    def __init__(self, *, failed: int, total: int, first: BaseException) -> None:
        self.failed = failed
        self.total = total
        self.first = first
        super().__init__(f"{failed} of {total} operations failed")


def describe_error(exc: BaseException, *, base_url: str = "") -> str:
    if isinstance(exc, BatchError):
        return describe_error(exc.first, base_url=base_url)
    if isinstance(exc, NetworkError):
        where = base_url or "backend"
        return f"Cannot connect to backend server. ({where})"
    if isinstance(exc, ServiceError):
        if exc.status == 404 and exc.path == LIST_PATH:
            return f"Please check backend API path. (Current: {LIST_PATH})"
        return exc.message
    if isinstance(exc, StorageError):
        return "Cannot save local data."
    if isinstance(exc, ValidationError):
        return str(exc) or "Invalid input."
    return "Unexpected error."
