"""Errors raised by the catalog store.

Every error is an expected, caller-correctable input problem. The HTTP
layer turns them into responses using ``status_code``.
"""


class CatalogError(Exception):
    """Base exception for all catalog errors."""

    def __init__(self, message="Catalog error", status_code=400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def to_dict(self):
        return {"detail": self.message}


class BadRequest(CatalogError):
    """Malformed identifier, invalid cross-reference or invariant violation."""

    def __init__(self, message="Bad request"):
        super().__init__(message, 400)


class NotFound(CatalogError):
    """The operation targets an id that is not stored."""

    def __init__(self, message="Resource not found"):
        super().__init__(message, 404)


class Conflict(CatalogError):
    """Duplicate identifier on create."""

    def __init__(self, message="Resource already exists"):
        super().__init__(message, 409)
