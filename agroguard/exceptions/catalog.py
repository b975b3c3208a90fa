"""
Custom exceptions for catalog workflows.
Separates bad input from requests that conflict with a record's lifecycle.
"""

from SharedStore.exc.base import BaseErrorCode


class CatalogError(Exception):
    """Base exception for catalog-related errors"""
    pass


class CatalogValidationError(CatalogError):
    """Payload is missing required fields or carries invalid values"""
    pass


class InvalidTransitionError(CatalogError):
    """Requested status change is not allowed from the record's current status"""

    def __init__(self, entity: str, current: str, target: str):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(f"{entity} cannot move from '{current}' to '{target}'")


class CatalogErrorCode(BaseErrorCode):
    VALIDATION = (2000, "{detail}")
    NOT_FOUND = (2001, "{entity} not found")
    INVALID_TRANSITION = (2002, "{detail}")
    PERSIST_FAILED = (2003, "Failed to {action} {entity}")
    INTERNAL = (2004, "Internal server error")


class PersistenceError(CatalogError):
    """The store accepted the request but did not persist it"""

    def __init__(self, action: str, entity: str):
        self.action = action
        self.entity = entity
        super().__init__(f"Failed to {action} {entity}")
