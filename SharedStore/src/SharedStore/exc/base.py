from enum import Enum

from fastapi import HTTPException


class BaseErrorCode(Enum):
    def __init__(self, code: int, message: str):
        self._value_ = code
        self.message = message

    @property
    def code(self):
        return self.value

    def as_dict(self, extras, **kwargs):
        return {
            "code": self.code,
            "message": self.message.format(**kwargs),
            "name": self.name,
            "extras": extras
        }


class StoreErrorCode(BaseErrorCode):
    UNKNOWN = (1000, "unknown error for {collection}")
    NOT_FOUND = (1001, "{collection} not served by this store")
    VALIDATION = (1002, "invalid record for {collection}")
    AUTHORIZATION_DENIED = (1003, "access to {collection} denied")
    TRANSIENT = (1004, "{collection} store unreachable")
    MALFORMED = (1005, "malformed data from {collection} store")


class EnumException(HTTPException):
    def __init__(self, status_code, error_enum: BaseErrorCode, headers=None, extras=None, err_kwargs=None):
        if err_kwargs is None:
            err_kwargs = err_kwargs or {}
        self.error_enum = error_enum
        super().__init__(status_code, detail=error_enum.as_dict(extras, **err_kwargs), headers=headers)


__all__ = [
    "BaseErrorCode",
    "StoreErrorCode",
    "EnumException",
]
