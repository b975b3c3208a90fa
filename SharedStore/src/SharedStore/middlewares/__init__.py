from .RequestLogMiddleware import RequestLogMiddleware

__all__ = [
    "RequestLogMiddleware",
]
