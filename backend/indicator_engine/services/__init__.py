"""
Indicator Engine Services

Service layer containing the indicator computation, caching, lifecycle and
preset logic. Chart rendering and price storage are collaborators injected
at the edges.
"""

from indicator_engine.services.base import (
    ServiceError,
    InsufficientDataError,
    UnknownIndicatorError,
    CachePersistError,
    RenderError,
    NotFoundError,
    IndexOutOfRangeError,
)

__all__ = [
    "ServiceError",
    "InsufficientDataError",
    "UnknownIndicatorError",
    "CachePersistError",
    "RenderError",
    "NotFoundError",
    "IndexOutOfRangeError",
]
