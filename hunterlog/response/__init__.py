from .response import (
    APIError,
    ErrorPayload,
    InvalidInputError,
    InvalidStateError,
    Meta,
    NotFoundError,
    Pagination,
    StandardResponse,
    make_error_response,
    make_success_response,
)

__all__ = [
    "APIError",
    "NotFoundError",
    "InvalidStateError",
    "InvalidInputError",
    "Pagination",
    "Meta",
    "ErrorPayload",
    "StandardResponse",
    "make_success_response",
    "make_error_response",
]
