from .base import (AppError, ClientError, ConfigError, DomainError, InfrastructureError,
                   RateLimitedError, UnauthorizedError, ValidationError)
from .http import handle_app_error, handle_http_exception, register_error_handler
from .validation import format_pydantic_errors, validation_error_from

__all__ = [
    "AppError",
    "ClientError",
    "ConfigError",
    "DomainError",
    "InfrastructureError",
    "RateLimitedError",
    "UnauthorizedError",
    "ValidationError",
    "format_pydantic_errors",
    "handle_app_error",
    "handle_http_exception",
    "register_error_handler",
    "validation_error_from",
]
