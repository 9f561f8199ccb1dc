"""
OpenAI error handling utilities.

Provides a context manager for consistent error handling across
all OpenAI API operations in the enrichment pipeline.
"""

from collections.abc import Generator
from contextlib import contextmanager

from openai import (
    APIConnectionError,
    APIError,
    APITimeoutError,
    AuthenticationError,
    PermissionDeniedError,
    RateLimitError,
)

from common.errors import ExternalServiceError
from common.logging import get_logger

logger = get_logger(__name__)

# All OpenAI exceptions that should be handled consistently
OPENAI_EXCEPTIONS = (
    PermissionDeniedError,
    AuthenticationError,
    RateLimitError,
    APIConnectionError,
    APIError,
)


def format_openai_error(e: Exception) -> str:
    """Extract a clean error message from OpenAI SDK exceptions."""
    error_type = type(e).__name__

    if isinstance(e, PermissionDeniedError):
        return f"OpenAI access denied: {e.message}"
    elif isinstance(e, AuthenticationError):
        return f"OpenAI authentication failed: {e.message}"
    elif isinstance(e, RateLimitError):
        return f"OpenAI rate limit exceeded: {e.message}"
    elif isinstance(e, APITimeoutError):
        return "OpenAI request timed out"
    elif isinstance(e, APIConnectionError):
        return f"Cannot connect to OpenAI: {e.message}"
    elif isinstance(e, APIError):
        status_code = getattr(e, "status_code", None)
        return f"OpenAI API error ({status_code}): {e.message}"

    return f"{error_type}: {e}"


@contextmanager
def handle_openai_errors(operation_name: str) -> Generator[None, None, None]:
    """
    Context manager for handling OpenAI errors consistently.

    Catches OpenAI-specific exceptions, formats them with clear messages,
    logs them, and re-raises as ExternalServiceError with the formatted message.

    Args:
        operation_name: Name of the operation (e.g., "AI", "Venue Analysis")
            Used in log messages for context.

    Usage:
        with handle_openai_errors("AI"):
            response = await client.chat.completions.create(...)

    Raises:
        ExternalServiceError: If an OpenAI exception occurs, with a formatted error message.
        Exception: Re-raises any other exceptions after logging.
    """
    try:
        yield
    except OPENAI_EXCEPTIONS as e:
        error_msg = format_openai_error(e)
        logger.error(f"[{operation_name}] OpenAI API error: {error_msg}")
        raise ExternalServiceError("openai", error_msg) from e
    except Exception as e:
        logger.error(f"[{operation_name}] Failed: {type(e).__name__}: {e!r}")
        raise
