"""
Correlation ID utilities for request tracing
Shared by the HTTP adapter and the logger
"""

import uuid
from contextvars import ContextVar
from typing import Dict, Optional

from variant_engine.core.config import config

CORRELATION_ID_HEADER = config.correlation_id_header

# Context variable to store correlation ID across async operations
correlation_id_context: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> Optional[str]:
    """
    Get the current correlation ID from context

    Returns:
        str: Current correlation ID, or None outside a traced request
    """
    return correlation_id_context.get("") or None


def set_correlation_id(correlation_id: str) -> None:
    """
    Set the correlation ID in context

    Args:
        correlation_id: The correlation ID to set
    """
    correlation_id_context.set(correlation_id)


def create_correlation_id() -> str:
    """
    Create a new correlation ID

    Returns:
        str: New UUID-based correlation ID
    """
    return str(uuid.uuid4())


def extract_correlation_id_from_headers(headers: Dict[str, str]) -> Optional[str]:
    """
    Extract correlation ID from request headers (case-insensitive)

    Args:
        headers: Request headers dictionary

    Returns:
        str: Correlation ID from headers, or None if absent
    """
    wanted = CORRELATION_ID_HEADER.lower()
    for name, value in headers.items():
        if name.lower() == wanted and value:
            return value
    return None
