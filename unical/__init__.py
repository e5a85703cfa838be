"""
Unical: one interface for calendar and event data from multiple backends.
"""

from unical.app import Unical, create_app
from unical.exceptions import (
    AlreadyRevokedError,
    ConfigurationError,
    NotFoundError,
    UnicalError,
    UnsupportedOperationError,
    UpstreamError,
    ValidationError,
)
from unical.integrations import CronofyConnector, GoogleConnector
from unical.registry import ConnectorRegistry

__all__ = [
    "AlreadyRevokedError",
    "ConfigurationError",
    "ConnectorRegistry",
    "CronofyConnector",
    "GoogleConnector",
    "NotFoundError",
    "Unical",
    "UnicalError",
    "UnsupportedOperationError",
    "UpstreamError",
    "ValidationError",
    "create_app",
]
