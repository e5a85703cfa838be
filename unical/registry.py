"""
Connector registry.

Maps connector names to connector instances and routes calls to them.
Lookups are case-insensitive. Routing does no transformation and no auth
handling: the connector's return value (usually a coroutine) is handed back
unchanged.
"""

import logging
from typing import Any

from unical.exceptions import ConfigurationError, NotFoundError, UnsupportedOperationError
from unical.integrations.base import CAPABILITY_METHODS

logger = logging.getLogger(__name__)


class ConnectorRegistry:
    """Name-indexed table of connectors, owned by the application object."""

    def __init__(self):
        self._connectors: dict[str, Any] = {}

    def register(self, connector: Any) -> None:
        """
        Add a connector, replacing any connector registered under the same name.

        Raises:
            ConfigurationError: If the connector is missing or has no name
        """
        if connector is None:
            raise ConfigurationError("Connector cannot be None")

        name = getattr(connector, "name", None)
        if not name:
            raise ConfigurationError("Connector must have a name")

        key = name.lower()
        if key in self._connectors:
            logger.warning(f"Replacing connector registered as '{key}'")
        self._connectors[key] = connector
        logger.debug(f"Registered connector '{key}'")

    def list_connectors(self) -> list[str]:
        """Names of all registered connectors, lower-cased."""
        return list(self._connectors)

    def get(self, connector_name: str) -> Any:
        """
        Look up a connector by name.

        Raises:
            NotFoundError: If the name is empty or not registered
        """
        if not connector_name:
            raise NotFoundError("You should specify a connector name")

        connector = self._connectors.get(connector_name.lower())
        if connector is None:
            raise NotFoundError(f"Unknown connector: {connector_name}")
        return connector

    def dispatch(self, connector_name: str, method_name: str, *args, **kwargs) -> Any:
        """
        Invoke an operation on a connector.

        Args:
            connector_name: Registered connector name (any case)
            method_name: Operation name, e.g. "list_events"
            *args, **kwargs: Passed through to the operation

        Returns:
            Whatever the operation returns (the awaitable for async operations)

        Raises:
            NotFoundError: If the connector is not registered
            UnsupportedOperationError: If the connector does not declare the
                capability providing the operation
        """
        connector = self.get(connector_name)

        capability = CAPABILITY_METHODS.get(method_name)
        if capability is None or not isinstance(connector, capability):
            raise UnsupportedOperationError(
                f"Connector '{connector.name}' does not implement {method_name}()"
            )

        logger.debug(f"Dispatching {method_name} to '{connector.name}'")
        return getattr(connector, method_name)(*args, **kwargs)
