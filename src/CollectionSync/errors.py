"""Exception types raised by CollectionSync."""

from __future__ import annotations


class CollectionSyncError(Exception):
    """Base class for all CollectionSync errors."""


class ModelConfigurationError(CollectionSyncError, ValueError):
    """Raised when a model cannot derive an index for its records."""


class ActionConfigurationError(CollectionSyncError, ValueError):
    """Raised when a CRUD action is used before it has a model or store."""


class EndpointConfigurationError(CollectionSyncError, ValueError):
    """Raised when an endpoint is executed without a URL."""
