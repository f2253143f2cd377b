"""Factory functions for CLI component creation."""

from __future__ import annotations

import requests

from CollectionSync.actions import Create, CrudAction, Delete, Read, Update
from CollectionSync.config import AppConfig, build_model
from CollectionSync.service import CollectionDataService
from CollectionSync.store import Store
from CollectionSync.transport import JsonEndpoint


def create_action(
    action_type: type[CrudAction],
    name: str,
    *,
    timeout: float,
    session: requests.Session,
) -> CrudAction:
    """Create an action whose endpoint uses the configured timeout and session."""
    endpoint = JsonEndpoint(
        method=action_type.method,
        headers=action_type.default_headers,
        timeout=timeout,
        session=session,
    )
    return action_type(name, endpoint=endpoint)


def create_service(
    config: AppConfig,
    model_name: str,
    *,
    store: Store,
    session: requests.Session,
) -> CollectionDataService:
    """Create a data service for a configured model.

    Args:
        config: Application configuration.
        model_name: Name of a model declared under ``models``.
        store: Store holding the collection.
        session: HTTP session shared by the service endpoints.

    Returns:
        Configured CollectionDataService.

    Raises:
        ValueError: If the model is not configured.
    """
    model = build_model(config.get_model(model_name))
    timeout = config.api.timeout
    return CollectionDataService(
        model,
        store=store,
        url=config.api.base_url,
        create=create_action(Create, "create", timeout=timeout, session=session),
        read=create_action(Read, "read", timeout=timeout, session=session),
        update=create_action(Update, "update", timeout=timeout, session=session),
        delete=create_action(Delete, "delete", timeout=timeout, session=session),
    )
