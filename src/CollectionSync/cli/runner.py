"""Command runner for coordinating CLI execution.

Manages logging configuration, component creation, HTTP session cleanup and
error handling for command execution.
"""

from __future__ import annotations

from typing import Any, Callable

import click
import requests

from CollectionSync.cli.commands import SyncCommand
from CollectionSync.cli.factories import create_service
from CollectionSync.config import AppConfig
from CollectionSync.store import Store
from CollectionSync.utils.log import configure_logging, log


class CommandRunner:
    """Orchestrates command execution with proper resource management."""

    def __init__(self, config: AppConfig) -> None:
        self.config = config

    def run(self, action: str, model_name: str, operation: Callable[[SyncCommand], Any]) -> Any:
        """Execute ``operation`` against a fresh service for ``model_name``.

        Args:
            action: The CLI command name (e.g., 'read').
            model_name: Configured model to operate on.
            operation: Callable receiving the SyncCommand.

        Returns:
            Whatever ``operation`` returns.

        Raises:
            click.Abort: When the command fails.
        """
        configure_logging(
            level=self.config.runtime.level,
            action=action,
            log_to_file=self.config.runtime.to_file,
            log_dir=self.config.runtime.dir,
        )
        session = requests.Session()
        try:
            service = create_service(self.config, model_name, store=Store(), session=session)
            return operation(SyncCommand(service=service))
        except Exception as e:  # noqa: BLE001 - cli boundary
            log.error("%s failed: %s", action.capitalize(), e)
            raise click.Abort from e
        finally:
            session.close()
