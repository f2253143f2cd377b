"""API domain configuration: where the REST resources live."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

from CollectionSync.config.common import (
    expect_float,
    expect_str,
    get_required_value,
    get_section,
)

BASE_URL_ENV = "COLLECTION_SYNC_BASE_URL"


@dataclass(frozen=True, slots=True)
class ApiConfig:
    """Store validated API connection settings."""

    base_url: str
    timeout: float


def load_api(raw: Mapping[str, Any]) -> ApiConfig:
    """Load the ``api`` section.

    ``COLLECTION_SYNC_BASE_URL`` overrides ``api.base_url`` when set.

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing.
    """
    section = get_section(raw, "api", required=True)
    base_url = os.environ.get(BASE_URL_ENV) or expect_str(
        get_required_value(section, "base_url", "api.base_url"), "api.base_url"
    )
    return ApiConfig(
        base_url=base_url.strip(),
        timeout=expect_float(section.get("timeout", 30.0), "api.timeout"),
    )


def check_api(config: ApiConfig) -> None:
    """Validate API domain constraints.

    Raises:
        ValueError: If values violate API constraints.
    """
    if not config.base_url:
        raise ValueError("api.base_url must not be empty")
    if config.timeout <= 0:
        raise ValueError("api.timeout must be positive")
