from __future__ import annotations

"""Public configuration API for CollectionSync."""

from CollectionSync.config.api import ApiConfig
from CollectionSync.config.app import (
    AppConfig,
    load_config,
    load_config_with_defaults,
    parse_config_dict,
)
from CollectionSync.config.models import FieldConfig, ModelConfig, build_model
from CollectionSync.config.runtime import RuntimeConfig

__all__ = [
    "RuntimeConfig",
    "ApiConfig",
    "FieldConfig",
    "ModelConfig",
    "AppConfig",
    "build_model",
    "load_config",
    "load_config_with_defaults",
    "parse_config_dict",
]
