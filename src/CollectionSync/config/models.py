"""Model declarations loaded from configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from CollectionSync.config.common import (
    expect_bool,
    expect_mapping,
    expect_str,
    get_required_value,
)
from CollectionSync.core.fields import FIELD_TYPES
from CollectionSync.core.model import Model


@dataclass(frozen=True, slots=True)
class FieldConfig:
    """One column declaration."""

    name: str
    type: str = "field"
    primary: bool = False


@dataclass(frozen=True, slots=True)
class ModelConfig:
    """One resource declaration."""

    name: str
    fields: tuple[FieldConfig, ...]

    @property
    def primary(self) -> tuple[str, ...]:
        return tuple(field.name for field in self.fields if field.primary)


def load_models(raw: Mapping[str, Any]) -> tuple[ModelConfig, ...]:
    """Load the ``models`` list.

    Each entry looks like::

        - name: users
          fields:
            id: {type: numeric, primary: true}
            email: {type: text}
            active: {}

    Raises:
        TypeError: If config types are invalid.
        ValueError: If required keys are missing or a field type is unknown.
    """
    models_obj = raw.get("models")
    if models_obj is None:
        return ()
    if not isinstance(models_obj, list):
        raise TypeError("models must be a list")
    return tuple(_parse_model(item, f"models[{idx}]") for idx, item in enumerate(models_obj))


def _parse_model(value: Any, config_key: str) -> ModelConfig:
    section = expect_mapping(value, config_key)
    name = expect_str(get_required_value(section, "name", f"{config_key}.name"), f"{config_key}.name").strip()
    fields_obj = expect_mapping(
        get_required_value(section, "fields", f"{config_key}.fields"), f"{config_key}.fields"
    )
    fields = tuple(
        _parse_field(key, spec, f"{config_key}.fields.{key}") for key, spec in fields_obj.items()
    )
    return ModelConfig(name=name, fields=fields)


def _parse_field(name: str, value: Any, config_key: str) -> FieldConfig:
    section = expect_mapping(value if value is not None else {}, config_key)
    field_type = expect_str(section.get("type", "field"), f"{config_key}.type").strip().lower()
    if field_type not in FIELD_TYPES:
        raise ValueError(f"{config_key}.type must be one of {sorted(FIELD_TYPES)}")
    return FieldConfig(
        name=name,
        type=field_type,
        primary=expect_bool(section.get("primary", False), f"{config_key}.primary"),
    )


def check_models(models: tuple[ModelConfig, ...]) -> None:
    """Validate model declarations.

    A model without primary fields is accepted here; indexing its records
    fails later when the first response arrives.

    Raises:
        ValueError: If names are empty or duplicated.
    """
    seen: set[str] = set()
    for model in models:
        if not model.name:
            raise ValueError("models[].name must not be empty")
        if model.name in seen:
            raise ValueError(f"Duplicate model: {model.name}")
        seen.add(model.name)
        if not model.fields:
            raise ValueError(f"Model {model.name} must declare at least one field")


def build_model(config: ModelConfig) -> Model:
    """Build a ``Model`` from its declaration."""
    return Model(
        config.name,
        {field.name: FIELD_TYPES[field.type](primary=field.primary) for field in config.fields},
    )
