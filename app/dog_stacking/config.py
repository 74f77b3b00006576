"""DoG parameters and YAML config loading."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from app.dog_stacking.blur import BACKENDS, BOUNDARIES, check_mode
from app.dog_stacking.dog import METHODS
from app.dog_stacking.errors import InvalidParameterError
from app.dog_stacking.kernel import DEFAULT_RADIUS_FACTOR, check_positive


@dataclass(frozen=True)
class DoGConfig:
    """Parameters of one DoG run, shared by every input image."""

    sigma: float = 3.0
    k: float = 0.5
    radius_factor: float = DEFAULT_RADIUS_FACTOR
    boundary: str = "zero"
    method: str = "two_pass"
    backend: str = "opencv"

    def validate(self) -> DoGConfig:
        """Raise `InvalidParameterError` if any field is out of range."""
        check_positive(self.sigma, "sigma")
        check_positive(self.k, "k")
        check_positive(self.radius_factor, "radius_factor")
        check_mode(self.boundary, BOUNDARIES, "boundary")
        check_mode(self.method, METHODS, "method")
        check_mode(self.backend, BACKENDS, "backend")
        if self.method == "single_pass" and self.boundary != "zero":
            raise InvalidParameterError("The single-pass method only supports the 'zero' boundary.")
        return self

    def replace(self, **overrides: Any) -> DoGConfig:
        """Return a copy with the non-None `overrides` applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return dataclasses.replace(self, **changes)

    def dog_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for `difference_of_gaussians`."""
        return dataclasses.asdict(self)


def parse_configs(config: str | Path) -> dict:
    """Load a YAML config file as a dict.

    Args:
        config: Path to YAML config file.

    Returns:
        Parsed config dictionary (empty for an empty file).
    """
    with open(config, "r", encoding="utf-8") as stream:
        try:
            configs = yaml.safe_load(stream)
        except yaml.YAMLError as exc:
            logging.error(exc)
            raise InvalidParameterError(f"Invalid YAML in config `{config}`.") from exc

    if configs is None:
        return {}
    if not isinstance(configs, dict):
        raise InvalidParameterError(f"Config `{config}` must be a mapping, got {type(configs).__name__}.")
    return configs


def load_config(config: str | Path) -> DoGConfig:
    """Build a validated `DoGConfig` from a YAML file.

    Keys are the `DoGConfig` field names; missing keys keep their defaults.

    Raises:
        InvalidParameterError: On unknown keys, malformed YAML or invalid values.
    """
    values = parse_configs(config)
    known = {field.name for field in dataclasses.fields(DoGConfig)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise InvalidParameterError(f"Unknown keys in config `{config}`: {unknown}.")
    return DoGConfig(**values).validate()
