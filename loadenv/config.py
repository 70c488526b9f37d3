# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
#
# This source code is licensed under the BSD-style license found in the
# LICENSE file in the root directory of this source tree.

"""
Load environments from YAML files.

Example file:

    name: staging
    default_config:
      base_url: http://staging.example.com
      scenario_timeout: 15
    scenarios:
      - scenario: myproject.scenarios:Checkout
        name: checkout-1
        config:
          delay: 2
      - scenario: myproject.scenarios:Browse
"""

import importlib
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .environment import Environment, EnvironmentBuilder
from .errors import ConfigError
from .scenario import ScenarioLike


def load_config(config_path: Path) -> dict:
    """Load environment configuration from YAML file."""
    try:
        with open(config_path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path}: expected a mapping at the top level")
    return data


def resolve_scenario(reference: str) -> ScenarioLike:
    """Import a scenario from a ``module:attribute`` reference."""
    module_name, sep, attr = reference.partition(":")
    if not sep or not module_name or not attr:
        raise ConfigError(f"Invalid scenario reference {reference!r}, expected 'module:Scenario'")

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Cannot import scenario module {module_name!r}: {e}") from e

    try:
        return getattr(module, attr)
    except AttributeError as e:
        raise ConfigError(f"Module {module_name!r} has no scenario {attr!r}") from e


def build_environment(data: Dict[str, Any], default_name: str = "environment") -> Environment:
    """Build an Environment from a parsed configuration mapping."""
    builder = EnvironmentBuilder(str(data.get("name") or default_name))
    builder.default_config(_mapping(data.get("default_config"), "default_config"))

    scenarios = data.get("scenarios") or []
    if not isinstance(scenarios, list):
        raise ConfigError("'scenarios' must be a list")

    for i, entry in enumerate(scenarios):
        if isinstance(entry, str):
            entry = {"scenario": entry}
        if not isinstance(entry, dict) or "scenario" not in entry:
            raise ConfigError(f"scenarios[{i}]: expected a mapping with a 'scenario' key")
        builder.run(
            resolve_scenario(entry["scenario"]),
            _mapping(entry.get("config"), f"scenarios[{i}].config"),
            name=entry.get("name"),
        )

    return builder.build()


def load_environment(config_path: Union[str, Path]) -> Environment:
    config_path = Path(config_path)
    return build_environment(load_config(config_path), default_name=config_path.stem)


def _mapping(value: Any, label: str) -> Dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{label}' must be a mapping")
    return value
