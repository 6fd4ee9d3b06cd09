# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Layered configuration loading (defaults, TOML files, environment, CLI)."""

from __future__ import annotations

import os
import tomllib
from abc import abstractmethod
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Final, Protocol, runtime_checkable

from pydantic import ValidationError

from .config import AddConfig
from .errors import ConfigError

PROJECT_CONFIG_NAME: Final[str] = ".subgraph-add.toml"
PYPROJECT_NAME: Final[str] = "pyproject.toml"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_SECTION_KEY: Final[str] = "subgraph-add"
ETHERSCAN_API_KEY_ENV: Final[str] = "ETHERSCAN_API_KEY"


@runtime_checkable
class ConfigSource(Protocol):
    """Provide a configuration fragment merged by :class:`ConfigLoader`."""

    name: str

    @abstractmethod
    def load(self) -> Mapping[str, Any]:
        """Return configuration values keyed by :class:`AddConfig` field name."""

    @abstractmethod
    def describe(self) -> str:
        """Return a human-readable description used in error messages."""


class DefaultConfigSource(ConfigSource):
    """Return the built-in defaults as a configuration fragment."""

    name = "defaults"

    def load(self) -> Mapping[str, Any]:
        return AddConfig().to_dict()

    def describe(self) -> str:
        return "Built-in defaults"


class TomlConfigSource(ConfigSource):
    """Load configuration data from a standalone TOML document."""

    def __init__(self, path: Path, *, name: str | None = None) -> None:
        self._path = path
        self.name = name or str(path)

    def load(self) -> Mapping[str, Any]:
        if not self._path.exists():
            return {}
        try:
            with self._path.open("rb") as handle:
                data = tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {self._path}: {exc}") from exc
        return _normalise_keys(data)

    def describe(self) -> str:
        return f"TOML configuration at {self.name}"


class PyProjectConfigSource(TomlConfigSource):
    """Read configuration from ``[tool.subgraph-add]`` within ``pyproject.toml``."""

    def load(self) -> Mapping[str, Any]:
        data = super().load()
        tool_section = data.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return {}
        section = tool_section.get(PYPROJECT_SECTION_KEY.replace("-", "_"))
        if not isinstance(section, Mapping):
            return {}
        return dict(section)

    def describe(self) -> str:
        return f"pyproject.toml ({self.name})"


class EnvironmentConfigSource(ConfigSource):
    """Pick up secrets supplied through the environment."""

    name = "environment"

    def __init__(self, env: Mapping[str, str] | None = None) -> None:
        self._env = os.environ if env is None else env

    def load(self) -> Mapping[str, Any]:
        api_key = self._env.get(ETHERSCAN_API_KEY_ENV)
        return {"etherscan_api_key": api_key} if api_key else {}

    def describe(self) -> str:
        return f"environment variable {ETHERSCAN_API_KEY_ENV}"


@dataclass(slots=True)
class ConfigLoader:
    """Merge configuration sources in precedence order into :class:`AddConfig`."""

    sources: Sequence[ConfigSource]
    overrides: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def for_root(
        cls,
        root: Path,
        *,
        overrides: Mapping[str, Any] | None = None,
        env: Mapping[str, str] | None = None,
    ) -> "ConfigLoader":
        """Return a loader reading the standard configuration files under ``root``."""

        sources: list[ConfigSource] = [
            DefaultConfigSource(),
            PyProjectConfigSource(root / PYPROJECT_NAME),
            TomlConfigSource(root / PROJECT_CONFIG_NAME),
            EnvironmentConfigSource(env),
        ]
        return cls(sources=sources, overrides=dict(overrides or {}))

    def load(self) -> AddConfig:
        """Return the merged configuration.

        Raises:
            ConfigError: If a source provides values the model rejects.
        """

        merged: dict[str, Any] = {}
        last_source = "defaults"
        for source in self.sources:
            fragment = source.load()
            if fragment:
                merged = _deep_merge(merged, fragment)
                last_source = source.describe()
        explicit = {key: value for key, value in self.overrides.items() if value is not None}
        if explicit:
            merged = _deep_merge(merged, explicit)
        try:
            return AddConfig.model_validate(merged)
        except ValidationError as exc:
            origin = "command-line options" if explicit else last_source
            raise ConfigError(f"Invalid configuration ({origin}): {exc}") from exc


def load_config(root: Path, *, overrides: Mapping[str, Any] | None = None) -> AddConfig:
    """Return the configuration for a project rooted at ``root``."""

    return ConfigLoader.for_root(root, overrides=overrides).load()


def _normalise_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``data`` with dashed TOML keys converted to model field names."""

    normalised: dict[str, Any] = {}
    for key, value in data.items():
        target = key.replace("-", "_")
        normalised[target] = _normalise_keys(value) if isinstance(value, Mapping) else value
    return normalised


def _deep_merge(base: Mapping[str, Any], incoming: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``base`` updated recursively with ``incoming``."""

    result = dict(base)
    for key, value in incoming.items():
        existing = result.get(key)
        if isinstance(existing, Mapping) and isinstance(value, Mapping):
            result[key] = _deep_merge(existing, value)
        else:
            result[key] = value
    return result


__all__ = [
    "ConfigLoader",
    "ConfigSource",
    "DefaultConfigSource",
    "EnvironmentConfigSource",
    "ETHERSCAN_API_KEY_ENV",
    "PROJECT_CONFIG_NAME",
    "PyProjectConfigSource",
    "TomlConfigSource",
    "load_config",
]
