"""
Configuration Loader.

Reads a vault YAML file, layers an optional per-environment overlay on top,
expands ${VAR} / ${VAR:default} references and validates the result into an
AppConfig.
"""

import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Iterator, Optional

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigParseError,
    ConfigValidationError,
)
from .models import AppConfig, expand_env

# Environment variable naming the overlay when load() gets no env argument
ENV_SELECTOR = "VAULT_ENV"


class ConfigLoader:
    """
    Loads vault configuration.

    For ``config/vault.yaml`` and env ``production`` the overlay is
    ``config/vault.production.yaml``; mappings are merged key by key, any
    other value in the overlay replaces the base value.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load("config/vault.yaml", env="production")
        >>> config.vault.rebalance_policy
        <RebalancePolicy.TRANSFER_BETWEEN_LEGS: 'transfer_between_legs'>
    """

    def __init__(self, env_file: Optional[str | Path] = None):
        """
        Args:
            env_file: Explicit .env file. Without it, the first .env found
                next to the config file, one level up, or in the working
                directory is used.
        """
        self._env_file = Path(env_file) if env_file else None
        self._dotenv_loaded = False

    def load(self, path: str | Path, env: Optional[str] = None) -> AppConfig:
        """
        Load, merge, expand and validate.

        Args:
            path: Base configuration file
            env: Overlay name; defaults to $VAULT_ENV. A missing overlay file
                is not an error.

        Raises:
            ConfigFileNotFoundError: Base file does not exist
            ConfigParseError: A file is not valid YAML or not a mapping
            ConfigValidationError: The merged document fails validation
        """
        path = Path(path)
        self._load_dotenv(path.parent)

        data = self.load_yaml(path)
        overlay = self.overlay_path(path, env or os.environ.get(ENV_SELECTOR))
        if overlay is not None and overlay.exists():
            data = self.merge_configs(data, self.load_yaml(overlay))

        data = self.substitute_env_vars(data)

        try:
            return AppConfig(**data)
        except ValidationError as e:
            raise ConfigValidationError(
                [_format_error(err) for err in e.errors()],
                path=str(path),
            ) from e

    @staticmethod
    def overlay_path(path: Path, env: Optional[str]) -> Optional[Path]:
        """Overlay file for env next to path, or None without an env."""
        if not env:
            return None
        return path.with_name(f"{path.stem}.{env}{path.suffix}")

    def load_yaml(self, path: str | Path) -> dict[str, Any]:
        """
        Parse one YAML file into a mapping. An empty file yields {}.

        Raises:
            ConfigFileNotFoundError: File does not exist
            ConfigParseError: Invalid YAML, or the document is not a mapping
        """
        path = Path(path)
        if not path.is_file():
            raise ConfigFileNotFoundError(str(path))

        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigParseError(str(path), str(e)) from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigParseError(
                str(path), f"expected a mapping at top level, got {type(data).__name__}"
            )
        return data

    def merge_configs(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """
        Overlay override onto base without mutating either.

        >>> ConfigLoader().merge_configs({"vault": {"owner": "a", "min_deposit": 1}},
        ...                              {"vault": {"owner": "b"}})
        {'vault': {'owner': 'b', 'min_deposit': 1}}
        """
        merged = deepcopy(base)
        for key, value in override.items():
            current = merged.get(key)
            if isinstance(current, dict) and isinstance(value, dict):
                merged[key] = self.merge_configs(current, value)
            else:
                merged[key] = deepcopy(value)
        return merged

    def substitute_env_vars(self, data: Any) -> Any:
        """Expand ${VAR} / ${VAR:default} references; see models.expand_env."""
        return expand_env(data)

    def _load_dotenv(self, config_dir: Path) -> None:
        if self._dotenv_loaded:
            return
        for candidate in self._dotenv_candidates(config_dir):
            if candidate.is_file():
                load_dotenv(candidate)
                self._dotenv_loaded = True
                return

    def _dotenv_candidates(self, config_dir: Path) -> Iterator[Path]:
        if self._env_file:
            yield self._env_file
        yield config_dir / ".env"
        yield config_dir.parent / ".env"
        yield Path.cwd() / ".env"


def _format_error(error: dict[str, Any]) -> str:
    location = ".".join(str(part) for part in error["loc"]) or "<root>"
    return f"{location}: {error['msg']}"


def load_config(
    path: str | Path,
    env: Optional[str] = None,
    env_file: Optional[str | Path] = None,
) -> AppConfig:
    """Shorthand for ConfigLoader(env_file).load(path, env)."""
    return ConfigLoader(env_file=env_file).load(path, env=env)
