"""
DartVS Configuration
Loads connection and editor settings from YAML with environment overrides
File: dartvs_services/config.py
"""

import os
import yaml
import logging
from typing import Dict, Any, Optional
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import DartVSConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DARTVS_CONFIG"

# Environment variable -> config field
ENV_OVERRIDES = {
    "DARTVS_LSP_HOST": "host",
    "DARTVS_LSP_PORT": "port",
    "DARTVS_WORKSPACE": "workspace_path",
}


class DartVSConfig(BaseModel):
    """Settings shared by the analysis client and the quick-info providers"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    host: str = "127.0.0.1"
    port: int = 8081
    workspace_path: str = "."
    connect_timeout: float = 5.0
    response_timeout: float = 10.0
    loading_text: str = "Loading..."


def _validate(data: Dict[str, Any], source: str) -> DartVSConfig:
    try:
        return DartVSConfig.model_validate(data)
    except ValidationError as e:
        raise DartVSConfigError(f"Invalid configuration in {source}: {e}")


def _apply_env_overrides(config: DartVSConfig, environ: Dict[str, str]) -> DartVSConfig:
    overrides = {}
    for env_var, field_name in ENV_OVERRIDES.items():
        raw = environ.get(env_var)
        if raw:
            overrides[field_name] = raw
            logger.debug(f"Config override from {env_var}: {field_name}={raw!r}")

    if not overrides:
        return config
    return _validate({**config.model_dump(), **overrides}, ", ".join(sorted(
        env_var for env_var, field_name in ENV_OVERRIDES.items() if field_name in overrides
    )))


def load_config(path: Optional[str | Path] = None, environ: Optional[Dict[str, str]] = None) -> DartVSConfig:
    """
    Load configuration.

    Args:
        path: YAML file to read. Falls back to $DARTVS_CONFIG, then to defaults.
        environ: Environment mapping, defaults to os.environ

    Returns:
        The resolved configuration

    Raises:
        DartVSConfigError: If the file cannot be parsed or holds invalid values
    """
    environ = os.environ if environ is None else environ
    path = path or environ.get(CONFIG_ENV_VAR)

    config = DartVSConfig()
    if path:
        config_path = Path(path)
        if not config_path.exists():
            raise DartVSConfigError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise DartVSConfigError(f"Error parsing {config_path}: {e}")

        if not isinstance(data, dict):
            raise DartVSConfigError(f"{config_path} must contain a mapping")

        config = _validate(data, str(config_path))
        logger.info(f"Loaded configuration from {config_path}")

    return _apply_env_overrides(config, environ)
