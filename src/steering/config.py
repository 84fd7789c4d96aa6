"""Steering Configuration

Configuration loading with environment variable support and sensible defaults.

Environment Variables:
    STEERING_CONFIG_PATH: Path to config file (default: steering-config.yaml in project dir)
    STEERING_CATALOG_PATH: Override catalog path from config
    STEERING_LOG_LEVEL: Override logging level from config

Configuration Schema:
    catalog:
        path: str - catalog.yaml or steering directory (default: bundled catalog)
    workspace:
        ignore: list - Directory names skipped when scanning the workspace
        max_files: int - Scan limit (default: 20000)
    session:
        store_dir: str - Session files directory (default: .steering/sessions)
    logging:
        level: str - Logging level (default: "WARNING")
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from steering.errors import ConfigurationError
from steering.workspace import DEFAULT_IGNORE, DEFAULT_MAX_FILES

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "steering-config.yaml"

# Default configuration values
DEFAULT_CONFIG: Dict[str, Any] = {
    "catalog": {
        "path": None,  # Use bundled catalog
    },
    "workspace": {
        "ignore": list(DEFAULT_IGNORE),
        "max_files": DEFAULT_MAX_FILES,
    },
    "session": {
        "store_dir": ".steering/sessions",
    },
    "logging": {
        "level": "WARNING",
    },
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge override dict into base dict.

    Args:
        base: Base dictionary (defaults)
        override: Override dictionary (user config)

    Returns:
        Merged dictionary with override values taking precedence
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _resolve_path(path: Optional[str], base_dir: Path) -> Optional[Path]:
    """
    Resolve a path, making relative paths absolute from base_dir.

    Args:
        path: Path string (absolute or relative) or None
        base_dir: Base directory for relative path resolution

    Returns:
        Resolved absolute Path or None if path was None
    """
    if path is None:
        return None

    path_obj = Path(path)
    if path_obj.is_absolute():
        return path_obj
    return (base_dir / path_obj).resolve()


def _read_yaml(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise yaml.YAMLError(f"top level of {path} must be a mapping")
    return data


def load_config(
    config_path: Optional[str] = None,
    project_dir: Optional[Path] = None
) -> Dict[str, Any]:
    """
    Load configuration from YAML file with environment variable overrides.

    Configuration Loading Order (later overrides earlier):
    1. Default values (DEFAULT_CONFIG)
    2. Config file (config_path, STEERING_CONFIG_PATH, or steering-config.yaml in project_dir)
    3. Environment variable overrides (STEERING_CATALOG_PATH, STEERING_LOG_LEVEL)

    Args:
        config_path: Explicit config file path (overrides STEERING_CONFIG_PATH)
        project_dir: Project directory for relative path resolution (default: cwd)

    Returns:
        Merged configuration dictionary

    Raises:
        ConfigurationError: If an explicit config file is invalid YAML or unreadable
    """
    if project_dir is None:
        project_dir = Path.cwd()
    project_dir = Path(project_dir)

    config = copy.deepcopy(DEFAULT_CONFIG)
    file_path = config_path or os.environ.get("STEERING_CONFIG_PATH")

    if file_path:
        # Explicit config path - must be valid if it exists
        resolved_path = _resolve_path(file_path, project_dir)
        if resolved_path and resolved_path.exists():
            try:
                config = _deep_merge(config, _read_yaml(resolved_path))
                logger.info(f"Loaded configuration from: {resolved_path}")
            except yaml.YAMLError as e:
                raise ConfigurationError(f"Invalid YAML in config file: {e}")
            except OSError as e:
                raise ConfigurationError(f"Cannot read config file: {e}")
        else:
            logger.warning(f"Config file not found (using defaults): {file_path}")
    else:
        # Default config file is optional
        default_config_path = project_dir / CONFIG_FILENAME
        if default_config_path.exists():
            try:
                config = _deep_merge(config, _read_yaml(default_config_path))
                logger.info(f"Loaded configuration from: {default_config_path}")
            except yaml.YAMLError as e:
                logger.warning(f"Invalid YAML in default config (ignoring): {e}")
            except OSError as e:
                logger.warning(f"Cannot read default config (ignoring): {e}")
        else:
            logger.debug("No config file found, using defaults")

    # Apply environment variable overrides
    catalog_override = os.environ.get("STEERING_CATALOG_PATH")
    if catalog_override:
        config.setdefault("catalog", {})["path"] = catalog_override
        logger.info(f"Catalog path override from env: {catalog_override}")

    level_override = os.environ.get("STEERING_LOG_LEVEL")
    if level_override:
        config.setdefault("logging", {})["level"] = level_override

    # Resolve catalog path
    if config.get("catalog", {}).get("path"):
        resolved = _resolve_path(config["catalog"]["path"], project_dir)
        config["catalog"]["path"] = str(resolved) if resolved else None

    return config


def get_catalog_path(config: Dict[str, Any]) -> Optional[Path]:
    """
    Get catalog path from config.

    Returns:
        Configured catalog path, or None for the bundled catalog
    """
    path_str = config.get("catalog", {}).get("path")
    return Path(path_str) if path_str else None


def get_session_store_dir(config: Dict[str, Any], project_dir: Path) -> Path:
    """Session files directory, resolved against the project directory."""
    store_dir = config.get("session", {}).get("store_dir") or DEFAULT_CONFIG["session"]["store_dir"]
    return _resolve_path(store_dir, Path(project_dir))


def get_workspace_config(config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Extract scan_workspace() keyword arguments.

    Raises:
        ConfigurationError: If workspace settings have the wrong type
    """
    workspace = config.get("workspace", {})
    ignore = workspace.get("ignore", list(DEFAULT_IGNORE))
    max_files = workspace.get("max_files", DEFAULT_MAX_FILES)

    if not isinstance(ignore, list):
        raise ConfigurationError("workspace.ignore must be a list of directory names")
    if not isinstance(max_files, int) or max_files <= 0:
        raise ConfigurationError("workspace.max_files must be a positive integer")

    return {"ignore": ignore, "max_files": max_files}


def configure_logging(config: Dict[str, Any]) -> None:
    """Send log output to stderr at the configured level."""
    level_name = str(config.get("logging", {}).get("level", "WARNING")).upper()
    level = getattr(logging, level_name, None)
    if not isinstance(level, int):
        raise ConfigurationError(f"Unknown logging level: {level_name}")

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
