"""Provides functions for loading and accessing configuration settings.

Supports loading from .env files, environment variables, and a dedicated
YAML configuration file (~/.spillcache/config.yaml).
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from spillcache.infrastructure.cache.recency_tracker import DEFAULT_MEMORY_CAPACITY
from spillcache.infrastructure.cache.spillover_store import DEFAULT_SCRATCH_PREFIX

logger = logging.getLogger(__name__)

# --- Configuration Constants ---
DEFAULT_CONFIG_DIR = Path.home() / ".spillcache"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"
ENV_FILE_NAME = ".env"
ENV_PREFIX = "SPILLCACHE_"

# --- Global Configuration Store ---
_config: Dict[str, Any] = {}
_test_config: Dict[str, Any] = {}
_loaded = False


def load_configuration(config_file: Optional[Path] = None, env_file: Optional[Path] = None) -> None:
    """Loads configuration from environment, .env file, and YAML file.

    Priority order (highest to lowest):
    1. Environment Variables
    2. .env file
    3. YAML configuration file
    4. Default values passed to get_config

    Args:
        config_file: Path to the YAML configuration file (DEFAULT_CONFIG_FILE if None).
        env_file: Path to the .env file (searches upwards from cwd if None).
    """
    global _config, _loaded
    if _loaded:
        logger.debug("Configuration already loaded.")
        return

    _config = {}
    config_file = config_file or DEFAULT_CONFIG_FILE

    # 1. YAML file (lowest priority)
    if config_file.exists():
        try:
            with open(config_file, 'r') as f:
                yaml_config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to load or parse YAML config {config_file}: {e}")
        else:
            if isinstance(yaml_config, dict):
                _config.update(_flatten(yaml_config))
                logger.info(f"Loaded configuration from YAML: {config_file}")
            elif yaml_config is not None:
                logger.warning(f"YAML config file {config_file} did not contain a dictionary.")
    else:
        logger.debug(f"YAML config file not found: {config_file}")

    # 2. .env file; override=False keeps real environment variables on top
    dotenv_path = env_file or find_dotenv_path()
    if dotenv_path:
        if load_dotenv(dotenv_path=dotenv_path, override=False):
            logger.info(f"Loaded environment variables from: {dotenv_path}")
    else:
        logger.debug("No .env file found at or above current directory.")

    _loaded = True
    logger.debug("Configuration loading process completed.")


def reset_configuration() -> None:
    """Forgets loaded configuration so the next load_configuration() reads again."""
    global _config, _loaded
    _config = {}
    _loaded = False


def _flatten(tree: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Turns nested YAML mappings into dotted keys ({'cache': {'a': 1}} -> {'cache.a': 1})."""
    flat: Dict[str, Any] = {}
    for key, value in tree.items():
        dotted = f"{prefix}{key}"
        if isinstance(value, dict):
            flat.update(_flatten(value, f"{dotted}."))
        else:
            flat[dotted] = value
    return flat


def env_var_name(key: str) -> str:
    """'cache.memory_capacity' -> 'SPILLCACHE_CACHE_MEMORY_CAPACITY'."""
    return f"{ENV_PREFIX}{key.upper().replace('.', '_')}"


def _coerce(value: str) -> Any:
    if value.lower() == 'true':
        return True
    if value.lower() == 'false':
        return False
    try:
        if '.' in value:
            return float(value)
        return int(value)
    except ValueError:
        return value


def get_config(key: str, default: Any = None) -> Any:
    """
    Get a configuration value by dotted key.

    Priority:
    1. Test configuration (if in testing mode)
    2. Environment variable (SPILLCACHE_ prefix, dots as underscores)
    3. YAML config
    4. Default value

    Args:
        key: The configuration key, e.g. 'cache.memory_capacity'
        default: Default value if the key is not found

    Returns:
        The configuration value
    """
    if key in _test_config:
        return _test_config[key]

    env_key = env_var_name(key)
    if env_key in os.environ:
        return _coerce(os.environ[env_key])

    if key in _config:
        return _config[key]

    logger.debug(f"Config key '{key}' not found in environment or loaded config. Returning default: {default}")
    return default


def find_dotenv_path() -> Optional[Path]:
    """Searches for the .env file upwards from the current directory."""
    cwd = Path.cwd()
    for path in [cwd] + list(cwd.parents):
        env_path = path / ENV_FILE_NAME
        if env_path.is_file():
            return env_path
    return None

# --- Convenience Functions ---

def get_memory_capacity() -> int:
    """Number of entries a cache keeps in memory (effectively unbounded by default)."""
    value = get_config('cache.memory_capacity', DEFAULT_MEMORY_CAPACITY)
    try:
        capacity = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Invalid cache.memory_capacity '{value}'. Using unbounded capacity.")
        return DEFAULT_MEMORY_CAPACITY
    if capacity < 1:
        logger.warning(f"cache.memory_capacity must be positive, got {capacity}. Using unbounded capacity.")
        return DEFAULT_MEMORY_CAPACITY
    return capacity


def get_scratch_parent() -> Optional[Path]:
    """Directory in which scratch directories are created (None means the system temp dir)."""
    value = get_config('cache.scratch_parent')
    return Path(str(value)).expanduser() if value else None


def get_scratch_prefix() -> str:
    return str(get_config('cache.scratch_prefix', DEFAULT_SCRATCH_PREFIX))


def get_log_level() -> int:
    level_name = str(get_config('logging.level', 'INFO')).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        logger.warning(f"Unknown logging.level '{level_name}'. Defaulting to INFO.")
        return logging.INFO
    return level


def get_log_file() -> Optional[str]:
    value = get_config('logging.file')
    return str(value) if value else None


def set_config_for_testing(config_dict: Dict[str, Any]) -> None:
    """
    Set configuration values for testing purposes.
    These values will override any existing configuration.

    Args:
        config_dict: Dictionary of configuration values to set
    """
    _test_config.update(config_dict)
    logger.debug(f"Set testing configuration: {config_dict}")


def clear_test_config() -> None:
    """Clear all testing configuration values."""
    _test_config.clear()
    logger.debug("Cleared testing configuration")


def effective_configuration() -> Dict[str, Any]:
    """The settings a cache built with FileBackedCache.from_config() would use."""
    capacity = get_memory_capacity()
    return {
        'cache.memory_capacity': 'unbounded' if capacity == DEFAULT_MEMORY_CAPACITY else capacity,
        'cache.scratch_parent': str(get_scratch_parent() or "(system temp dir)"),
        'cache.scratch_prefix': get_scratch_prefix(),
        'logging.level': logging.getLevelName(get_log_level()),
        'logging.file': get_log_file() or "(none)",
    }
