"""
Configuration loading for the editor.

Settings come from a TOML file merged over built-in defaults::

    [editor]
    tab_stop = 8
    quit_times = 3
    message_timeout = 5
    read_timeout = 1
    syntax_fallback = true

    [logging]
    file = "/tmp/kilopy.log"
    level = "DEBUG"
"""

import copy
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Final, Optional

import toml

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR: Final[str] = 'KILOPY_CONFIG'
DEFAULT_CONFIG_PATH: Final[str] = os.path.join('~', '.config', 'kilopy', 'config.toml')

DEFAULT_CONFIG: Final[Dict[str, Dict[str, Any]]] = {
    'editor': {
        'tab_stop': 8,
        'quit_times': 3,
        'message_timeout': 5,
        'read_timeout': 1,
        'syntax_fallback': True,
    },
    'logging': {
        'file': None,
        'level': 'INFO',
    },
}

POSITIVE_INT_KEYS: Final[tuple] = ('tab_stop', 'quit_times', 'message_timeout', 'read_timeout')


class ConfigError(ValueError):
    """A configuration value is out of range or of the wrong type."""


@dataclass(frozen=True)
class EditorConfig:
    tab_stop: int = 8
    quit_times: int = 3
    message_timeout: int = 5
    read_timeout: int = 1
    syntax_fallback: bool = True
    log_file: Optional[str] = None
    log_level: str = 'INFO'


def _merge(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(defaults)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value

    return merged


def _resolve_path(path: Optional[str]) -> Optional[str]:
    if path:
        return os.path.expanduser(path)

    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return os.path.expanduser(env_path)

    default_path = os.path.expanduser(DEFAULT_CONFIG_PATH)
    if os.path.exists(default_path):
        return default_path

    return None


def config_from_dict(data: Dict[str, Any]) -> EditorConfig:
    """
    Build an EditorConfig from a parsed TOML document.

    Raises:
        ConfigError: If a value has the wrong type or is not positive
    """

    merged = _merge(DEFAULT_CONFIG, data)
    for section in DEFAULT_CONFIG:
        if not isinstance(merged[section], dict):
            raise ConfigError(f"[{section}] must be a table, got {merged[section]!r}")

    editor = merged['editor']
    log = merged['logging']

    for key in POSITIVE_INT_KEYS:
        value = editor[key]
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise ConfigError(f"editor.{key} must be a positive integer, got {value!r}")

    if editor['read_timeout'] > 255:
        raise ConfigError("editor.read_timeout must be at most 255 tenths of a second")

    if not isinstance(editor['syntax_fallback'], bool):
        raise ConfigError("editor.syntax_fallback must be true or false")

    if log['file'] is not None and not isinstance(log['file'], str):
        raise ConfigError(f"logging.file must be a path string, got {log['file']!r}")

    if not isinstance(log['level'], str):
        raise ConfigError(f"logging.level must be a string, got {log['level']!r}")

    level = log['level'].upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"logging.level {log['level']!r} is not a logging level")

    return EditorConfig(
        tab_stop=editor['tab_stop'],
        quit_times=editor['quit_times'],
        message_timeout=editor['message_timeout'],
        read_timeout=editor['read_timeout'],
        syntax_fallback=editor['syntax_fallback'],
        log_file=os.path.expanduser(log['file']) if log['file'] else None,
        log_level=level,
    )


def load_config(path: Optional[str] = None) -> EditorConfig:
    """
    Load the editor configuration.

    The file is looked up as the given path, then $KILOPY_CONFIG, then
    ~/.config/kilopy/config.toml. A missing or unparsable file leaves the
    defaults in place.

    Args:
        path: Optional explicit config file path

    Returns:
        EditorConfig: The merged configuration

    Raises:
        ConfigError: If a value in the file is invalid
    """

    config_path = _resolve_path(path)
    if config_path is None:
        return config_from_dict({})

    try:
        data = toml.load(config_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Could not read config %s: %s; using defaults", config_path, e)
        return config_from_dict({})

    logger.debug("Loaded config from %s", config_path)
    return config_from_dict(data)
