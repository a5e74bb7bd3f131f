"""
Configuration loading utilities for the registration form.

This module provides functionality to load and validate application
configuration (validation limits, messages, logging, UI) with fallback
to defaults.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

from .exceptions import ConfigurationLoadError

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.yaml")

MAX_AVATAR_BYTES = 5 * 1024 * 1024

DEFAULT_MESSAGES = {
    'avatar_required': "Avatar is required",
    'avatar_type': "Avatar must be an image file",
    'avatar_size': "File exceeds maximum size of {max_avatar_mb}MB",
    'name_required': "Name is required",
    'email_required': "Email is required",
    'email_format': "Invalid email format",
    'password_required': "Password is required",
    'password_length': "Password must be at least {min_length} characters",
    'techs_min': "Add at least {min_techs} technologies",
    'tech_title_required': "Title is required",
    'tech_knowledge_number': "Knowledge must be a number",
    'tech_knowledge_min': "Knowledge must be at least {knowledge_min}",
    'tech_knowledge_max': "Knowledge must be at most {knowledge_max}",
}

# Global configuration cache
_config_cache = None


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """
    Get default configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'User Registration',
            'version': '1.0.0',
            'debug': False
        },
        'ui': {
            'page_title': 'Create User',
            'show_raw_errors': False
        },
        'logging': {
            'level': 'INFO',
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        },
        'validation': {
            'max_avatar_bytes': MAX_AVATAR_BYTES,
            'min_password_length': 6,
            'min_techs': 2,
            'knowledge_min': 1,
            'knowledge_max': 100,
            'avatar_mime_prefix': 'image/'
        },
        'messages': dict(DEFAULT_MESSAGES)
    }


def load_config(config_path: Optional[Path] = None, strict: bool = False) -> Dict[str, Any]:
    """
    Load application configuration merged over the defaults.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)
        strict: Raise ConfigurationLoadError instead of falling back to defaults

    Returns:
        Complete configuration dictionary

    Raises:
        ConfigurationLoadError: If strict and the file cannot be loaded
    """
    if config_path is None:
        config_path = CONFIG_FILE
    config_path = Path(config_path)

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return default_config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)

        if user_config is None:
            logger.warning(f"Configuration file is empty: {config_path}")
            return default_config

        if not isinstance(user_config, dict):
            raise ValueError("top-level document must be a mapping")

        config = deep_merge(default_config, user_config)

        logger.info(f"Successfully loaded configuration from {config_path}")
        return config

    except (yaml.YAMLError, OSError, ValueError) as e:
        if strict:
            raise ConfigurationLoadError(config_path, e) from e
        logger.error(f"Failed to load configuration from {config_path}: {e}")
        logger.info("Using default configuration")
        return default_config


def get_config() -> Dict[str, Any]:
    """Return the cached configuration, loading config.yaml on first use."""
    global _config_cache

    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


def get_config_value(section: str, key: str, default: Any = None) -> Any:
    """
    Get a specific configuration value.

    Args:
        section: Configuration section name
        key: Key within the section
        default: Default value if not found

    Returns:
        Configuration value or default
    """
    section_values = get_config().get(section, {})
    if not isinstance(section_values, dict):
        return default
    return section_values.get(key, default)


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and validation limits.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'validation', 'messages']

    for section in required_sections:
        if section not in config:
            logger.warning(f"Missing required configuration section: {section}")
            return False

    validation = config.get('validation', {})
    if not isinstance(validation, dict):
        logger.warning("validation section must be a mapping")
        return False

    for key in ('max_avatar_bytes', 'min_password_length', 'min_techs'):
        if key not in validation:
            continue
        try:
            value = int(validation[key])
        except (ValueError, TypeError):
            logger.warning(f"{key} must be a valid integer")
            return False
        if value <= 0:
            logger.warning(f"{key} must be positive")
            return False

    try:
        knowledge_min = float(validation.get('knowledge_min', 1))
        knowledge_max = float(validation.get('knowledge_max', 100))
    except (ValueError, TypeError):
        logger.warning("knowledge_min and knowledge_max must be numbers")
        return False

    if knowledge_min > knowledge_max:
        logger.warning("knowledge_min must not exceed knowledge_max")
        return False

    if not isinstance(config.get('messages'), dict):
        logger.warning("messages section must be a mapping")
        return False

    return True
