"""Configuration validation."""

from pathlib import Path
from typing import Dict, Any, List

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


class ValidationError(Exception):
    """Configuration validation errors."""
    pass


def validate_config(config: Dict[str, Any]) -> None:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary from loader

    Raises:
        ValidationError: If configuration is invalid
    """
    errors = []

    errors.extend(_validate_paths(config.get('paths') or {}))
    errors.extend(_validate_sync(config.get('sync') or {}))
    errors.extend(_validate_logging(config.get('logging') or {}))

    if errors:
        raise ValidationError(
            "Configuration validation failed:\n  - " + "\n  - ".join(errors)
        )


def _validate_paths(section: Dict[str, Any]) -> List[str]:
    """Validate paths section."""
    errors = []

    for path_key in ('source', 'destination'):
        value = section.get(path_key)
        if not value:
            errors.append(f"paths.{path_key} is required")
            continue

        path = Path(str(value)).expanduser()
        if not path.exists():
            errors.append(f"paths.{path_key} not found: {path}")
        elif not path.is_dir():
            errors.append(f"paths.{path_key} must be a directory: {path}")

    return errors


def _validate_sync(section: Dict[str, Any]) -> List[str]:
    """Validate sync options section."""
    errors = []

    for name_key in ('catalog_directory', 'media_directory', 'gamelist_filename'):
        if name_key in section:
            value = section[name_key]
            if not isinstance(value, str) or not value:
                errors.append(f"sync.{name_key} must be a non-empty string")
            elif '/' in value or '\\' in value:
                errors.append(f"sync.{name_key} must be a plain name, not a path")

    platforms = section.get('platforms', [])
    if platforms is not None:
        if not isinstance(platforms, list):
            errors.append("sync.platforms must be a list")
        elif any(not isinstance(p, str) for p in platforms):
            errors.append("sync.platforms entries must be strings")

    for flag in ('replace_existing_media', 'deterministic_matching'):
        if flag in section and not isinstance(section[flag], bool):
            errors.append(f"sync.{flag} must be a boolean")

    return errors


def _validate_logging(section: Dict[str, Any]) -> List[str]:
    """Validate logging section."""
    errors = []

    level = section.get('level', 'INFO')
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        errors.append(f"logging.level must be one of: {', '.join(VALID_LOG_LEVELS)}")

    if 'console' in section and not isinstance(section['console'], bool):
        errors.append("logging.console must be a boolean")

    for file_key in ('file', 'error_log'):
        value = section.get(file_key)
        if value is not None and not isinstance(value, str):
            errors.append(f"logging.{file_key} must be a path string")

    return errors
