"""Global configuration management for evented.

This module provides centralized configuration management with thread-safe
access and configuration validation.
"""

from __future__ import annotations

from dataclasses import replace
import logging
import threading
from typing import TYPE_CHECKING
from typing import Any

if TYPE_CHECKING:
    import types

from evented.config.informer_config import DEFAULT_CONFIG
from evented.config.informer_config import InformerConfig

logger = logging.getLogger(__name__)

_ALLOWED_KEYS = frozenset({"log_level", "filter_seen_limit", "coroutine_wait_mode"})


def _apply_log_level(config: InformerConfig) -> None:
    logging.getLogger("evented").setLevel(config.log_level)


class ConfigManager:
    """Thread-safe manager for process-wide configuration state."""

    def __init__(self, default_config: InformerConfig) -> None:
        self._lock = threading.RLock()
        self._default_config = default_config
        self._current_config = default_config

    def _assign_current_config(self, value: InformerConfig) -> None:
        self._current_config = value
        _apply_log_level(value)

    def get_config(self) -> InformerConfig:
        """Get the current configuration in a thread-safe manner."""
        with self._lock:
            return self._current_config

    def set_config(self, config: InformerConfig) -> None:
        """Set the current configuration in a thread-safe manner."""
        with self._lock:
            config.validate()
            self._assign_current_config(config)

    def update_config(self, **kwargs: Any) -> None:
        """Update the current configuration with new values."""
        with self._lock:
            unknown_keys = sorted(set(kwargs) - _ALLOWED_KEYS)
            if unknown_keys:
                logger.warning("Ignoring unknown config key(s): %s", ", ".join(unknown_keys))

            changes = {key: value for key, value in kwargs.items() if key in _ALLOWED_KEYS}
            new_config = replace(self._current_config, **changes)
            new_config.validate()
            self._assign_current_config(new_config)

    def reset_config(self) -> None:
        """Reset configuration to defaults."""
        with self._lock:
            self._assign_current_config(self._default_config)

    def apply_context_changes(
        self, changes: dict[str, Any]
    ) -> tuple[InformerConfig, InformerConfig]:
        """Apply temporary configuration changes atomically.

        Returns:
            Tuple of (original_config, new_config).
        """
        with self._lock:
            original = self._current_config
            unknown_keys = sorted(set(changes) - _ALLOWED_KEYS)
            if unknown_keys:
                logger.warning("Ignoring unknown config key(s): %s", ", ".join(unknown_keys))

            new_config = replace(
                original,
                **{key: value for key, value in changes.items() if key in _ALLOWED_KEYS},
            )
            new_config.validate()
            self._assign_current_config(new_config)
            return original, new_config

    def restore_config(self, config: InformerConfig) -> None:
        """Restore a previously captured configuration."""
        with self._lock:
            self._assign_current_config(config)


_config_manager = ConfigManager(DEFAULT_CONFIG)


def get_config() -> InformerConfig:
    """Get the current configuration in a thread-safe manner.

    Returns:
        The current InformerConfig instance
    """
    return _config_manager.get_config()


def set_config(config: InformerConfig) -> None:
    """Set the current configuration in a thread-safe manner.

    Args:
        config: The new configuration to set
    """
    _config_manager.set_config(config)


def update_config(**kwargs: Any) -> None:
    """Update the current configuration with new values.

    Args:
        **kwargs: Configuration values to update
    """
    _config_manager.update_config(**kwargs)


def reset_config() -> None:
    """Reset configuration to defaults."""
    _config_manager.reset_config()


class ConfigContext:
    """Context manager for temporary configuration changes.

    This allows for temporary configuration modifications that are
    automatically reverted when the context exits.
    """

    def __init__(self, **kwargs: Any):
        self._manager = _config_manager
        self._changes = kwargs
        self._original_config: InformerConfig | None = None

    def __enter__(self) -> InformerConfig:
        self._original_config, new_config = self._manager.apply_context_changes(self._changes)
        return new_config

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        if self._original_config is not None:
            self._manager.restore_config(self._original_config)


def config_context(**kwargs: Any) -> ConfigContext:
    """Create a context manager for temporary configuration changes."""
    return ConfigContext(**kwargs)
