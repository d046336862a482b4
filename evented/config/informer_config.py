"""Configuration for informers.

Settings that are process-wide rather than per-emitter live here, the
manager in ``config_manager`` hands them out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from evented.errors import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
WAIT_MODES = ("series", "parallel")


@dataclass
class InformerConfig:
    """Process-wide defaults for ``Informer`` instances."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"

    # None keeps every emitted filter so has_been_seen sees the full history
    filter_seen_limit: int | None = None

    # Wait mode used for listeners that return an awaitable without calling wait()
    coroutine_wait_mode: Literal["series", "parallel"] = "series"

    def validate(self) -> None:
        """Validate configuration and raise errors for invalid setups."""
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(
                f"Unknown log level {self.log_level!r}",
                config_key="log_level",
                details={"allowed": list(LOG_LEVELS)},
            )

        if self.filter_seen_limit is not None and (
            isinstance(self.filter_seen_limit, bool)
            or not isinstance(self.filter_seen_limit, int)
            or self.filter_seen_limit < 1
        ):
            raise ConfigurationError(
                "filter_seen_limit must be a positive integer or None",
                config_key="filter_seen_limit",
                details={"value": self.filter_seen_limit},
            )

        if self.coroutine_wait_mode not in WAIT_MODES:
            raise ConfigurationError(
                f"Unknown wait mode {self.coroutine_wait_mode!r}",
                config_key="coroutine_wait_mode",
                details={"allowed": list(WAIT_MODES)},
            )


# Default configuration instance
DEFAULT_CONFIG = InformerConfig()
