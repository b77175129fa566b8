"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, optional_int_env_var, require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import DEFAULT_TIMEOUT_SECONDS, RateLimit, ResilienceConfig
from .logging import configure_logging
from .reconcile import ReconcileConfig, get_reconcile_config
from .twilio import TwilioConfig, get_twilio_config

__all__ = [
    "DEFAULT_TIMEOUT_SECONDS",
    "ConfigurationError",
    "MissingConfigurationError",
    "RateLimit",
    "ReconcileConfig",
    "ResilienceConfig",
    "TwilioConfig",
    "configure_logging",
    "get_reconcile_config",
    "get_twilio_config",
    "optional_env_var",
    "optional_int_env_var",
    "require_env_var",
    "require_env_vars",
]
