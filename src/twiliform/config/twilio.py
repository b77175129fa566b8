"""Twilio API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import optional_env_var, require_env_vars
from .http_resilience import ResilienceConfig

DEFAULT_TWILIO_API_URL = "https://api.twilio.com"
DEFAULT_TWILIO_MESSAGING_URL = "https://messaging.twilio.com"
TWILIO_API_VERSION = "2010-04-01"


@dataclass(frozen=True, slots=True)
class TwilioConfig:
    """Credentials and endpoints for one Twilio (parent) account."""

    account_sid: str
    auth_token: str = field(repr=False)
    api_base_url: str = DEFAULT_TWILIO_API_URL
    messaging_base_url: str = DEFAULT_TWILIO_MESSAGING_URL
    resilience: ResilienceConfig = field(default_factory=lambda: ResilienceConfig(name="twilio"))


def get_twilio_config(*, resilience: ResilienceConfig | None = None) -> TwilioConfig:
    values = require_env_vars(("TWILIO_ACCOUNT_SID", "TWILIO_AUTH_TOKEN"))
    api_base_url = optional_env_var("TWILIO_API_URL", DEFAULT_TWILIO_API_URL)
    messaging_base_url = optional_env_var("TWILIO_MESSAGING_URL", DEFAULT_TWILIO_MESSAGING_URL)
    return TwilioConfig(
        account_sid=values["TWILIO_ACCOUNT_SID"],
        auth_token=values["TWILIO_AUTH_TOKEN"],
        api_base_url=api_base_url.rstrip("/"),
        messaging_base_url=messaging_base_url.rstrip("/"),
        resilience=resilience or ResilienceConfig(name="twilio"),
    )
