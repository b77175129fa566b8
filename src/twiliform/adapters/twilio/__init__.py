"""Public interface for the Twilio adapter."""

from __future__ import annotations

from .client import TwilioClient, classify_error, error_from_response
from .schema import (
    Account,
    ApiKey,
    AvailablePhoneNumber,
    IncomingPhoneNumber,
    MessagingService,
    ServicePhoneNumber,
)

__all__ = [
    "Account",
    "ApiKey",
    "AvailablePhoneNumber",
    "IncomingPhoneNumber",
    "MessagingService",
    "ServicePhoneNumber",
    "TwilioClient",
    "classify_error",
    "error_from_response",
]
