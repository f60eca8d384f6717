"""API key authentication.

Every ``/api/v1/*`` route requires the ``x-api-key`` header to equal the
configured key. An unset key rejects every request.
"""

from __future__ import annotations

import hmac
import logging
from typing import TYPE_CHECKING

from ganji_gateway.errors.definitions import ErrUnauthorized

if TYPE_CHECKING:
    from ganji_gateway.config.settings import AuthConfig

logger = logging.getLogger(__name__)

AUTH_HEADER_API_KEY = "x-api-key"


def authenticate_api_key(config: AuthConfig, provided: str, *, client: str = "") -> None:
    """Check *provided* against the configured key.

    Raises:
        GatewayError: 401 if the key is missing or does not match.
    """
    expected = config.api_key
    if not provided or not expected or not hmac.compare_digest(provided, expected):
        logger.warning("Unauthorized access attempt from %s", client or "unknown")
        raise ErrUnauthorized
