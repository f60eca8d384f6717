"""Pre-built error instances raised at the HTTP boundary."""

from __future__ import annotations

from ganji_gateway.errors.gateway_errors import GatewayError

# -- Authentication --------------------------------------------------------

ErrUnauthorized = GatewayError(
    "Unauthorized: Invalid or missing API key", status_code=401, code="unauthorized"
)

# -- Throttling ------------------------------------------------------------

ErrRateLimited = GatewayError(
    "Too many requests, please try again later.", status_code=429, code="rate-limited"
)

# -- Lifecycle -------------------------------------------------------------

ErrEngineNotReady = GatewayError(
    "service engine not initialized", code="engine-not-ready"
)
