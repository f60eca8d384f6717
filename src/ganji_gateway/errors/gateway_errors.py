"""GatewayError — base exception class for all gateway errors.

Only boundary rejections carry a 4xx status; every other failure is a 500.
"""

from __future__ import annotations


class GatewayError(Exception):
    """Base error for all gateway operations.

    Attributes:
        message: Human-readable error description.
        status_code: Suggested HTTP status code.
        code: Machine-readable error code string.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        code: str = "gateway-error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class ValidationError(GatewayError):
    """Request shape rejected before any RPC call."""

    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=400, code="validation-error")


class ServiceNotConfiguredError(GatewayError):
    """A chain service or signer was used before it was configured."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="not-configured")
