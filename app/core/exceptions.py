from typing import Optional


class ConfigurationError(Exception):
    """Raised when required service configuration is missing or unreadable."""


class ShopifyAPIError(Exception):
    """Non-success response from the Shopify Admin REST API."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is None:
            return base
        return f"{base} ({self.status_code}): {self.body or ''}".rstrip(": ")
