from app.integrations.errors import (
    IntegrationBadGatewayError,
    IntegrationError,
    IntegrationTimeoutError,
    IntegrationUnavailableError,
    error_for_status,
    error_for_transport,
)
from app.integrations.url_shortener import UrlShortener, get_url_shortener

__all__ = [
    "IntegrationError",
    "IntegrationTimeoutError",
    "IntegrationUnavailableError",
    "IntegrationBadGatewayError",
    "error_for_status",
    "error_for_transport",
    "UrlShortener",
    "get_url_shortener",
]
