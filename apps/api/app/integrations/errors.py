from dataclasses import dataclass

import httpx


@dataclass
class IntegrationError(Exception):
    """Failure talking to an outside HTTP service; ``service`` names the provider."""

    service: str
    code: str
    message: str
    retryable: bool = False

    def __str__(self) -> str:
        return f"{self.service}:{self.code}:{self.message}"


class IntegrationTimeoutError(IntegrationError):
    def __init__(self, service: str, message: str = "Provider timed out") -> None:
        super().__init__(service=service, code="TIMEOUT", message=message, retryable=True)


class IntegrationUnavailableError(IntegrationError):
    def __init__(self, service: str, message: str = "Provider unreachable") -> None:
        super().__init__(service=service, code="UNAVAILABLE", message=message, retryable=True)


class IntegrationBadGatewayError(IntegrationError):
    def __init__(self, service: str, message: str = "Unusable provider response") -> None:
        super().__init__(service=service, code="BAD_GATEWAY", message=message)


def error_for_transport(service: str, err: httpx.TransportError) -> IntegrationError:
    if isinstance(err, httpx.TimeoutException):
        return IntegrationTimeoutError(service)
    return IntegrationUnavailableError(service, str(err) or type(err).__name__)


def error_for_status(service: str, status_code: int) -> IntegrationError | None:
    """Map a non-success HTTP status to an error; ``None`` for 2xx/3xx."""
    if status_code >= 500:
        return IntegrationUnavailableError(service, f"Provider returned {status_code}")
    if status_code >= 400:
        return IntegrationBadGatewayError(service, f"Provider returned {status_code}")
    return None
