import logging
from dataclasses import dataclass, field
from typing import Protocol

import httpx

from app.config import settings, shortener_provider_names
from app.integrations.errors import (
    IntegrationBadGatewayError,
    IntegrationError,
    error_for_status,
    error_for_transport,
)
from app.observability import log_event, metrics_store, observe_timing


class UrlShortenerProtocol(Protocol):
    def shorten(self, long_url: str) -> str | None: ...


@dataclass(frozen=True)
class PlainTextProvider:
    """Provider answering with the short URL as the whole response body."""

    name: str
    endpoint: str
    extra_params: dict[str, str] = field(default_factory=dict)

    def params(self, long_url: str) -> dict[str, str]:
        return {**self.extra_params, "url": long_url}

    def parse(self, response: httpx.Response) -> str:
        text = response.text.strip()
        if not text.startswith("http"):
            raise IntegrationBadGatewayError(self.name, "Shortener returned no URL")
        return text


@dataclass(frozen=True)
class ShrtcoProvider:
    name: str = "shrtco"
    endpoint: str = "https://api.shrtco.de/v2/shorten"

    def params(self, long_url: str) -> dict[str, str]:
        return {"url": long_url}

    def parse(self, response: httpx.Response) -> str:
        try:
            payload = response.json()
        except ValueError as err:
            raise IntegrationBadGatewayError(self.name, "Malformed JSON body") from err

        if not isinstance(payload, dict) or not payload.get("ok"):
            raise IntegrationBadGatewayError(self.name, "Shortener returned no URL")
        result = payload.get("result")
        short_url = result.get("full_short_link") if isinstance(result, dict) else None
        if not isinstance(short_url, str):
            raise IntegrationBadGatewayError(self.name, "Shortener returned no URL")
        return short_url


KNOWN_PROVIDERS = {
    "shrtco": ShrtcoProvider(),
    "isgd": PlainTextProvider("isgd", "https://is.gd/create.php", {"format": "simple"}),
    "tinyurl": PlainTextProvider("tinyurl", "https://tinyurl.com/api-create.php"),
}


class UrlShortener:
    """Try each provider once, in order; the first short URL wins.

    Failures never propagate: an exhausted chain yields ``None`` and the long URL
    remains the working link.
    """

    def __init__(self, providers: list, timeout_s: float) -> None:
        self.providers = providers
        self.timeout_s = timeout_s

    def shorten(self, long_url: str) -> str | None:
        for provider in self.providers:
            try:
                with observe_timing("url_shortener_request_seconds"):
                    short_url = self._shorten_with(provider, long_url)
            except IntegrationError as err:
                metrics_store.increment("url_shortener_failures_total")
                log_event(
                    f"url_shortener_failed:{err.code}",
                    provider=provider.name,
                    level=logging.WARNING,
                )
                continue

            metrics_store.increment("url_shortener_success_total")
            log_event("url_shortened", provider=provider.name)
            return short_url

        log_event("url_shortener_exhausted", level=logging.WARNING)
        return None

    def _shorten_with(self, provider, long_url: str) -> str:
        try:
            with httpx.Client(timeout=self.timeout_s) as client:
                response = client.get(provider.endpoint, params=provider.params(long_url))
        except httpx.TransportError as err:
            raise error_for_transport(provider.name, err) from err

        error = error_for_status(provider.name, response.status_code)
        if error is not None:
            raise error
        return provider.parse(response)


def get_url_shortener() -> UrlShortenerProtocol:
    providers = [
        KNOWN_PROVIDERS[name] for name in shortener_provider_names() if name in KNOWN_PROVIDERS
    ]
    return UrlShortener(providers, timeout_s=settings.shortener_timeout_s)
