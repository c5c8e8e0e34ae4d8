import httpx

from app.config import settings
from app.integrations.url_shortener import KNOWN_PROVIDERS, UrlShortener, get_url_shortener
from app.observability import metrics_store

LONG_URL = "https://jerseys.example.com/customer.html?order=ORD-1&action=details"


class _Response:
    def __init__(self, status_code: int, payload=None, text: str = ""):
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class _ClientStub:
    def __init__(self, responses: dict):
        self._responses = responses
        self.requests: list[tuple[str, dict]] = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def get(self, url, params=None):
        self.requests.append((url, params))
        value = self._responses[url]
        if isinstance(value, Exception):
            raise value
        return value


def _install(monkeypatch, responses: dict) -> _ClientStub:
    stub = _ClientStub(responses)
    monkeypatch.setattr(
        "app.integrations.url_shortener.httpx.Client", lambda timeout: stub
    )
    return stub


def _shortener() -> UrlShortener:
    providers = [KNOWN_PROVIDERS[name] for name in ("shrtco", "isgd", "tinyurl")]
    return UrlShortener(providers, timeout_s=0.1)


def test_first_provider_success_wins(monkeypatch):
    stub = _install(
        monkeypatch,
        {
            "https://api.shrtco.de/v2/shorten": _Response(
                200, {"ok": True, "result": {"full_short_link": "https://shrtco.de/abc"}}
            ),
        },
    )

    assert _shortener().shorten(LONG_URL) == "https://shrtco.de/abc"
    assert stub.requests == [("https://api.shrtco.de/v2/shorten", {"url": LONG_URL})]
    assert metrics_store.snapshot().counters["url_shortener_success_total"] == 1


def test_falls_through_failing_providers(monkeypatch):
    stub = _install(
        monkeypatch,
        {
            "https://api.shrtco.de/v2/shorten": httpx.ConnectError("dns failure"),
            "https://is.gd/create.php": _Response(200, text="Error: rate limited"),
            "https://tinyurl.com/api-create.php": _Response(200, text="https://tinyurl.com/y4x\n"),
        },
    )

    assert _shortener().shorten(LONG_URL) == "https://tinyurl.com/y4x"
    assert [url for url, _ in stub.requests] == [
        "https://api.shrtco.de/v2/shorten",
        "https://is.gd/create.php",
        "https://tinyurl.com/api-create.php",
    ]
    assert stub.requests[1][1] == {"format": "simple", "url": LONG_URL}
    assert metrics_store.snapshot().counters["url_shortener_failures_total"] == 2


def test_exhausted_chain_returns_none(monkeypatch):
    _install(
        monkeypatch,
        {
            "https://api.shrtco.de/v2/shorten": _Response(200, {"ok": False}),
            "https://is.gd/create.php": httpx.ReadTimeout("slow"),
            "https://tinyurl.com/api-create.php": _Response(503, text="busy"),
        },
    )

    assert _shortener().shorten(LONG_URL) is None
    assert metrics_store.snapshot().counters["url_shortener_failures_total"] == 3


def test_client_errors_and_bad_json_are_failures(monkeypatch):
    _install(
        monkeypatch,
        {
            "https://api.shrtco.de/v2/shorten": _Response(200, None),
            "https://is.gd/create.php": _Response(400, text="https://is.gd/bad"),
        },
    )
    shortener = UrlShortener(
        [KNOWN_PROVIDERS["shrtco"], KNOWN_PROVIDERS["isgd"]], timeout_s=0.1
    )

    assert shortener.shorten(LONG_URL) is None


def test_non_object_json_moves_on_to_next_provider(monkeypatch):
    _install(
        monkeypatch,
        {
            "https://api.shrtco.de/v2/shorten": _Response(200, []),
            "https://is.gd/create.php": _Response(200, text="https://is.gd/x"),
        },
    )
    shortener = UrlShortener(
        [KNOWN_PROVIDERS["shrtco"], KNOWN_PROVIDERS["isgd"]], timeout_s=0.1
    )

    assert shortener.shorten(LONG_URL) == "https://is.gd/x"
    assert metrics_store.snapshot().counters["url_shortener_failures_total"] == 1


def test_get_url_shortener_follows_configured_order(monkeypatch):
    monkeypatch.setattr(settings, "shortener_providers", "tinyurl,unknown,isgd")

    shortener = get_url_shortener()

    assert [provider.name for provider in shortener.providers] == ["tinyurl", "isgd"]
