"""Shared fixtures for reach map server tests."""

import os

import httpx
import pytest

# Keep tests fast and offline BEFORE importing any reach_map_server modules
# (load_dotenv won't override values that are already set)
os.environ["GEOCODER_MIN_DELAY"] = "0"
os.environ["GEOCODER_BACKOFF"] = "0"
os.environ["GEOCODER_MAX_RETRIES"] = "2"
os.environ["TRACING_ENABLED"] = "false"

from reach_map_server.cache import GeocodeCache  # noqa: E402
from reach_map_server.geocoding import GeocodeResolver  # noqa: E402
from reach_map_server.helpers import normalize_location  # noqa: E402
from reach_map_server.models import User  # noqa: E402
from reach_map_server.state import GeocoderSettings  # noqa: E402

FAST_SETTINGS = GeocoderSettings(
    min_delay_seconds=0,
    max_retries=2,
    backoff_seconds=0,
    user_agent="reach-map-tests/1.0",
)


def nominatim_item(
    lat: float,
    lon: float,
    display_name: str = "Somewhere, Brasil",
    suburb: str | None = None,
) -> dict:
    """Build one element of a Nominatim JSON answer."""
    address = {"city": "Somewhere", "state": "Somewhere", "country": "Brasil"}
    if suburb:
        address["suburb"] = suburb
    return {
        "lat": str(lat),
        "lon": str(lon),
        "display_name": display_name,
        "boundingbox": [str(lat - 0.1), str(lat + 0.1), str(lon - 0.1), str(lon + 0.1)],
        "address": address,
    }


class FakeNominatim:
    """In-process stand-in for the Nominatim search endpoint.

    answers maps query text (compared normalized) to the JSON array to return;
    unknown queries get an empty array ("no match"). failures maps query text
    to a list of failures to produce before answering: an int is an HTTP
    status, anything else raises httpx.ConnectError.
    """

    def __init__(self, answers: dict | None = None, failures: dict | None = None):
        self.answers = {normalize_location(k): v for k, v in (answers or {}).items()}
        self.failures = {normalize_location(k): list(v) for k, v in (failures or {}).items()}
        self.fail_everything: int | str | None = None
        self.requests: list[httpx.Request] = []

    @property
    def queries(self) -> list[str]:
        return [r.url.params["q"] for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = normalize_location(request.url.params["q"])

        failure = self.fail_everything
        pending = self.failures.get(key)
        if failure is None and pending:
            failure = pending.pop(0)
        if failure is not None:
            if isinstance(failure, int):
                return httpx.Response(failure, json={"error": "unavailable"})
            raise httpx.ConnectError("connection refused", request=request)

        return httpx.Response(200, json=self.answers.get(key, []))


@pytest.fixture
def fake_provider():
    return FakeNominatim()


@pytest.fixture
def make_resolver():
    """Build a resolver talking to a FakeNominatim."""

    def _make(provider: FakeNominatim, settings: GeocoderSettings = FAST_SETTINGS):
        client = httpx.AsyncClient(transport=httpx.MockTransport(provider.handler))
        return GeocodeResolver(settings, client=client)

    return _make


@pytest.fixture
def cache():
    return GeocodeCache()


@pytest.fixture
def sample_users():
    """5 users: 3 share a neighborhood, 2 live in other cities without one."""
    return [
        User(
            id="1",
            name="Ana",
            email="ana@example.com",
            neighborhood="São Sebastião",
            city="Surubim",
            state="PE",
            role="admin",
        ),
        User(
            id="2",
            name="Bruno",
            email="bruno@example.com",
            neighborhood="Sao Sebastiao",
            city="surubim",
            state="PE",
        ),
        User(
            id="3",
            name="Carla",
            email="carla@example.com",
            neighborhood="  SÃO  sebastião ",
            city="Surubim",
            state="PE",
        ),
        User(id="4", name="Davi", email="davi@example.com", city="Cubatão", state="SP"),
        User(id="5", name="Elisa", email="elisa@example.com", city="Xique-Xique", state="BA"),
    ]


@pytest.fixture
def sample_answers():
    """Provider answers resolving every location in sample_users."""
    return {
        "São Sebastião, Surubim, PE, Brasil": [
            nominatim_item(
                -7.8333, -35.7667, "São Sebastião, Surubim, PE", suburb="São Sebastião"
            )
        ],
        "Cubatão, SP, Brasil": [nominatim_item(-23.895, -46.425, "Cubatão, SP")],
        "Xique-Xique, BA, Brasil": [nominatim_item(-10.8231, -42.7289, "Xique-Xique, BA")],
    }


@pytest.fixture
def sample_provider(sample_answers):
    return FakeNominatim(sample_answers)
