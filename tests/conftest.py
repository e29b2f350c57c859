"""Shared test fixtures for all test modules."""

import logging
from collections.abc import Iterator

import pytest

from elcentral.adapters.frameworks.asgi import create_asgi_app
from elcentral.adapters.storage.in_memory import InMemoryMetricsRegistry
from elcentral.adapters.storage.ring_buffer import RingBufferLogStorage
from elcentral.core.dispatcher import TelegramDispatcher

try:
    import httpx
except ImportError:
    httpx = None


SAMPLE_TELEGRAM = """\
/ISk5\\2MT382-1000

0-0:1.0.0(230615143000S)
0-0:96.1.0(4530303336303030303037393533313132)
1-0:1.8.0(001234.567*kWh)
1-0:2.8.0(000012.001*kWh)
1-0:3.8.0(000005.120*kvarh)
1-0:4.8.0(000301.450*kvarh)
1-0:1.7.0(01.193*kW)
1-0:2.7.0(00.000*kW)
1-0:3.7.0(00.101*kvar)
1-0:4.7.0(00.000*kvar)
1-0:21.7.0(00.512*kW)
1-0:41.7.0(00.381*kW)
1-0:61.7.0(00.300*kW)
1-0:32.7.0(230.1*V)
1-0:52.7.0(231.4*V)
1-0:72.7.0(229.8*V)
1-0:31.7.0(002.3*A)
1-0:51.7.0(001.7*A)
1-0:71.7.0(001.4*A)
0-0:96.7.21(00004)
!7E2F
"""


@pytest.fixture
def sample_telegram() -> str:
    """A complete telegram with one unknown code (0-0:96.7.21)."""
    return SAMPLE_TELEGRAM


@pytest.fixture
def registry() -> InMemoryMetricsRegistry:
    """Fixture providing an empty metrics registry."""
    return InMemoryMetricsRegistry()


@pytest.fixture
def log_storage() -> RingBufferLogStorage:
    """Fixture providing an empty log storage."""
    return RingBufferLogStorage(max_size=100)


@pytest.fixture
def dispatcher(registry: InMemoryMetricsRegistry) -> TelegramDispatcher:
    """Dispatcher writing to the test registry."""
    return TelegramDispatcher(registry)


@pytest.fixture
def restore_logging() -> Iterator[None]:
    """Undo handler and level changes made by configure_logging()."""
    root = logging.getLogger()
    app_logger = logging.getLogger("elcentral")
    root_level, root_handlers = root.level, list(root.handlers)
    app_handlers = list(app_logger.handlers)
    yield
    root.setLevel(root_level)
    root.handlers[:] = root_handlers
    app_logger.handlers[:] = app_handlers


# === ASGI Test Fixtures ===


@pytest.fixture
def asgi_send_capture():
    """Fixture that returns a send callable and a responses list for capture.

    Returns a tuple of (send_func, responses_list) for recording ASGI messages.
    """

    responses: list[dict[str, object]] = []

    async def send(message: dict[str, object]) -> None:
        """Capture ASGI messages."""
        responses.append(message)

    return send, responses


@pytest.fixture
def asgi_test_client():
    """Factory fixture that creates an httpx.AsyncClient for ASGI testing.

    Usage:
        async def test_something(asgi_test_client):
            app = create_asgi_app(registry, log_storage)
            async with asgi_test_client(app) as client:
                response = await client.get("/metrics")
    """
    if httpx is None:
        pytest.skip("httpx not installed")

    def _get_client(app):
        """Return an AsyncClient context manager for the given app."""
        return httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app), base_url="http://test"
        )

    return _get_client


@pytest.fixture
async def scrape_client(registry, log_storage, asgi_test_client):
    """Client bound to a scrape app over the test registry and log storage."""
    app = create_asgi_app(registry, log_storage)
    async with asgi_test_client(app) as client:
        yield client
