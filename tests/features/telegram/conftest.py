"""BDD step definitions for telegram decoding features."""

import asyncio
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

import httpx
import pytest
from pytest_bdd import given, parsers, then, when

from elcentral.adapters.frameworks.asgi import ASGIApp, create_asgi_app
from elcentral.adapters.logging import LogStorageHandler
from elcentral.adapters.storage import InMemoryMetricsRegistry, RingBufferLogStorage
from elcentral.core.dispatcher import TelegramDispatcher


@dataclass
class TelegramScenarioContext:
    """State shared between the steps of one scenario."""

    registry: InMemoryMetricsRegistry = field(default_factory=InMemoryMetricsRegistry)
    log_storage: RingBufferLogStorage = field(
        default_factory=lambda: RingBufferLogStorage(max_size=100)
    )
    dispatcher: TelegramDispatcher | None = None
    scrape_body: str = ""


def run_async(coro):
    """Run a coroutine from a synchronous step."""
    return asyncio.run(coro)


async def scrape(app: ASGIApp, path: str) -> httpx.Response:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path)


def _parse_labels(text: str) -> dict[str, str]:
    return dict(pair.split("=", 1) for pair in text.split(",") if pair)


@pytest.fixture
def ctx() -> Iterator[TelegramScenarioContext]:
    """Fresh scenario context with dispatcher warnings captured."""
    context = TelegramScenarioContext()
    handler = LogStorageHandler(context.log_storage)
    app_logger = logging.getLogger("elcentral")
    app_logger.addHandler(handler)
    yield context
    app_logger.removeHandler(handler)


# === Given ===


@given("an exporter with an empty registry")
def given_empty_registry(ctx: TelegramScenarioContext) -> None:
    ctx.dispatcher = TelegramDispatcher(ctx.registry)


# === When ===


@when(parsers.parse('the line "{line}" is dispatched'))
def when_line_dispatched(ctx: TelegramScenarioContext, line: str) -> None:
    assert ctx.dispatcher is not None
    ctx.dispatcher.dispatch(line + "\r\n")


@when("/metrics is scraped")
def when_metrics_scraped(ctx: TelegramScenarioContext) -> None:
    app = create_asgi_app(ctx.registry, ctx.log_storage)
    response = run_async(scrape(app, "/metrics"))
    assert response.status_code == 200
    ctx.scrape_body = response.text


# === Then ===


@then(parsers.parse("the registry holds {count:d} series"))
def then_registry_holds(ctx: TelegramScenarioContext, count: int) -> None:
    assert len(ctx.registry) == count


@then(parsers.parse('"{name}" with labels "{labels}" is {value}'))
def then_series_value(
    ctx: TelegramScenarioContext, name: str, labels: str, value: str
) -> None:
    assert ctx.registry.get(name, _parse_labels(labels)) == pytest.approx(
        float(value)
    )


@then(parsers.parse('a warning mentions "{text}"'))
def then_warning_mentions(ctx: TelegramScenarioContext, text: str) -> None:
    warnings = ctx.log_storage.read(level="WARNING")
    assert any(text in entry.message for entry in warnings)


@then(parsers.parse('the scrape declares "{name}" as a gauge'))
def then_scrape_declares_gauge(ctx: TelegramScenarioContext, name: str) -> None:
    assert f"# TYPE {name} gauge" in ctx.scrape_body.splitlines()


@then(parsers.parse("the scrape contains the line: {text}"))
def then_scrape_contains(ctx: TelegramScenarioContext, text: str) -> None:
    assert text in ctx.scrape_body.splitlines()
