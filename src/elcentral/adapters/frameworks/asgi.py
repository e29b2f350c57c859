"""ASGI adapter serving the scrape endpoints.

This adapter provides a framework-agnostic ASGI application that can be run
by any ASGI server (uvicorn, hypercorn, daphne) without extra web framework
dependencies.
"""

import json
import logging
from collections.abc import Callable, Coroutine, Mapping
from typing import Any

from elcentral.adapters.frameworks.query_params import parse_logs_query
from elcentral.core.encoding import ndjson, prometheus
from elcentral.core.obis import METRIC_HELP
from elcentral.core.ports import LogStoragePort, MetricsRegistryPort

logger = logging.getLogger(__name__)

# ASGI type aliases
Scope = dict[str, Any]
Receive = Callable[[], Coroutine[Any, Any, dict[str, Any]]]
Send = Callable[[dict[str, Any]], Coroutine[Any, Any, None]]
ASGIApp = Callable[[Scope, Receive, Send], Coroutine[Any, Any, None]]


async def _send_response(
    send: Send,
    status: int,
    content_type: str,
    body: str,
    extra_headers: list[tuple[bytes, bytes]] | None = None,
) -> None:
    """Send an HTTP response with headers and body.

    Args:
        send: ASGI send callable for writing response.
        status: HTTP status code.
        content_type: Content-Type header value.
        body: Response body as string (will be encoded to bytes).
        extra_headers: Additional raw headers (e.g., Location).
    """
    headers = [(b"content-type", content_type.encode())]
    headers.extend(extra_headers or [])
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": body.encode()})


async def _handle_endpoint(
    send: Send,
    endpoint_func: Callable[[], str],
    content_type: str,
    log_message: str,
) -> None:
    """Execute an endpoint function with error handling and send response.

    Args:
        send: ASGI send callable for writing response.
        endpoint_func: Function that returns the response body.
        content_type: Content-Type header for success response.
        log_message: Message to log on error.
    """
    try:
        body = endpoint_func()
    except Exception:
        logger.exception(log_message)
        error_body = json.dumps({"error": "Internal Server Error"})
        await _send_response(send, 500, "application/json", error_body)
        return
    await _send_response(send, 200, content_type, body)


def create_asgi_app(
    registry: MetricsRegistryPort,
    log_storage: LogStoragePort,
    metric_prefix: str = "elcentral_",
    help_texts: Mapping[str, str] = METRIC_HELP,
) -> ASGIApp:
    """Create an ASGI app with /metrics, / and /logs endpoints.

    Args:
        registry: Registry whose snapshot is exported on /metrics.
        log_storage: Storage adapter implementing LogStoragePort.
        metric_prefix: Namespace prepended to every exported metric name.
        help_texts: HELP text per unprefixed metric name.

    Returns:
        ASGI application callable.
    """

    async def app(scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return

        path = scope["path"]

        if path == "/metrics":
            await _handle_endpoint(
                send,
                lambda: prometheus.encode_metrics(
                    registry.snapshot(), prefix=metric_prefix, help_texts=help_texts
                ),
                prometheus.CONTENT_TYPE,
                "Error encoding metrics endpoint",
            )
        elif path == "/":
            await _send_response(
                send,
                301,
                "text/plain",
                "Moved Permanently",
                extra_headers=[(b"location", b"/metrics")],
            )
        elif path == "/logs":
            query = parse_logs_query(scope.get("query_string", b""))
            await _handle_endpoint(
                send,
                lambda: ndjson.encode_logs(log_storage.read(*query)),
                ndjson.CONTENT_TYPE,
                "Error encoding logs endpoint",
            )
        else:
            await _send_response(send, 404, "text/plain", "Not Found")

    return app
