"""Process wiring: serial reader thread plus the uvicorn scrape server."""

import logging
import signal
import threading
from types import FrameType

import uvicorn

from elcentral.adapters.frameworks.asgi import create_asgi_app
from elcentral.adapters.serial import StreamReader, open_serial
from elcentral.adapters.storage import InMemoryMetricsRegistry, RingBufferLogStorage
from elcentral.config import Settings
from elcentral.core.dispatcher import TelegramDispatcher
from elcentral.core.errors import StreamFault
from elcentral.core.ports import LineSource

logger = logging.getLogger(__name__)

READER_JOIN_TIMEOUT_S = 5.0


class ExporterServer(uvicorn.Server):
    """uvicorn server that treats SIGINT and SIGTERM as a clean shutdown.

    uvicorn re-raises captured signals once it has stopped, which would end
    the process before the serial port is closed. This server only records
    the signal and leaves the exit to Exporter.serve().
    """

    def __init__(self, config: uvicorn.Config) -> None:
        super().__init__(config)
        self.exit_signal: int | None = None

    def handle_exit(self, sig: int, frame: FrameType | None) -> None:
        self.exit_signal = sig
        if self.should_exit and sig == signal.SIGINT:
            self.force_exit = True
        else:
            self.should_exit = True


class Exporter:
    """Owns the registry and connects the meter stream to the scrape server.

    Args:
        settings: Exporter settings.
        source: Byte source to read; the configured serial port is opened
                when omitted.
    """

    def __init__(self, settings: Settings, source: LineSource | None = None) -> None:
        self.settings = settings
        self.registry = InMemoryMetricsRegistry()
        self.log_storage = RingBufferLogStorage(max_size=settings.log_buffer_size)
        self.dispatcher = TelegramDispatcher(
            self.registry, strict=settings.strict_parsing
        )
        self.app = create_asgi_app(
            self.registry, self.log_storage, metric_prefix=settings.metric_prefix
        )
        self.fault: StreamFault | None = None
        self._source = source
        self._server: ExporterServer | None = None
        self._stopping = threading.Event()

    @property
    def started(self) -> bool:
        """True once the scrape server is accepting connections."""
        return self._server is not None and self._server.started

    def read_stream(self, source: LineSource) -> None:
        """Run the read loop until the stream faults, then stop the server."""
        reader = StreamReader(source, self.dispatcher)
        try:
            reader.run()
        except StreamFault as exc:
            if self._stopping.is_set():
                logger.debug("Stream closed during shutdown: %s", exc)
                return
            self.fault = exc
            logger.error("Stream fault after %d lines: %s", reader.lines_read, exc)
            if self._server is not None:
                self._server.should_exit = True

    def serve(self) -> int:
        """Run until a signal or a stream fault.

        Returns:
            Exit status: 1 after a stream fault, otherwise 0.
        """
        source = self._source
        if source is None:
            source = open_serial(self.settings)
        config = uvicorn.Config(
            self.app,
            host=self.settings.host,
            port=self.settings.port,
            lifespan="off",
            log_config=None,
        )
        self._server = ExporterServer(config)
        reader = threading.Thread(
            target=self.read_stream, args=(source,), name="stream-reader", daemon=True
        )
        reader.start()

        logger.info(
            "Starting Prometheus HTTP server on %s:%d",
            self.settings.host,
            self.settings.port,
        )
        try:
            try:
                self._server.run()
            except KeyboardInterrupt:
                logger.info("Interrupted before the server was ready")
            if self._server.exit_signal is not None:
                logger.info(
                    "Received %s", signal.Signals(self._server.exit_signal).name
                )
        finally:
            logger.info("Shutting down application...")
            self._stopping.set()
            close = getattr(source, "close", None)
            if close is not None:
                close()
            reader.join(timeout=READER_JOIN_TIMEOUT_S)

        return 1 if self.fault is not None else 0
