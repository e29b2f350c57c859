"""Serial transport: opens the meter port and runs the line read loop."""

import logging

import serial

from elcentral.config import Settings
from elcentral.core.dispatcher import TelegramDispatcher
from elcentral.core.errors import StreamFault
from elcentral.core.ports import LineSource

logger = logging.getLogger(__name__)


def open_serial(settings: Settings) -> serial.Serial:
    """Open the meter's P1 port (8N1, blocking reads without timeout).

    Raises:
        serial.SerialException: If the device cannot be opened.
    """
    return serial.Serial(
        port=settings.serial_port,
        baudrate=settings.baud_rate,
        bytesize=serial.EIGHTBITS,
        parity=serial.PARITY_NONE,
        stopbits=serial.STOPBITS_ONE,
        timeout=None,
    )


class StreamReader:
    """Feeds each line of a byte source to the dispatcher, one at a time.

    The loop ends only through a StreamFault: the source returned an empty
    read (end of stream) or raised. Reads are never retried; closing the
    source from another thread is how the loop is stopped.

    Args:
        source: Line-delimited byte source, usually a serial.Serial.
        dispatcher: Receives every decoded line.
    """

    def __init__(self, source: LineSource, dispatcher: TelegramDispatcher) -> None:
        self._source = source
        self._dispatcher = dispatcher
        self.lines_read = 0

    def read_line(self) -> str:
        """Block for the next line and decode it.

        Raises:
            StreamFault: On end of stream or a read error.
        """
        try:
            raw = self._source.readline()
        except (OSError, ValueError) as exc:
            raise StreamFault(f"Error reading from serial port: {exc}") from exc
        if not raw:
            raise StreamFault("End of stream")
        if isinstance(raw, bytes):
            return raw.decode("ascii", errors="replace")
        return raw

    def run(self) -> None:
        """Read and dispatch lines until the stream faults.

        Raises:
            StreamFault: Always, once the source can no longer be read.
        """
        while True:
            line = self.read_line()
            self.lines_read += 1
            logger.debug("Received data: %s", line.rstrip("\r\n"))
            self._dispatcher.dispatch(line)
