"""Command line entry point for the elcentral exporter."""

import argparse
import logging
from collections.abc import Sequence

import serial
from pydantic import ValidationError

from elcentral import __version__
from elcentral.adapters.logging import configure_logging
from elcentral.app import Exporter
from elcentral.config import Settings

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="elcentral",
        description="Prometheus exporter for the P1 port of electricity meters",
    )
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    parser.add_argument(
        "--serial-port", dest="serial_port", help="Path to the serial port"
    )
    parser.add_argument(
        "--baud-rate", dest="baud_rate", type=int, help="Serial baud rate"
    )
    parser.add_argument("--host", help="Address the metrics server binds to")
    parser.add_argument("--port", type=int, help="Port the metrics server listens on")
    parser.add_argument(
        "--debug", action="store_const", const=True, help="Enable debug logging"
    )
    parser.add_argument(
        "--strict",
        dest="strict_parsing",
        action="store_const",
        const=True,
        help="Skip malformed readings instead of exporting 0",
    )
    return parser


def load_settings(args: argparse.Namespace) -> Settings:
    """Build settings from the environment, overridden by explicit flags."""
    overrides = {
        key: value
        for key, value in vars(args).items()
        if key != "version" and value is not None
    }
    return Settings(**overrides)


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.version:
        print("Version:", __version__)
        return 0

    try:
        settings = load_settings(args)
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}")
        return 2

    exporter = Exporter(settings)
    configure_logging(settings.debug, exporter.log_storage)
    logger.info("Serial port: %s", settings.serial_port)

    try:
        return exporter.serve()
    except serial.SerialException as exc:
        logger.error("Error opening serial port: %s", exc)
        return 1
