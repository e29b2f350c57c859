"""Adapters connecting the core to serial ports, HTTP servers and logging."""
