"""Constants used across the xplane-udp package."""

from __future__ import annotations

from pathlib import Path

APP_NAME = "xplane-udp"
DEFAULT_CONFIG_FILENAME = f"{APP_NAME}.cfg"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / APP_NAME / DEFAULT_CONFIG_FILENAME

DEFAULT_XPLANE_HOST = "127.0.0.1"
DEFAULT_XPLANE_PORT = 49000
DEFAULT_LOCAL_PORT = 49015

DEFAULT_RECV_TIMEOUT_SECONDS = 2.0
DEFAULT_RECV_BUFFER_SIZE = 1024

DEFAULT_MONITOR_DATAREFS = ["sim/time/paused"]
DEFAULT_MONITOR_FREQUENCY = 3
DEFAULT_MONITOR_REFERENCE_ID = 12
