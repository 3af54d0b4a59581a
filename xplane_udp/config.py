"""Configuration loader for xplane-udp."""

from __future__ import annotations

from configparser import ConfigParser
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from . import constants


@dataclass(slots=True)
class XPlaneConfig:
    host: str = constants.DEFAULT_XPLANE_HOST
    xp_port: int = constants.DEFAULT_XPLANE_PORT
    local_port: int = constants.DEFAULT_LOCAL_PORT
    recv_timeout_seconds: float = constants.DEFAULT_RECV_TIMEOUT_SECONDS
    recv_buffer_size: int = constants.DEFAULT_RECV_BUFFER_SIZE


@dataclass(slots=True)
class MonitorConfig:
    datarefs: List[str] = field(
        default_factory=lambda: list(constants.DEFAULT_MONITOR_DATAREFS)
    )
    frequency: int = constants.DEFAULT_MONITOR_FREQUENCY
    reference_id_start: int = constants.DEFAULT_MONITOR_REFERENCE_ID


@dataclass(slots=True)
class LoggingConfig:
    level: str = "INFO"
    path: Optional[Path] = None
    log_datagrams: bool = True
    max_bytes: int = 1_048_576
    backup_count: int = 3


@dataclass(slots=True)
class ClientConfig:
    xplane: XPlaneConfig
    monitor: MonitorConfig
    logging: LoggingConfig
    raw: ConfigParser
    path: Path


def _parse_list(value: str, *, default: Iterable[str]) -> List[str]:
    if not value:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


def _clamp_port(value: int) -> int:
    return max(0, min(65535, value))


def load_config(path: Optional[Path] = None) -> ClientConfig:
    """Load configuration from disk, applying defaults where necessary."""

    config_path = path or constants.DEFAULT_CONFIG_PATH
    parser = ConfigParser()
    parser.read_dict(
        {
            "xplane": {
                "host": constants.DEFAULT_XPLANE_HOST,
                "xp_port": str(constants.DEFAULT_XPLANE_PORT),
                "local_port": str(constants.DEFAULT_LOCAL_PORT),
                "recv_timeout_seconds": str(constants.DEFAULT_RECV_TIMEOUT_SECONDS),
                "recv_buffer_size": str(constants.DEFAULT_RECV_BUFFER_SIZE),
            },
            "monitor": {
                "datarefs": ",".join(constants.DEFAULT_MONITOR_DATAREFS),
                "frequency": str(constants.DEFAULT_MONITOR_FREQUENCY),
                "reference_id_start": str(constants.DEFAULT_MONITOR_REFERENCE_ID),
            },
            "logging": {
                "level": "INFO",
                "path": "",
                "log_datagrams": "true",
                "max_bytes": "1048576",
                "backup_count": "3",
            },
        }
    )

    if config_path.exists():
        parser.read(config_path)

    host_value = parser.get("xplane", "host")
    xp_port_value = parser.getint(
        "xplane", "xp_port", fallback=constants.DEFAULT_XPLANE_PORT
    )

    # Accept "host:port"; an IPv6 literal has more than one colon and is kept whole.
    if host_value.count(":") == 1:
        host_part, port_part = host_value.split(":")
        try:
            parsed_port = int(port_part)
        except ValueError:
            pass
        else:
            host_value = host_part
            xp_port_value = parsed_port
            parser.set("xplane", "host", host_part)
            parser.set("xplane", "xp_port", str(parsed_port))

    default_timeout = constants.DEFAULT_RECV_TIMEOUT_SECONDS
    try:
        recv_timeout = parser.getfloat(
            "xplane", "recv_timeout_seconds", fallback=default_timeout
        )
    except ValueError:
        recv_timeout = default_timeout
    if recv_timeout <= 0:
        recv_timeout = default_timeout

    xplane = XPlaneConfig(
        host=host_value,
        xp_port=_clamp_port(xp_port_value),
        local_port=_clamp_port(
            parser.getint(
                "xplane", "local_port", fallback=constants.DEFAULT_LOCAL_PORT
            )
        ),
        recv_timeout_seconds=recv_timeout,
        recv_buffer_size=max(
            1,
            parser.getint(
                "xplane",
                "recv_buffer_size",
                fallback=constants.DEFAULT_RECV_BUFFER_SIZE,
            ),
        ),
    )

    monitor = MonitorConfig(
        datarefs=_parse_list(
            parser.get(
                "monitor",
                "datarefs",
                fallback=",".join(constants.DEFAULT_MONITOR_DATAREFS),
            ),
            default=constants.DEFAULT_MONITOR_DATAREFS,
        ),
        frequency=max(
            0,
            parser.getint(
                "monitor", "frequency", fallback=constants.DEFAULT_MONITOR_FREQUENCY
            ),
        ),
        reference_id_start=parser.getint(
            "monitor",
            "reference_id_start",
            fallback=constants.DEFAULT_MONITOR_REFERENCE_ID,
        ),
    )

    log_path_value = parser.get("logging", "path", fallback="").strip()
    logging_config = LoggingConfig(
        level=parser.get("logging", "level", fallback="INFO"),
        path=Path(log_path_value).expanduser() if log_path_value else None,
        log_datagrams=parser.getboolean("logging", "log_datagrams", fallback=True),
        max_bytes=max(0, parser.getint("logging", "max_bytes", fallback=1_048_576)),
        backup_count=max(0, parser.getint("logging", "backup_count", fallback=3)),
    )

    return ClientConfig(
        xplane=xplane,
        monitor=monitor,
        logging=logging_config,
        raw=parser,
        path=config_path,
    )


def save_config(config: ClientConfig) -> None:
    """Persist the current configuration to disk."""

    config_path = config.path
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("w", encoding="utf-8") as stream:
        config.raw.write(stream)
