from pathlib import Path

from xplane_udp import constants
from xplane_udp.config import load_config, save_config


def test_load_config_defaults(tmp_path: Path) -> None:
    config_path = tmp_path / "xplane-udp.cfg"
    config = load_config(config_path)

    assert config.path == config_path
    assert config.xplane.host == constants.DEFAULT_XPLANE_HOST
    assert config.xplane.xp_port == 49000
    assert config.xplane.local_port == 49015
    assert config.xplane.recv_timeout_seconds == 2.0
    assert config.xplane.recv_buffer_size == 1024
    assert config.monitor.datarefs == ["sim/time/paused"]
    assert config.monitor.frequency == 3
    assert config.monitor.reference_id_start == 12
    assert config.logging.level == "INFO"
    assert config.logging.path is None
    assert config.logging.log_datagrams is True
    assert config.logging.max_bytes == 1_048_576
    assert config.logging.backup_count == 3


def test_load_config_parses_host_with_port(tmp_path: Path) -> None:
    config_path = tmp_path / "xplane-udp.cfg"
    config_path.write_text("[xplane]\nhost = 192.168.178.36:49001\n", encoding="utf-8")

    config = load_config(config_path)

    assert config.xplane.host == "192.168.178.36"
    assert config.xplane.xp_port == 49001
    assert config.raw.get("xplane", "host") == "192.168.178.36"
    assert config.raw.get("xplane", "xp_port") == "49001"


def test_load_config_overrides_defaults(tmp_path):
    config_file = tmp_path / "xplane-udp.cfg"
    config_file.write_text(
        """
[xplane]
host = 10.0.0.2
xp_port = 49010
local_port = 49020
recv_timeout_seconds = 0.5

[monitor]
datarefs = sim/time/paused, sim/flightmodel/position/latitude ,
frequency = 10
reference_id_start = 100

[logging]
level = DEBUG
path = ~/xplane-udp.log
log_datagrams = false
max_bytes = 4096
backup_count = 1
"""
    )

    config = load_config(config_file)

    assert config.xplane.host == "10.0.0.2"
    assert config.xplane.xp_port == 49010
    assert config.xplane.local_port == 49020
    assert config.xplane.recv_timeout_seconds == 0.5
    assert config.monitor.datarefs == [
        "sim/time/paused",
        "sim/flightmodel/position/latitude",
    ]
    assert config.monitor.frequency == 10
    assert config.monitor.reference_id_start == 100
    assert config.logging.level == "DEBUG"
    assert config.logging.path == Path("~/xplane-udp.log").expanduser()
    assert config.logging.log_datagrams is False
    assert config.logging.max_bytes == 4096
    assert config.logging.backup_count == 1


def test_load_config_clamps_invalid_values(tmp_path):
    config_file = tmp_path / "xplane-udp.cfg"
    config_file.write_text(
        """
[xplane]
xp_port = 70000
local_port = -5
recv_timeout_seconds = nope

[monitor]
datarefs =
frequency = -3
"""
    )

    config = load_config(config_file)

    assert config.xplane.xp_port == 65535
    assert config.xplane.local_port == 0
    assert config.xplane.recv_timeout_seconds == constants.DEFAULT_RECV_TIMEOUT_SECONDS
    assert config.monitor.datarefs == constants.DEFAULT_MONITOR_DATAREFS
    assert config.monitor.frequency == 0


def test_save_config_round_trips_raw_values(tmp_path):
    config_file = tmp_path / "nested" / "xplane-udp.cfg"
    config = load_config(config_file)
    config.raw.set("xplane", "host", "10.1.1.1")

    save_config(config)

    reloaded = load_config(config_file)
    assert reloaded.xplane.host == "10.1.1.1"


def test_load_config_keeps_ipv6_literal_whole(tmp_path: Path) -> None:
    config_path = tmp_path / "xplane-udp.cfg"
    config_path.write_text("[xplane]\nhost = ::1\n", encoding="utf-8")

    config = load_config(config_path)

    assert config.xplane.host == "::1"
    assert config.xplane.xp_port == 49000


def test_load_config_clamps_negative_log_rotation(tmp_path: Path) -> None:
    config_path = tmp_path / "xplane-udp.cfg"
    config_path.write_text(
        "[logging]\nmax_bytes = -1\nbackup_count = -5\nlog_datagrams = no\n",
        encoding="utf-8",
    )

    config = load_config(config_path)

    assert config.logging.max_bytes == 0
    assert config.logging.backup_count == 0
    assert config.logging.log_datagrams is False
